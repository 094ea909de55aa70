# -*- coding: utf-8 -*-
"""
searchkit.local パッケージ

単一の軌跡を改善していく局所探索アルゴリズムをまとめています。
- hill_climbing.py : 最急降下の山登り法（横ばい・リスタート付き）
- stochastic.py    : 確率的山登り法（standard / weighted / first_choice）
- annealing.py     : 焼きなまし法
"""

from .annealing import SimulatedAnnealing
from .hill_climbing import ClimbingSearch, HillClimbing, MoveKind
from .stochastic import StochasticHillClimbing

__all__ = [
    "ClimbingSearch",
    "HillClimbing",
    "MoveKind",
    "SimulatedAnnealing",
    "StochasticHillClimbing",
]
