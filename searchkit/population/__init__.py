# -*- coding: utf-8 -*-
"""
searchkit.population パッケージ

複数の候補を世代単位で進める集団系アルゴリズムをまとめています。
- beam.py      : 局所ビーム探索（deterministic / stochastic）
- genetic.py   : 遺伝的アルゴリズム
- selection.py : 共有の選択部品（トーナメント・切り捨て・ボルツマン選択）
"""

from .beam import LocalBeamSearch
from .genetic import GeneticAlgorithm
from .selection import boltzmann_selection, tournament_selection, truncation_selection

__all__ = [
    "GeneticAlgorithm",
    "LocalBeamSearch",
    "boltzmann_selection",
    "tournament_selection",
    "truncation_selection",
]
