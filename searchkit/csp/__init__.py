# -*- coding: utf-8 -*-
"""
searchkit.csp パッケージ

空の割り当てから 1 変数ずつ値を決めていく構成的探索と、その部品です。
- blind.py        : フロンティア探索の基底クラスと BFS / DFS
- backtracking.py : Backtracking / Forward Checking / AC-3
- heuristics.py   : 変数選択・値順序のヒューリスティック
- propagation.py  : 二項制約に対する FC / AC-3 の伝播
"""

from .backtracking import ArcConsistency, Backtracking, CSPSearch, ForwardChecking, PropagatingSearch
from .blind import BreadthFirstSearch, ConstructiveSearch, DepthFirstSearch
from .heuristics import VALUE_HEURISTICS, VARIABLE_HEURISTICS
from .propagation import arc_consistency, forward_check, revise

__all__ = [
    "ArcConsistency",
    "Backtracking",
    "BreadthFirstSearch",
    "CSPSearch",
    "ConstructiveSearch",
    "DepthFirstSearch",
    "ForwardChecking",
    "PropagatingSearch",
    "VALUE_HEURISTICS",
    "VARIABLE_HEURISTICS",
    "arc_consistency",
    "forward_check",
    "revise",
]
