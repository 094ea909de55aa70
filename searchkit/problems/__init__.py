# -*- coding: utf-8 -*-
"""
searchkit.problems パッケージ

アルゴリズムの動作確認とベンチマークに使う問題の実装です。
- n_queens.py     : N-Queens
- map_coloring.py : 地図の塗り分け（オーストラリア / ランダムグラフ）
- tsp.py          : 巡回セールスマン問題
- assignment.py   : 割り当て型の問題の共通部分（CSP 拡張一式）
"""

from typing import Dict

from ..errors import ConfigurationError
from ..problem import Problem
from .assignment import AssignmentProblem, AssignmentState
from .map_coloring import MapColoringProblem, MapColoringState, MapGraph
from .n_queens import NQueensProblem, NQueensState
from .tsp import CityMap, TSPProblem, TSPState

PROBLEMS: Dict[str, Problem] = {
    problem.id: problem
    for problem in (NQueensProblem(), MapColoringProblem(), TSPProblem())
}


def get_problem(problem_id: str) -> Problem:
    try:
        return PROBLEMS[problem_id]
    except KeyError:
        raise ConfigurationError(f"unknown problem: {problem_id!r}") from None


__all__ = [
    "AssignmentProblem",
    "AssignmentState",
    "CityMap",
    "MapColoringProblem",
    "MapColoringState",
    "MapGraph",
    "NQueensProblem",
    "NQueensState",
    "PROBLEMS",
    "TSPProblem",
    "TSPState",
    "get_problem",
]
