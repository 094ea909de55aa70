# searchkit/__init__.py
# -*- coding: utf-8 -*-
"""
searchkit パッケージの入口となるモジュールです。

    import random
    from searchkit import create_search
    from searchkit.problems import NQueensProblem

    search = create_search("backtracking", NQueensProblem(),
                           problem_params={"size": 8}, rng=random.Random(0))
    for record in search:
        print(record.note, record.state.cost)

構成
----
- local/      : Hill Climbing / Stochastic HC / Simulated Annealing
- population/ : Local Beam Search / Genetic Algorithm
- csp/        : BFS / DFS / Backtracking / Forward Checking / AC-3 とヒューリスティック
- problems/   : N-Queens / Map Coloring / TSP
- benchmark.py: 複数構成 × 複数シードの比較
"""

from .engine import SearchAlgorithm
from .errors import ConfigurationError, ProblemContractError, SearchkitError
from .problem import Problem, SearchSpaceEstimate
from .registry import ALGORITHMS, create_search
from .types import Domains, PropagationResult, SearchStatus, State, StepRecord

__all__ = [
    "ALGORITHMS",
    "ConfigurationError",
    "Domains",
    "Problem",
    "ProblemContractError",
    "PropagationResult",
    "SearchAlgorithm",
    "SearchSpaceEstimate",
    "SearchStatus",
    "SearchkitError",
    "State",
    "StepRecord",
    "create_search",
]
