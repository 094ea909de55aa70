# -*- coding: utf-8 -*-
"""
アルゴリズム名 -> 実装クラス の対応表です。

    search = create_search("simulated_annealing", NQueensProblem(),
                           config={"coolingRate": 0.995}, rng=random.Random(42))
    for record in search:
        ...
"""

from __future__ import annotations

import random
from typing import Any, Dict, Mapping, Optional, Type

from .config import AlgorithmConfig
from .csp import ArcConsistency, Backtracking, BreadthFirstSearch, DepthFirstSearch, ForwardChecking
from .engine import SearchAlgorithm
from .errors import ConfigurationError
from .local import HillClimbing, SimulatedAnnealing, StochasticHillClimbing
from .population import GeneticAlgorithm, LocalBeamSearch
from .problem import Problem
from .types import State

ALGORITHMS: Dict[str, Type[SearchAlgorithm]] = {
    cls.name: cls
    for cls in (
        HillClimbing,
        StochasticHillClimbing,
        SimulatedAnnealing,
        LocalBeamSearch,
        GeneticAlgorithm,
        BreadthFirstSearch,
        DepthFirstSearch,
        Backtracking,
        ForwardChecking,
        ArcConsistency,
    )
}

# 問題側の CSP 拡張（ドメイン・伝播・部分的妥当性）を必要とするアルゴリズム
CSP_ALGORITHMS = frozenset({"backtracking", "forward_checking", "arc_consistency"})


def create_search(
    name: str,
    problem: Problem,
    initial_state: Optional[State] = None,
    config: Optional[Mapping[str, Any] | AlgorithmConfig] = None,
    *,
    rng: Optional[random.Random] = None,
    problem_params: Optional[Mapping[str, Any]] = None,
) -> SearchAlgorithm:
    """名前からアルゴリズムを作ります。未知の名前は ConfigurationError。"""
    try:
        cls = ALGORITHMS[name]
    except KeyError:
        raise ConfigurationError(
            f"unknown algorithm: {name!r} (available: {', '.join(sorted(ALGORITHMS))})"
        ) from None
    return cls(problem, initial_state, config, rng=rng, problem_params=problem_params)
