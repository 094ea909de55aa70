# -*- coding: utf-8 -*-
"""
CSP 系アルゴリズムで共有する、変数選択・値順序のヒューリスティックです。

変数選択（次に割り当てる変数を選ぶ）
-----------------------------------
in_order          : Problem.select_unassigned_variable に任せる（通常は先頭の未割り当て変数）
random            : 未割り当て変数から一様ランダム
degree            : 未割り当ての隣接変数が最も多い変数（最も制約している変数）
mrv               : 現在のドメインが最も小さい変数（Minimum Remaining Values）
least_constrained : 現在のドメインが最も大きい変数（比較用のわざと悪い選び方）

値の順序（選んだ変数にどの値から試すか）
---------------------------------------
in_order : ドメインの順
random   : ランダムに並べ替え
lcv      : 隣接変数の選択肢を減らさない値から（Least Constraining Value）

同点はいずれも「未割り当て変数の並び順で先に来るもの」を優先するので、
random 以外は乱数を消費しません。
"""

from __future__ import annotations

import random
from typing import Any, Callable, Dict, Hashable, List, Optional, Sequence

from ..errors import ConfigurationError
from ..problem import Problem
from ..types import State
from .propagation import values_removed

VariableHeuristic = Callable[[Problem, State, random.Random], Optional[Hashable]]
ValueHeuristic = Callable[[Problem, State, Hashable, Sequence[Any], random.Random], List[Any]]


# ==== 変数選択 =============================================================

def select_in_order(problem: Problem, state: State, rng: random.Random) -> Optional[Hashable]:
    return problem.select_unassigned_variable(state)


def select_random(problem: Problem, state: State, rng: random.Random) -> Optional[Hashable]:
    candidates = problem.unassigned_variables(state)
    if not candidates:
        return None
    return rng.choice(candidates)


def select_degree(problem: Problem, state: State, rng: random.Random) -> Optional[Hashable]:
    """
    degree ヒューリスティック：
    まだ割り当てられていない隣接変数の数が最大の変数を選ぶ。
    """
    candidates = problem.unassigned_variables(state)
    if not candidates:
        return None
    unassigned = set(candidates)
    return max(
        candidates,
        key=lambda v: sum(1 for n in problem.constraint_neighbors(state, v) if n in unassigned),
    )


def select_mrv(problem: Problem, state: State, rng: random.Random) -> Optional[Hashable]:
    candidates = problem.unassigned_variables(state)
    if not candidates:
        return None
    return min(candidates, key=lambda v: problem.domain_size(state, v))


def select_least_constrained(
    problem: Problem, state: State, rng: random.Random
) -> Optional[Hashable]:
    candidates = problem.unassigned_variables(state)
    if not candidates:
        return None
    return max(candidates, key=lambda v: problem.domain_size(state, v))


VARIABLE_HEURISTICS: Dict[str, VariableHeuristic] = {
    "in_order": select_in_order,
    "random": select_random,
    "degree": select_degree,
    "mrv": select_mrv,
    "least_constrained": select_least_constrained,
}


# ==== 値の順序 =============================================================

def order_in_order(
    problem: Problem, state: State, variable: Hashable, values: Sequence[Any], rng: random.Random
) -> List[Any]:
    return list(values)


def order_random(
    problem: Problem, state: State, variable: Hashable, values: Sequence[Any], rng: random.Random
) -> List[Any]:
    ordered = list(values)
    rng.shuffle(ordered)
    return ordered


def order_lcv(
    problem: Problem, state: State, variable: Hashable, values: Sequence[Any], rng: random.Random
) -> List[Any]:
    """
    LCV（Least Constraining Value）で値の順序付けを行う。

    各値について Forward Checking の伝播を試し、
    他の変数のドメインから取り除かれる値の総数が少ない順に並べる。
    """
    assert state.domains is not None
    scored = []
    for value in values:
        result = problem.propagate_forward_checking(state, variable, value)
        scored.append((values_removed(state.domains, result.domains), value))

    # sort は安定なので、同点はドメインの順のまま
    scored.sort(key=lambda t: t[0])
    return [v for _, v in scored]


VALUE_HEURISTICS: Dict[str, ValueHeuristic] = {
    "in_order": order_in_order,
    "random": order_random,
    "lcv": order_lcv,
}


def get_variable_heuristic(name: str) -> VariableHeuristic:
    try:
        return VARIABLE_HEURISTICS[name]
    except KeyError:
        raise ConfigurationError(f"unknown variable heuristic: {name!r}") from None


def get_value_heuristic(name: str) -> ValueHeuristic:
    try:
        return VALUE_HEURISTICS[name]
    except KeyError:
        raise ConfigurationError(f"unknown value heuristic: {name!r}") from None
