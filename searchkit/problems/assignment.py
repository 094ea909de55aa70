# -*- coding: utf-8 -*-
"""
「変数 i に値を 1 つずつ割り当てる」形の問題の共通部分です。

状態は長さ n のタプル values で表し、未割り当ての変数は None にします。
N-Queens（行 -> 列）と Map Coloring（地域 -> 色）がこの形です。

AssignmentProblem は、サブクラスが
- candidate_values(state, variable) : 変数の初期ドメイン
- consistent(state, xi, vi, xj, vj) : 二項制約
- constraint_neighbors(state, variable)
を実装するだけで、CSP 拡張（ドメイン初期化・FC・AC-3・部分的妥当性・
BFS / DFS の後続状態）一式が使えるようにします。
"""

from __future__ import annotations

import abc
import random
from typing import Any, Hashable, List, Mapping, Optional, Sequence, Tuple

from ..csp.propagation import arc_consistency, forward_check
from ..problem import Problem
from ..types import Domains, PropagationResult, State


class AssignmentState(State):
    """割り当てタプルで表される状態の基底クラス。"""

    def __init__(self, values: Sequence[Optional[Any]], domains: Optional[Domains] = None) -> None:
        self.values: Tuple[Optional[Any], ...] = tuple(values)
        self.domains = domains

    @property
    def is_partial(self) -> bool:
        return any(v is None for v in self.values)

    def assigned(self) -> List[int]:
        return [i for i, v in enumerate(self.values) if v is not None]

    def unassigned(self) -> List[int]:
        return [i for i, v in enumerate(self.values) if v is None]

    @abc.abstractmethod
    def derive(self, values: Sequence[Optional[Any]], domains: Optional[Domains] = None):
        """同じ問題インスタンス上の、新しい割り当ての状態を作ります。"""

    def replace(self, index: int, value: Any, domains: Optional[Domains] = None):
        values = list(self.values)
        values[index] = value
        return self.derive(values, domains)

    def with_domains(self, domains: Domains):
        return self.derive(self.values, domains)

    def __repr__(self) -> str:
        body = ",".join("_" if v is None else str(v) for v in self.values)
        return f"{type(self).__name__}([{body}], cost={self.cost})"


class AssignmentProblem(Problem):
    supports_csp = True

    # ---- サブクラスが実装するもの -----------------------------------------

    def candidate_values(self, state: AssignmentState, variable: int) -> Tuple[Any, ...]:
        raise self._missing("candidate_values")

    def consistent(self, state: AssignmentState, xi: int, vi: Any, xj: int, vj: Any) -> bool:
        raise self._missing("consistent")

    # ---- GA ---------------------------------------------------------------

    def mutate(
        self, state: State, rate: float, params: Mapping[str, Any], rng: random.Random
    ) -> State:
        """各変数を確率 rate で、ランダムな値に置き換えます。"""
        assert isinstance(state, AssignmentState)
        values = list(state.values)
        for i in range(len(values)):
            if rng.random() < rate:
                values[i] = rng.choice(self.candidate_values(state, i))
        return state.derive(values)

    # ---- CSP --------------------------------------------------------------

    def initialize_domains(self, state: State) -> Domains:
        assert isinstance(state, AssignmentState)
        return {
            i: (v,) if v is not None else self.candidate_values(state, i)
            for i, v in enumerate(state.values)
        }

    def unassigned_variables(self, state: State) -> List[Hashable]:
        assert isinstance(state, AssignmentState)
        return list(state.unassigned())

    def apply_move(
        self, state: State, variable: Hashable, value: Any, new_domains: Optional[Domains]
    ) -> State:
        assert isinstance(state, AssignmentState)
        return state.replace(variable, value, new_domains)

    def _propagate(self, algorithm, state: State, variable: Hashable, value: Any) -> PropagationResult:
        assert isinstance(state, AssignmentState)
        domains = state.domains if state.domains is not None else self.initialize_domains(state)
        return algorithm(
            domains,
            variable,
            value,
            lambda v: self.constraint_neighbors(state, v),
            lambda xi, vi, xj, vj: self.consistent(state, xi, vi, xj, vj),
            state.assigned(),
        )

    def propagate_forward_checking(
        self, state: State, variable: Hashable, value: Any
    ) -> PropagationResult:
        return self._propagate(forward_check, state, variable, value)

    def propagate_arc_consistency(
        self, state: State, variable: Hashable, value: Any
    ) -> PropagationResult:
        return self._propagate(arc_consistency, state, variable, value)

    def partially_valid(self, state: State) -> bool:
        """割り当て済みの変数どうしに、制約違反が 1 つもないかどうか。"""
        assert isinstance(state, AssignmentState)
        values = state.values
        for xi in state.assigned():
            for xj in self.constraint_neighbors(state, xi):
                if xj > xi and values[xj] is not None:
                    if not self.consistent(state, xi, values[xi], xj, values[xj]):
                        return False
        return True

    def successors(self, state: State) -> List[State]:
        """
        先頭の未割り当て変数に、候補値を 1 つずつ割り当てた子のリスト。
        ドメインを持つ状態ではドメインの値だけを使います。
        """
        assert isinstance(state, AssignmentState)
        variable = self.select_unassigned_variable(state)
        if variable is None:
            return []

        if state.domains is not None:
            values = state.domains[variable]
        else:
            values = self.candidate_values(state, variable)

        children: List[State] = []
        for value in values:
            domains = None
            if state.domains is not None:
                domains = dict(state.domains)
                domains[variable] = (value,)
            children.append(state.replace(variable, value, domains))
        return children
