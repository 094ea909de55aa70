# -*- coding: utf-8 -*-
"""
Problem（問題記述）の基底クラスです。

アルゴリズムはすべて、この Problem と State の契約だけに依存して書かれます。
特定の問題（N-Queens など）を名前で分岐することはありません。
問題ごとの違い（後続状態の作り方、制約伝播のやり方など）は
すべて Problem のサブクラス側に実装します。

基本の契約
----------
random_state(params, rng) / empty_state(params)
    状態のファクトリ。
is_solution(state)
    解かどうかの判定（cost == 0 は必要条件にすぎない）。

拡張（必要なアルゴリズムを使うときだけ実装する）
------------------------------------------------
GA        : crossover, mutate
CSP       : initialize_domains, unassigned_variables, select_unassigned_variable,
            domain_values, domain_size, apply_move,
            propagate_forward_checking, propagate_arc_consistency,
            partially_valid, successors, constraint_neighbors
計測用    : estimated_optimal_cost, search_space_estimate, extract_instance_params

実装されていない操作を呼ぶと ProblemContractError になります
（必要になった時点で即座に失敗させ、黙って誤魔化さない）。
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Mapping, Optional, Sequence, Tuple

from .errors import ProblemContractError
from .types import Domains, PropagationResult, State


@dataclass(frozen=True)
class SearchSpaceEstimate:
    """探索空間の大きさの目安（表示用）。"""

    formula: str
    approx: str


class Problem:
    """状態空間を記述する、状態を持たない Problem の基底クラス。"""

    id: str = ""
    name: str = ""
    description: str = ""
    default_params: Mapping[str, Any] = {}

    # ベンチマークでシードごとに別の問題インスタンスを作るときに書き換えるパラメータ名
    instance_seed_param: Optional[str] = None

    # True なら Backtracking / FC / AC-3 で使える
    supports_csp: bool = False

    def _missing(self, operation: str) -> ProblemContractError:
        return ProblemContractError(
            f"{type(self).__name__} does not implement {operation}()"
        )

    def resolve_params(self, params: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        """default_params に params を上書きした dict を返します。"""
        merged = dict(self.default_params)
        merged.update(params or {})
        return merged

    # ---- ファクトリ -------------------------------------------------------

    def random_state(self, params: Mapping[str, Any], rng: random.Random) -> State:
        raise self._missing("random_state")

    def empty_state(self, params: Mapping[str, Any]) -> State:
        raise self._missing("empty_state")

    def is_solution(self, state: State) -> bool:
        return not state.is_partial and state.cost == 0

    # ---- GA 拡張 ----------------------------------------------------------

    def crossover(
        self, parents: Sequence[State], params: Mapping[str, Any], rng: random.Random
    ) -> State:
        raise self._missing("crossover")

    def mutate(
        self, state: State, rate: float, params: Mapping[str, Any], rng: random.Random
    ) -> State:
        """突然変異を適用した「新しい」状態を返します（state 自体は変更しない）。"""
        raise self._missing("mutate")

    # ---- CSP 拡張 ---------------------------------------------------------

    def initialize_domains(self, state: State) -> Domains:
        raise self._missing("initialize_domains")

    def unassigned_variables(self, state: State) -> List[Hashable]:
        raise self._missing("unassigned_variables")

    def select_unassigned_variable(self, state: State) -> Optional[Hashable]:
        variables = self.unassigned_variables(state)
        return variables[0] if variables else None

    def domain_values(self, state: State, variable: Hashable) -> Tuple[Any, ...]:
        if state.domains is None:
            raise ProblemContractError(
                f"{type(state).__name__} carries no domains; call initialize_domains() first"
            )
        return tuple(state.domains[variable])

    def domain_size(self, state: State, variable: Hashable) -> int:
        return len(self.domain_values(state, variable))

    def apply_move(
        self, state: State, variable: Hashable, value: Any, new_domains: Optional[Domains]
    ) -> State:
        raise self._missing("apply_move")

    def propagate_forward_checking(
        self, state: State, variable: Hashable, value: Any
    ) -> PropagationResult:
        raise self._missing("propagate_forward_checking")

    def propagate_arc_consistency(
        self, state: State, variable: Hashable, value: Any
    ) -> PropagationResult:
        raise self._missing("propagate_arc_consistency")

    def partially_valid(self, state: State) -> bool:
        raise self._missing("partially_valid")

    def successors(self, state: State) -> List[State]:
        raise self._missing("successors")

    def constraint_neighbors(self, state: State, variable: Hashable) -> List[Hashable]:
        raise self._missing("constraint_neighbors")

    # ---- 計測用拡張 -------------------------------------------------------

    def estimated_optimal_cost(self, params: Mapping[str, Any]) -> Optional[float]:
        return None

    def search_space_estimate(self, params: Mapping[str, Any]) -> Optional[SearchSpaceEstimate]:
        return None

    def extract_instance_params(self, state: State) -> Dict[str, Any]:
        """
        状態から「問題インスタンスを再現するためのパラメータ」を取り出します。

        ベンチマークで同じ盤面・同じ都市配置を複数回使い回すために使います。
        """
        return {}
