# -*- coding: utf-8 -*-
"""
刈り込み付きの構成的探索（Backtracking / Forward Checking / AC-3）です。

3 つとも、ノードごとに
1. 変数選択ヒューリスティックで次の変数を選ぶ
2. 値順序ヒューリスティックで値を並べる
3. 値ごとに子を作り、スタックに積む
という流れは共通で、違うのは刈り込みの方法だけです。

Backtracking
    子のドメインは割り当てた変数を単一値にするだけ（伝播なし）。
    Problem.partially_valid が False のノードは展開しない。

Forward Checking / AC-3
    各値について制約伝播（FC: 1 ホップ / AC-3: 弧整合）を行い、
    成功した子だけをスタックに積む。
    伝播が失敗した子（wipeout）も、観察用に 1 回だけレコードとして出してから捨てます。
    そのレコードは、展開したノードのレコードの直後のステップで順に返されます。
"""

from __future__ import annotations

import abc
from typing import Any, Hashable, List, Optional, Tuple

from ..config import CSPSearchConfig
from ..types import Domains, PropagationResult, State
from .blind import ConstructiveSearch
from .heuristics import get_value_heuristic, get_variable_heuristic


class CSPSearch(ConstructiveSearch):
    """
    ドメインと順序ヒューリスティックを使う構成的探索の共通部分です。

    根には Problem.initialize_domains() でドメインを持たせます。
    """

    config_model = CSPSearchConfig

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.select_variable = get_variable_heuristic(self.config.variable_heuristic)
        self.order_values = get_value_heuristic(self.config.value_heuristic)

    def _prepare_root(self, root: State) -> State:
        return root.with_domains(self.problem.initialize_domains(root))

    def _choose(self, node: State) -> Tuple[Optional[Hashable], List[Any]]:
        """次に割り当てる変数と、試す順に並べた値を返します。"""
        variable = self.select_variable(self.problem, node, self.rng)
        if variable is None:
            return None, []
        values = self.order_values(
            self.problem, node, variable, self.problem.domain_values(node, variable), self.rng
        )
        return variable, list(values)


class Backtracking(CSPSearch):
    name = "backtracking"
    tag = "BT"

    def _expand(self, node: State) -> str:
        if not self.problem.partially_valid(node):
            return "Pruned (constraint violation)"

        variable, values = self._choose(node)
        if variable is None:
            return "Dead end (no unassigned variable)"

        children = [
            self.problem.apply_move(node, variable, value, self._fixed(node, variable, value))
            for value in values
        ]
        self.evaluations += len(children)
        self._push_children(children)
        return f"Stack: {len(self.frontier)} (assigning {variable})"

    @staticmethod
    def _fixed(node: State, variable: Hashable, value: Any) -> Domains:
        assert node.domains is not None
        domains = dict(node.domains)
        domains[variable] = (value,)
        return domains


class PropagatingSearch(CSPSearch):
    """
    伝播付きの CSP 探索（FC / AC-3）の共通部分です。

    サブクラスは _propagate() で使う伝播だけを決めます。
    """

    @abc.abstractmethod
    def _propagate(self, state: State, variable: Hashable, value: Any) -> PropagationResult:
        """state で variable = value としたときの伝播結果。"""

    def _expand(self, node: State) -> str:
        variable, values = self._choose(node)
        if variable is None:
            return "Dead end (no unassigned variable)"

        children: List[State] = []
        wipeouts: List[Tuple[State, Any]] = []
        for value in values:
            result = self._propagate(node, variable, value)
            child = self.problem.apply_move(node, variable, value, result.domains)
            self.evaluations += 1
            if result.success:
                children.append(child)
            else:
                wipeouts.append((child, value))

        self._push_children(children)

        for child, value in wipeouts:
            self._pending.append(
                self._node_record(
                    child, f"Pruned (wipeout after {variable}={value})",
                    wipeout=True, variable=variable, value=value,
                )
            )

        return f"Stack: {len(self.frontier)} (assigning {variable})"


class ForwardChecking(PropagatingSearch):
    name = "forward_checking"
    tag = "FC"

    def _propagate(self, state: State, variable: Hashable, value: Any) -> PropagationResult:
        return self.problem.propagate_forward_checking(state, variable, value)


class ArcConsistency(PropagatingSearch):
    name = "arc_consistency"
    tag = "AC3"

    def _propagate(self, state: State, variable: Hashable, value: Any) -> PropagationResult:
        return self.problem.propagate_arc_consistency(state, variable, value)
