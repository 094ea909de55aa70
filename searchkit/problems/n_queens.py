# -*- coding: utf-8 -*-
"""
N-Queens 問題です。

状態: queens[row] = column（未配置は None）
コスト: 配置済みのクイーンどうしで利き合っているペアの数
        + PARTIAL_PENALTY × 未配置のクイーン数

例: [1, 3, 0, 2] はコスト 0（4-Queens の解）、
    [0, 0, 0, 0] は 4C2 = 6（全ペアが同じ列、斜めの利きは数えない）。
"""

from __future__ import annotations

import random
from typing import Any, Dict, Hashable, List, Mapping, Optional, Sequence, Tuple

from ..config import PARTIAL_PENALTY
from ..problem import SearchSpaceEstimate
from ..types import Domains, State
from .assignment import AssignmentProblem, AssignmentState


def attacks(r1: int, c1: int, r2: int, c2: int) -> bool:
    """(r1, c1) と (r2, c2) のクイーンが利き合うかどうか（同じ行は想定しない）。"""
    return c1 == c2 or abs(c1 - c2) == abs(r1 - r2)


class NQueensState(AssignmentState):
    def __init__(self, queens: Sequence[Optional[int]], domains: Optional[Domains] = None) -> None:
        super().__init__(queens, domains)

    @property
    def queens(self) -> Tuple[Optional[int], ...]:
        return self.values

    @property
    def size(self) -> int:
        return len(self.values)

    def derive(self, values, domains=None) -> "NQueensState":
        return NQueensState(values, domains)

    def attacking_pairs(self) -> int:
        placed = [(r, c) for r, c in enumerate(self.values) if c is not None]
        count = 0
        for i in range(len(placed)):
            r1, c1 = placed[i]
            for j in range(i + 1, len(placed)):
                r2, c2 = placed[j]
                if attacks(r1, c1, r2, c2):
                    count += 1
        return count

    def compute_cost(self) -> float:
        return self.attacking_pairs() + PARTIAL_PENALTY * len(self.unassigned())

    def neighbors(self) -> List[State]:
        """配置済みのクイーンを 1 つ、同じ行の別の列に動かした状態すべて。"""
        result: List[State] = []
        for row in self.assigned():
            for col in range(self.size):
                if col != self.values[row]:
                    result.append(self.replace(row, col))
        return result

    def random_neighbor(self, rng: random.Random) -> State:
        rows = self.assigned()
        if self.size < 2 or not rows:
            return super().random_neighbor(rng)
        row = rng.choice(rows)
        # 現在の列以外から一様に選ぶ
        col = rng.randrange(self.size - 1)
        if col >= self.values[row]:
            col += 1
        return self.replace(row, col)


class NQueensProblem(AssignmentProblem):
    id = "n-queens"
    name = "N-Queens"
    description = "Place N queens on an N x N board so that no two attack each other."
    default_params = {"size": 8}

    def random_state(self, params: Mapping[str, Any], rng: random.Random) -> State:
        n = int(params["size"])
        return NQueensState([rng.randrange(n) for _ in range(n)])

    def empty_state(self, params: Mapping[str, Any]) -> State:
        return NQueensState([None] * int(params["size"]))

    # ---- GA ---------------------------------------------------------------

    def crossover(
        self, parents: Sequence[State], params: Mapping[str, Any], rng: random.Random
    ) -> State:
        """一点交叉。"""
        a, b = parents[0], parents[1]
        assert isinstance(a, NQueensState) and isinstance(b, NQueensState)
        if a.size < 2:
            return a.derive(a.values)
        cut = rng.randrange(1, a.size)
        return a.derive(a.values[:cut] + b.values[cut:])

    # ---- CSP --------------------------------------------------------------

    def candidate_values(self, state: AssignmentState, variable: int) -> Tuple[Any, ...]:
        return tuple(range(len(state.values)))

    def consistent(self, state: AssignmentState, xi: int, vi: Any, xj: int, vj: Any) -> bool:
        return not attacks(xi, vi, xj, vj)

    def constraint_neighbors(self, state: State, variable: Hashable) -> List[Hashable]:
        assert isinstance(state, NQueensState)
        return [row for row in range(state.size) if row != variable]

    # ---- 計測用 -----------------------------------------------------------

    def estimated_optimal_cost(self, params: Mapping[str, Any]) -> Optional[float]:
        # N = 2, 3 には解がない
        return None if int(params["size"]) in (2, 3) else 0

    def search_space_estimate(self, params: Mapping[str, Any]) -> Optional[SearchSpaceEstimate]:
        n = int(params["size"])
        return SearchSpaceEstimate(formula=f"{n}^{n}", approx=f"{float(n) ** n:.2e}")

    def extract_instance_params(self, state: State) -> Dict[str, Any]:
        assert isinstance(state, NQueensState)
        return {"size": state.size}
