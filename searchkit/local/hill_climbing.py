# -*- coding: utf-8 -*-
"""
Hill Climbing（山登り法）による局所探索を行うモジュールです。

ここでは最急降下型（全近傍を評価してコスト最小の近傍へ移る）を実装し、
Stochastic Hill Climbing と共通の
- 横ばい移動（sideways move）の回数制限
- 横ばいの許容幅（sideways_tolerance）
- ランダムリスタート
の仕組みを ClimbingSearch にまとめています。

横ばいの許容幅は「改善する近傍が選ばれなかったとき」にだけ使います。
（台地から抜け出すための仕組みであり、改善手があるときに悪化手を選ぶことはない）
"""

from __future__ import annotations

import abc
from enum import Enum
from typing import Optional, Tuple

from ..config import HillClimbingConfig
from ..engine import SearchAlgorithm
from ..errors import ProblemContractError
from ..types import SearchStatus, State, StepRecord


class MoveKind(str, Enum):
    """候補近傍の分類。"""

    IMPROVED = "Improved"
    SIDEWAYS = "Sideways"
    SIDEWAYS_APPROX = "Sideways (≈)"


class ClimbingSearch(SearchAlgorithm):
    """
    単一の軌跡をたどる山登り系アルゴリズムの共通部分です。

    サブクラスは _propose() で「次の候補とその分類」を返すだけでよく、
    横ばい回数の管理とリスタートはここで行います。
    """

    config_model = HillClimbingConfig

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.current: Optional[State] = None
        self.best: Optional[State] = None
        self.restarts = 0
        self.sideways_moves = 0

    @abc.abstractmethod
    def _propose(self, current: State) -> Tuple[Optional[State], Optional[MoveKind]]:
        """次の候補を返します。候補がなければ (None, None)。"""

    def classify(self, current_cost: float, cost: float) -> Optional[MoveKind]:
        """近傍のコストを、現在のコストと比べて分類します。"""
        if cost < current_cost:
            return MoveKind.IMPROVED
        if cost == current_cost:
            return MoveKind.SIDEWAYS
        tolerance = self.config.sideways_tolerance
        if tolerance > 0 and cost <= current_cost * (1 + tolerance):
            return MoveKind.SIDEWAYS_APPROX
        return None

    def _fresh_state(self) -> State:
        return self.problem.random_state(self.params, self.rng)

    def _start(self) -> StepRecord:
        self.current = self.initial_state if self.initial_state is not None else self._fresh_state()
        self.best = self.current
        return self._record(self.current, "Initial state", restart_count=0)

    def _advance(self) -> StepRecord:
        assert self.current is not None and self.best is not None
        current = self.current

        if self.problem.is_solution(current):
            return self._record(
                current, "Solution found", SearchStatus.SOLUTION_FOUND,
                restart_count=self.restarts,
            )

        candidate, kind = self._propose(current)

        if candidate is not None and kind is MoveKind.IMPROVED:
            self.current = candidate
            self.sideways_moves = 0
            self._update_best()
            return self._record(candidate, kind.value, restart_count=self.restarts)

        if candidate is not None and kind is not None:
            if self.sideways_moves < self.config.max_sideways_moves:
                self.current = candidate
                self.sideways_moves += 1
                return self._record(
                    candidate, kind.value, restart_count=self.restarts,
                    sideways_moves=self.sideways_moves,
                )

        # 局所最適（または台地で横ばい回数を使い切った）
        if self.restarts < self.config.max_restarts:
            self.restarts += 1
            self.sideways_moves = 0
            self.current = self._fresh_state()
            self.evaluations += 1
            self._update_best()
            return self._record(
                self.current, f"Stuck - restart #{self.restarts}",
                restart_count=self.restarts,
            )

        return self._record(
            self.best, "Stuck (local optimum)", SearchStatus.STUCK_NO_RESTARTS_LEFT,
            restart_count=self.restarts,
        )

    def _update_best(self) -> None:
        assert self.current is not None and self.best is not None
        if self.current.cost < self.best.cost:
            self.best = self.current


class HillClimbing(ClimbingSearch):
    """
    最急降下の山登り法。

    全近傍を評価し、コスト最小の近傍（同率はランダムに 1 つ）を候補にします。
    """

    name = "hill_climbing"
    tag = "HC"

    def _propose(self, current: State) -> Tuple[Optional[State], Optional[MoveKind]]:
        neighbors = current.neighbors()
        if not neighbors:
            raise ProblemContractError(
                f"{type(current).__name__} produced no neighbors for a non-solution state"
            )
        self.evaluations += len(neighbors)

        best_cost = min(n.cost for n in neighbors)
        ties = [n for n in neighbors if n.cost == best_cost]
        chosen = self.rng.choice(ties)
        return chosen, self.classify(current.cost, chosen.cost)
