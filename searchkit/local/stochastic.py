# -*- coding: utf-8 -*-
"""
Stochastic Hill Climbing（確率的山登り法）のモジュールです。

3 種類の手の選び方（variant）を切り替えられます。

standard
    改善する近傍の中から一様ランダムに 1 つ選ぶ。
weighted
    改善する近傍の中から、改善量 (current.cost - neighbor.cost) に
    比例した確率で選ぶ（急な坂ほど選ばれやすい）。
first_choice
    近傍をすべて作らず、random_neighbor() で 1 つずつサンプルして
    最初に見つかった改善近傍を採用する。上限回数までに見つからなければ、
    途中で見つけた横ばい候補を使う。

改善近傍がない場合の横ばい・リスタートの扱いは Hill Climbing と共通です。
"""

from __future__ import annotations

from typing import Optional, Tuple

from ..config import FIRST_CHOICE_MAX_ATTEMPTS, StochasticHillClimbingConfig
from ..errors import ProblemContractError
from ..types import State
from .hill_climbing import ClimbingSearch, MoveKind

_SIDEWAYS_KINDS = (MoveKind.SIDEWAYS, MoveKind.SIDEWAYS_APPROX)


class StochasticHillClimbing(ClimbingSearch):
    name = "stochastic_hill_climbing"
    tag = "SHC"
    config_model = StochasticHillClimbingConfig

    def _propose(self, current: State) -> Tuple[Optional[State], Optional[MoveKind]]:
        if self.config.variant == "first_choice":
            return self._propose_first_choice(current)

        neighbors = current.neighbors()
        if not neighbors:
            raise ProblemContractError(
                f"{type(current).__name__} produced no neighbors for a non-solution state"
            )
        self.evaluations += len(neighbors)

        better = [n for n in neighbors if n.cost < current.cost]
        if better:
            if self.config.variant == "weighted":
                improvements = [current.cost - n.cost for n in better]
                chosen = self.rng.choices(better, weights=improvements, k=1)[0]
            else:
                chosen = self.rng.choice(better)
            return chosen, MoveKind.IMPROVED

        sideways = [
            n for n in neighbors if self.classify(current.cost, n.cost) in _SIDEWAYS_KINDS
        ]
        if not sideways:
            return None, None
        chosen = self.rng.choice(sideways)
        return chosen, self.classify(current.cost, chosen.cost)

    def _propose_first_choice(
        self, current: State
    ) -> Tuple[Optional[State], Optional[MoveKind]]:
        fallback: Tuple[Optional[State], Optional[MoveKind]] = (None, None)

        for _ in range(FIRST_CHOICE_MAX_ATTEMPTS):
            neighbor = current.random_neighbor(self.rng)
            self.evaluations += 1

            kind = self.classify(current.cost, neighbor.cost)
            if kind is MoveKind.IMPROVED:
                return neighbor, kind
            if kind is not None and fallback[0] is None:
                # 最初に見つかった横ばい候補を覚えておく
                fallback = (neighbor, kind)

        return fallback
