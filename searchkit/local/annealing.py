# -*- coding: utf-8 -*-
"""
Simulated Annealing（焼きなまし法）による探索を行うモジュールです。

焼きなまし法の特徴:
- 確率的に「悪い手」も受け入れることで局所最適から脱出
- 温度パラメータで探索の「大胆さ」を制御
- 1 ステップごとに温度を cooling_rate 倍して解を収束させる

1 ステップ = 近傍を 1 つサンプルして受理/棄却を決め、温度を下げる。
温度は毎ステップ必ず下がります（T_{n+1} = T_n * cooling_rate）。
"""

from __future__ import annotations

import math
from typing import Optional

from ..config import SA_FROZEN_TEMPERATURE, SimulatedAnnealingConfig
from ..engine import SearchAlgorithm
from ..types import SearchStatus, State, StepRecord


class SimulatedAnnealing(SearchAlgorithm):
    name = "simulated_annealing"
    tag = "SA"
    config_model = SimulatedAnnealingConfig

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.current: Optional[State] = None
        self.best: Optional[State] = None
        self.temperature = self.config.initial_temperature
        self.accepted = 0
        self.rejected = 0

    def _start(self) -> StepRecord:
        if self.initial_state is not None:
            self.current = self.initial_state
        else:
            self.current = self.problem.random_state(self.params, self.rng)
        self.best = self.current
        return self._record(
            self.current, f"T={self.temperature:.2f}", temperature=self.temperature
        )

    def _advance(self) -> StepRecord:
        assert self.current is not None and self.best is not None

        if self.problem.is_solution(self.current):
            return self._record(
                self.current, "Solution found", SearchStatus.SOLUTION_FOUND,
                temperature=self.temperature,
            )

        if self.temperature < SA_FROZEN_TEMPERATURE:
            return self._record(
                self.best, "Frozen", SearchStatus.FROZEN, temperature=self.temperature
            )

        used_temperature = self.temperature
        neighbor = self.current.random_neighbor(self.rng)
        self.evaluations += 1

        # 正なら改善（コストが下がる）
        delta = self.current.cost - neighbor.cost

        if delta > 0:
            accept, outcome = True, "Improved"
        else:
            accept = self.rng.random() < math.exp(delta / used_temperature)
            outcome = "Accepted worse" if accept else "Rejected"

        if accept:
            self.current = neighbor
            self.accepted += 1
            if self.current.cost < self.best.cost:
                self.best = self.current
        else:
            self.rejected += 1

        # 温度を冷却
        self.temperature *= self.config.cooling_rate

        return self._record(
            self.current,
            f"T={used_temperature:.2f} ({outcome})",
            temperature=self.temperature,
            delta=delta,
            accepted=accept,
        )
