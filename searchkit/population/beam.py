# -*- coding: utf-8 -*-
"""
Local Beam Search（局所ビーム探索）のモジュールです。

k 個の状態（ビーム）を同時に保持し、1 ステップ = 1 世代として
- ビーム内の全状態の全近傍を 1 つの候補プールに集める
- deterministic : コストの小さい k 個を残す
- stochastic    : exp(-β(cost - min)) に比例した確率で k 個を復元抽出
を繰り返します。

「改善」か「横ばい」かは、そのビームでのこれまでの最良コストと比べて判定します。
（直前の世代とだけ比べると、2 つのコストを行き来するだけで
　横ばいカウンタがリセットされ続けてしまうため）

行き詰まり（横ばい回数切れ・候補ゼロ・世代数上限）になったら、
リスタート回数が残っていればビーム全体を作り直します。
"""

from __future__ import annotations

import math
from typing import List, Optional

import numpy as np

from ..config import LocalBeamSearchConfig
from ..engine import SearchAlgorithm
from ..types import SearchStatus, State, StepRecord
from .selection import boltzmann_selection, truncation_selection


class LocalBeamSearch(SearchAlgorithm):
    name = "local_beam_search"
    tag = "BEAM"
    config_model = LocalBeamSearchConfig

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.population: List[State] = []
        self.best: Optional[State] = None
        self.generation = 0
        self.restarts = 0
        self.sideways_moves = 0
        self.beam_best_cost = math.inf

    def _new_beam(self, include_initial: bool) -> None:
        k = self.config.beam_width
        members: List[State] = []
        if include_initial and self.initial_state is not None:
            members.append(self.initial_state)
        while len(members) < k:
            members.append(self.problem.random_state(self.params, self.rng))
            self.evaluations += 1

        members.sort(key=lambda s: s.cost)
        self.population = members
        self.generation = 0
        self.sideways_moves = 0
        self.beam_best_cost = members[0].cost
        if self.best is None or members[0].cost < self.best.cost:
            self.best = members[0]

    def _beam_record(self, note: str, status: SearchStatus = SearchStatus.IN_PROGRESS,
                     state: Optional[State] = None) -> StepRecord:
        return self._record(
            state if state is not None else self.population[0],
            note,
            status,
            population=tuple(self.population),
            restart_count=self.restarts,
            generation=self.generation,
            avg_cost=float(np.mean([s.cost for s in self.population])),
        )

    def _start(self) -> StepRecord:
        self._new_beam(include_initial=True)
        return self._beam_record(f"Generation 0 best: {self.population[0].cost}")

    def _advance(self) -> StepRecord:
        solved = next((s for s in self.population if self.problem.is_solution(s)), None)
        if solved is not None:
            return self._beam_record(
                f"Solution found in generation {self.generation}",
                SearchStatus.SOLUTION_FOUND,
                state=solved,
            )

        if self.generation >= self.config.max_generations:
            return self._stuck("Generation limit reached")

        pool: List[State] = []
        for member in self.population:
            pool.extend(member.neighbors())
        self.evaluations += len(pool)

        if not pool:
            return self._stuck("Dead end (no candidates)")

        k = self.config.beam_width
        if self.config.variant == "stochastic":
            chosen = boltzmann_selection(pool, k, self.rng)
        else:
            chosen = truncation_selection(pool, k)
        chosen.sort(key=lambda s: s.cost)

        self.population = chosen
        self.generation += 1
        generation_best = chosen[0]
        assert self.best is not None
        if generation_best.cost < self.best.cost:
            self.best = generation_best

        if generation_best.cost < self.beam_best_cost:
            self.beam_best_cost = generation_best.cost
            self.sideways_moves = 0
            return self._beam_record(
                f"Generation {self.generation} improved: {generation_best.cost}"
            )

        if self.sideways_moves < self.config.max_sideways_moves:
            self.sideways_moves += 1
            return self._beam_record(
                f"Generation {self.generation} sideways "
                f"{self.sideways_moves}/{self.config.max_sideways_moves}"
            )

        return self._stuck("Sideways limit reached")

    def _stuck(self, reason: str) -> StepRecord:
        if self.restarts < self.config.max_restarts:
            self.restarts += 1
            self._new_beam(include_initial=False)
            return self._beam_record(f"{reason} - restart #{self.restarts}")

        return self._beam_record(
            f"Stuck ({reason})", SearchStatus.STUCK_NO_RESTARTS_LEFT, state=self.best
        )
