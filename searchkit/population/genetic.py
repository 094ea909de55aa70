# -*- coding: utf-8 -*-
"""
Genetic Algorithm（遺伝的アルゴリズム）による探索を行うモジュールです。

GAの特徴:
- 複数の解候補（個体）を並列的に進化させる
- 交叉と突然変異で新しい解を生成
- 局所最適に陥りにくい

1 ステップ = 1 世代:
1. 下位 cull_rate の割合を淘汰（コスト順にソート済みの先頭が生存）
2. elitism なら最良個体の複製をそのまま次世代へ
3. トーナメント選択で親を 2 つ選び、Problem の crossover で子を作り、
   Problem の mutate で突然変異させる。これを個体数がそろうまで繰り返す
4. 新しい集団をソートし、最良個体が解なら終了

交叉・突然変異は Problem 側の実装で、常に新しい State を返します。
"""

from __future__ import annotations

from typing import List, Optional

import numpy as np

from ..config import GeneticAlgorithmConfig
from ..engine import SearchAlgorithm
from ..types import SearchStatus, State, StepRecord
from .selection import tournament_selection


class GeneticAlgorithm(SearchAlgorithm):
    name = "genetic_algorithm"
    tag = "GA"
    config_model = GeneticAlgorithmConfig

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.population: List[State] = []
        self.best: Optional[State] = None
        self.generation = 0

    def _population_record(
        self, note: str, status: SearchStatus = SearchStatus.IN_PROGRESS,
        state: Optional[State] = None,
    ) -> StepRecord:
        costs = [ind.cost for ind in self.population]
        return self._record(
            state if state is not None else self.population[0],
            note,
            status,
            population=tuple(self.population),
            generation=self.generation,
            size=len(self.population),
            avg_cost=float(np.mean(costs)),
        )

    def _start(self) -> StepRecord:
        size = self.config.population_size
        population: List[State] = []
        if self.initial_state is not None:
            population.append(self.initial_state)
        while len(population) < size:
            population.append(self.problem.random_state(self.params, self.rng))
            self.evaluations += 1

        population.sort(key=lambda ind: ind.cost)
        self.population = population
        self.best = population[0]

        if self.problem.is_solution(self.best):
            return self._population_record(
                "Solution in generation 0", SearchStatus.SOLUTION_FOUND
            )
        return self._population_record(f"Generation 0 best: {self.best.cost}")

    def _advance(self) -> StepRecord:
        assert self.best is not None
        size = self.config.population_size

        # 淘汰（少なくとも 1 個体は残す）
        keep = max(1, int(size * (1 - self.config.cull_rate)))
        survivors = self.population[:keep]

        next_population: List[State] = []
        if self.config.elitism:
            next_population.append(survivors[0].clone())

        while len(next_population) < size:
            parents = [
                tournament_selection(survivors, self.rng),
                tournament_selection(survivors, self.rng),
            ]
            child = self.problem.crossover(parents, self.params, self.rng)
            child = self.problem.mutate(child, self.config.mutation_rate, self.params, self.rng)
            self.evaluations += 1
            next_population.append(child)

        next_population.sort(key=lambda ind: ind.cost)
        self.population = next_population
        self.generation += 1

        generation_best = next_population[0]
        if generation_best.cost < self.best.cost:
            self.best = generation_best

        if self.problem.is_solution(generation_best):
            return self._population_record(
                f"Solution in generation {self.generation}", SearchStatus.SOLUTION_FOUND
            )

        if self.generation >= self.config.max_generations:
            return self._population_record(
                f"Generation limit reached (best: {self.best.cost})",
                SearchStatus.STOPPED_AT_LIMIT,
                state=self.best,
            )

        return self._population_record(
            f"Generation {self.generation} best: {generation_best.cost}"
        )
