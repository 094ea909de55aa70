# -*- coding: utf-8 -*-
"""
集団系アルゴリズムで共有する選択（selection）の部品です。
"""

from __future__ import annotations

import heapq
import random
from typing import List, Sequence

import numpy as np

from ..config import BEAM_SELECTION_SENSITIVITY, GA_TOURNAMENT_SIZE
from ..types import State


def tournament_selection(
    population: Sequence[State],
    rng: random.Random,
    tournament_size: int = GA_TOURNAMENT_SIZE,
) -> State:
    """
    トーナメント選択: 一様ランダムに tournament_size 個（重複あり）を選び、
    その中でコスト最小の個体を返す。
    """
    best = None
    for _ in range(tournament_size):
        candidate = population[rng.randrange(len(population))]
        if best is None or candidate.cost < best.cost:
            best = candidate
    assert best is not None
    return best


def truncation_selection(pool: Sequence[State], k: int) -> List[State]:
    """
    コストの小さい順に k 個を返します。

    候補が k 個に満たない場合は、選ばれた状態を順に繰り返して k 個にそろえます。
    """
    chosen = heapq.nsmallest(k, pool, key=lambda s: s.cost)
    return [chosen[i % len(chosen)] for i in range(k)]


def boltzmann_selection(
    pool: Sequence[State],
    k: int,
    rng: random.Random,
    beta: float = BEAM_SELECTION_SENSITIVITY,
) -> List[State]:
    """
    重み exp(-beta * (cost - min_cost)) に比例して k 個を復元抽出します。

    最小コストを引いてから exp を取るので、コストが大きくても
    すべての重みが 0 にアンダーフローすることはありません（最小コストの重みは 1）。
    """
    costs = np.array([s.cost for s in pool], dtype=float)
    weights = np.exp(-beta * (costs - costs.min()))
    return rng.choices(list(pool), weights=weights.tolist(), k=k)
