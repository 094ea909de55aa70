# -*- coding: utf-8 -*-
"""
巡回セールスマン問題（TSP）です。

都市は 100 x 100 の正方形内にランダムに置きます（city_seed から決定的に生成）。
状態は都市番号の列 tour で、コストは巡回路の長さ（最後の都市から最初へ戻る分を含む）。
部分的な巡回路（BFS / DFS で作るもの）は戻りの辺を含まず、
未訪問の都市 1 つにつき PARTIAL_PENALTY を足します。

純粋な最適化問題なので is_solution は常に False です。
アルゴリズムは行き詰まり・凍結・世代数上限などで止まります。
"""

from __future__ import annotations

import itertools
import math
import random
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from ..config import PARTIAL_PENALTY
from ..local.hill_climbing import HillClimbing
from ..problem import Problem, SearchSpaceEstimate
from ..types import State

# これ以下の都市数なら、推定最適コストを全列挙で厳密に求める
BRUTE_FORCE_MAX_CITIES = 8


@dataclass(frozen=True, eq=False)
class CityMap:
    """都市の座標と、事前に計算した距離行列。"""

    points: Tuple[Tuple[float, float], ...]
    distances: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        coords = np.asarray(self.points, dtype=float).reshape(-1, 2)
        diff = coords[:, None, :] - coords[None, :, :]
        object.__setattr__(self, "distances", np.sqrt((diff ** 2).sum(axis=-1)))

    def __len__(self) -> int:
        return len(self.points)

    def tour_length(self, tour: Sequence[int], closed: bool = True) -> float:
        if len(tour) < 2:
            return 0.0
        idx = np.asarray(tour, dtype=int)
        total = float(self.distances[idx[:-1], idx[1:]].sum())
        if closed:
            total += float(self.distances[idx[-1], idx[0]])
        return total


@lru_cache(maxsize=32)
def random_cities(size: int, seed: int) -> CityMap:
    generator = np.random.default_rng(seed)
    coords = generator.uniform(0.0, 100.0, size=(size, 2))
    return CityMap(points=tuple((float(x), float(y)) for x, y in coords))


class TSPState(State):
    def __init__(self, tour: Sequence[int], cities: CityMap) -> None:
        self.tour: Tuple[int, ...] = tuple(tour)
        self.cities = cities

    @property
    def is_partial(self) -> bool:
        return len(self.tour) < len(self.cities)

    def compute_cost(self) -> float:
        if self.is_partial:
            missing = len(self.cities) - len(self.tour)
            return self.cities.tour_length(self.tour, closed=False) + PARTIAL_PENALTY * missing
        return self.cities.tour_length(self.tour)

    def _swapped(self, i: int, j: int) -> "TSPState":
        tour = list(self.tour)
        tour[i], tour[j] = tour[j], tour[i]
        return TSPState(tour, self.cities)

    def neighbors(self) -> List[State]:
        """2 都市の入れ替えすべて。"""
        n = len(self.tour)
        return [self._swapped(i, j) for i in range(n) for j in range(i + 1, n)]

    def random_neighbor(self, rng: random.Random) -> State:
        n = len(self.tour)
        if n < 2:
            return super().random_neighbor(rng)
        i, j = rng.sample(range(n), 2)
        return self._swapped(i, j)

    def __repr__(self) -> str:
        return f"TSPState({list(self.tour)}, cost={self.cost:.3f})"


class TSPProblem(Problem):
    id = "tsp"
    name = "Traveling Salesperson"
    description = "Find the shortest closed tour visiting every city exactly once."
    default_params = {"size": 20, "city_seed": 0}
    instance_seed_param = "city_seed"

    def cities_for(self, params: Mapping[str, Any]) -> CityMap:
        """params に "cities" があればそれを使い、なければ city_seed から生成します。"""
        cities = params.get("cities")
        if cities is None:
            return random_cities(int(params["size"]), int(params["city_seed"]))
        if isinstance(cities, CityMap):
            return cities
        return CityMap(points=tuple((float(x), float(y)) for x, y in cities))

    def random_state(self, params: Mapping[str, Any], rng: random.Random) -> State:
        cities = self.cities_for(params)
        tour = list(range(len(cities)))
        rng.shuffle(tour)
        return TSPState(tour, cities)

    def empty_state(self, params: Mapping[str, Any]) -> State:
        return TSPState([], self.cities_for(params))

    def is_solution(self, state: State) -> bool:
        return False

    # ---- GA ---------------------------------------------------------------

    def crossover(
        self, parents: Sequence[State], params: Mapping[str, Any], rng: random.Random
    ) -> State:
        """
        順序交叉（OX1）。

        親 1 の区間 [start, end] をそのまま写し、残りの位置を end+1 から順に、
        親 2 の並び（end+1 から巡回）で未使用の都市で埋めます。
        """
        p1, p2 = parents[0], parents[1]
        assert isinstance(p1, TSPState) and isinstance(p2, TSPState)
        n = len(p1.tour)
        if n < 2:
            return TSPState(p1.tour, p1.cities)

        start, end = sorted((rng.randrange(n), rng.randrange(n)))
        child: List[Optional[int]] = [None] * n
        child[start:end + 1] = p1.tour[start:end + 1]
        used = set(p1.tour[start:end + 1])

        donors = (p2.tour[(end + 1 + k) % n] for k in range(n))
        fill = [city for city in donors if city not in used]
        positions = [(end + 1 + k) % n for k in range(n - (end - start + 1))]
        for pos, city in zip(positions, fill):
            child[pos] = city

        return TSPState([c for c in child if c is not None], p1.cities)

    def mutate(
        self, state: State, rate: float, params: Mapping[str, Any], rng: random.Random
    ) -> State:
        """確率 rate で 2 都市を入れ替えます。"""
        assert isinstance(state, TSPState)
        if len(state.tour) >= 2 and rng.random() < rate:
            i, j = rng.sample(range(len(state.tour)), 2)
            return state._swapped(i, j)
        return TSPState(state.tour, state.cities)

    # ---- 構成的探索 -------------------------------------------------------

    def successors(self, state: State) -> List[State]:
        """未訪問の都市を 1 つ末尾に加えた巡回路すべて。"""
        assert isinstance(state, TSPState)
        visited = set(state.tour)
        return [
            TSPState(state.tour + (city,), state.cities)
            for city in range(len(state.cities))
            if city not in visited
        ]

    # ---- 計測用 -----------------------------------------------------------

    def estimated_optimal_cost(self, params: Mapping[str, Any]) -> Optional[float]:
        """
        BRUTE_FORCE_MAX_CITIES 以下なら全列挙で最短巡回路を求め、
        それより大きければリスタート付き Hill Climbing の結果を目安として返します。
        """
        cities = self.cities_for(params)
        n = len(cities)
        if n < 2:
            return 0.0

        if n <= BRUTE_FORCE_MAX_CITIES:
            # 都市 0 を始点に固定すれば、回転の重複を数えずに済む
            return min(
                cities.tour_length((0,) + rest)
                for rest in itertools.permutations(range(1, n))
            )

        search = HillClimbing(
            self,
            config={"max_sideways_moves": 20, "max_restarts": 5},
            rng=random.Random(0),
            problem_params={**params, "cities": cities},
        )
        search.run()
        return search.best.cost if search.best is not None else None

    def search_space_estimate(self, params: Mapping[str, Any]) -> Optional[SearchSpaceEstimate]:
        n = len(self.cities_for(params))
        if n < 3:
            return SearchSpaceEstimate(formula="(N-1)!/2", approx="1")
        # log10((n-1)!/2)
        log10_value = math.lgamma(n) / math.log(10) - math.log10(2)
        exponent = math.floor(log10_value)
        mantissa = 10 ** (log10_value - exponent)
        return SearchSpaceEstimate(formula="(N-1)!/2", approx=f"{mantissa:.2f}e+{exponent}")

    def extract_instance_params(self, state: State) -> Dict[str, Any]:
        assert isinstance(state, TSPState)
        return {"cities": state.cities}
