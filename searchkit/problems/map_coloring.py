# -*- coding: utf-8 -*-
"""
Map Coloring（地図の塗り分け）問題です。

変数 = 地域（グラフの頂点番号）、値 = 色番号、制約 = 隣接する地域は別の色。

グラフは次の 2 種類:
- "australia" : オーストラリアの 7 州（Tasmania は孤立点）
- "random"    : 環状に並べた頂点に、ランダムな弦を足したグラフ
                （graph_seed から決定的に作るので、同じパラメータなら同じグラフ）

コスト = 同じ色の隣接ペア数 + PARTIAL_PENALTY × 未着色の地域数
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Hashable, List, Mapping, Optional, Sequence, Tuple

from ..config import PARTIAL_PENALTY
from ..errors import ConfigurationError
from ..problem import SearchSpaceEstimate
from ..types import Domains, State
from .assignment import AssignmentProblem, AssignmentState

AUSTRALIA_ADJACENCY: Dict[str, Tuple[str, ...]] = {
    "Western Australia": ("Northern Territory", "South Australia"),
    "Northern Territory": ("Western Australia", "South Australia", "Queensland"),
    "South Australia": (
        "Western Australia", "Northern Territory", "Queensland", "New South Wales", "Victoria",
    ),
    "Queensland": ("Northern Territory", "South Australia", "New South Wales"),
    "New South Wales": ("Queensland", "South Australia", "Victoria"),
    "Victoria": ("South Australia", "New South Wales"),
    "Tasmania": (),
}


@dataclass(frozen=True)
class MapGraph:
    """
    無向グラフ（問題インスタンス）。

    Attributes
    ----------
    names : tuple of str
        頂点 i の名前。
    adjacency : tuple of tuple of int
        adjacency[i] = i に隣接する頂点番号。
    edges : tuple of (int, int)
        i < j の辺の一覧。
    """

    names: Tuple[str, ...]
    adjacency: Tuple[Tuple[int, ...], ...]
    edges: Tuple[Tuple[int, int], ...]

    @property
    def node_count(self) -> int:
        return len(self.names)

    @classmethod
    def from_adjacency(cls, adjacency: Mapping[str, Sequence[str]]) -> "MapGraph":
        names = tuple(adjacency.keys())
        index = {name: i for i, name in enumerate(names)}
        adj: List[List[int]] = [[] for _ in names]
        edges = []
        for name, neighbors in adjacency.items():
            i = index[name]
            for other in neighbors:
                j = index[other]
                if j not in adj[i]:
                    adj[i].append(j)
                if i not in adj[j]:
                    adj[j].append(i)
        for i, neighbors_i in enumerate(adj):
            for j in neighbors_i:
                if i < j:
                    edges.append((i, j))
        return cls(names=names, adjacency=tuple(tuple(a) for a in adj), edges=tuple(sorted(edges)))


@lru_cache(maxsize=32)
def random_graph(node_count: int, seed: int) -> MapGraph:
    """
    環状グラフ + ランダムな弦。

    頂点 i は i+1 と必ず隣接し、さらに確率 1/2 で
    2 〜 (2 + node_count/3) 先の頂点とも隣接します。
    """
    rng = random.Random(seed)
    names = [f"R{i + 1}" for i in range(node_count)]
    adjacency: Dict[str, List[str]] = {name: [] for name in names}

    def connect(i: int, j: int) -> None:
        a, b = names[i], names[j]
        if i != j and b not in adjacency[a]:
            adjacency[a].append(b)
            adjacency[b].append(a)

    for i in range(node_count):
        connect(i, (i + 1) % node_count)
        if rng.random() < 0.5:
            skip = 2 + rng.randrange(max(1, node_count // 3))
            connect(i, (i + skip) % node_count)

    return MapGraph.from_adjacency(adjacency)


AUSTRALIA = MapGraph.from_adjacency(AUSTRALIA_ADJACENCY)


class MapColoringState(AssignmentState):
    def __init__(
        self,
        graph: MapGraph,
        num_colors: int,
        colors: Sequence[Optional[int]],
        domains: Optional[Domains] = None,
    ) -> None:
        super().__init__(colors, domains)
        self.graph = graph
        self.num_colors = num_colors

    @property
    def colors(self) -> Tuple[Optional[int], ...]:
        return self.values

    def derive(self, values, domains=None) -> "MapColoringState":
        return MapColoringState(self.graph, self.num_colors, values, domains)

    def conflicts(self) -> int:
        count = 0
        for i, j in self.graph.edges:
            ci, cj = self.values[i], self.values[j]
            if ci is not None and ci == cj:
                count += 1
        return count

    def compute_cost(self) -> float:
        return self.conflicts() + PARTIAL_PENALTY * len(self.unassigned())

    def neighbors(self) -> List[State]:
        """着色済みの地域を 1 つ、別の色に塗り替えた状態すべて。"""
        result: List[State] = []
        for node in self.assigned():
            for color in range(self.num_colors):
                if color != self.values[node]:
                    result.append(self.replace(node, color))
        return result

    def random_neighbor(self, rng: random.Random) -> State:
        nodes = self.assigned()
        if self.num_colors < 2 or not nodes:
            return super().random_neighbor(rng)
        node = rng.choice(nodes)
        color = rng.randrange(self.num_colors - 1)
        if color >= self.values[node]:
            color += 1
        return self.replace(node, color)


class MapColoringProblem(AssignmentProblem):
    id = "map-coloring"
    name = "Map Coloring"
    description = "Color a map so no two adjacent regions share the same color."
    default_params = {
        "graph_type": "australia",
        "num_colors": 3,
        # random グラフの頂点数と、グラフを作るための乱数シード
        "size": 8,
        "graph_seed": 0,
    }
    instance_seed_param = "graph_seed"

    def graph_for(self, params: Mapping[str, Any]) -> MapGraph:
        """params からグラフを決めます。"graph" があればそれをそのまま使う。"""
        if params.get("graph") is not None:
            return params["graph"]
        graph_type = params.get("graph_type", "australia")
        if graph_type == "australia":
            return AUSTRALIA
        if graph_type == "random":
            return random_graph(int(params["size"]), int(params["graph_seed"]))
        raise ConfigurationError(f"unknown graph_type: {graph_type!r}")

    def random_state(self, params: Mapping[str, Any], rng: random.Random) -> State:
        graph = self.graph_for(params)
        k = int(params["num_colors"])
        return MapColoringState(graph, k, [rng.randrange(k) for _ in range(graph.node_count)])

    def empty_state(self, params: Mapping[str, Any]) -> State:
        graph = self.graph_for(params)
        return MapColoringState(graph, int(params["num_colors"]), [None] * graph.node_count)

    # ---- GA ---------------------------------------------------------------

    def crossover(
        self, parents: Sequence[State], params: Mapping[str, Any], rng: random.Random
    ) -> State:
        """一様交叉（変数ごとに親をランダムに選ぶ）。"""
        first = parents[0]
        assert isinstance(first, MapColoringState)
        colors = [
            rng.choice(parents).values[i]  # type: ignore[attr-defined]
            for i in range(first.graph.node_count)
        ]
        return first.derive(colors)

    # ---- CSP --------------------------------------------------------------

    def candidate_values(self, state: AssignmentState, variable: int) -> Tuple[Any, ...]:
        assert isinstance(state, MapColoringState)
        return tuple(range(state.num_colors))

    def consistent(self, state: AssignmentState, xi: int, vi: Any, xj: int, vj: Any) -> bool:
        return vi != vj

    def constraint_neighbors(self, state: State, variable: Hashable) -> List[Hashable]:
        assert isinstance(state, MapColoringState)
        return list(state.graph.adjacency[variable])

    # ---- 計測用 -----------------------------------------------------------

    def estimated_optimal_cost(self, params: Mapping[str, Any]) -> Optional[float]:
        return 0

    def search_space_estimate(self, params: Mapping[str, Any]) -> Optional[SearchSpaceEstimate]:
        n = self.graph_for(params).node_count
        k = int(params["num_colors"])
        exponent = n * math.log10(k) if k > 1 else 0.0
        approx = f"{10 ** exponent:.2e}" if exponent >= 1 else str(k ** n)
        return SearchSpaceEstimate(formula=f"{k}^{n}", approx=approx)

    def extract_instance_params(self, state: State) -> Dict[str, Any]:
        assert isinstance(state, MapColoringState)
        return {"graph": state.graph, "num_colors": state.num_colors}
