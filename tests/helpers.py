from __future__ import annotations

import random
from typing import Any, List, Mapping

from searchkit.problem import Problem
from searchkit.types import State


class LineState(State):
    """整数 x。コストは |x|、近傍は x-1 と x+1。"""

    def __init__(self, x: int) -> None:
        self.x = x

    def compute_cost(self) -> float:
        return abs(self.x)

    def neighbors(self) -> List[State]:
        return [LineState(self.x - 1), LineState(self.x + 1)]


class LineProblem(Problem):
    id = "line"

    def random_state(self, params: Mapping[str, Any], rng: random.Random) -> State:
        return LineState(rng.randint(-10, 10))


class FlatState(State):
    """どこへ動いてもコストが 1 のままの台地。"""

    def __init__(self, value: int) -> None:
        self.value = value

    def compute_cost(self) -> float:
        return 1

    def neighbors(self) -> List[State]:
        return [FlatState(self.value - 1), FlatState(self.value + 1)]


class FlatProblem(Problem):
    id = "flat"

    def random_state(self, params: Mapping[str, Any], rng: random.Random) -> State:
        return FlatState(rng.randrange(100))


class LoneState(State):
    def compute_cost(self) -> float:
        return 1

    def neighbors(self) -> List[State]:
        return []


class NegativeState(State):
    def compute_cost(self) -> float:
        return -1


class LoneProblem(Problem):
    id = "lone"

    def random_state(self, params: Mapping[str, Any], rng: random.Random) -> State:
        return LoneState()


class RampState(State):
    """近傍は 1 つだけで、少しずつコストが上がっていく坂。"""

    def __init__(self, step: int) -> None:
        self.step = step

    def compute_cost(self) -> float:
        return 100 + self.step

    def neighbors(self) -> List[State]:
        return [RampState(self.step + 1)]


class HalvingProblem(LineProblem):
    """交叉すると親の |x| の半分になる。突然変異はしない。"""

    id = "halving"

    def random_state(self, params: Mapping[str, Any], rng: random.Random) -> State:
        return LineState(rng.choice([-4, 4]))

    def crossover(self, parents, params, rng) -> State:
        return LineState(min(abs(p.x) for p in parents) // 2)

    def mutate(self, state, rate, params, rng) -> State:
        return state
