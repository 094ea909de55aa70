from __future__ import annotations

import math
import random

import pytest

from searchkit.config import PARTIAL_PENALTY
from searchkit.problems import (
    PROBLEMS,
    CityMap,
    MapColoringProblem,
    MapColoringState,
    NQueensProblem,
    NQueensState,
    TSPProblem,
    TSPState,
    get_problem,
)
from searchkit.problems.map_coloring import AUSTRALIA, random_graph
from searchkit.errors import ConfigurationError

SQUARE = CityMap(points=((0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)))


# ---- N-Queens ---------------------------------------------------------------

def test_four_queens_costs() -> None:
    assert NQueensState([1, 3, 0, 2]).cost == 0
    assert NQueensState([0, 0, 0, 0]).cost == 6
    assert NQueensState([0, 1, 2, 3]).cost == 6
    assert NQueensState([1, None, None, None]).cost == 3 * PARTIAL_PENALTY


def test_four_queens_solution_predicate() -> None:
    problem = NQueensProblem()
    assert problem.is_solution(NQueensState([1, 3, 0, 2]))
    assert not problem.is_solution(NQueensState([0, 0, 0, 0]))
    assert not problem.is_solution(NQueensState([None, None, None, None]))


def test_queens_neighbors_move_one_queen_in_its_row() -> None:
    state = NQueensState([0, 1, 2, 3])
    neighbors = state.neighbors()
    assert len(neighbors) == 4 * 3
    for neighbor in neighbors:
        diff = [r for r in range(4) if neighbor.queens[r] != state.queens[r]]
        assert len(diff) == 1


def test_queens_random_neighbor_changes_exactly_one_row(rng: random.Random) -> None:
    state = NQueensState([0, 1, 2, 3, 4])
    for _ in range(50):
        neighbor = state.random_neighbor(rng)
        assert sum(a != b for a, b in zip(state.queens, neighbor.queens)) == 1


def test_queens_crossover_and_mutation_return_new_states(rng: random.Random) -> None:
    problem = NQueensProblem()
    params = problem.resolve_params({"size": 6})
    a = NQueensState([0] * 6)
    b = NQueensState([5] * 6)

    child = problem.crossover([a, b], params, rng)
    assert child.size == 6
    assert child.queens[0] == 0 and child.queens[-1] == 5

    mutated = problem.mutate(a, 1.0, params, rng)
    assert mutated is not a
    assert a.queens == (0,) * 6
    unchanged = problem.mutate(a, 0.0, params, rng)
    assert unchanged.queens == a.queens


def test_queens_partial_validity() -> None:
    problem = NQueensProblem()
    assert problem.partially_valid(NQueensState([1, 3, None, None]))
    assert not problem.partially_valid(NQueensState([0, 1, None, None]))


def test_queens_successors_fill_first_empty_row() -> None:
    problem = NQueensProblem()
    children = problem.successors(NQueensState([1, None, None, None]))
    assert [c.queens for c in children] == [(1, c, None, None) for c in range(4)]
    assert problem.successors(NQueensState([1, 3, 0, 2])) == []


def test_queens_instrumentation() -> None:
    problem = NQueensProblem()
    assert problem.estimated_optimal_cost({"size": 8}) == 0
    assert problem.estimated_optimal_cost({"size": 3}) is None
    estimate = problem.search_space_estimate({"size": 8})
    assert estimate.formula == "8^8"
    assert estimate.approx == "1.68e+07"
    assert problem.extract_instance_params(NQueensState([0] * 5)) == {"size": 5}


# ---- Map Coloring -----------------------------------------------------------

def test_australia_graph() -> None:
    assert AUSTRALIA.node_count == 7
    assert len(AUSTRALIA.edges) == 9
    assert AUSTRALIA.adjacency[AUSTRALIA.names.index("Tasmania")] == ()
    assert len(AUSTRALIA.adjacency[AUSTRALIA.names.index("South Australia")]) == 5


def test_map_coloring_cost() -> None:
    state = MapColoringState(AUSTRALIA, 3, [0] * 7)
    assert state.cost == 9
    partial = MapColoringState(AUSTRALIA, 3, [None] * 7)
    assert partial.cost == 7 * PARTIAL_PENALTY
    assert partial.is_partial


def test_random_graph_is_deterministic_ring_with_chords() -> None:
    graph = random_graph(10, 3)
    assert graph is random_graph(10, 3)
    assert graph.node_count == 10
    for i in range(10):
        assert (i + 1) % 10 in graph.adjacency[i]
        assert len(graph.adjacency[i]) >= 2


def test_random_map_instance_is_stable_across_random_states(rng: random.Random) -> None:
    problem = MapColoringProblem()
    params = problem.resolve_params({"graph_type": "random", "size": 12, "graph_seed": 5})
    a = problem.random_state(params, rng)
    b = problem.random_state(params, rng)
    assert a.graph is b.graph


def test_unknown_graph_type() -> None:
    problem = MapColoringProblem()
    with pytest.raises(ConfigurationError):
        problem.empty_state(problem.resolve_params({"graph_type": "europe"}))


def test_map_coloring_search_space() -> None:
    estimate = MapColoringProblem().search_space_estimate(MapColoringProblem().resolve_params())
    assert estimate.formula == "3^7"
    assert estimate.approx == "2.19e+03"


# ---- TSP --------------------------------------------------------------------

def test_tsp_tour_costs() -> None:
    assert TSPState([0, 1, 2, 3], SQUARE).cost == pytest.approx(4.0)
    assert TSPState([0, 2, 1, 3], SQUARE).cost == pytest.approx(2 + 2 * math.sqrt(2))
    assert TSPState([0, 1], SQUARE).cost == pytest.approx(1.0 + 2 * PARTIAL_PENALTY)
    assert TSPState([], SQUARE).cost == 4 * PARTIAL_PENALTY


def test_tsp_is_never_solved() -> None:
    assert not TSPProblem().is_solution(TSPState([0, 1, 2, 3], SQUARE))


def test_tsp_neighbors_are_swaps(rng: random.Random) -> None:
    state = TSPState([0, 1, 2, 3], SQUARE)
    assert len(state.neighbors()) == 6
    neighbor = state.random_neighbor(rng)
    assert sorted(neighbor.tour) == [0, 1, 2, 3]
    assert sum(a != b for a, b in zip(state.tour, neighbor.tour)) == 2


def test_order_crossover_yields_permutations(rng: random.Random) -> None:
    problem = TSPProblem()
    cities = problem.cities_for(problem.resolve_params({"size": 9}))
    p1 = TSPState(list(range(9)), cities)
    p2 = TSPState(list(reversed(range(9))), cities)
    for _ in range(50):
        child = problem.crossover([p1, p2], {}, rng)
        assert sorted(child.tour) == list(range(9))


def test_swap_mutation_keeps_permutation(rng: random.Random) -> None:
    problem = TSPProblem()
    state = TSPState([0, 1, 2, 3], SQUARE)
    mutated = problem.mutate(state, 1.0, {}, rng)
    assert mutated is not state
    assert sorted(mutated.tour) == [0, 1, 2, 3]
    assert state.tour == (0, 1, 2, 3)


def test_tsp_successors_append_unvisited_cities() -> None:
    problem = TSPProblem()
    children = problem.successors(TSPState([2], SQUARE))
    assert [c.tour for c in children] == [(2, 0), (2, 1), (2, 3)]


def test_tsp_cities_follow_seed_and_instance_params(rng: random.Random) -> None:
    problem = TSPProblem()
    params = problem.resolve_params({"size": 6, "city_seed": 1})
    state = problem.random_state(params, rng)
    assert len(state.cities.points) == 6
    assert problem.cities_for(params) is state.cities

    reused = problem.random_state(problem.extract_instance_params(state), rng)
    assert reused.cities is state.cities

    explicit = problem.cities_for({"cities": [(0, 0), (3, 4)]})
    assert explicit.distances[0, 1] == pytest.approx(5.0)


def test_tsp_estimated_optimal_cost() -> None:
    problem = TSPProblem()
    assert problem.estimated_optimal_cost({"cities": SQUARE}) == pytest.approx(4.0)

    params = problem.resolve_params({"size": 10, "city_seed": 2})
    estimate = problem.estimated_optimal_cost(params)
    assert estimate is not None and estimate > 0


def test_tsp_search_space() -> None:
    estimate = TSPProblem().search_space_estimate({"size": 10, "city_seed": 0})
    assert estimate.formula == "(N-1)!/2"
    assert estimate.approx == "1.81e+5"


def test_problem_registry() -> None:
    assert set(PROBLEMS) == {"n-queens", "map-coloring", "tsp"}
    assert get_problem("tsp").supports_csp is False
    assert get_problem("n-queens").supports_csp is True
    with pytest.raises(ConfigurationError):
        get_problem("sudoku")
