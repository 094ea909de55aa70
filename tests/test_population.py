from __future__ import annotations

import random

import pytest

from helpers import FlatProblem, HalvingProblem, LineProblem, LineState, LoneProblem
from searchkit import SearchStatus
from searchkit.population import (
    GeneticAlgorithm,
    LocalBeamSearch,
    boltzmann_selection,
    tournament_selection,
    truncation_selection,
)
from searchkit.problems import NQueensProblem, TSPProblem


@pytest.mark.parametrize("variant", ["deterministic", "stochastic"])
def test_beam_population_size_is_constant(variant: str) -> None:
    search = LocalBeamSearch(
        NQueensProblem(),
        config={"beam_width": 5, "variant": variant, "max_sideways_moves": 5, "max_restarts": 1},
        rng=random.Random(4),
        problem_params={"size": 6},
    )
    records = search.run(max_steps=200)
    assert records
    for record in records:
        assert record.population is not None
        assert len(record.population) == 5
        assert all(s.cost >= 0 for s in record.population)


def test_beam_plateau_stops_after_sideways_budget(rng: random.Random) -> None:
    search = LocalBeamSearch(
        FlatProblem(),
        config={"beam_width": 4, "max_sideways_moves": 3, "max_restarts": 0},
        rng=rng,
    )
    records = search.run(max_steps=100)

    # 第 0 世代 + 横ばい 3 世代 + 行き詰まり
    assert len(records) == 5
    assert records[-1].status is SearchStatus.STUCK_NO_RESTARTS_LEFT
    assert [r.metrics["generation"] for r in records] == [0, 1, 2, 3, 4]


def test_beam_restarts_whole_beam(rng: random.Random) -> None:
    search = LocalBeamSearch(
        FlatProblem(),
        config={"beam_width": 3, "max_sideways_moves": 1, "max_restarts": 2},
        rng=rng,
    )
    records = search.run(max_steps=100)
    assert records[-1].status is SearchStatus.STUCK_NO_RESTARTS_LEFT
    assert records[-1].restart_count == 2
    restarts = [r for r in records if "restart #" in r.note]
    assert len(restarts) == 2
    assert all(r.metrics["generation"] == 0 for r in restarts)


def test_beam_generation_limit_counts_as_stuck(rng: random.Random) -> None:
    search = LocalBeamSearch(
        FlatProblem(),
        config={"beam_width": 2, "max_generations": 2, "max_sideways_moves": 50},
        rng=rng,
    )
    records = search.run()
    assert records[-1].status is SearchStatus.STUCK_NO_RESTARTS_LEFT
    assert "Generation limit" in records[-1].note


def test_beam_with_no_candidates_is_stuck(rng: random.Random) -> None:
    search = LocalBeamSearch(LoneProblem(), config={"beam_width": 3, "max_restarts": 0}, rng=rng)
    records = search.run()

    assert len(records) == 2
    assert records[-1].status is SearchStatus.STUCK_NO_RESTARTS_LEFT
    assert records[-1].note == "Stuck (Dead end (no candidates))"
    assert records[-1].evaluations == 3


def test_beam_solves_line(rng: random.Random) -> None:
    search = LocalBeamSearch(LineProblem(), LineState(7), config={"beam_width": 3}, rng=rng)
    records = search.run()
    assert records[-1].status is SearchStatus.SOLUTION_FOUND
    assert records[-1].state.cost == 0


def test_ga_population_size_and_elitism() -> None:
    search = GeneticAlgorithm(
        NQueensProblem(),
        config={"population_size": 20, "mutation_rate": 0.2, "max_generations": 30, "cull_rate": 0.25},
        rng=random.Random(21),
        problem_params={"size": 8},
    )
    records = search.run()
    assert records[-1].terminal

    best_costs = []
    for record in records:
        assert record.population is not None
        assert len(record.population) == 20
        best_costs.append(min(s.cost for s in record.population))

    for prev, cur in zip(best_costs, best_costs[1:]):
        assert cur <= prev


def test_ga_stops_at_generation_limit_with_best_ever() -> None:
    search = GeneticAlgorithm(
        TSPProblem(),
        config={"population_size": 8, "max_generations": 5, "elitism": False},
        rng=random.Random(3),
        problem_params={"size": 6},
    )
    records = search.run()

    assert len(records) == 6
    assert records[-1].status is SearchStatus.STOPPED_AT_LIMIT
    best_seen = min(s.cost for r in records for s in r.population)
    assert records[-1].state.cost == pytest.approx(best_seen)


def test_ga_reports_generation_of_solution(rng: random.Random) -> None:
    search = GeneticAlgorithm(
        HalvingProblem(), config={"population_size": 6, "cull_rate": 0.5, "max_generations": 10}, rng=rng,
    )
    records = search.run()

    # |x| = 4 -> 2 -> 1 -> 0
    assert len(records) == 4
    assert records[-1].status is SearchStatus.SOLUTION_FOUND
    assert records[-1].note == "Solution in generation 3"
    assert records[-1].state.x == 0
    assert records[-1].metrics["generation"] == 3


def test_ga_offspring_are_new_states() -> None:
    search = GeneticAlgorithm(
        NQueensProblem(),
        config={"population_size": 6, "mutation_rate": 1.0, "max_generations": 3},
        rng=random.Random(0),
        problem_params={"size": 5},
    )
    first = search.step()
    before = [s.queens for s in first.population]
    search.step()
    assert [s.queens for s in first.population] == before


def test_tournament_selection_picks_lowest_of_sample(rng: random.Random) -> None:
    population = [LineState(x) for x in (3, 1, 2)]
    winners = {tournament_selection(population, rng, tournament_size=50).x for _ in range(20)}
    assert winners == {1}

    single = [tournament_selection(population, rng, tournament_size=1).x for _ in range(200)]
    assert set(single) == {1, 2, 3}


def test_truncation_selection_pads_small_pool() -> None:
    pool = [LineState(4), LineState(-1)]
    chosen = truncation_selection(pool, 5)
    assert len(chosen) == 5
    assert chosen[0].x == -1
    assert [s.x for s in chosen] == [-1, 4, -1, 4, -1]


def test_boltzmann_selection_handles_large_costs(rng: random.Random) -> None:
    pool = [LineState(100000), LineState(100001)]
    chosen = boltzmann_selection(pool, 200, rng, beta=1.0)
    assert len(chosen) == 200
    assert sum(1 for s in chosen if s.x == 100000) > 100
