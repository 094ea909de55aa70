from __future__ import annotations

import logging
import random

import pandas as pd
import pytest

from helpers import LineProblem, LineState
from searchkit.benchmark import (
    BENCHMARK_CONFIGS,
    RUN_COLUMNS,
    SUMMARY_COLUMNS,
    BenchmarkConfig,
    BenchmarkRunner,
    summarize,
    valid_configs,
)
from searchkit.problems import MapColoringProblem, NQueensProblem, TSPProblem

SMALL_CONFIGS = [
    BenchmarkConfig("hc", "Hill Climbing", "hill_climbing", {"max_restarts": 2}),
    BenchmarkConfig("bt", "Backtracking", "backtracking", {"max_iterations": 500}),
    BenchmarkConfig("fc", "Forward Checking", "forward_checking", {"variable_heuristic": "mrv"}),
    BenchmarkConfig(
        "ga", "GA", "genetic_algorithm",
        {"population_size": 10, "max_generations": 5}, use_seed_state=False,
    ),
]


def test_catalog_and_csp_filtering() -> None:
    ids = [c.config_id for c in BENCHMARK_CONFIGS]
    assert len(ids) == len(set(ids)) == 12

    assert len(valid_configs(NQueensProblem())) == 12
    tsp_ids = {c.config_id for c in valid_configs(TSPProblem())}
    assert {"backtracking", "fc", "ac3"}.isdisjoint(tsp_ids)
    assert {"bfs", "dfs", "sa_fast", "ga"} <= tsp_ids


def test_runner_aggregates_and_ranks() -> None:
    runner = BenchmarkRunner(
        NQueensProblem(), {"size": 4}, num_seeds=3, max_steps=300, seed=7, configs=SMALL_CONFIGS,
    )
    progress = []
    summary = runner.run(on_progress=progress.append)

    assert list(summary.columns) == SUMMARY_COLUMNS
    assert set(summary["config_id"]) == {"hc", "bt", "fc", "ga"}
    assert list(runner.runs.columns) == RUN_COLUMNS
    assert len(runner.runs) == 3 * len(SMALL_CONFIGS)
    assert progress[-1] == pytest.approx(1.0)
    assert not runner.is_running

    # 完全な探索は 4-Queens を必ず解く
    by_id = summary.set_index("config_id")
    assert by_id.loc["bt", "success_rate"] == 100.0
    assert by_id.loc["fc", "success_rate"] == 100.0
    assert by_id.loc["bt", "best_cost"] == 0

    assert summary["best_cost"].is_monotonic_increasing
    assert ((summary["success_rate"] >= 0) & (summary["success_rate"] <= 100)).all()
    assert (runner.runs["steps"] <= 300).all()


def test_runner_is_reproducible_with_seed() -> None:
    def run() -> pd.DataFrame:
        runner = BenchmarkRunner(
            MapColoringProblem(), {"graph_type": "random", "size": 9},
            num_seeds=2, max_steps=200, seed=11, configs=SMALL_CONFIGS,
        )
        runner.run()
        return runner.runs[["config_id", "seed_index", "status", "best_cost", "steps", "evaluations"]]

    pd.testing.assert_frame_equal(run(), run())


def test_seeds_use_distinct_instances() -> None:
    runner = BenchmarkRunner(TSPProblem(), {"size": 6}, num_seeds=2, seed=3)
    master = random.Random(0)
    _, params_a = runner._instance(random.Random(master.randrange(2 ** 32)))
    _, params_b = runner._instance(random.Random(master.randrange(2 ** 32)))
    assert params_a["cities"].points != params_b["cities"].points


def test_cancel_between_runs_returns_none() -> None:
    runner = BenchmarkRunner(
        NQueensProblem(), {"size": 4}, num_seeds=2, max_steps=100, seed=1, configs=SMALL_CONFIGS,
    )
    result = runner.run(on_progress=lambda fraction: runner.cancel())
    assert result is None
    assert len(runner.runs) == 1
    assert not runner.is_running


def test_summarize_orders_ties_by_evaluations() -> None:
    runs = pd.DataFrame(
        [
            {"config_id": "a", "name": "A", "seed_index": 0, "status": "X", "best_cost": 1.0,
             "steps": 5, "evaluations": 50, "time_ms": 1.0, "success": False},
            {"config_id": "b", "name": "B", "seed_index": 0, "status": "X", "best_cost": 1.0,
             "steps": 5, "evaluations": 10, "time_ms": 1.0, "success": False},
            {"config_id": "c", "name": "C", "seed_index": 0, "status": "SOLUTION_FOUND", "best_cost": 0.0,
             "steps": 5, "evaluations": 90, "time_ms": 1.0, "success": True},
        ],
        columns=RUN_COLUMNS,
    )
    summary = summarize(runs)
    assert list(summary["config_id"]) == ["c", "b", "a"]
    assert list(summary["success_rate"]) == [100.0, 0.0, 0.0]


def test_summarize_empty() -> None:
    summary = summarize(pd.DataFrame(columns=RUN_COLUMNS))
    assert summary.empty
    assert list(summary.columns) == SUMMARY_COLUMNS


def test_run_cut_off_on_solved_step_still_counts_as_success() -> None:
    config = BenchmarkConfig("hc", "Hill Climbing", "hill_climbing", {})
    runner = BenchmarkRunner(LineProblem(), num_seeds=1, max_steps=4, seed=0, configs=[config])

    # 3 -> 2 -> 1 -> 0 で 4 ステップ目に解に着くが、終了レコードは 5 ステップ目
    row = runner.run_one(config, LineState(3), {}, random.Random(0))

    assert row["steps"] == 4
    assert row["status"] == "IN_PROGRESS"
    assert row["best_cost"] == 0
    assert row["success"]


def test_per_run_logs_are_debug_only(caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level(logging.DEBUG, logger="searchkit")
    runner = BenchmarkRunner(
        NQueensProblem(), {"size": 4}, num_seeds=1, max_steps=50, seed=2, configs=SMALL_CONFIGS,
    )
    runner.run()

    starts = [r for r in caplog.records if "Starting" in r.getMessage()]
    assert len(starts) == len(SMALL_CONFIGS)
    assert all(r.levelno == logging.DEBUG for r in starts)
    assert any(r.levelno == logging.INFO and "[BENCH]" in r.getMessage() for r in caplog.records)
