# -*- coding: utf-8 -*-
"""
複数のアルゴリズム構成を、同じ問題インスタンス群で走らせて比較するモジュールです。

流れ
----
1. シードごとに問題インスタンスを 1 つ作る
   （ランダムな初期状態を作り、extract_instance_params で
   　都市配置・グラフなどのパラメータを取り出す）
2. そのインスタンス上で、各構成を 1 回ずつ実行する（ステップ数の上限つき）
3. 構成ごとに集計し、best_cost → avg_evaluations の順に並べた DataFrame を返す

集計の列
--------
config_id, name, best_cost, avg_cost, avg_steps, avg_evaluations,
avg_time_ms, success_rate（解に到達した実行の割合、%）
"""

from __future__ import annotations

import logging
import math
import random
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

import pandas as pd

from .config import BENCHMARK_MAX_STEPS, BENCHMARK_NUM_SEEDS
from .logging_utils import get_logger
from .problem import Problem
from .registry import CSP_ALGORITHMS, create_search
from .types import SearchStatus, State

logger = get_logger("benchmark")

RUN_COLUMNS = [
    "config_id", "name", "seed_index", "status",
    "best_cost", "steps", "evaluations", "time_ms", "success",
]
SUMMARY_COLUMNS = [
    "config_id", "name", "best_cost", "avg_cost", "avg_steps",
    "avg_evaluations", "avg_time_ms", "success_rate",
]


@dataclass(frozen=True)
class BenchmarkConfig:
    """
    ベンチマークの 1 構成。

    Attributes
    ----------
    config_id : str
        集計結果の識別子。
    name : str
        表示名。
    algorithm : str
        registry.ALGORITHMS のキー。
    config : mapping
        アルゴリズム設定。
    use_seed_state : bool
        シードの初期状態から始めるかどうか。
        集団系（ビーム・GA）は False で、自前でランダムな集団を作る。
    """

    config_id: str
    name: str
    algorithm: str
    config: Mapping[str, Any] = field(default_factory=dict)
    use_seed_state: bool = True


BENCHMARK_CONFIGS: Tuple[BenchmarkConfig, ...] = (
    BenchmarkConfig(
        "hc_std", "Hill Climbing (Standard)", "hill_climbing",
        {"max_sideways_moves": 100, "max_restarts": 5},
    ),
    BenchmarkConfig(
        "hc_stoch", "Stochastic HC (Weighted)", "stochastic_hill_climbing",
        {"max_sideways_moves": 100, "max_restarts": 5, "variant": "weighted"},
    ),
    BenchmarkConfig(
        "beam", "Beam Search (k=10)", "local_beam_search",
        {"beam_width": 10, "variant": "stochastic", "max_sideways_moves": 10, "max_restarts": 2},
        use_seed_state=False,
    ),
    BenchmarkConfig(
        "sa_fast", "Sim. Annealing (Fast)", "simulated_annealing",
        {"initial_temperature": 1000, "cooling_rate": 0.95},
    ),
    BenchmarkConfig(
        "sa_slow", "Sim. Annealing (Slow)", "simulated_annealing",
        {"initial_temperature": 1000, "cooling_rate": 0.995},
    ),
    BenchmarkConfig(
        "sa_extreme", "Sim. Annealing (Extreme)", "simulated_annealing",
        {"initial_temperature": 10000, "cooling_rate": 0.9995},
    ),
    BenchmarkConfig(
        "ga", "Genetic Algo", "genetic_algorithm",
        {"population_size": 100, "mutation_rate": 0.1, "elitism": True, "cull_rate": 0.2},
        use_seed_state=False,
    ),
    BenchmarkConfig("bfs", "BFS (Uninformed)", "bfs", {"max_iterations": 10000}),
    BenchmarkConfig("dfs", "DFS (Uninformed)", "dfs", {"max_iterations": 10000}),
    BenchmarkConfig("backtracking", "Backtracking (CSP)", "backtracking", {"max_iterations": 10000}),
    BenchmarkConfig("fc", "Forward Checking", "forward_checking", {"max_iterations": 5000}),
    BenchmarkConfig("ac3", "Arc Consistency", "arc_consistency", {"max_iterations": 2000}),
)


def valid_configs(
    problem: Problem, configs: Sequence[BenchmarkConfig] = BENCHMARK_CONFIGS
) -> List[BenchmarkConfig]:
    """CSP 拡張を持たない問題では、Backtracking / FC / AC-3 を除きます。"""
    if problem.supports_csp:
        return list(configs)
    return [c for c in configs if c.algorithm not in CSP_ALGORITHMS]


def summarize(runs: pd.DataFrame) -> pd.DataFrame:
    """1 実行 1 行の DataFrame を、構成ごとに集計して並べ替えます。"""
    if runs.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    summary = (
        runs.groupby(["config_id", "name"], sort=False)
        .agg(
            best_cost=("best_cost", "min"),
            avg_cost=("best_cost", "mean"),
            avg_steps=("steps", "mean"),
            avg_evaluations=("evaluations", "mean"),
            avg_time_ms=("time_ms", "mean"),
            success_rate=("success", "mean"),
        )
        .reset_index()
    )
    summary["success_rate"] = summary["success_rate"].astype(float) * 100.0

    # 同じ best_cost なら評価回数の少ない（効率の良い）構成を上に
    summary = summary.sort_values(["best_cost", "avg_evaluations"], kind="mergesort")
    return summary.reset_index(drop=True)[SUMMARY_COLUMNS]


class BenchmarkRunner:
    """
    Parameters
    ----------
    problem : Problem
        対象の問題。
    problem_params : mapping, optional
        問題パラメータ（盤面サイズなど）。
    num_seeds : int
        問題インスタンスの数。
    max_steps : int
        1 回の実行で進める最大ステップ数。
    seed : int, optional
        指定すると、インスタンス生成も各実行の乱数も再現できる。
    configs : sequence of BenchmarkConfig, optional
        省略時は valid_configs(problem)。
    """

    def __init__(
        self,
        problem: Problem,
        problem_params: Optional[Mapping[str, Any]] = None,
        num_seeds: int = BENCHMARK_NUM_SEEDS,
        max_steps: int = BENCHMARK_MAX_STEPS,
        seed: Optional[int] = None,
        configs: Optional[Sequence[BenchmarkConfig]] = None,
    ) -> None:
        self.problem = problem
        self.problem_params = dict(problem_params or {})
        self.num_seeds = num_seeds
        self.max_steps = max_steps
        self.seed = seed
        self.configs = list(configs) if configs is not None else valid_configs(problem)

        self.runs = pd.DataFrame(columns=RUN_COLUMNS)
        self.is_running = False
        self._cancelled = False

    def cancel(self) -> None:
        """実行と実行の間で止めるよう要求します（run() は None を返す）。"""
        self._cancelled = True

    def _instance(self, seed_rng: random.Random) -> Tuple[State, Dict[str, Any]]:
        """1 シード分の問題インスタンス（初期状態と、それを再現するパラメータ）。"""
        params = self.problem.resolve_params(self.problem_params)
        if self.problem.instance_seed_param is not None:
            params[self.problem.instance_seed_param] = seed_rng.randrange(2 ** 31)

        seed_state = self.problem.random_state(params, seed_rng)
        params.update(self.problem.extract_instance_params(seed_state))
        return seed_state, params

    def run_one(
        self,
        config: BenchmarkConfig,
        seed_state: State,
        params: Mapping[str, Any],
        rng: random.Random,
    ) -> Dict[str, Any]:
        """1 構成を 1 回実行し、結果を 1 行分の dict で返します。"""
        search = create_search(
            config.algorithm,
            self.problem,
            seed_state if config.use_seed_state else None,
            config.config,
            rng=rng,
            problem_params=params,
        )
        search.log_level = logging.DEBUG

        best_cost = math.inf
        solved = False
        started = time.perf_counter()
        while not search.finished and search.steps_taken < self.max_steps:
            record = search.step()
            best_cost = min(best_cost, record.state.cost)
            # ステップ上限で打ち切られても、解に到達していれば成功とみなす
            solved = solved or self.problem.is_solution(record.state)
        elapsed_ms = (time.perf_counter() - started) * 1000.0

        return {
            "config_id": config.config_id,
            "name": config.name,
            "status": search.status.value,
            "best_cost": best_cost,
            "steps": search.steps_taken,
            "evaluations": search.evaluations,
            "time_ms": elapsed_ms,
            "success": solved or search.status is SearchStatus.SOLUTION_FOUND,
        }

    def run(self, on_progress: Optional[Callable[[float], None]] = None) -> Optional[pd.DataFrame]:
        """
        全シード × 全構成を実行して集計結果を返します。

        途中で cancel() された場合は None を返します（それまでの実行は runs に残る）。
        """
        self.is_running = True
        self._cancelled = False
        master = random.Random(self.seed)
        total = self.num_seeds * len(self.configs)
        rows: List[Dict[str, Any]] = []

        logger.info(
            "[BENCH] %s: %d configs x %d seeds (max_steps=%d)",
            self.problem.id, len(self.configs), self.num_seeds, self.max_steps,
        )

        try:
            for seed_index in range(self.num_seeds):
                seed_state, params = self._instance(random.Random(master.randrange(2 ** 32)))

                for config in self.configs:
                    if self._cancelled:
                        logger.info("[BENCH] Cancelled after %d/%d runs", len(rows), total)
                        return None

                    row = self.run_one(
                        config, seed_state, params, random.Random(master.randrange(2 ** 32))
                    )
                    row["seed_index"] = seed_index
                    rows.append(row)
                    self.runs = pd.DataFrame(rows, columns=RUN_COLUMNS)
                    logger.debug(
                        "[BENCH] seed=%d %s: status=%s best_cost=%s steps=%d",
                        seed_index, config.config_id, row["status"],
                        row["best_cost"], row["steps"],
                    )

                    if on_progress is not None:
                        on_progress(len(rows) / total)
        finally:
            self.is_running = False

        summary = summarize(self.runs)
        if not summary.empty:
            top = summary.iloc[0]
            logger.info(
                "[BENCH] Best: %s (best_cost=%s, success_rate=%.1f%%)",
                top["name"], top["best_cost"], top["success_rate"],
            )
        return summary
