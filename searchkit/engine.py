# -*- coding: utf-8 -*-
"""
再開可能なステップ実行の土台となるモジュールです。

すべてのアルゴリズムは SearchAlgorithm を継承した「状態機械」として書かれます。
ジェネレータ（yield）は使わず、

    record = search.step()

を呼ぶたびに、1 単位の仕事（1 手の移動・1 世代・1 ノードの展開）だけを行い、
StepRecord を 1 つ返します。終了ステップでは record.terminal が True になり、
以降の step() は何も計算せずに同じ終了レコードを返します。

run() でまとめて進めても、1 ステップずつ進めた場合と
同じレコード列が得られます（まとめ実行は呼び出し側の都合にすぎない）。
"""

from __future__ import annotations

import abc
import logging
import random
from typing import Any, ClassVar, Iterator, List, Mapping, Optional, Tuple, Type

from .config import PROGRESS_LOG_INTERVAL, AlgorithmConfig, load_config
from .logging_utils import get_logger
from .problem import Problem
from .types import SearchStatus, State, StepRecord

logger = get_logger("engine")


class SearchAlgorithm(abc.ABC):
    """
    ステップ実行型アルゴリズムの基底クラスです。

    Parameters
    ----------
    problem : Problem
        探索対象の問題記述。
    initial_state : State, optional
        開始状態。None なら各アルゴリズムが Problem のファクトリで作る。
    config : mapping or AlgorithmConfig, optional
        アルゴリズム設定。config_model で検証される。
    rng : random.Random, optional
        乱数源。シードを固定した Random を渡すと実行が再現できる。
    problem_params : mapping, optional
        問題側のパラメータ（盤面サイズ、都市配置など）。
    """

    name: ClassVar[str] = ""
    tag: ClassVar[str] = ""
    config_model: ClassVar[Type[AlgorithmConfig]] = AlgorithmConfig

    def __init__(
        self,
        problem: Problem,
        initial_state: Optional[State] = None,
        config: Optional[Mapping[str, Any] | AlgorithmConfig] = None,
        *,
        rng: Optional[random.Random] = None,
        problem_params: Optional[Mapping[str, Any]] = None,
    ) -> None:
        self.problem = problem
        self.initial_state = initial_state
        self.config = load_config(self.config_model, config)
        self.params = problem.resolve_params(problem_params)
        self.rng = rng if rng is not None else random.Random()

        # 開始・進捗・終了ログのレベル（ベンチマークでは DEBUG に下げる）
        self.log_level = logging.INFO

        self.evaluations = 0
        self.steps_taken = 0
        self._started = False
        self._last_record: Optional[StepRecord] = None

    # ---- 公開インターフェース ---------------------------------------------

    @property
    def last_record(self) -> Optional[StepRecord]:
        return self._last_record

    @property
    def finished(self) -> bool:
        return self._last_record is not None and self._last_record.terminal

    @property
    def status(self) -> SearchStatus:
        if self._last_record is None:
            return SearchStatus.IN_PROGRESS
        return self._last_record.status

    def step(self) -> StepRecord:
        """1 単位だけ探索を進め、StepRecord を返します。"""
        if self.finished:
            assert self._last_record is not None
            return self._last_record

        if not self._started:
            self._started = True
            logger.log(
                self.log_level,
                "[%s] Starting on %s with %s",
                self.tag, self.problem.id or type(self.problem).__name__,
                self.config.model_dump(),
            )
            record = self._start()
        else:
            record = self._advance()

        self.steps_taken += 1
        self._last_record = record

        if self.steps_taken % PROGRESS_LOG_INTERVAL == 0:
            logger.log(
                self.log_level,
                "[%s] step=%d, evaluations=%d, cost=%s",
                self.tag, self.steps_taken, self.evaluations, record.state.cost,
            )
        if record.terminal:
            logger.log(
                self.log_level,
                "[%s] Finished: %s after %d steps (evaluations=%d, cost=%s)",
                self.tag, record.status.value, self.steps_taken,
                self.evaluations, record.state.cost,
            )
        return record

    def run(self, max_steps: Optional[int] = None) -> List[StepRecord]:
        """
        終了するか max_steps に達するまでまとめて進め、得られたレコードを返します。
        """
        records: List[StepRecord] = []
        while not self.finished:
            if max_steps is not None and len(records) >= max_steps:
                break
            records.append(self.step())
        return records

    def __iter__(self) -> Iterator[StepRecord]:
        while not self.finished:
            yield self.step()

    # ---- サブクラスが実装するもの -----------------------------------------

    @abc.abstractmethod
    def _start(self) -> StepRecord:
        """最初のステップ（初期状態・初期集団などの提示）。"""

    @abc.abstractmethod
    def _advance(self) -> StepRecord:
        """2 ステップ目以降の 1 単位の仕事。"""

    # ---- 補助 -------------------------------------------------------------

    def _record(
        self,
        state: State,
        note: str,
        status: SearchStatus = SearchStatus.IN_PROGRESS,
        *,
        population: Optional[Tuple[State, ...]] = None,
        restart_count: Optional[int] = None,
        **metrics: Any,
    ) -> StepRecord:
        return StepRecord(
            state=state,
            note=note,
            evaluations=self.evaluations,
            status=status,
            population=population,
            restart_count=restart_count,
            metrics=metrics,
        )
