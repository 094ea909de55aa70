# -*- coding: utf-8 -*-
"""
searchkit で使う主なデータ構造（型）をまとめたモジュールです。

- State        : 探索対象の「1 つの候補解」のスナップショット
- StepRecord   : 1 ステップ分の探索結果（ドライバが受け取る単位）
- SearchStatus : ステップの状態（進行中 / 各種終了理由）
- PropagationResult : 制約伝播の結果（新しいドメインと成否）

State は「ほぼ不変」です。
近傍の生成・交叉・突然変異・割り当てはすべて新しい State を返し、
既に StepRecord で外に出した State を書き換えることはありません。
そのため cost はインスタンスごとに 1 回だけ計算してキャッシュします。
"""

from __future__ import annotations

import abc
import copy
import random
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from types import MappingProxyType
from typing import Any, Dict, Hashable, List, Mapping, Optional, Tuple

from .errors import ProblemContractError

# 変数 -> 残っている候補値（順序付き・重複なし）
Domains = Dict[Hashable, Tuple[Any, ...]]


class SearchStatus(str, Enum):
    """ステップの状態。終了理由は文字列解析なしで区別できます。"""

    IN_PROGRESS = "IN_PROGRESS"
    SOLUTION_FOUND = "SOLUTION_FOUND"
    STUCK_NO_RESTARTS_LEFT = "STUCK_NO_RESTARTS_LEFT"
    FROZEN = "FROZEN"
    STOPPED_AT_LIMIT = "STOPPED_AT_LIMIT"
    NO_SOLUTION_EXHAUSTED = "NO_SOLUTION_EXHAUSTED"


class State(abc.ABC):
    """
    探索状態の基底クラスです。

    サブクラスが実装するもの
    ------------------------
    compute_cost()
        コスト（0 以上、小さいほど良い）を計算して返す。
    neighbors()
        近傍状態のリスト（局所探索・ビームサーチ用）。
    random_neighbor(rng)
        近傍を 1 つだけランダムに返す。既定では neighbors() から選ぶ。
    is_partial
        未割り当ての変数が残っているかどうか。
    with_domains(domains)
        CSP 用。ドメインだけを差し替えた新しい状態を返す。
    """

    # CSP アルゴリズムの下でだけ設定される
    domains: Optional[Domains] = None

    @abc.abstractmethod
    def compute_cost(self) -> float:
        """コストを計算します（キャッシュは cost プロパティ側で行う）。"""

    @cached_property
    def cost(self) -> float:
        value = self.compute_cost()
        if value < 0:
            raise ProblemContractError(
                f"{type(self).__name__} returned a negative cost: {value!r}"
            )
        return value

    @property
    def is_partial(self) -> bool:
        return False

    def neighbors(self) -> List["State"]:
        raise ProblemContractError(f"{type(self).__name__} does not implement neighbors()")

    def random_neighbor(self, rng: random.Random) -> "State":
        candidates = self.neighbors()
        if not candidates:
            raise ProblemContractError(
                f"{type(self).__name__} has no neighbors to sample from"
            )
        return rng.choice(candidates)

    def clone(self) -> "State":
        return copy.copy(self)

    def with_domains(self, domains: Domains) -> "State":
        raise ProblemContractError(f"{type(self).__name__} does not implement with_domains()")


@dataclass(frozen=True)
class StepRecord:
    """
    1 ステップ分の観測結果です。

    Attributes
    ----------
    state : State
        このステップの主な状態（現在状態・最良個体・展開したノードなど）。
    note : str
        人が読むための短い説明（"Improved", "Sideways" など）。
    evaluations : int
        ここまでに評価した状態の累計数。
    status : SearchStatus
        進行中なら IN_PROGRESS、終了ステップなら終了理由。
    population : tuple of State, optional
        集団系アルゴリズムの現在の集団。
    restart_count : int, optional
        リスタートを持つアルゴリズムのリスタート回数。
    metrics : mapping
        アルゴリズム固有の値（temperature, generation, frontier_size など）。
    """

    state: State
    note: str
    evaluations: int
    status: SearchStatus = SearchStatus.IN_PROGRESS
    population: Optional[Tuple[State, ...]] = None
    restart_count: Optional[int] = None
    metrics: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        # 外から metrics を書き換えられないようにする
        object.__setattr__(self, "metrics", MappingProxyType(dict(self.metrics)))

    @property
    def terminal(self) -> bool:
        return self.status is not SearchStatus.IN_PROGRESS


@dataclass(frozen=True)
class PropagationResult:
    """
    制約伝播の結果です。

    success が False のときは、いずれかの未割り当て変数のドメインが
    空になった（wipeout）ことを表します。エラーではなく「この枝は不可能」
    という通常の結果です。
    """

    domains: Domains
    success: bool
