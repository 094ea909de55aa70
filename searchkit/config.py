# -*- coding: utf-8 -*-
"""
searchkit 全体で共通して使う設定値をまとめたモジュールです。

前半はモジュールレベルの既定値（定数）、
後半は pydantic によるアルゴリズム設定モデルです。

アルゴリズムに渡す設定（config）は、ここで定義したモデルで検証されます。
- 未知のキー
- 範囲外の値（例: cooling_rate = 1.5）
は ConfigurationError になります。

キーは snake_case（max_sideways_moves）でも
camelCase（maxSidewaysMoves）でも受け付けます。
"""

from __future__ import annotations

from typing import Any, Literal, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from .errors import ConfigurationError

# ==== 共通 =================================================================

# 部分状態（未割り当て変数あり）に課すペナルティ（未割り当て 1 個あたり）
PARTIAL_PENALTY: int = 1000

# 何ステップごとに進捗ログを出すか
PROGRESS_LOG_INTERVAL: int = 1000

# ==== Hill Climbing 関連 ===================================================

# 横ばい移動（同コスト近傍への移動）の最大連続回数
HC_MAX_SIDEWAYS_MOVES: int = 0

# ランダムリスタートの最大回数
HC_MAX_RESTARTS: int = 0

# 横ばいとみなすコストの許容幅（割合）。0 なら完全一致のみ
HC_SIDEWAYS_TOLERANCE: float = 0.0

# first-choice 変種で、改善近傍を探すためにサンプルする最大回数
FIRST_CHOICE_MAX_ATTEMPTS: int = 500

# ==== Simulated Annealing 関連 =============================================

# 初期温度
SA_INITIAL_TEMPERATURE: float = 100.0

# 冷却率（1 ステップごとに温度へ掛ける係数）
SA_COOLING_RATE: float = 0.99

# この温度を下回ったら「凍結」とみなして終了
SA_FROZEN_TEMPERATURE: float = 1e-4

# ==== Local Beam Search 関連 ===============================================

# ビーム幅（同時に保持する状態数）
BEAM_WIDTH: int = 10

# 1 本のビームで進める最大世代数
BEAM_MAX_GENERATIONS: int = 1000

# 横ばい世代の最大連続回数
BEAM_MAX_SIDEWAYS_MOVES: int = 100

# ビーム全体のリスタート回数
BEAM_MAX_RESTARTS: int = 0

# stochastic 変種の選択圧 β（weight = exp(-β * (cost - min_cost))）
BEAM_SELECTION_SENSITIVITY: float = 1.0

# ==== Genetic Algorithm 関連 ===============================================

# 個体数
GA_POPULATION_SIZE: int = 100

# 突然変異率
GA_MUTATION_RATE: float = 0.1

# 世代ごとに淘汰する下位個体の割合
GA_CULL_RATE: float = 0.0

# 最良個体をそのまま次世代へ残すかどうか
GA_ELITISM: bool = True

# 最大世代数
GA_MAX_GENERATIONS: int = 1000

# トーナメント選択で比較する個体数
GA_TOURNAMENT_SIZE: int = 3

# ==== 構成的探索 / CSP 関連 ================================================

# 展開ノード数の上限
CSP_MAX_ITERATIONS: int = 10000

# ==== ベンチマーク関連 =====================================================

# 1 構成あたりのシード（問題インスタンス）数
BENCHMARK_NUM_SEEDS: int = 5

# 1 回の実行で進める最大ステップ数
BENCHMARK_MAX_STEPS: int = 50000


# ==== 設定モデル ===========================================================

VariableHeuristicName = Literal["in_order", "random", "degree", "mrv", "least_constrained"]
ValueHeuristicName = Literal["in_order", "random", "lcv"]

ConfigT = TypeVar("ConfigT", bound="AlgorithmConfig")


class AlgorithmConfig(BaseModel):
    """全アルゴリズム設定の基底クラス。"""

    model_config = ConfigDict(
        extra="forbid",
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class HillClimbingConfig(AlgorithmConfig):
    max_sideways_moves: int = Field(default=HC_MAX_SIDEWAYS_MOVES, ge=0)
    max_restarts: int = Field(default=HC_MAX_RESTARTS, ge=0)
    sideways_tolerance: float = Field(default=HC_SIDEWAYS_TOLERANCE, ge=0.0, lt=1.0)


class StochasticHillClimbingConfig(HillClimbingConfig):
    variant: Literal["standard", "weighted", "first_choice"] = "standard"

    @field_validator("variant", mode="before")
    @classmethod
    def _normalize_variant(cls, value: Any) -> Any:
        # "firstChoice" 表記も受け付ける
        if value == "firstChoice":
            return "first_choice"
        return value


class SimulatedAnnealingConfig(AlgorithmConfig):
    initial_temperature: float = Field(default=SA_INITIAL_TEMPERATURE, gt=0.0)
    cooling_rate: float = Field(default=SA_COOLING_RATE, gt=0.0, lt=1.0)


class LocalBeamSearchConfig(AlgorithmConfig):
    beam_width: int = Field(default=BEAM_WIDTH, ge=1)
    variant: Literal["deterministic", "stochastic"] = "deterministic"
    max_generations: int = Field(default=BEAM_MAX_GENERATIONS, ge=1)
    max_sideways_moves: int = Field(default=BEAM_MAX_SIDEWAYS_MOVES, ge=0)
    max_restarts: int = Field(default=BEAM_MAX_RESTARTS, ge=0)


class GeneticAlgorithmConfig(AlgorithmConfig):
    population_size: int = Field(default=GA_POPULATION_SIZE, ge=1)
    mutation_rate: float = Field(default=GA_MUTATION_RATE, ge=0.0, le=1.0)
    cull_rate: float = Field(default=GA_CULL_RATE, ge=0.0, lt=1.0)
    elitism: bool = GA_ELITISM
    max_generations: int = Field(default=GA_MAX_GENERATIONS, ge=1)


class ConstructiveConfig(AlgorithmConfig):
    """BFS / DFS 用。盲目的探索なので順序ヒューリスティックは持たない。"""

    max_iterations: int = Field(default=CSP_MAX_ITERATIONS, ge=1)


class CSPSearchConfig(ConstructiveConfig):
    """Backtracking / FC / AC-3 用。"""

    variable_heuristic: VariableHeuristicName = "in_order"
    value_heuristic: ValueHeuristicName = "in_order"


def load_config(
    model: Type[ConfigT],
    config: Optional[Mapping[str, Any] | AlgorithmConfig] = None,
) -> ConfigT:
    """
    dict（または設定モデル）を検証して model のインスタンスを返します。

    pydantic の ValidationError は ConfigurationError に包み直して送出します。
    """
    if isinstance(config, model):
        return config
    if isinstance(config, AlgorithmConfig):
        # 別モデルのインスタンスが渡された場合は、値だけ取り出して再検証する
        config = config.model_dump()

    try:
        return model.model_validate(dict(config or {}))
    except ValidationError as exc:
        raise ConfigurationError(f"invalid {model.__name__}: {exc}") from exc
