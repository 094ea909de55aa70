# -*- coding: utf-8 -*-
"""
searchkit で使う例外クラスです。

探索中に「普通に起こりうること」（ドメインの wipeout、フロンティアの枯渇、
反復回数の上限到達）は例外にせず、StepRecord のステータスで表現します。
ここにある例外は、設定ミスや Problem 実装の契約違反といった
「プログラムの誤り」だけに使います。
"""

from __future__ import annotations


class SearchkitError(Exception):
    """searchkit が送出する例外の基底クラス。"""


class ConfigurationError(SearchkitError, ValueError):
    """アルゴリズム設定が不正（未知のキー、範囲外の値、未知の名前）。"""


class ProblemContractError(SearchkitError, TypeError):
    """Problem / State が必要な操作を実装していない、または契約に反する値を返した。"""


__all__ = [
    "SearchkitError",
    "ConfigurationError",
    "ProblemContractError",
]
