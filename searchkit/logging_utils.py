# -*- coding: utf-8 -*-
"""
ログ出力の設定を行うモジュールです。

探索アルゴリズムは 1 ステップごとに細かく進むため、
全ステップをログに出すと大量になります。
そのため各アルゴリズムは
- 開始時のパラメータ
- 一定ステップごとの進捗
- 終了時の結果（ステータス）
だけを INFO で出力します。
"""

from __future__ import annotations

import logging

# searchkit パッケージ共通で使うロガー名
LOGGER_NAME = "searchkit"


def get_logger(name: str | None = None) -> logging.Logger:
    """
    searchkit 全体で共通して使う logger を返します。

    name を渡すと "searchkit.<name>" の子ロガーを返します。
    ハンドラは親ロガー（searchkit）にだけ設定するので、
    子ロガーのメッセージも同じ形式で出力されます。
    """
    root = logging.getLogger(LOGGER_NAME)

    # まだハンドラが設定されていなければ、簡単な設定を行う
    if not root.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
        )
        handler.setFormatter(formatter)
        root.addHandler(handler)
        root.setLevel(logging.INFO)

    if name:
        return root.getChild(name)
    return root
