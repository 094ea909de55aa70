# -*- coding: utf-8 -*-
"""
構成的探索（空の割り当てから 1 変数ずつ値を決めていく探索）の共通部分と、
盲目的探索（BFS / DFS）を実装するモジュールです。

ざっくり流れ
------------
1. 根（何も割り当てていない状態）を Problem.empty_state で作り、フロンティアに入れる
2. 1 ステップごとにフロンティアから 1 ノード取り出して「展開」する
   - BFS は FIFO キュー、DFS と Backtracking / FC / AC-3 は LIFO スタック
3. 取り出したノードが解なら終了（SOLUTION_FOUND）
4. 展開数が max_iterations に達したら終了（STOPPED_AT_LIMIT）
5. そうでなければ子ノードをフロンティアに積む
6. フロンティアが空になったら終了（NO_SOLUTION_EXHAUSTED）

1 ステップ = 1 ノードの展開 なので、max_iterations = 10 なら
ちょうど 10 ステップ目で打ち切りになります。
"""

from __future__ import annotations

import abc
from collections import deque
from typing import ClassVar, Deque, Optional

from ..config import ConstructiveConfig
from ..engine import SearchAlgorithm
from ..types import SearchStatus, State, StepRecord


class ConstructiveSearch(SearchAlgorithm):
    """
    フロンティアを持つ木探索の基底クラスです。

    サブクラスは _expand() で子ノードをフロンティアに積み、
    そのステップの説明（note）を返します。
    """

    config_model = ConstructiveConfig

    # True なら LIFO（スタック）、False なら FIFO（キュー）
    lifo: ClassVar[bool] = True

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.frontier: Deque[State] = deque()
        self.expansions = 0
        self.last_node: Optional[State] = None
        # 展開の途中で生じた、後続ステップで順に出すレコード（FC / AC-3 の wipeout）
        self._pending: Deque[StepRecord] = deque()

    # ---- 根の作成 ---------------------------------------------------------

    def _root(self) -> State:
        """
        根となる空の状態を作ります。

        初期状態が渡された場合は、そこから問題インスタンスのパラメータ
        （都市配置・グラフなど）を取り出して、同じインスタンス上で木を作ります。
        """
        params = dict(self.params)
        if self.initial_state is not None:
            params.update(self.problem.extract_instance_params(self.initial_state))
        return self.problem.empty_state(params)

    def _prepare_root(self, root: State) -> State:
        return root

    # ---- ステップ ---------------------------------------------------------

    def _start(self) -> StepRecord:
        self.frontier.append(self._prepare_root(self._root()))
        return self._expand_next()

    def _advance(self) -> StepRecord:
        if self._pending:
            return self._pending.popleft()
        return self._expand_next()

    def _expand_next(self) -> StepRecord:
        if not self.frontier:
            assert self.last_node is not None
            return self._node_record(
                self.last_node, "No solution found (exhausted)",
                SearchStatus.NO_SOLUTION_EXHAUSTED,
            )

        node = self.frontier.pop() if self.lifo else self.frontier.popleft()
        self.expansions += 1
        self.last_node = node

        if self.problem.is_solution(node):
            return self._node_record(node, "Solution found", SearchStatus.SOLUTION_FOUND)

        max_iterations = self.config.max_iterations
        if self.expansions >= max_iterations:
            return self._node_record(
                node, f"Stopped (max iterations {max_iterations})",
                SearchStatus.STOPPED_AT_LIMIT,
            )

        note = self._expand(node)
        return self._node_record(node, note)

    @abc.abstractmethod
    def _expand(self, node: State) -> str:
        """node の子をフロンティアに積み、そのステップの note を返します。"""

    def _node_record(
        self, state: State, note: str, status: SearchStatus = SearchStatus.IN_PROGRESS,
        **metrics,
    ) -> StepRecord:
        return self._record(
            state, note, status,
            expansions=self.expansions,
            frontier_size=len(self.frontier),
            **metrics,
        )

    def _push_children(self, children) -> None:
        # スタックでは逆順に積んで、先頭の子から取り出されるようにする
        if self.lifo:
            self.frontier.extend(reversed(children))
        else:
            self.frontier.extend(children)


class BreadthFirstSearch(ConstructiveSearch):
    """幅優先探索（刈り込みなし）。"""

    name = "bfs"
    tag = "BFS"
    lifo = False

    def _expand(self, node: State) -> str:
        children = self.problem.successors(node)
        self.evaluations += len(children)
        self._push_children(children)
        return f"Queue: {len(self.frontier)}"


class DepthFirstSearch(ConstructiveSearch):
    """深さ優先探索（刈り込みなし）。"""

    name = "dfs"
    tag = "DFS"

    def _expand(self, node: State) -> str:
        children = self.problem.successors(node)
        self.evaluations += len(children)
        self._push_children(children)
        return f"Stack: {len(self.frontier)}"
