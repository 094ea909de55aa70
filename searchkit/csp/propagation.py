# -*- coding: utf-8 -*-
"""
二項制約に対する、問題に依存しない制約伝播のモジュールです。

制約は次の 2 つの関数で表します。

neighbors(variable) -> Iterable[variable]
    variable と制約で結ばれている変数。
consistent(xi, vi, xj, vj) -> bool
    xi = vi と xj = vj が同時に成り立ってよいかどうか。

各 Problem は propagate_forward_checking / propagate_arc_consistency を
ここに委譲するだけでよく、「値が異なる」以外の制約（N-Queens の斜め利きなど）も
consistent を書き換えるだけで扱えます。

どちらの関数も渡されたドメインは書き換えず、新しい dict を返します。
"""

from __future__ import annotations

from collections import deque
from typing import Any, Callable, Collection, Hashable, Iterable

from ..types import Domains, PropagationResult

NeighborsFn = Callable[[Hashable], Iterable[Hashable]]
ConsistentFn = Callable[[Hashable, Any, Hashable, Any], bool]


def forward_check(
    domains: Domains,
    variable: Hashable,
    value: Any,
    neighbors: NeighborsFn,
    consistent: ConsistentFn,
    assigned: Collection[Hashable],
) -> PropagationResult:
    """
    Forward Checking（1 ホップの先読み）。

    variable のドメインを (value,) にし、制約で結ばれた「未割り当て」の変数から
    value と両立しない値を取り除きます。

    Parameters
    ----------
    domains : Domains
        割り当て前のドメイン。
    variable, value :
        今回の割り当て。
    neighbors, consistent :
        制約の記述（モジュールの説明を参照）。
    assigned : collection
        既に割り当て済みの変数。これらのドメインには触れない。

    Returns
    -------
    PropagationResult
        いずれかの未割り当て変数のドメインが空になったら success=False。
        空になったドメインも含めて、伝播後のドメインをそのまま返す。
    """
    new_domains: Domains = dict(domains)
    new_domains[variable] = (value,)

    success = True
    for other in neighbors(variable):
        if other == variable or other in assigned:
            continue
        kept = tuple(v for v in new_domains[other] if consistent(variable, value, other, v))
        new_domains[other] = kept
        if not kept:
            success = False

    return PropagationResult(domains=new_domains, success=success)


def revise(
    domains: Domains,
    xi: Hashable,
    xj: Hashable,
    consistent: ConsistentFn,
) -> bool:
    """
    D(xi) から、D(xj) に支持（両立する値）を持たない値を取り除きます。

    domains はその場で更新します。値を 1 つでも取り除いたら True。
    """
    supported = tuple(
        vi for vi in domains[xi]
        if any(consistent(xi, vi, xj, vj) for vj in domains[xj])
    )
    if len(supported) == len(domains[xi]):
        return False
    domains[xi] = supported
    return True


def arc_consistency(
    domains: Domains,
    variable: Hashable,
    value: Any,
    neighbors: NeighborsFn,
    consistent: ConsistentFn,
    assigned: Collection[Hashable],
) -> PropagationResult:
    """
    割り当て + AC-3。

    まず forward_check と同じ初期の刈り込みを行い、その後
    未割り当て変数間の弧 (xi, xj) をキューで処理します。
    D(xi) が縮んだら、xi の他の隣接変数 xk について (xk, xi) を再投入します。

    割り当て済みの変数（今回の variable を含む）は見直さないので、
    そのドメインは常に長さ 1 のままです。
    結果のドメインは、同じ割り当てに対する forward_check の結果の部分集合になります。
    """
    first = forward_check(domains, variable, value, neighbors, consistent, assigned)
    if not first.success:
        return first

    new_domains: Domains = dict(first.domains)
    fixed = set(assigned)
    fixed.add(variable)

    queue = deque(
        (xi, xj)
        for xi in new_domains
        if xi not in fixed
        for xj in neighbors(xi)
        if xj != xi
    )

    while queue:
        xi, xj = queue.popleft()
        if not revise(new_domains, xi, xj, consistent):
            continue
        if not new_domains[xi]:
            return PropagationResult(domains=new_domains, success=False)
        for xk in neighbors(xi):
            if xk != xj and xk != xi and xk not in fixed:
                queue.append((xk, xi))

    return PropagationResult(domains=new_domains, success=True)


def values_removed(before: Domains, after: Domains) -> int:
    """伝播で取り除かれた値の総数（LCV の評価に使う）。"""
    return sum(len(before[var]) - len(after.get(var, ())) for var in before)
