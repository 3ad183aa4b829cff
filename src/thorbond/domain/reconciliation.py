"""Join whitelist-request memos against the registry and live bond state."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from logging import getLogger
from typing import TYPE_CHECKING, TypeVar

from .errors import InvariantViolation
from .memo import decode_whitelist_request
from .model import RequestPartition, WhitelistRequest
from .registry import index_registry

if TYPE_CHECKING:
    from collections.abc import Awaitable, Iterable, Sequence

    from .model import Action, BondInfo, Node, WhitelistRequestMemo
    from .ports import BondOracle

log = getLogger(__name__)

DEFAULT_CONCURRENCY = 4

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class _Candidate:
    action: Action
    request: WhitelistRequestMemo
    node: Node
    for_user: bool
    for_operator: bool


def _select_candidates(
    actions: Iterable[Action],
    registry: Iterable[Node],
    viewer_address: str,
) -> list[_Candidate]:
    nodes_by_address = index_registry(registry)
    candidates: list[_Candidate] = []
    for action in actions:
        request = decode_whitelist_request(action.memo)
        if request is None:
            continue
        node = nodes_by_address.get(request.node_address)
        if node is None:
            raise InvariantViolation(f"node not found: {request.node_address}")
        for_user = request.user_address == viewer_address
        for_operator = node.operator_address == viewer_address
        if not (for_user or for_operator):
            continue
        candidates.append(
            _Candidate(
                action=action,
                request=request,
                node=node,
                for_user=for_user,
                for_operator=for_operator,
            )
        )
    return candidates


async def _gather_in_order(awaitables: Sequence[Awaitable[T]]) -> list[T]:
    """Await all ``awaitables``; on the first failure cancel the rest and re-raise it."""

    tasks = [asyncio.ensure_future(item) for item in awaitables]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


async def reconcile(
    actions: Sequence[Action],
    registry: Sequence[Node],
    viewer_address: str,
    *,
    oracle: BondOracle,
    concurrency: int = DEFAULT_CONCURRENCY,
    deadline_seconds: float | None = None,
) -> RequestPartition:
    """Classify the whitelist requests ``viewer_address`` takes part in.

    Requests naming a node missing from ``registry`` abort the whole call with
    :class:`InvariantViolation` before any oracle query is made. Each remaining
    request costs one oracle query; at most ``concurrency`` run at once, and
    ``deadline_seconds`` bounds the whole batch. Output order follows ``actions``.
    """

    if concurrency < 1:
        raise ValueError("concurrency must be at least 1")

    candidates = _select_candidates(actions, registry, viewer_address)
    semaphore = asyncio.Semaphore(concurrency)

    async def lookup(candidate: _Candidate) -> BondInfo:
        async with semaphore:
            return await oracle.get_bond_info(
                candidate.node.node_address, candidate.request.user_address
            )

    async with asyncio.timeout(deadline_seconds):
        bond_infos = await _gather_in_order([lookup(candidate) for candidate in candidates])

    partition = RequestPartition()
    for candidate, bond_info in zip(candidates, bond_infos, strict=True):
        whitelist_request = WhitelistRequest(
            node=candidate.node,
            wallet_address=candidate.request.user_address,
            intended_bond_amount=candidate.request.amount,
            status=bond_info.status,
            created_at=candidate.action.created_at,
        )
        if candidate.for_user:
            partition.user_requests.append(whitelist_request)
        if candidate.for_operator:
            partition.operator_requests.append(whitelist_request)

    log.info(
        "Reconciled %d whitelist request(s) for %s: %d as user, %d as operator",
        len(candidates),
        viewer_address,
        len(partition.user_requests),
        len(partition.operator_requests),
    )
    return partition


__all__ = ["DEFAULT_CONCURRENCY", "reconcile"]
