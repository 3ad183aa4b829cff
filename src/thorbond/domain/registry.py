"""Derive the node registry from listing memos."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from .memo import decode_listing
from .model import Node

if TYPE_CHECKING:
    from collections.abc import Iterable

    from .model import Action

log = getLogger(__name__)


def build_registry(actions: Iterable[Action]) -> list[Node]:
    """Return one node per distinct node address, in feed order.

    The first listing seen for an address wins and later ones are discarded.
    Because the indexer returns newest actions first, that is normally the most
    recent listing transaction.
    """

    nodes: list[Node] = []
    seen: set[str] = set()
    for action in actions:
        listing = decode_listing(action.memo)
        if listing is None:
            continue
        if listing.node_address in seen:
            log.debug("Ignoring repeated listing for node %s", listing.node_address)
            continue
        seen.add(listing.node_address)
        nodes.append(Node.from_listing(listing, created_at=action.created_at))
    return nodes


def index_registry(nodes: Iterable[Node]) -> dict[str, Node]:
    return {node.node_address: node for node in nodes}

__all__ = ["build_registry", "index_registry"]
