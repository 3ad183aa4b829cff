"""Domain records derived from on-chain actions (pure, dependency-light)."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

NANOS_PER_SECOND = 1_000_000_000


def nanos_to_datetime(timestamp_nanos: int) -> datetime:
    """Convert an indexer nanosecond timestamp to an aware UTC ``datetime``."""

    return datetime.fromtimestamp(timestamp_nanos / NANOS_PER_SECOND, tz=UTC)


@dataclass(frozen=True, slots=True)
class Action:
    """One historical transaction sent to the protocol address.

    Only ``kind``, ``timestamp_nanos`` and ``memo`` are interpreted; the rest is
    carried through from the indexer untouched.
    """

    kind: str
    timestamp_nanos: int
    memo: str | None = None
    height: str | None = None
    inputs: tuple[Any, ...] = ()
    outputs: tuple[Any, ...] = ()
    pools: tuple[str, ...] = ()
    status: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict, hash=False, compare=False)

    @property
    def created_at(self) -> datetime:
        return nanos_to_datetime(self.timestamp_nanos)


@dataclass(frozen=True, slots=True)
class ListingMemo:
    """An operator's published bonding terms."""

    node_address: str
    operator_address: str
    min_bond: float
    max_bond: float
    fee_percentage: float


@dataclass(frozen=True, slots=True)
class WhitelistRequestMemo:
    """A user's intent to bond ``amount`` into ``node_address``."""

    node_address: str
    user_address: str
    amount: float


@dataclass(frozen=True, slots=True)
class Node:
    """A materialised listing; ``node_address`` is the unique key."""

    operator_address: str
    node_address: str
    bonding_capacity: float
    minimum_bond: float
    fee_percentage: float
    created_at: datetime

    @classmethod
    def from_listing(cls, listing: ListingMemo, *, created_at: datetime) -> Node:
        return cls(
            operator_address=listing.operator_address,
            node_address=listing.node_address,
            bonding_capacity=listing.max_bond,
            minimum_bond=listing.min_bond,
            fee_percentage=listing.fee_percentage,
            created_at=created_at,
        )


class RequestStatus(StrEnum):
    PENDING = "pending"
    APPROVED = "approved"
    BONDED = "bonded"
    REJECTED = "rejected"


@dataclass(frozen=True, slots=True)
class BondInfo:
    is_bond_provider: bool = False
    bonded_amount: float = 0

    @property
    def status(self) -> RequestStatus:
        """Classify the observable bond state.

        ``REJECTED`` is never produced here; it needs an action this view does not model.
        """

        status = RequestStatus.PENDING
        if self.is_bond_provider:
            status = RequestStatus.APPROVED
        if self.is_bond_provider and self.bonded_amount > 0:
            status = RequestStatus.BONDED
        return status


@dataclass(frozen=True, slots=True)
class WhitelistRequest:
    node: Node
    wallet_address: str
    intended_bond_amount: float
    status: RequestStatus
    created_at: datetime
    rejection_reason: str | None = None


@dataclass(slots=True)
class RequestPartition:
    """Whitelist requests split by the role the viewing wallet plays in them."""

    operator_requests: list[WhitelistRequest] = field(default_factory=list)
    user_requests: list[WhitelistRequest] = field(default_factory=list)


__all__ = [
    "Action",
    "BondInfo",
    "ListingMemo",
    "Node",
    "RequestPartition",
    "RequestStatus",
    "WhitelistRequest",
    "WhitelistRequestMemo",
    "nanos_to_datetime",
]
