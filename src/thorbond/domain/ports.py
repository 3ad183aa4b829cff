"""Ports for the external collaborators the engine depends on."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .model import Action, BondInfo

DEFAULT_ACTION_LIMIT = 50


@dataclass(frozen=True, slots=True)
class ActionWindow:
    """A single bounded page of indexer history.

    Only this page is read; older history needs a different window.
    """

    limit: int = DEFAULT_ACTION_LIMIT
    offset: int = 0
    action_type: str = "send"


@runtime_checkable
class ActionFetcher(Protocol):
    """Port for reading the protocol address's transaction history."""

    async def fetch_actions(self, address: str, window: ActionWindow) -> Sequence[Action]: ...


@runtime_checkable
class BondOracle(Protocol):
    """Port for live node bond state."""

    async def get_bond_info(self, node_address: str, user_address: str) -> BondInfo: ...


@runtime_checkable
class SupportsAclose(Protocol):
    """Collaborators holding a connection that must be released."""

    async def aclose(self) -> None: ...


TRANSFER_AMOUNT_BASE_UNITS = 1_000_000
TRANSFER_DECIMALS = 8


@dataclass(frozen=True, slots=True)
class TransferRequest:
    """A RUNE transfer to the protocol address carrying a memo.

    The default amount is 0.01 RUNE in 8-decimal base units.
    """

    from_address: str
    recipient: str
    memo: str
    amount: int = TRANSFER_AMOUNT_BASE_UNITS
    decimals: int = TRANSFER_DECIMALS


@runtime_checkable
class TransferSubmitter(Protocol):
    """Port for handing a transfer to the user's wallet."""

    async def submit_transfer(self, transfer: TransferRequest) -> Any: ...


__all__ = [
    "ActionFetcher",
    "ActionWindow",
    "BondOracle",
    "SupportsAclose",
    "TransferRequest",
    "TransferSubmitter",
]
