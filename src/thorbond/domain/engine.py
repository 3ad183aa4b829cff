"""Engine façade owning the cached action history and its lifecycle."""

from __future__ import annotations

import asyncio
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING, Any

from .errors import NotInitializedError, WalletError
from .memo import encode_listing, encode_whitelist_request
from .ports import ActionWindow, SupportsAclose, TransferRequest
from .reconciliation import DEFAULT_CONCURRENCY, reconcile
from .registry import build_registry

if TYPE_CHECKING:
    from types import TracebackType

    from .model import Action, BondInfo, ListingMemo, Node, RequestPartition, WhitelistRequestMemo
    from .ports import ActionFetcher, BondOracle, TransferSubmitter

log = getLogger(__name__)


class EngineState(StrEnum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


class ThorBondEngine:
    """Recomputed view over the protocol address's recent history.

    Each instance owns its own action snapshot. Refreshing swaps the snapshot
    reference in one assignment, so a reconciliation already running keeps
    working against the snapshot it started with.
    """

    def __init__(
        self,
        *,
        fetcher: ActionFetcher,
        oracle: BondOracle,
        protocol_address: str,
        window: ActionWindow | None = None,
        wallet: TransferSubmitter | None = None,
        oracle_concurrency: int = DEFAULT_CONCURRENCY,
        reconcile_deadline_seconds: float | None = None,
    ) -> None:
        self._fetcher = fetcher
        self._oracle = oracle
        self._wallet = wallet
        self.protocol_address = protocol_address
        self.window = window or ActionWindow()
        self.oracle_concurrency = oracle_concurrency
        self.reconcile_deadline_seconds = reconcile_deadline_seconds
        self._state = EngineState.UNINITIALIZED
        self._actions: tuple[Action, ...] = ()
        self._lock = asyncio.Lock()

    async def __aenter__(self) -> ThorBondEngine:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the connections held by the fetcher and oracle, if any."""

        for collaborator in (self._oracle, self._fetcher):
            if isinstance(collaborator, SupportsAclose):
                await collaborator.aclose()

    @property
    def state(self) -> EngineState:
        return self._state

    @property
    def is_ready(self) -> bool:
        return self._state is EngineState.READY

    async def initialize(self) -> None:
        """Load the action window unless already loaded."""

        async with self._lock:
            if self._state is EngineState.READY:
                return
            await self._load()

    async def refresh(self) -> None:
        """Discard the current snapshot and load the window again."""

        async with self._lock:
            self._state = EngineState.UNINITIALIZED
            await self._load()

    async def _load(self) -> None:
        self._state = EngineState.INITIALIZING
        try:
            actions = tuple(await self._fetcher.fetch_actions(self.protocol_address, self.window))
        except BaseException:
            self._state = EngineState.UNINITIALIZED
            raise
        self._actions = actions
        self._state = EngineState.READY
        log.info("Loaded %d action(s) for %s", len(actions), self.protocol_address)

    def _require_ready(self) -> tuple[Action, ...]:
        if self._state is not EngineState.READY:
            raise NotInitializedError(f"ThorBondEngine not initialized (state: {self._state})")
        return self._actions

    def get_actions(self) -> tuple[Action, ...]:
        return self._require_ready()

    def get_nodes(self) -> list[Node]:
        return build_registry(self._require_ready())

    async def get_whitelist_requests(self, viewer_address: str) -> RequestPartition:
        actions = self._require_ready()
        return await reconcile(
            actions,
            build_registry(actions),
            viewer_address,
            oracle=self._oracle,
            concurrency=self.oracle_concurrency,
            deadline_seconds=self.reconcile_deadline_seconds,
        )

    async def get_bond_info(self, node_address: str, user_address: str) -> BondInfo:
        return await self._oracle.get_bond_info(node_address, user_address)

    def create_listing(self, listing: ListingMemo) -> str:
        return encode_listing(listing)

    def create_whitelist_request(self, request: WhitelistRequestMemo) -> str:
        return encode_whitelist_request(request)

    async def send_listing_transaction(self, listing: ListingMemo) -> Any:
        memo = self.create_listing(listing)
        return await self._submit(listing.operator_address, memo)

    async def send_whitelist_request(self, request: WhitelistRequestMemo) -> Any:
        memo = self.create_whitelist_request(request)
        return await self._submit(request.user_address, memo)

    async def _submit(self, from_address: str, memo: str) -> Any:
        if self._wallet is None:
            raise WalletError("wallet not found")
        transfer = TransferRequest(
            from_address=from_address,
            recipient=self.protocol_address,
            memo=memo,
        )
        log.info("Submitting transfer from %s with memo %s", from_address, memo)
        return await self._wallet.submit_transfer(transfer)


__all__ = ["EngineState", "ThorBondEngine"]
