"""Adapter wrapping a callback-style wallet extension as an awaitable transfer."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from logging import getLogger
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from thorbond.domain.errors import WalletError
from thorbond.domain.ports import TransferSubmitter

if TYPE_CHECKING:
    from thorbond.domain.ports import TransferRequest

log = getLogger(__name__)

RUNE_ASSET: dict[str, str] = {"chain": "THOR", "symbol": "RUNE", "ticker": "RUNE"}

WalletCallback = Callable[[Any, Any], None]


@runtime_checkable
class WalletProvider(Protocol):
    """``request(payload, callback)`` API exposed by browser wallet extensions.

    The callback receives ``(error, result)``; a truthy ``error`` means failure.
    It may be invoked from any thread.
    """

    def request(self, payload: Mapping[str, Any], callback: WalletCallback) -> None: ...


def build_transfer_payload(transfer: TransferRequest) -> dict[str, Any]:
    return {
        "method": "transfer",
        "params": [
            {
                "asset": dict(RUNE_ASSET),
                "from": transfer.from_address,
                "recipient": transfer.recipient,
                "amount": {"amount": transfer.amount, "decimals": transfer.decimals},
                "memo": transfer.memo,
            }
        ],
    }


class CallbackWalletSubmitter:
    """Submit transfers through a :class:`WalletProvider`.

    The wallet's error is surfaced unmodified on :attr:`WalletError.error`.
    """

    def __init__(self, provider: WalletProvider | None, *, timeout_seconds: float | None = None):
        self._provider = provider
        self._timeout_seconds = timeout_seconds

    async def submit_transfer(self, transfer: TransferRequest) -> Any:
        if self._provider is None:
            raise WalletError("wallet not found")

        loop = asyncio.get_running_loop()
        future: asyncio.Future[Any] = loop.create_future()

        def settle(error: Any, result: Any) -> None:
            if future.done():
                return
            if error:
                failure = WalletError("wallet rejected the transfer", error=error)
                if isinstance(error, BaseException):
                    failure.__cause__ = error
                future.set_exception(failure)
            else:
                future.set_result(result)

        def callback(error: Any, result: Any) -> None:
            loop.call_soon_threadsafe(settle, error, result)

        self._provider.request(build_transfer_payload(transfer), callback)
        async with asyncio.timeout(self._timeout_seconds):
            result = await future
        log.info("Transfer from %s accepted by wallet", transfer.from_address)
        return result


if TYPE_CHECKING:
    _submitter_check: TransferSubmitter = CallbackWalletSubmitter(None)
