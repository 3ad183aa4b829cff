"""Bond-state oracle backed by the THORNode API."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
import pydantic

from thorbond.adapters.http_resilience import ResilientClient
from thorbond.config.thornode import ThornodeConfig, get_thornode_config
from thorbond.domain.errors import FetchError, ValidationError
from thorbond.domain.memo import is_chain_address
from thorbond.domain.model import BondInfo
from thorbond.domain.ports import BondOracle

from .schema import NodeResponse

if TYPE_CHECKING:
    from collections.abc import Callable
    from types import TracebackType

    from thorbond.config.http_resilience import ResilienceConfig

log = getLogger(__name__)

NODE_PATH = "node/{node_address}"
FETCH_FAILED_MESSAGE = "failed to retrieve bond info"


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


class ThornodeBondOracle:
    """Look up whether a wallet is a bond provider of a node, and its bond.

    One HTTP client is shared by every query so the configured rate limit spans
    the whole reconciliation batch. Close it with :meth:`aclose` or use the
    oracle as an async context manager.
    """

    def __init__(
        self,
        config: ThornodeConfig | None = None,
        *,
        client_factory: Callable[[ResilienceConfig], ResilientClient] | None = None,
    ) -> None:
        self.config = config or get_thornode_config()
        self._client_factory = client_factory or _default_client_factory
        self._client: ResilientClient | None = None

    async def __aenter__(self) -> ThornodeBondOracle:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _get_client(self) -> ResilientClient:
        if self._client is None or self._client.is_closed:
            self._client = self._client_factory(self.config.resilience)
        return self._client

    async def get_bond_info(self, node_address: str, user_address: str) -> BondInfo:
        if not is_chain_address(node_address):
            raise ValidationError("Invalid THORChain address", field="node_address")
        if not is_chain_address(user_address):
            raise ValidationError("Invalid THORChain address", field="user_address")

        node = await self._fetch_node(node_address)
        provider = node.find_provider(user_address)
        if provider is None:
            return BondInfo(is_bond_provider=False, bonded_amount=0)
        return BondInfo(is_bond_provider=True, bonded_amount=provider.bond)

    async def _fetch_node(self, node_address: str) -> NodeResponse:
        client = self._get_client()
        try:
            response = await client.get(NODE_PATH.format(node_address=node_address))
            response.raise_for_status()
            return NodeResponse.model_validate(response.json())
        except httpx.HTTPStatusError as exc:
            log.error(
                f"THORNode returned {exc.response.status_code} for node {node_address}"
            )
            raise FetchError(FETCH_FAILED_MESSAGE, status_code=exc.response.status_code) from exc
        except httpx.HTTPError as exc:
            log.error(f"THORNode request for node {node_address} failed: {exc!r}")
            raise FetchError(FETCH_FAILED_MESSAGE) from exc
        except (ValueError, pydantic.ValidationError) as exc:
            log.error(f"Unexpected THORNode payload for node {node_address}: {exc}")
            raise FetchError(FETCH_FAILED_MESSAGE) from exc


if TYPE_CHECKING:
    _oracle_check: BondOracle = ThornodeBondOracle()
