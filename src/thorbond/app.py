"""Application orchestration entry points."""

from __future__ import annotations

from contextlib import asynccontextmanager
from logging import getLogger
from typing import TYPE_CHECKING

from thorbond.adapters.midgard import MidgardActionFetcher
from thorbond.adapters.thornode import ThornodeBondOracle
from thorbond.config import get_engine_config, get_midgard_config, get_thornode_config
from thorbond.domain.engine import ThorBondEngine

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from thorbond.config import EngineConfig, MidgardConfig, ThornodeConfig
    from thorbond.domain.model import Node, RequestPartition
    from thorbond.domain.ports import ActionFetcher, BondOracle, TransferSubmitter

log = getLogger(__name__)


def build_engine(
    *,
    fetcher: ActionFetcher | None = None,
    oracle: BondOracle | None = None,
    wallet: TransferSubmitter | None = None,
    midgard_config: MidgardConfig | None = None,
    engine_config: EngineConfig | None = None,
) -> ThorBondEngine:
    """Assemble an engine from configured adapters, honouring any overrides.

    The caller owns the returned engine and must ``await engine.aclose()`` (or
    use it as an async context manager) to release the oracle connection that
    is created when no ``oracle`` is passed. :func:`open_engine` does this.
    """

    effective_midgard = midgard_config or get_midgard_config()
    effective_engine = engine_config or get_engine_config()
    effective_fetcher = fetcher or MidgardActionFetcher(config=effective_midgard)
    window = (
        effective_fetcher.default_window()
        if isinstance(effective_fetcher, MidgardActionFetcher)
        else None
    )
    return ThorBondEngine(
        fetcher=effective_fetcher,
        oracle=oracle or ThornodeBondOracle(get_thornode_config()),
        protocol_address=effective_midgard.protocol_address,
        window=window,
        wallet=wallet,
        oracle_concurrency=effective_engine.oracle_concurrency,
        reconcile_deadline_seconds=effective_engine.reconcile_deadline_seconds,
    )


@asynccontextmanager
async def open_engine(
    *,
    wallet: TransferSubmitter | None = None,
    midgard_config: MidgardConfig | None = None,
    thornode_config: ThornodeConfig | None = None,
    engine_config: EngineConfig | None = None,
) -> AsyncIterator[ThorBondEngine]:
    """Yield an initialised engine whose connections are closed on exit."""

    engine = build_engine(
        oracle=ThornodeBondOracle(thornode_config or get_thornode_config()),
        wallet=wallet,
        midgard_config=midgard_config,
        engine_config=engine_config,
    )
    async with engine:
        await engine.initialize()
        yield engine


async def list_nodes(engine: ThorBondEngine) -> list[Node]:
    await engine.initialize()
    nodes = engine.get_nodes()
    log.info("Registry holds %d node(s)", len(nodes))
    return nodes


async def list_whitelist_requests(engine: ThorBondEngine, viewer_address: str) -> RequestPartition:
    await engine.initialize()
    return await engine.get_whitelist_requests(viewer_address)
