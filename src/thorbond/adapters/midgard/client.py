"""HTTP client for the Midgard indexer."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

import httpx
import pydantic

from thorbond.adapters.http_resilience import ResilientClient
from thorbond.config.midgard import MidgardConfig, get_midgard_config
from thorbond.domain.errors import FetchError
from thorbond.domain.ports import ActionFetcher, ActionWindow

from .schema import ActionsResponse
from .translator import parse_action

if TYPE_CHECKING:
    from collections.abc import Callable

    from thorbond.config.http_resilience import ResilienceConfig
    from thorbond.domain.model import Action

log = getLogger(__name__)

ACTIONS_PATH = "actions"


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class MidgardActionFetcher:
    """Read one bounded page of actions sent to an address."""

    config: MidgardConfig = field(default_factory=get_midgard_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )

    def default_window(self) -> ActionWindow:
        return ActionWindow(limit=self.config.limit, action_type=self.config.action_type)

    async def fetch_actions(self, address: str, window: ActionWindow) -> list[Action]:
        params = httpx.QueryParams(
            {
                "address": address,
                "limit": window.limit,
                "offset": window.offset,
                "type": window.action_type,
            }
        )
        async with self.client_factory(self.config.resilience) as client:
            payload = await self._perform_request(client=client, params=params)
        actions: list[Action] = []
        for index, item in enumerate(payload.actions):
            try:
                actions.append(parse_action(item))
            except pydantic.ValidationError as exc:
                log.warning(f"Skipping malformed Midgard action at position {index}: {exc}")
        log.debug("Fetched %d action(s) for %s", len(actions), address)
        return actions

    async def _perform_request(
        self,
        *,
        client: ResilientClient,
        params: httpx.QueryParams,
    ) -> ActionsResponse:
        try:
            response = await client.get(ACTIONS_PATH, params=params)
            response.raise_for_status()
            return ActionsResponse.model_validate(response.json())
        except httpx.HTTPStatusError as exc:
            log.error(f"Midgard returned {exc.response.status_code} for {exc.request.url}")
            raise FetchError(
                "failed to retrieve actions", status_code=exc.response.status_code
            ) from exc
        except httpx.HTTPError as exc:
            log.error(f"Midgard request failed: {exc!r}")
            raise FetchError("failed to retrieve actions") from exc
        except (ValueError, pydantic.ValidationError) as exc:
            log.error(f"Unexpected Midgard response payload: {exc}")
            raise FetchError("failed to retrieve actions") from exc


if TYPE_CHECKING:
    _fetcher_check: ActionFetcher = MidgardActionFetcher()
