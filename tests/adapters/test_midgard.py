from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import httpx
import pytest

from thorbond.adapters.midgard import MidgardActionFetcher, parse_action
from thorbond.config.midgard import MidgardConfig, default_midgard_resilience
from thorbond.domain.errors import FetchError
from thorbond.domain.ports import ActionWindow

if TYPE_CHECKING:
    from tests.adapters.conftest import ClientFactoryBuilder

BASE_URL = "https://midgard.test/v2"
PROTOCOL_ADDRESS = "thor1protocol"


def _action_payload(memo: str | None, *, date: str = "1700000000000000000") -> dict[str, object]:
    metadata: dict[str, object] = {}
    if memo is not None:
        metadata["send"] = {
            "code": "0",
            "memo": memo,
            "networkFees": [{"amount": "2000000", "asset": "THOR.RUNE"}],
            "reason": "",
        }
    return {
        "type": "send",
        "date": date,
        "height": "15000000",
        "in": [{"address": "thor1sender", "coins": [{"amount": "1000000", "asset": "THOR.RUNE"}]}],
        "out": [{"address": PROTOCOL_ADDRESS, "coins": []}],
        "pools": [],
        "status": "success",
        "metadata": metadata,
    }


def _fetcher(factory) -> MidgardActionFetcher:  # type: ignore[no-untyped-def]
    config = MidgardConfig(
        resilience=default_midgard_resilience(BASE_URL), protocol_address=PROTOCOL_ADDRESS
    )
    return MidgardActionFetcher(config=config, client_factory=factory)


def test_fetch_actions_issues_bounded_query(client_factory: ClientFactoryBuilder) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={"actions": [_action_payload("TB:thor1n:thor1o:1:10:1"), _action_payload(None)]},
        )

    fetcher = _fetcher(client_factory(handler))

    actions = asyncio.run(fetcher.fetch_actions(PROTOCOL_ADDRESS, fetcher.default_window()))

    [request] = seen
    assert request.url.path == "/v2/actions"
    assert dict(request.url.params) == {
        "address": PROTOCOL_ADDRESS,
        "limit": "50",
        "offset": "0",
        "type": "send",
    }
    assert [action.memo for action in actions] == ["TB:thor1n:thor1o:1:10:1", None]
    assert actions[0].kind == "send"
    assert actions[0].timestamp_nanos == 1_700_000_000_000_000_000
    assert actions[0].height == "15000000"
    assert actions[0].status == "success"
    assert actions[0].inputs[0]["address"] == "thor1sender"
    assert actions[0].metadata["send"]["networkFees"][0]["asset"] == "THOR.RUNE"


def test_fetch_actions_respects_window(client_factory: ClientFactoryBuilder) -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"actions": []})

    fetcher = _fetcher(client_factory(handler))

    asyncio.run(fetcher.fetch_actions("thor1other", ActionWindow(limit=10, offset=20)))

    assert seen[0].url.params["limit"] == "10"
    assert seen[0].url.params["offset"] == "20"
    assert seen[0].url.params["address"] == "thor1other"


def test_missing_actions_list_is_empty(client_factory: ClientFactoryBuilder) -> None:
    fetcher = _fetcher(client_factory(lambda _request: httpx.Response(200, json={})))

    assert asyncio.run(fetcher.fetch_actions(PROTOCOL_ADDRESS, ActionWindow())) == []


def test_server_error_surfaces_as_fetch_error(client_factory: ClientFactoryBuilder) -> None:
    calls: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503, json={"error": "unavailable"})

    fetcher = _fetcher(client_factory(handler))

    with pytest.raises(FetchError) as exc:
        asyncio.run(fetcher.fetch_actions(PROTOCOL_ADDRESS, ActionWindow()))

    assert exc.value.status_code == 503
    assert len(calls) == 1


def test_transport_error_surfaces_as_fetch_error(client_factory: ClientFactoryBuilder) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    fetcher = _fetcher(client_factory(handler))

    with pytest.raises(FetchError, match="failed to retrieve actions"):
        asyncio.run(fetcher.fetch_actions(PROTOCOL_ADDRESS, ActionWindow()))


def test_garbage_payload_surfaces_as_fetch_error(client_factory: ClientFactoryBuilder) -> None:
    fetcher = _fetcher(client_factory(lambda _request: httpx.Response(200, text="<html>")))

    with pytest.raises(FetchError):
        asyncio.run(fetcher.fetch_actions(PROTOCOL_ADDRESS, ActionWindow()))


def test_parse_action_tolerates_missing_metadata() -> None:
    payload = _action_payload(None)
    payload["metadata"] = None

    action = parse_action(payload)

    assert action.memo is None
    assert action.metadata == {}


def test_malformed_entry_is_skipped_without_failing_window(
    client_factory: ClientFactoryBuilder,
) -> None:
    bad_date = _action_payload("TB:thor1bad:thor1o:1:10:1", date="not-a-number")
    payload = {
        "actions": [
            _action_payload("TB:thor1a:thor1o:1:10:1"),
            bad_date,
            "garbage",
            _action_payload("TB:thor1b:thor1o:1:10:1"),
        ]
    }
    fetcher = _fetcher(client_factory(lambda _request: httpx.Response(200, json=payload)))

    actions = asyncio.run(fetcher.fetch_actions(PROTOCOL_ADDRESS, ActionWindow()))

    assert [action.memo for action in actions] == [
        "TB:thor1a:thor1o:1:10:1",
        "TB:thor1b:thor1o:1:10:1",
    ]


def test_parse_action_tolerates_incomplete_pass_through_fields() -> None:
    payload = _action_payload("TB:thor1n:thor1o:1:10:1")
    payload["metadata"]["send"]["networkFees"] = [{"amount": "2000000"}]  # type: ignore[index]
    payload["height"] = 15000000
    payload["pools"] = [{"asset": "BTC.BTC"}]

    action = parse_action(payload)

    assert action.memo == "TB:thor1n:thor1o:1:10:1"
    assert action.height == "15000000"
    assert action.metadata["send"]["networkFees"] == [{"amount": "2000000"}]
