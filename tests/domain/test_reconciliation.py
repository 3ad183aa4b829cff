from __future__ import annotations

import asyncio

import pytest

from tests.helpers.engine_fakes import FakeBondOracle, make_action
from thorbond.domain.errors import FetchError, InvariantViolation
from thorbond.domain.model import BondInfo, RequestStatus
from thorbond.domain.reconciliation import reconcile
from thorbond.domain.registry import build_registry

LISTING = "TB:thorNODE:thorOP:100:10000:5"


def _run(actions, viewer, oracle, **kwargs):  # type: ignore[no-untyped-def]
    return asyncio.run(reconcile(actions, build_registry(actions), viewer, oracle=oracle, **kwargs))


def test_user_sees_approved_request() -> None:
    actions = [make_action(LISTING), make_action("TB:thorNODE:thorUSER:500", offset_seconds=5)]
    oracle = FakeBondOracle({("thorNODE", "thorUSER"): BondInfo(True, 0)})

    partition = _run(actions, "thorUSER", oracle)

    assert partition.operator_requests == []
    assert len(partition.user_requests) == 1
    request = partition.user_requests[0]
    assert request.status is RequestStatus.APPROVED
    assert request.intended_bond_amount == 500
    assert request.wallet_address == "thorUSER"
    assert request.node.node_address == "thorNODE"
    assert request.created_at == actions[1].created_at
    assert request.rejection_reason is None


def test_operator_sees_requests_for_their_node() -> None:
    actions = [
        make_action(LISTING),
        make_action("TB:thorNODE:thorA:500"),
        make_action("TB:thorNODE:thorB:700"),
    ]
    oracle = FakeBondOracle(
        {
            ("thorNODE", "thorA"): BondInfo(True, 500),
            ("thorNODE", "thorB"): BondInfo(False, 0),
        }
    )

    partition = _run(actions, "thorOP", oracle)

    assert partition.user_requests == []
    assert [(r.wallet_address, r.status) for r in partition.operator_requests] == [
        ("thorA", RequestStatus.BONDED),
        ("thorB", RequestStatus.PENDING),
    ]


def test_unrelated_viewer_gets_nothing_and_no_queries() -> None:
    actions = [make_action(LISTING), make_action("TB:thorNODE:thorUSER:500")]
    oracle = FakeBondOracle()

    partition = _run(actions, "thorSTRANGER", oracle)

    assert partition.user_requests == []
    assert partition.operator_requests == []
    assert oracle.calls == []


def test_operator_requesting_own_node_appears_in_both_views() -> None:
    actions = [make_action(LISTING), make_action("TB:thorNODE:thorOP:200")]
    oracle = FakeBondOracle()

    partition = _run(actions, "thorOP", oracle)

    assert len(partition.user_requests) == 1
    assert len(partition.operator_requests) == 1
    assert partition.user_requests[0] == partition.operator_requests[0]
    assert oracle.calls == [("thorNODE", "thorOP")]


def test_unknown_node_is_fatal() -> None:
    actions = [make_action(LISTING), make_action("TB:thorGHOST:thorUSER:500")]
    oracle = FakeBondOracle()

    with pytest.raises(InvariantViolation, match="node not found"):
        _run(actions, "thorUSER", oracle)

    assert oracle.calls == []


def test_unknown_node_is_fatal_even_for_other_viewers() -> None:
    actions = [make_action(LISTING), make_action("TB:thorGHOST:thorUSER:500")]

    with pytest.raises(InvariantViolation):
        _run(actions, "thorSOMEONE", FakeBondOracle())


def test_malformed_whitelist_memos_are_skipped() -> None:
    actions = [
        make_action(LISTING),
        make_action("TB:thorNODE:thorUSER:zero"),
        make_action("TB:thorNODE:thorUSER:-5"),
        make_action("TB:thorNODE:bnbUSER:5"),
        make_action(None),
    ]
    oracle = FakeBondOracle()

    partition = _run(actions, "thorUSER", oracle)

    assert partition.user_requests == []
    assert oracle.calls == []


def test_one_query_per_request_without_caching() -> None:
    actions = [
        make_action(LISTING),
        make_action("TB:thorNODE:thorUSER:500"),
        make_action("TB:thorNODE:thorUSER:800"),
    ]
    oracle = FakeBondOracle()

    partition = _run(actions, "thorUSER", oracle)

    assert [r.intended_bond_amount for r in partition.user_requests] == [500, 800]
    assert oracle.calls == [("thorNODE", "thorUSER"), ("thorNODE", "thorUSER")]


def test_concurrency_is_bounded_and_order_preserved() -> None:
    users = [f"thorU{i}" for i in range(10)]
    actions = [make_action(LISTING)] + [make_action(f"TB:thorNODE:{u}:1") for u in users]
    oracle = FakeBondOracle(
        {("thorNODE", u): BondInfo(True, i) for i, u in enumerate(users)}, delay=0.01
    )

    partition = _run(actions, "thorOP", oracle, concurrency=3)

    assert [r.wallet_address for r in partition.operator_requests] == users
    assert partition.operator_requests[0].status is RequestStatus.APPROVED
    assert partition.operator_requests[1].status is RequestStatus.BONDED
    assert 1 < oracle.max_in_flight <= 3


def test_oracle_failure_aborts_batch() -> None:
    actions = [
        make_action(LISTING),
        make_action("TB:thorNODE:thorA:1"),
        make_action("TB:thorNODE:thorB:1"),
    ]
    oracle = FakeBondOracle(errors={("thorNODE", "thorA"): FetchError("boom")})

    with pytest.raises(FetchError, match="boom"):
        _run(actions, "thorOP", oracle)


def test_oracle_failure_cancels_queries_still_in_flight() -> None:
    cancelled: list[tuple[str, str]] = []

    class SlowUnlessFailing(FakeBondOracle):
        async def get_bond_info(self, node_address: str, user_address: str) -> BondInfo:
            if (node_address, user_address) in self.errors:
                await asyncio.sleep(0.01)
                raise self.errors[(node_address, user_address)]
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                cancelled.append((node_address, user_address))
                raise
            return BondInfo()

    actions = [
        make_action(LISTING),
        make_action("TB:thorNODE:thorA:1"),
        make_action("TB:thorNODE:thorB:1"),
        make_action("TB:thorNODE:thorC:1"),
    ]
    oracle = SlowUnlessFailing(errors={("thorNODE", "thorA"): FetchError("boom")})

    with pytest.raises(FetchError, match="boom") as exc:
        _run(actions, "thorOP", oracle, concurrency=3)

    assert type(exc.value) is FetchError
    assert sorted(cancelled) == [("thorNODE", "thorB"), ("thorNODE", "thorC")]


def test_deadline_aborts_slow_batch() -> None:
    actions = [make_action(LISTING), make_action("TB:thorNODE:thorA:1")]
    oracle = FakeBondOracle(delay=1.0)

    with pytest.raises(TimeoutError):
        _run(actions, "thorOP", oracle, deadline_seconds=0.01)

    assert oracle.in_flight == 0


def test_concurrency_must_be_positive() -> None:
    with pytest.raises(ValueError, match="concurrency"):
        _run([], "thorOP", FakeBondOracle(), concurrency=0)
