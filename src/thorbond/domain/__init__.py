"""Domain layer: memo protocol, registry, reconciliation and the engine façade."""

from __future__ import annotations

from .engine import EngineState, ThorBondEngine
from .errors import (
    FetchError,
    InvariantViolation,
    NotInitializedError,
    ThorBondError,
    ValidationError,
    WalletError,
)
from .memo import (
    decode_listing,
    decode_whitelist_request,
    encode_listing,
    encode_whitelist_request,
)
from .model import (
    Action,
    BondInfo,
    ListingMemo,
    Node,
    RequestPartition,
    RequestStatus,
    WhitelistRequest,
    WhitelistRequestMemo,
)
from .ports import (
    ActionFetcher,
    ActionWindow,
    BondOracle,
    SupportsAclose,
    TransferRequest,
    TransferSubmitter,
)
from .reconciliation import reconcile
from .registry import build_registry

__all__ = [
    "Action",
    "ActionFetcher",
    "ActionWindow",
    "BondInfo",
    "BondOracle",
    "EngineState",
    "FetchError",
    "InvariantViolation",
    "ListingMemo",
    "Node",
    "NotInitializedError",
    "RequestPartition",
    "RequestStatus",
    "SupportsAclose",
    "ThorBondEngine",
    "ThorBondError",
    "TransferRequest",
    "TransferSubmitter",
    "ValidationError",
    "WalletError",
    "WhitelistRequest",
    "WhitelistRequestMemo",
    "build_registry",
    "decode_listing",
    "decode_whitelist_request",
    "encode_listing",
    "encode_whitelist_request",
    "reconcile",
]
