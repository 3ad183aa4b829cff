"""Colon-delimited memo grammar for listings and whitelist requests.

Wire format::

    TB:<node>:<operator>:<min_bond>:<max_bond>:<fee_percentage>   (listing)
    TB:<node>:<user>:<amount>                                     (whitelist request)

Encoding is strict and raises :class:`ValidationError`. Decoding is tolerant:
anything that does not match the grammar decodes to ``None`` so unrelated
transfers to the protocol address are ignored.
"""

from __future__ import annotations

import math
import re
from decimal import Decimal
from logging import getLogger
from typing import Final

from .errors import ValidationError
from .model import ListingMemo, WhitelistRequestMemo

log = getLogger(__name__)

MEMO_TAG: Final[str] = "TB"
MEMO_SEPARATOR: Final[str] = ":"
ADDRESS_PREFIX: Final[str] = "thor"
LISTING_FIELD_COUNT: Final[int] = 6
WHITELIST_REQUEST_FIELD_COUNT: Final[int] = 4

_NUMBER_PATTERN: Final = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?", re.ASCII)


def is_chain_address(value: str) -> bool:
    return isinstance(value, str) and value.startswith(ADDRESS_PREFIX)


def format_number(value: float) -> str:
    """Render ``value`` the way it appears in memos (``100`` rather than ``100.0``)."""

    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    number = float(value)
    if number.is_integer() and abs(number) < 1e21:
        return str(int(number))
    return _shortest_decimal(number)


def _shortest_decimal(number: float) -> str:
    # Shortest round-trip digits; exponent form below 1e-6 and from 1e21 up,
    # written as 1e-7 / 1.5e+21 so other memo readers parse the same text.
    sign, digit_tuple, exponent = Decimal(repr(number)).as_tuple()
    digits = "".join(map(str, digit_tuple)).rstrip("0") or "0"
    exponent += len(digit_tuple) - len(digits)
    point = exponent + len(digits)
    prefix = "-" if sign else ""
    if len(digits) <= point <= 21:
        return prefix + digits + "0" * (point - len(digits))
    if 0 < point <= 21:
        return f"{prefix}{digits[:point]}.{digits[point:]}"
    if -6 < point <= 0:
        return f"{prefix}0.{'0' * -point}{digits}"
    power = point - 1
    mantissa = digits[0] + (f".{digits[1:]}" if len(digits) > 1 else "")
    return f"{prefix}{mantissa}e{'+' if power > 0 else '-'}{abs(power)}"


def parse_number(text: str) -> float | None:
    """Parse a memo number, returning ``None`` for anything non-finite or non-numeric.

    Only plain ASCII decimal notation is accepted: no digit separators and no
    non-ASCII digits.
    """

    stripped = text.strip()
    if not stripped or _NUMBER_PATTERN.fullmatch(stripped) is None:
        return None
    try:
        value = float(stripped)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


def _require_address(value: str, *, field: str, label: str) -> None:
    if not is_chain_address(value):
        raise ValidationError(f"Invalid {label} address format", field=field)


def _require_finite(value: float, *, field: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int | float) or not math.isfinite(value):
        raise ValidationError(f"{field} must be a finite number", field=field)


def validate_listing(listing: ListingMemo) -> None:
    """Raise :class:`ValidationError` naming the first violated constraint."""

    _require_address(listing.node_address, field="node_address", label="node")
    _require_address(listing.operator_address, field="operator_address", label="operator")
    _require_finite(listing.min_bond, field="min_bond")
    _require_finite(listing.max_bond, field="max_bond")
    _require_finite(listing.fee_percentage, field="fee_percentage")
    if listing.min_bond <= 0:
        raise ValidationError("Minimum RUNE amount must be greater than 0", field="min_bond")
    if listing.max_bond <= listing.min_bond:
        raise ValidationError(
            "Maximum RUNE amount must be greater than minimum amount", field="max_bond"
        )
    if not 0 <= listing.fee_percentage <= 100:
        raise ValidationError("Fee percentage must be between 0 and 100", field="fee_percentage")


def validate_whitelist_request(request: WhitelistRequestMemo) -> None:
    _require_address(request.node_address, field="node_address", label="node")
    _require_address(request.user_address, field="user_address", label="user")
    _require_finite(request.amount, field="amount")
    if request.amount <= 0:
        raise ValidationError("Amount must be greater than 0", field="amount")


def encode_listing(listing: ListingMemo) -> str:
    validate_listing(listing)
    return MEMO_SEPARATOR.join(
        (
            MEMO_TAG,
            listing.node_address,
            listing.operator_address,
            format_number(listing.min_bond),
            format_number(listing.max_bond),
            format_number(listing.fee_percentage),
        )
    )


def encode_whitelist_request(request: WhitelistRequestMemo) -> str:
    validate_whitelist_request(request)
    return MEMO_SEPARATOR.join(
        (
            MEMO_TAG,
            request.node_address,
            request.user_address,
            format_number(request.amount),
        )
    )


def _split(memo: str | None, expected_fields: int) -> list[str] | None:
    if not memo:
        return None
    parts = memo.split(MEMO_SEPARATOR)
    if len(parts) != expected_fields or parts[0] != MEMO_TAG:
        return None
    return parts


def decode_listing(memo: str | None) -> ListingMemo | None:
    parts = _split(memo, LISTING_FIELD_COUNT)
    if parts is None:
        return None
    _, node_address, operator_address, min_text, max_text, fee_text = parts

    min_bond = parse_number(min_text)
    max_bond = parse_number(max_text)
    fee_percentage = parse_number(fee_text)
    if min_bond is None or max_bond is None or fee_percentage is None:
        log.debug("Skipping listing memo with non-numeric terms: %s", memo)
        return None
    if min_bond < 0 or max_bond <= min_bond or not 0 <= fee_percentage <= 100:
        log.debug("Skipping listing memo with out-of-range terms: %s", memo)
        return None

    return ListingMemo(
        node_address=node_address,
        operator_address=operator_address,
        min_bond=min_bond,
        max_bond=max_bond,
        fee_percentage=fee_percentage,
    )


def decode_whitelist_request(memo: str | None) -> WhitelistRequestMemo | None:
    parts = _split(memo, WHITELIST_REQUEST_FIELD_COUNT)
    if parts is None:
        return None
    _, node_address, user_address, amount_text = parts

    if not is_chain_address(node_address) or not is_chain_address(user_address):
        log.debug("Skipping whitelist memo with foreign addresses: %s", memo)
        return None
    amount = parse_number(amount_text)
    if amount is None or amount <= 0:
        log.debug("Skipping whitelist memo with invalid amount: %s", memo)
        return None

    return WhitelistRequestMemo(node_address=node_address, user_address=user_address, amount=amount)


__all__ = [
    "ADDRESS_PREFIX",
    "MEMO_TAG",
    "decode_listing",
    "decode_whitelist_request",
    "encode_listing",
    "encode_whitelist_request",
    "format_number",
    "is_chain_address",
    "parse_number",
    "validate_listing",
    "validate_whitelist_request",
]
