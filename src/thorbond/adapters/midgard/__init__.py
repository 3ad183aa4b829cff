"""Public interface for the Midgard indexer adapter."""

from __future__ import annotations

from .client import MidgardActionFetcher
from .schema import ActionsResponse, MidgardAction
from .translator import parse_action

__all__ = [
    "ActionsResponse",
    "MidgardAction",
    "MidgardActionFetcher",
    "parse_action",
]
