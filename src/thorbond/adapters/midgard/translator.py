"""Translate Midgard payloads into domain actions."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from thorbond.domain.model import Action

from .schema import MidgardAction

MidgardActionInput = MidgardAction | Mapping[str, Any]


def parse_action(payload: MidgardActionInput) -> Action:
    """Build an :class:`Action`, lifting the memo out of ``metadata.send.memo``."""

    model = payload if isinstance(payload, MidgardAction) else MidgardAction.model_validate(payload)
    return Action(
        kind=model.type,
        timestamp_nanos=model.date,
        memo=model.memo,
        height=model.height,
        inputs=tuple(model.inputs),
        outputs=tuple(model.outputs),
        pools=tuple(model.pools),
        status=model.status,
        metadata=model.metadata.model_dump(by_alias=True, exclude_none=True),
    )
