"""Pydantic models describing the Midgard ``/actions`` payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class MidgardBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class NetworkFee(MidgardBaseModel):
    amount: str | None = None
    asset: str | None = None


class SendMetadata(MidgardBaseModel):
    code: str | None = None
    memo: str | None = None
    network_fees: list[NetworkFee] = Field(default_factory=list, alias="networkFees")
    reason: str | None = None


class ActionMetadata(MidgardBaseModel):
    send: SendMetadata | None = None


class MidgardAction(MidgardBaseModel):
    type: str
    date: int
    height: str | None = None
    inputs: list[Any] = Field(default_factory=list, alias="in")
    outputs: list[Any] = Field(default_factory=list, alias="out")
    pools: list[Any] = Field(default_factory=list)
    status: str | None = None
    metadata: ActionMetadata = Field(default_factory=ActionMetadata)

    @field_validator("date", mode="before")
    @classmethod
    def _parse_nanos(cls, value: int | str) -> int:
        return int(value)

    @field_validator("height", mode="before")
    @classmethod
    def _stringify_height(cls, value: object) -> object:
        return str(value) if isinstance(value, int) else value

    @field_validator("metadata", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return {} if value is None else value

    @property
    def memo(self) -> str | None:
        send = self.metadata.send
        return send.memo if send is not None else None


class ActionsResponse(MidgardBaseModel):
    """Envelope of one page. Entries are validated one by one when translated."""

    actions: list[Any] = Field(default_factory=list)
    count: str | None = None

    @field_validator("actions", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return [] if value is None else value
