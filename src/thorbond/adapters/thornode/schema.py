"""Pydantic models describing the THORNode ``/node/{address}`` payload."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ThornodeBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class BondProvider(ThornodeBaseModel):
    bond_address: str
    bond: float = 0

    @field_validator("bond", mode="before")
    @classmethod
    def _parse_bond(cls, value: float | str | None) -> float:
        if value is None or value == "":
            return 0
        return float(value)


class BondProviders(ThornodeBaseModel):
    providers: list[BondProvider] = Field(default_factory=list)

    @field_validator("providers", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return [] if value is None else value


class NodeResponse(ThornodeBaseModel):
    node_address: str | None = None
    status: str | None = None
    bond_providers: BondProviders = Field(default_factory=BondProviders)

    @field_validator("bond_providers", mode="before")
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return {} if value is None else value

    def find_provider(self, address: str) -> BondProvider | None:
        for provider in self.bond_providers.providers:
            if provider.bond_address == address:
                return provider
        return None
