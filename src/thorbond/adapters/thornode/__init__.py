"""Public interface for the THORNode bond-state adapter."""

from __future__ import annotations

from .client import ThornodeBondOracle
from .schema import BondProvider, NodeResponse

__all__ = ["BondProvider", "NodeResponse", "ThornodeBondOracle"]
