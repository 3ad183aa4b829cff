"""Errors raised while reading thorbond settings from the environment."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable


class ConfigurationError(RuntimeError):
    """Base class for unusable thorbond settings."""


class MissingConfigurationError(ConfigurationError):
    """One or more required variables (such as ``THORBOND_VIEWER``) are unset or blank."""

    def __init__(self, variables: Iterable[str]) -> None:
        self.variables = tuple(sorted(variables))
        super().__init__(f"Missing configuration for: {', '.join(self.variables)}")


class InvalidConfigurationError(ConfigurationError):
    """A variable is set but its value cannot be used."""

    def __init__(self, variable: str, value: str, expected: str) -> None:
        self.variable = variable
        self.value = value
        super().__init__(f"{variable} must be {expected}, got {value!r}")
