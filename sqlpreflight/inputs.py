"""Providers for the optional pipeline inputs read during resolution."""

from __future__ import annotations

import os
from typing import Mapping, Protocol, runtime_checkable


@runtime_checkable
class InputProvider(Protocol):
    """Source of named step inputs; an empty string means the input is unset."""

    def get_input(self, name: str) -> str:
        """Return the value of ``name`` or ``''``."""


def input_variable_name(name: str) -> str:
    """Environment variable a workflow runner uses to expose input ``name``."""

    return f"INPUT_{name.replace(' ', '_').upper()}"


class EnvironmentInputProvider:
    """Reads step inputs from ``INPUT_*`` environment variables."""

    def __init__(self, environ: Mapping[str, str] | None = None) -> None:
        self._environ = environ if environ is not None else os.environ

    def get_input(self, name: str) -> str:
        return self._environ.get(input_variable_name(name), "").strip()


class StaticInputProvider:
    """Mapping-backed provider used when embedding or testing."""

    def __init__(self, values: Mapping[str, str] | None = None) -> None:
        self._values = dict(values or {})
        self.requested: list[str] = []

    def get_input(self, name: str) -> str:
        self.requested.append(name)
        return self._values.get(name, "")


__all__ = [
    "EnvironmentInputProvider",
    "InputProvider",
    "StaticInputProvider",
    "input_variable_name",
]
