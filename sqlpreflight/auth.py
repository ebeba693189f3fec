"""Authentication mode resolution and per-mode field requirements."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from .errors import MissingRequiredFieldError, UnsupportedAuthenticationTypeError
from .inputs import InputProvider
from .models import AuthMode
from .tokenizer import QUOTE_CHARS

LOG = logging.getLogger(__name__)

AUTH_ALIASES: Mapping[AuthMode, tuple[str, ...]] = {
    AuthMode.SQL_PASSWORD: ("SQL Password", "SQLPassword"),
    AuthMode.AAD_PASSWORD: ("Active Directory Password", "ActiveDirectoryPassword"),
    AuthMode.AAD_SERVICE_PRINCIPAL_SECRET: (
        "Active Directory Service Principal",
        "ActiveDirectoryServicePrincipal",
    ),
    AuthMode.AAD_DEFAULT: ("Active Directory Default", "ActiveDirectoryDefault"),
}


@dataclass(frozen=True, slots=True)
class RequiredField:
    """Connection string field copied into the authentication options."""

    source: str
    option: str
    missing: str


@dataclass(frozen=True, slots=True)
class ModeRequirements:
    """Fields a mode needs, checked in order, and whether pipeline inputs join its options."""

    required: tuple[RequiredField, ...] = ()
    uses_inputs: bool = False


_USER_NAME = RequiredField(source="user", option="userName", missing="user")
_PASSWORD = RequiredField(source="password", option="password", missing="password")
CLIENT_INPUTS = (("client-id", "clientId"), ("tenant-id", "tenantId"))

MODE_REQUIREMENTS: Mapping[AuthMode, ModeRequirements] = {
    AuthMode.SQL_PASSWORD: ModeRequirements(required=(_USER_NAME, _PASSWORD)),
    AuthMode.AAD_PASSWORD: ModeRequirements(required=(_USER_NAME, _PASSWORD), uses_inputs=True),
    AuthMode.AAD_SERVICE_PRINCIPAL_SECRET: ModeRequirements(
        required=(
            RequiredField(source="user", option="clientId", missing="client_id"),
            RequiredField(source="password", option="clientSecret", missing="client_secret"),
        ),
        uses_inputs=True,
    ),
    AuthMode.AAD_DEFAULT: ModeRequirements(),
}


@dataclass(frozen=True, slots=True)
class ResolvedAuthentication:
    """Outcome of resolving the `Authentication` keyword."""

    mode: AuthMode
    options: Mapping[str, str] = field(default_factory=dict)
    explicit: bool = False
    inputs: Mapping[str, str] = field(default_factory=dict)


def _fold(value: str) -> str:
    # All whitespace is dropped, so "Active Directory Password" and "ActiveDirectoryPassword" fold alike.
    stripped = value.strip().strip("".join(QUOTE_CHARS))
    return "".join(stripped.split()).lower()


_ALIAS_LOOKUP: dict[str, AuthMode] = {
    _fold(alias): mode for mode, aliases in AUTH_ALIASES.items() for alias in aliases
}


def normalize_authentication(value: str | None) -> AuthMode:
    """Map an `Authentication` value onto its mode; absent or blank means SQL password."""

    if value is None:
        return AuthMode.SQL_PASSWORD
    folded = _fold(value)
    if not folded:
        return AuthMode.SQL_PASSWORD
    try:
        return _ALIAS_LOOKUP[folded]
    except KeyError:
        raise UnsupportedAuthenticationTypeError(value) from None


def resolve_authentication(pairs: Mapping[str, str], inputs: InputProvider) -> ResolvedAuthentication:
    """Resolve the mode for ``pairs`` and collect its options.

    Required fields are validated before any input is requested so the input
    provider never sees a half-validated configuration.
    """

    literal = pairs.get("authentication")
    mode = normalize_authentication(literal)
    requirements = MODE_REQUIREMENTS[mode]
    options: dict[str, str] = {}
    for required in requirements.required:
        value = pairs.get(required.source)
        if not value:
            raise MissingRequiredFieldError(required.missing)
        options[required.option] = value
    supplied: dict[str, str] = {}
    for name, option in CLIENT_INPUTS:
        value = inputs.get_input(name)
        if value:
            supplied[option] = value
    if requirements.uses_inputs:
        for option, value in supplied.items():
            # Values taken from the connection string win over pipeline inputs.
            options.setdefault(option, value)
    explicit = literal is not None and bool(_fold(literal))
    LOG.debug(
        "Resolved authentication mode",
        extra={"mode": mode.value, "explicit": explicit, "options": sorted(options)},
    )
    return ResolvedAuthentication(mode=mode, options=options, explicit=explicit, inputs=supplied)


__all__ = [
    "AUTH_ALIASES",
    "CLIENT_INPUTS",
    "MODE_REQUIREMENTS",
    "ModeRequirements",
    "RequiredField",
    "ResolvedAuthentication",
    "normalize_authentication",
    "resolve_authentication",
]
