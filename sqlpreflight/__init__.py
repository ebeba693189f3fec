"""Connection string validation for SQL Server pipeline steps."""

from __future__ import annotations

from .auth import AUTH_ALIASES, ResolvedAuthentication, normalize_authentication, resolve_authentication
from .config import SqlConnectionConfig
from .errors import (
    ConnectionStringError,
    MalformedConnectionStringError,
    MissingRequiredFieldError,
    UnsupportedAuthenticationTypeError,
)
from .inputs import EnvironmentInputProvider, InputProvider, StaticInputProvider
from .models import AuthenticationConfig, AuthMode, ResolvedConfig
from .redaction import CompositeMasker, LogRedactionFilter, SecretMasker, WorkflowCommandMasker
from .tokenizer import ConnectionStringPair, mask_connection_string, parse_connection_string, tokenize

__version__ = "0.1.0"

__all__ = [
    "AUTH_ALIASES",
    "AuthMode",
    "AuthenticationConfig",
    "CompositeMasker",
    "ConnectionStringError",
    "ConnectionStringPair",
    "EnvironmentInputProvider",
    "InputProvider",
    "LogRedactionFilter",
    "MalformedConnectionStringError",
    "MissingRequiredFieldError",
    "ResolvedAuthentication",
    "ResolvedConfig",
    "SecretMasker",
    "SqlConnectionConfig",
    "StaticInputProvider",
    "UnsupportedAuthenticationTypeError",
    "WorkflowCommandMasker",
    "__version__",
    "mask_connection_string",
    "normalize_authentication",
    "parse_connection_string",
    "resolve_authentication",
    "tokenize",
]
