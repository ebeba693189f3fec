"""Errors raised while validating connection strings."""

from __future__ import annotations

MALFORMED_MESSAGE = (
    "Invalid connection string. A valid connection string is a series of keyword/value pairs "
    "separated by semi-colons. If there are any special characters like quotes or semi-colons "
    "in the keyword value, enclose the value within quotes. Refer to this link for more info on "
    "connection string https://aka.ms/sqlconnectionstring"
)

MISSING_FIELD_MESSAGES: dict[str, str] = {
    "user": "Invalid connection string. Please ensure 'User' or 'User ID' is provided in the connection string.",
    "password": "Invalid connection string. Please ensure 'Password' is provided in the connection string.",
    "database": (
        "Invalid connection string. Please ensure 'Database' or 'Initial Catalog' is provided in the "
        "connection string."
    ),
    "client_id": (
        "Invalid connection string. Please ensure client ID is provided in the 'User' or 'User ID' "
        "field of the connection string."
    ),
    "client_secret": (
        "Invalid connection string. Please ensure client secret is provided in the 'Password' field "
        "of the connection string."
    ),
}


class ConnectionStringError(ValueError):
    """Base error for connection strings that cannot be turned into a config."""


class MalformedConnectionStringError(ConnectionStringError):
    """Raised when the keyword/value grammar is violated."""

    def __init__(self) -> None:
        super().__init__(MALFORMED_MESSAGE)


class MissingRequiredFieldError(ConnectionStringError):
    """Raised when a field required by the authentication mode is absent."""

    def __init__(self, field: str) -> None:
        super().__init__(MISSING_FIELD_MESSAGES[field])
        self.field = field


class UnsupportedAuthenticationTypeError(ConnectionStringError):
    """Raised for an `Authentication` value outside the supported aliases."""

    def __init__(self, literal: str) -> None:
        super().__init__(f"Authentication type '{literal}' is not supported.")
        self.literal = literal


__all__ = [
    "ConnectionStringError",
    "MALFORMED_MESSAGE",
    "MISSING_FIELD_MESSAGES",
    "MalformedConnectionStringError",
    "MissingRequiredFieldError",
    "UnsupportedAuthenticationTypeError",
]
