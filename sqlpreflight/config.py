"""Builds validated, driver-ready configuration from a raw connection string."""

from __future__ import annotations

import logging

from .auth import ResolvedAuthentication, resolve_authentication
from .errors import MalformedConnectionStringError, MissingRequiredFieldError
from .inputs import EnvironmentInputProvider, InputProvider
from .models import SECRET_MASK, AuthenticationConfig, AuthMode, ResolvedConfig
from .redaction import SecretMasker, WorkflowCommandMasker
from .tokenizer import mask_connection_string, parse_connection_string

LOG = logging.getLogger(__name__)

_SECRET_ORDER = ("clientSecret", "clientId", "tenantId")


class SqlConnectionConfig:
    """Validated view over a SQL Server connection string.

    Construction either succeeds with a complete :class:`ResolvedConfig` or
    raises a :class:`~sqlpreflight.errors.ConnectionStringError`. Secret
    values are handed to ``masker`` only once everything has validated.
    """

    def __init__(
        self,
        connection_string: str,
        *,
        inputs: InputProvider | None = None,
        masker: SecretMasker | None = None,
    ) -> None:
        inputs = inputs if inputs is not None else EnvironmentInputProvider()
        masker = masker if masker is not None else WorkflowCommandMasker()
        pairs = parse_connection_string(connection_string)
        if not pairs.get("database"):
            raise MissingRequiredFieldError("database")
        server = split_server(pairs["server"]) if pairs.get("server") else (None, None, None)
        auth = resolve_authentication(pairs, inputs)
        config = _build_config(pairs, server, auth)
        for secret in _secrets_of(config, auth):
            masker.mark_secret(secret)
        self._connection_string = connection_string
        self._config = config
        self._auth_mode = auth.mode
        LOG.info(
            "Validated connection string",
            extra={"server": config.server, "database": config.database, "mode": auth.mode.value},
        )

    @property
    def connection_string(self) -> str:
        """The connection string exactly as supplied."""

        return self._connection_string

    @property
    def config(self) -> ResolvedConfig:
        return self._config

    @property
    def auth_mode(self) -> AuthMode:
        return self._auth_mode

    @property
    def redacted_connection_string(self) -> str:
        """The connection string with password values masked."""

        return mask_connection_string(self._connection_string, ("password",), SECRET_MASK)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(server={self._config.server!r}, "
            f"database={self._config.database!r}, mode={self._auth_mode.value!r})"
        )


def split_server(value: str) -> tuple[str, int | None, str | None]:
    """Split ``[tcp:]host[\\instance][,port]`` into its parts."""

    host = value.strip()
    if host[:4].lower() == "tcp:":
        host = host[4:]
    port: int | None = None
    if "," in host:
        host, _, port_text = host.partition(",")
        port_text = port_text.strip()
        if not port_text.isdigit():
            raise MalformedConnectionStringError()
        port = int(port_text)
    instance: str | None = None
    if "\\" in host:
        host, _, instance = host.partition("\\")
        instance = instance.strip() or None
    return host.strip(), port, instance


def _build_config(
    pairs: dict[str, str],
    server_parts: tuple[str | None, int | None, str | None],
    auth: ResolvedAuthentication,
) -> ResolvedConfig:
    server, port, instance_name = server_parts
    authentication = None
    if auth.explicit or auth.mode is not AuthMode.SQL_PASSWORD:
        authentication = AuthenticationConfig(type=auth.mode, options=dict(auth.options))
    return ResolvedConfig(
        server=server or None,
        port=port,
        instance_name=instance_name,
        database=pairs["database"],
        user=pairs.get("user"),
        password=pairs.get("password"),
        authentication=authentication,
    )


def _secrets_of(config: ResolvedConfig, auth: ResolvedAuthentication) -> list[str]:
    # Pipeline inputs are secret in every mode, even where they never reach the options.
    options = config.authentication.options if config.authentication is not None else {}
    candidates: list[str | None] = [config.password]
    for key in _SECRET_ORDER:
        candidates.append(options.get(key))
        candidates.append(auth.inputs.get(key))
    secrets: list[str] = []
    for value in candidates:
        if value and value not in secrets:
            secrets.append(value)
    return secrets


__all__ = ["SqlConnectionConfig", "split_server"]
