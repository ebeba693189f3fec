"""Typed configuration produced from a validated connection string."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

SECRET_MASK = "***"

SECRET_OPTION_KEYS = ("password", "clientSecret", "clientId", "tenantId")


class AuthMode(str, Enum):
    """Authentication modes understood by the resolver."""

    SQL_PASSWORD = "sql-password"
    AAD_PASSWORD = "aad-password"
    AAD_SERVICE_PRINCIPAL_SECRET = "aad-service-principal-secret"
    AAD_DEFAULT = "aad-default"

    @property
    def driver_type(self) -> str:
        """Authentication type name used by tedious/mssql style drivers."""

        return _DRIVER_TYPES[self]


_DRIVER_TYPES: dict[AuthMode, str] = {
    AuthMode.SQL_PASSWORD: "default",
    AuthMode.AAD_PASSWORD: "azure-active-directory-password",
    AuthMode.AAD_SERVICE_PRINCIPAL_SECRET: "azure-active-directory-service-principal-secret",
    AuthMode.AAD_DEFAULT: "azure-active-directory-default",
}


class AuthenticationConfig(BaseModel):
    """Authentication block handed to the driver."""

    model_config = ConfigDict(frozen=True)

    type: AuthMode
    options: dict[str, str] = Field(default_factory=dict, repr=False)


class ResolvedConfig(BaseModel):
    """Driver-ready configuration derived from a connection string."""

    model_config = ConfigDict(frozen=True)

    server: str | None = None
    port: int | None = None
    instance_name: str | None = None
    database: str
    user: str | None = None
    password: str | None = Field(default=None, repr=False)
    authentication: AuthenticationConfig | None = None

    def masked(self, mask: str = SECRET_MASK) -> ResolvedConfig:
        """Return a copy with every secret value replaced by ``mask``."""

        updates: dict[str, object] = {}
        if self.password is not None:
            updates["password"] = mask
        if self.authentication is not None:
            options = {
                key: mask if key in SECRET_OPTION_KEYS else value
                for key, value in self.authentication.options.items()
            }
            updates["authentication"] = self.authentication.model_copy(update={"options": options})
        return self.model_copy(update=updates)

    def to_driver_config(self) -> dict[str, object]:
        """Render the camel-cased mapping consumed by the SQL Server driver."""

        config: dict[str, object] = {}
        if self.server is not None:
            config["server"] = self.server
        if self.port is not None:
            config["port"] = self.port
        config["database"] = self.database
        if self.user is not None:
            config["user"] = self.user
        if self.password is not None:
            config["password"] = self.password
        if self.authentication is not None:
            config["authentication"] = {
                "type": self.authentication.type.driver_type,
                "options": dict(self.authentication.options),
            }
        if self.instance_name is not None:
            config["options"] = {"instanceName": self.instance_name}
        return config


__all__ = [
    "AuthMode",
    "AuthenticationConfig",
    "ResolvedConfig",
    "SECRET_MASK",
    "SECRET_OPTION_KEYS",
]
