"""Inputs of the configuration composer."""

from __future__ import annotations

from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator

from azfunc_mcp.utilities.parsing import parse_client_ids

SettingsMap: TypeAlias = dict[str, str]


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class FeatureFlags(_Frozen):
    """Which storage services the function host uses, and debug access."""

    enable_blob: bool = True
    enable_queue: bool = True
    enable_table: bool = False
    allow_user_identity_principal: bool = False


class Identity(_Frozen):
    """The user-assigned managed identity bound to the function app."""

    resource_id: str = ""
    client_id: str = ""
    principal_id: str = ""


class StorageEndpoints(_Frozen):
    """Primary endpoints of the host storage account.

    All three service URIs are always supplied; whether they reach the
    settings map is decided by `FeatureFlags`.
    """

    account_name: str = ""
    blob: str = ""
    queue: str = ""
    table: str = ""

    @classmethod
    def for_account(cls, account_name: str, suffix: str = "core.windows.net") -> StorageEndpoints:
        """Build the public endpoints of a storage account from its name."""
        return cls(
            account_name=account_name,
            blob=f"https://{account_name}.blob.{suffix}/",
            queue=f"https://{account_name}.queue.{suffix}/",
            table=f"https://{account_name}.table.{suffix}/",
        )


class AppInsightsRef(_Frozen):
    """Reference to the Application Insights component."""

    connection_string: str


class AuthParams(_Frozen):
    """Entra ID application the function app authenticates callers against."""

    client_id: str = ""
    tenant_id: str = ""
    identifier_uri: str = ""
    pre_authorized_client_ids: list[str] = Field(default_factory=list)

    @field_validator("pre_authorized_client_ids", mode="before")
    @classmethod
    def _parse_client_ids(cls, v: object) -> list[str]:
        return parse_client_ids(v)

    @property
    def enabled(self) -> bool:
        """Authentication is configured only when client and tenant are both known."""
        return bool(self.client_id and self.tenant_id)
