"""Deployment parameters supplied by the deployment caller.

Values are read from azd-style environment variables (``AZURE_ENV_NAME``,
``AZURE_LOCATION``, ...) and the ``.env`` file, and may be overridden with
explicit keyword arguments to `load_parameters`.
"""

from __future__ import annotations

import json
from typing import Annotated, Any

from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict, SettingsError

from azfunc_mcp.constants import ALLOWED_LOCATIONS, DEFAULT_DELEGATED_PERMISSIONS
from azfunc_mcp.exceptions import InvalidInput
from azfunc_mcp.models import FeatureFlags
from azfunc_mcp.settings import ENV_FILE
from azfunc_mcp.utilities.logging import get_logger
from azfunc_mcp.utilities.parsing import (
    parse_client_ids,
    parse_comma_separated,
    parse_scopes,
)
from azfunc_mcp.utilities.types import NotSet, NotSetT

logger = get_logger(__name__)


def _env(name: str, env_var: str) -> AliasChoices:
    return AliasChoices(name, env_var)


class DeploymentParameters(BaseSettings):
    """Inputs of a deployment plan."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        extra="ignore",
        frozen=True,
    )

    environment_name: str = Field(
        min_length=1,
        max_length=64,
        validation_alias=_env("environment_name", "AZURE_ENV_NAME"),
    )
    location: str = Field(validation_alias=_env("location", "AZURE_LOCATION"))
    subscription_id: str = Field(
        default="", validation_alias=_env("subscription_id", "AZURE_SUBSCRIPTION_ID")
    )

    # Optional explicit resource names; generated from the environment when empty
    resource_group_name: str = Field(
        default="", validation_alias=_env("resource_group_name", "RESOURCE_GROUP_NAME")
    )
    api_service_name: str = Field(
        default="", validation_alias=_env("api_service_name", "API_SERVICE_NAME")
    )
    api_user_assigned_identity_name: str = Field(
        default="",
        validation_alias=_env(
            "api_user_assigned_identity_name", "API_USER_ASSIGNED_IDENTITY_NAME"
        ),
    )
    application_insights_name: str = Field(
        default="",
        validation_alias=_env("application_insights_name", "APPLICATION_INSIGHTS_NAME"),
    )
    log_analytics_name: str = Field(
        default="", validation_alias=_env("log_analytics_name", "LOG_ANALYTICS_NAME")
    )
    storage_account_name: str = Field(
        default="", validation_alias=_env("storage_account_name", "STORAGE_ACCOUNT_NAME")
    )

    # Authentication
    pre_authorized_client_ids: str = Field(
        default="",
        description="Comma-separated client IDs, kept verbatim for the outputs.",
        validation_alias=_env("pre_authorized_client_ids", "PRE_AUTHORIZED_CLIENT_IDS"),
    )
    delegated_permissions: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_DELEGATED_PERMISSIONS),
        validation_alias=_env("delegated_permissions", "DELEGATED_PERMISSIONS"),
    )
    token_exchange_audience: str = Field(
        default="",
        validation_alias=_env("token_exchange_audience", "TOKEN_EXCHANGE_AUDIENCE"),
    )
    extra_redirect_uris: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        validation_alias=_env("extra_redirect_uris", "EXTRA_REDIRECT_URIS"),
    )

    # Networking and access
    vnet_enabled: bool = Field(
        default=False, validation_alias=_env("vnet_enabled", "VNET_ENABLED")
    )
    principal_id: str = Field(
        default="", validation_alias=_env("principal_id", "AZURE_PRINCIPAL_ID")
    )

    # Feature flags
    enable_blob: bool = Field(default=True, validation_alias=_env("enable_blob", "ENABLE_BLOB"))
    enable_queue: bool = Field(
        default=True, validation_alias=_env("enable_queue", "ENABLE_QUEUE")
    )
    enable_table: bool = Field(
        default=False, validation_alias=_env("enable_table", "ENABLE_TABLE")
    )
    allow_user_identity_principal: bool = Field(
        default=False,
        validation_alias=_env(
            "allow_user_identity_principal", "ALLOW_USER_IDENTITY_PRINCIPAL"
        ),
    )

    app_settings: Annotated[dict[str, str], NoDecode] = Field(
        default_factory=dict,
        description="Passthrough application settings; computed settings win on collision.",
        validation_alias=_env("app_settings", "APP_SETTINGS"),
    )

    @field_validator("environment_name", mode="after")
    @classmethod
    def _strip_environment_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("environment_name must not be blank")
        return v

    @field_validator("location", mode="after")
    @classmethod
    def _validate_location(cls, v: str) -> str:
        normalized = v.strip().lower()
        if normalized not in ALLOWED_LOCATIONS:
            raise ValueError(
                f"location {v!r} is not supported; choose one of: "
                + ", ".join(ALLOWED_LOCATIONS)
            )
        return normalized

    @field_validator("delegated_permissions", mode="before")
    @classmethod
    def _parse_delegated_permissions(cls, v: object) -> list[str]:
        scopes = parse_scopes(v)
        return scopes if scopes else list(DEFAULT_DELEGATED_PERMISSIONS)

    @field_validator("extra_redirect_uris", mode="before")
    @classmethod
    def _parse_redirect_uris(cls, v: object) -> list[str]:
        return parse_comma_separated(v)

    @field_validator("app_settings", mode="before")
    @classmethod
    def _parse_app_settings(cls, v: object) -> object:
        if not isinstance(v, str):
            return v
        if not v.strip():
            return {}
        try:
            return json.loads(v)
        except json.JSONDecodeError as e:
            raise ValueError(f"app_settings must be a JSON object: {e}") from e

    @property
    def parsed_pre_authorized_client_ids(self) -> list[str]:
        return parse_client_ids(self.pre_authorized_client_ids)

    @property
    def flags(self) -> FeatureFlags:
        return FeatureFlags(
            enable_blob=self.enable_blob,
            enable_queue=self.enable_queue,
            enable_table=self.enable_table,
            allow_user_identity_principal=self.allow_user_identity_principal,
        )


def load_parameters(
    *,
    environment_name: str | NotSetT = NotSet,
    location: str | NotSetT = NotSet,
    subscription_id: str | NotSetT = NotSet,
    pre_authorized_client_ids: str | NotSetT = NotSet,
    delegated_permissions: list[str] | str | NotSetT = NotSet,
    token_exchange_audience: str | NotSetT = NotSet,
    vnet_enabled: bool | NotSetT = NotSet,
    principal_id: str | NotSetT = NotSet,
    **overrides: Any,
) -> DeploymentParameters:
    """Load deployment parameters from the environment plus explicit overrides.

    Arguments left as ``NotSet`` fall back to the environment. Any other
    field of `DeploymentParameters` may be passed through ``overrides``.

    Raises:
        InvalidInput: if a parameter is missing or outside its allowed set
    """
    values = {
        k: v
        for k, v in {
            "environment_name": environment_name,
            "location": location,
            "subscription_id": subscription_id,
            "pre_authorized_client_ids": pre_authorized_client_ids,
            "delegated_permissions": delegated_permissions,
            "token_exchange_audience": token_exchange_audience,
            "vnet_enabled": vnet_enabled,
            "principal_id": principal_id,
            **overrides,
        }.items()
        if v is not NotSet
    }

    try:
        params = DeploymentParameters(**values)
    except ValidationError as e:
        raise InvalidInput(_describe_validation_error(e)) from e
    except SettingsError as e:
        raise InvalidInput(f"Invalid deployment parameters - {e}") from e

    logger.info(
        "Loaded deployment parameters for environment %s in %s",
        params.environment_name,
        params.location,
    )
    return params


def _describe_validation_error(error: ValidationError) -> str:
    problems = []
    for err in error.errors():
        field = ".".join(str(part) for part in err["loc"]) or "parameters"
        problems.append(f"{field}: {err['msg']}")
    return "Invalid deployment parameters - " + "; ".join(problems)
