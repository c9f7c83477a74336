"""Deterministic resource names derived from the deployment environment."""

from __future__ import annotations

import base64
import hashlib
import re

from pydantic import BaseModel, ConfigDict

from azfunc_mcp.constants import (
    ABBREVIATIONS,
    CONTENT_SHARE_MAX_LENGTH,
    RESOURCE_TOKEN_LENGTH,
    STORAGE_ACCOUNT_NAME_MAX_LENGTH,
)
from azfunc_mcp.parameters import DeploymentParameters


def resource_token(*parts: str, length: int = RESOURCE_TOKEN_LENGTH) -> str:
    """Stable, lower-case alphanumeric token for the given parts.

    The same parts always yield the same token, so re-planning an
    environment targets the same resources.
    """
    digest = hashlib.sha256("|".join(parts).encode()).digest()
    return base64.b32encode(digest).decode().lower()[:length]


def _storage_account_name(name: str) -> str:
    return re.sub(r"[^a-z0-9]", "", name.lower())[:STORAGE_ACCOUNT_NAME_MAX_LENGTH]


class ResourceNames(BaseModel):
    """Names of every resource in the deployment."""

    model_config = ConfigDict(frozen=True)

    resource_token: str
    resource_group: str
    function_app: str
    app_service_plan: str
    storage_account: str
    deployment_container: str
    content_share: str
    user_assigned_identity: str
    application_insights: str
    log_analytics: str
    entra_app_unique_name: str

    @property
    def function_app_hostname(self) -> str:
        return f"{self.function_app}.azurewebsites.net"

    @classmethod
    def from_parameters(
        cls, params: DeploymentParameters, subscription_id: str | None = None
    ) -> ResourceNames:
        """Derive names, letting explicit names from ``params`` win."""
        subscription = subscription_id or params.subscription_id
        token = resource_token(subscription, params.environment_name, params.location)
        abbrs = ABBREVIATIONS

        function_app = params.api_service_name or f"{abbrs['function_app']}api-{token}"
        container_token = resource_token(function_app, token, length=7)

        return cls(
            resource_token=token,
            resource_group=params.resource_group_name
            or f"{abbrs['resource_group']}{params.environment_name}",
            function_app=function_app,
            app_service_plan=f"{abbrs['app_service_plan']}{token}",
            storage_account=_storage_account_name(
                params.storage_account_name or f"{abbrs['storage_account']}{token}"
            ),
            deployment_container=f"app-package-{function_app[:32]}-{container_token}",
            content_share=function_app.lower()[:CONTENT_SHARE_MAX_LENGTH],
            user_assigned_identity=params.api_user_assigned_identity_name
            or f"{abbrs['user_assigned_identity']}api-{token}",
            application_insights=params.application_insights_name
            or f"{abbrs['application_insights']}{token}",
            log_analytics=params.log_analytics_name
            or f"{abbrs['log_analytics']}{token}",
            entra_app_unique_name=f"mcp-app-{token}",
        )
