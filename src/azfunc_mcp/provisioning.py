"""Contract with the provisioning engine that owns resource lifecycle."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from azfunc_mcp.constants import MONITORING_ROLE, STORAGE_ROLES
from azfunc_mcp.models import (
    AppInsightsRef,
    FeatureFlags,
    Identity,
    SettingsMap,
    StorageEndpoints,
)
from azfunc_mcp.naming import ResourceNames
from azfunc_mcp.parameters import DeploymentParameters


class ProvisionedResources(BaseModel):
    """Output attributes of the infrastructure the function app depends on."""

    model_config = ConfigDict(frozen=True)

    identity: Identity
    storage: StorageEndpoints
    app_insights: AppInsightsRef | None = None
    function_app_resource_id: str = ""
    function_app_hostname: str = ""


@runtime_checkable
class ProvisioningEngine(Protocol):
    """Applies declared resources idempotently.

    Errors raised by the engine are not retried or translated here.
    """

    def provision_infrastructure(
        self, names: ResourceNames, params: DeploymentParameters
    ) -> ProvisionedResources: ...

    def configure_function_app(
        self,
        name: str,
        app_settings: SettingsMap,
        auth_policy: dict[str, Any] | None,
    ) -> None: ...


class AccessGrant(BaseModel):
    """A role the deployment asks the engine to grant to a principal."""

    model_config = ConfigDict(frozen=True)

    principal_id: str
    principal_type: str
    role: str


def access_grants(
    flags: FeatureFlags, identity: Identity, principal_id: str = ""
) -> list[AccessGrant]:
    """Roles for the managed identity and, when allowed, the debug principal.

    Storage roles follow the enabled storage services; the monitoring role
    lets the identity publish telemetry.
    """
    enabled = {
        "blob": flags.enable_blob,
        "queue": flags.enable_queue,
        "table": flags.enable_table,
    }
    roles = [STORAGE_ROLES[service] for service, on in enabled.items() if on]
    roles.append(MONITORING_ROLE)

    principals: list[tuple[str, str]] = []
    if identity.principal_id:
        principals.append((identity.principal_id, "ServicePrincipal"))
    if flags.allow_user_identity_principal and principal_id:
        principals.append((principal_id, "User"))

    return [
        AccessGrant(principal_id=pid, principal_type=ptype, role=role)
        for pid, ptype in principals
        for role in roles
    ]
