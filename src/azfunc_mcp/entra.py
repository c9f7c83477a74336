"""Entra ID application registration for the MCP service.

The registration itself is performed by an external directory service; this
module builds the request and defines the contract that service fulfils.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict, Field

from azfunc_mcp.constants import (
    AUTH_CALLBACK_PATH,
    IDENTIFIER_URI_SCHEME,
    MICROSOFT_GRAPH_APP_ID,
    USER_IMPERSONATION_SCOPE,
)
from azfunc_mcp.naming import ResourceNames
from azfunc_mcp.parameters import DeploymentParameters
from azfunc_mcp.utilities.logging import get_logger
from azfunc_mcp.utilities.parsing import unique

logger = get_logger(__name__)


class ExposedScope(BaseModel):
    """An OAuth2 permission scope the application exposes."""

    model_config = ConfigDict(frozen=True)

    value: str
    admin_consent_display_name: str
    admin_consent_description: str
    user_consent_display_name: str
    user_consent_description: str


class RequiredResourceAccess(BaseModel):
    """Delegated permissions the application requests on another resource."""

    model_config = ConfigDict(frozen=True)

    resource_app_id: str
    scopes: tuple[str, ...]


class ApplicationRegistrationRequest(BaseModel):
    """Everything the directory needs to create or update the registration."""

    model_config = ConfigDict(frozen=True)

    display_name: str
    unique_name: str
    identifier_uri: str
    redirect_uris: tuple[str, ...]
    exposed_scopes: tuple[ExposedScope, ...]
    pre_authorized_client_ids: tuple[str, ...] = ()
    required_resource_access: tuple[RequiredResourceAccess, ...] = ()


class ApplicationRegistration(BaseModel):
    """Identifiers the directory returns for a registration."""

    model_config = ConfigDict(frozen=True)

    app_id: str
    object_id: str
    service_principal_id: str
    identifier_uri: str
    tenant_id: str = Field(description="Directory (tenant) the application lives in")


@runtime_checkable
class DirectoryService(Protocol):
    """Identity directory that owns application registrations.

    Re-registering with the same ``unique_name`` must update the existing
    application rather than create a second one.
    """

    def register_application(
        self, request: ApplicationRegistrationRequest
    ) -> ApplicationRegistration: ...


def redirect_uris(names: ResourceNames, extra: list[str] | None = None) -> list[str]:
    """Redirect URIs for the function app's built-in authentication callback."""
    callback = f"https://{names.function_app_hostname}{AUTH_CALLBACK_PATH}"
    return unique([callback, *(extra or [])])


def user_impersonation_scope(display_name: str) -> ExposedScope:
    return ExposedScope(
        value=USER_IMPERSONATION_SCOPE,
        admin_consent_display_name=f"Access {display_name}",
        admin_consent_description=(
            f"Allows the application to access {display_name} on behalf of the signed-in user."
        ),
        user_consent_display_name=f"Access {display_name}",
        user_consent_description=(
            f"Allows the application to access {display_name} on your behalf."
        ),
    )


def build_registration_request(
    params: DeploymentParameters, names: ResourceNames
) -> ApplicationRegistrationRequest:
    """Build the registration request for the MCP function app."""
    display_name = f"MCP Server ({params.environment_name})"
    request = ApplicationRegistrationRequest(
        display_name=display_name,
        unique_name=names.entra_app_unique_name,
        identifier_uri=f"{IDENTIFIER_URI_SCHEME}{names.entra_app_unique_name}",
        redirect_uris=tuple(redirect_uris(names, params.extra_redirect_uris)),
        exposed_scopes=(user_impersonation_scope(display_name),),
        pre_authorized_client_ids=tuple(
            unique(params.parsed_pre_authorized_client_ids)
        ),
        required_resource_access=(
            RequiredResourceAccess(
                resource_app_id=MICROSOFT_GRAPH_APP_ID,
                scopes=tuple(params.delegated_permissions),
            ),
        ),
    )
    logger.debug(
        "Built registration request for %s with %d redirect URIs",
        request.unique_name,
        len(request.redirect_uris),
    )
    return request
