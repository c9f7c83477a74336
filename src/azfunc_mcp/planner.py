"""Deployment planning: from parameters to settings, policy and outputs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict

import azfunc_mcp
from azfunc_mcp.auth_policy import AuthPolicy
from azfunc_mcp.composer import compose
from azfunc_mcp.entra import (
    ApplicationRegistration,
    DirectoryService,
    build_registration_request,
    redirect_uris,
)
from azfunc_mcp.exceptions import InvalidInput
from azfunc_mcp.models import AuthParams, SettingsMap
from azfunc_mcp.naming import ResourceNames
from azfunc_mcp.parameters import DeploymentParameters
from azfunc_mcp.provisioning import (
    AccessGrant,
    ProvisionedResources,
    ProvisioningEngine,
    access_grants,
)
from azfunc_mcp.utilities.logging import get_logger

logger = get_logger(__name__)


class DeploymentOutputs(BaseModel):
    """Values exposed to the deployment caller and downstream tooling."""

    model_config = ConfigDict(frozen=True)

    resource_group: str
    function_app_name: str
    function_app_hostname: str
    function_app_resource_id: str = ""
    storage_account_name: str
    identity_client_id: str
    identity_resource_id: str = ""
    app_insights_connection_string: str = ""
    tenant_id: str = ""
    application_id: str = ""
    application_object_id: str = ""
    service_principal_id: str = ""
    identifier_uri: str = ""
    auth_enabled: bool = False
    configured_scopes: str = ""
    pre_authorized_client_ids: str = ""
    redirect_uris: tuple[str, ...] = ()

    def to_env(self) -> dict[str, str]:
        """Outputs keyed the way azd exposes them to hooks and `.env` files."""
        return {
            "AZURE_RESOURCE_GROUP": self.resource_group,
            "AZURE_FUNCTION_APP_NAME": self.function_app_name,
            "SERVICE_API_NAME": self.function_app_name,
            "SERVICE_API_URI": f"https://{self.function_app_hostname}",
            "AZURE_FUNCTION_APP_RESOURCE_ID": self.function_app_resource_id,
            "AZURE_STORAGE_ACCOUNT_NAME": self.storage_account_name,
            "AZURE_CLIENT_ID": self.identity_client_id,
            "AZURE_USER_ASSIGNED_IDENTITY_ID": self.identity_resource_id,
            "APPLICATIONINSIGHTS_CONNECTION_STRING": self.app_insights_connection_string,
            "AZURE_TENANT_ID": self.tenant_id,
            "ENTRA_APPLICATION_ID": self.application_id,
            "ENTRA_APPLICATION_OBJECT_ID": self.application_object_id,
            "ENTRA_SERVICE_PRINCIPAL_ID": self.service_principal_id,
            "ENTRA_IDENTIFIER_URI": self.identifier_uri,
            "AUTH_ENABLED": str(self.auth_enabled).lower(),
            "CONFIGURED_SCOPES": self.configured_scopes,
            "PRE_AUTHORIZED_CLIENT_IDS": self.pre_authorized_client_ids,
            "REDIRECT_URIS": ",".join(self.redirect_uris),
        }


@dataclass(frozen=True)
class DeploymentPlan:
    names: ResourceNames
    app_settings: SettingsMap
    auth_policy: AuthPolicy | None
    outputs: DeploymentOutputs
    access_grants: list[AccessGrant] = field(default_factory=list)
    storage_public_network_access: str = "Enabled"

    @property
    def auth_policy_document(self) -> dict[str, Any] | None:
        return self.auth_policy.to_document() if self.auth_policy else None


def auth_params_for(
    params: DeploymentParameters, registration: ApplicationRegistration | None
) -> AuthParams | None:
    if registration is None:
        return None
    return AuthParams(
        client_id=registration.app_id,
        tenant_id=registration.tenant_id,
        identifier_uri=registration.identifier_uri,
        pre_authorized_client_ids=params.parsed_pre_authorized_client_ids,
    )


def plan_deployment(
    params: DeploymentParameters,
    names: ResourceNames,
    resources: ProvisionedResources,
    registration: ApplicationRegistration | None = None,
    *,
    login_endpoint: str | None = None,
) -> DeploymentPlan:
    """Compose the function app configuration and the deployment outputs.

    Raises:
        InvalidInput: if a required identifier is missing
    """
    composition = compose(
        params.flags,
        resources.identity,
        resources.storage,
        resources.app_insights,
        auth_params_for(params, registration),
        content_share=names.content_share,
        app_settings=params.app_settings,
        token_exchange_audience=params.token_exchange_audience,
        login_endpoint=login_endpoint or azfunc_mcp.settings.login_endpoint,
    )

    outputs = DeploymentOutputs(
        resource_group=names.resource_group,
        function_app_name=names.function_app,
        function_app_hostname=resources.function_app_hostname
        or names.function_app_hostname,
        function_app_resource_id=resources.function_app_resource_id,
        storage_account_name=resources.storage.account_name,
        identity_client_id=resources.identity.client_id,
        identity_resource_id=resources.identity.resource_id,
        app_insights_connection_string=resources.app_insights.connection_string
        if resources.app_insights
        else "",
        tenant_id=registration.tenant_id if registration else "",
        application_id=registration.app_id if registration else "",
        application_object_id=registration.object_id if registration else "",
        service_principal_id=registration.service_principal_id if registration else "",
        identifier_uri=registration.identifier_uri if registration else "",
        auth_enabled=composition.auth_enabled,
        configured_scopes=",".join(params.delegated_permissions),
        pre_authorized_client_ids=params.pre_authorized_client_ids,
        redirect_uris=tuple(redirect_uris(names, params.extra_redirect_uris)),
    )

    return DeploymentPlan(
        names=names,
        app_settings=composition.app_settings,
        auth_policy=composition.auth_policy,
        outputs=outputs,
        access_grants=access_grants(
            params.flags, resources.identity, params.principal_id
        ),
        storage_public_network_access="Disabled" if params.vnet_enabled else "Enabled",
    )


def deploy(
    params: DeploymentParameters,
    engine: ProvisioningEngine,
    directory: DirectoryService | None = None,
    *,
    subscription_id: str | None = None,
    login_endpoint: str | None = None,
) -> DeploymentPlan:
    """Register, provision and configure the MCP function app.

    Everything that can be checked from the parameters alone is checked
    before the first collaborator call, so a bad input leaves no partial
    deployment behind.
    """
    names = ResourceNames.from_parameters(params, subscription_id)
    if not names.storage_account:
        raise InvalidInput("storage account name resolves to an empty string")
    if not names.content_share:
        raise InvalidInput("content share name resolves to an empty string")

    logger.info(
        "Planning deployment of %s into %s (%s)",
        names.function_app,
        names.resource_group,
        params.location,
    )

    registration = None
    if directory is not None:
        request = build_registration_request(params, names)
        registration = directory.register_application(request)
        logger.info(
            "Registered Entra application %s (%s)",
            request.unique_name,
            registration.app_id,
        )

    resources = engine.provision_infrastructure(names, params)
    plan = plan_deployment(
        params, names, resources, registration, login_endpoint=login_endpoint
    )

    engine.configure_function_app(
        names.function_app, plan.app_settings, plan.auth_policy_document
    )
    logger.info(
        "Configured %s with %d settings (auth %s)",
        names.function_app,
        len(plan.app_settings),
        "enabled" if plan.outputs.auth_enabled else "disabled",
    )
    return plan
