import pytest

from azfunc_mcp.entra import ApplicationRegistration, ApplicationRegistrationRequest
from azfunc_mcp.models import (
    AppInsightsRef,
    AuthParams,
    FeatureFlags,
    Identity,
    StorageEndpoints,
)
from azfunc_mcp.naming import ResourceNames
from azfunc_mcp.parameters import DeploymentParameters
from azfunc_mcp.provisioning import ProvisionedResources

DEPLOYMENT_ENV_VARS = [
    "AZURE_ENV_NAME",
    "AZURE_LOCATION",
    "AZURE_SUBSCRIPTION_ID",
    "AZURE_PRINCIPAL_ID",
    "RESOURCE_GROUP_NAME",
    "API_SERVICE_NAME",
    "API_USER_ASSIGNED_IDENTITY_NAME",
    "APPLICATION_INSIGHTS_NAME",
    "LOG_ANALYTICS_NAME",
    "STORAGE_ACCOUNT_NAME",
    "PRE_AUTHORIZED_CLIENT_IDS",
    "DELEGATED_PERMISSIONS",
    "TOKEN_EXCHANGE_AUDIENCE",
    "EXTRA_REDIRECT_URIS",
    "VNET_ENABLED",
    "ENABLE_BLOB",
    "ENABLE_QUEUE",
    "ENABLE_TABLE",
    "ALLOW_USER_IDENTITY_PRINCIPAL",
    "APP_SETTINGS",
    "AZFUNC_MCP_LOGIN_ENDPOINT",
]


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Keep the developer's azd environment and .env file out of the tests."""
    for name in [*DEPLOYMENT_ENV_VARS, *DeploymentParameters.model_fields]:
        monkeypatch.delenv(name, raising=False)
        monkeypatch.delenv(name.lower(), raising=False)
        monkeypatch.delenv(name.upper(), raising=False)
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def flags():
    return FeatureFlags()


@pytest.fixture
def identity():
    return Identity(
        resource_id="/subscriptions/sub/resourceGroups/rg-dev/providers/Microsoft.ManagedIdentity/userAssignedIdentities/id-api",
        client_id="mi-client-id",
        principal_id="mi-principal-id",
    )


@pytest.fixture
def storage():
    return StorageEndpoints.for_account("stabc123")


@pytest.fixture
def app_insights():
    return AppInsightsRef(
        connection_string="InstrumentationKey=ikey;IngestionEndpoint=https://eastus2.in.applicationinsights.azure.com/"
    )


@pytest.fixture
def auth():
    return AuthParams(
        client_id="app-client-id",
        tenant_id="tenant-id",
        identifier_uri="api://mcp-app-xyz",
        pre_authorized_client_ids="client-a, client-b",
    )


class InMemoryDirectory:
    """Directory service that registers each unique name once."""

    def __init__(self):
        self.apps: dict[str, ApplicationRegistration] = {}
        self.requests: list[ApplicationRegistrationRequest] = []

    def register_application(
        self, request: ApplicationRegistrationRequest
    ) -> ApplicationRegistration:
        self.requests.append(request)
        if request.unique_name not in self.apps:
            n = len(self.apps) + 1
            self.apps[request.unique_name] = ApplicationRegistration(
                app_id=f"app-client-{n}",
                object_id=f"app-object-{n}",
                service_principal_id=f"sp-{n}",
                identifier_uri=request.identifier_uri,
                tenant_id="tenant-id",
            )
        return self.apps[request.unique_name]


class RecordingEngine:
    """Provisioning engine that returns fixed outputs and records configuration."""

    def __init__(self, identity: Identity, app_insights: AppInsightsRef | None = None):
        self.identity = identity
        self.app_insights = app_insights
        self.provisioned: list[ResourceNames] = []
        self.configured: list[tuple[str, dict, dict | None]] = []

    def provision_infrastructure(
        self, names: ResourceNames, params: DeploymentParameters
    ) -> ProvisionedResources:
        self.provisioned.append(names)
        return ProvisionedResources(
            identity=self.identity,
            storage=StorageEndpoints.for_account(names.storage_account),
            app_insights=self.app_insights,
            function_app_resource_id=f"/subscriptions/sub/resourceGroups/{names.resource_group}/providers/Microsoft.Web/sites/{names.function_app}",
        )

    def configure_function_app(self, name, app_settings, auth_policy):
        self.configured.append((name, dict(app_settings), auth_policy))


@pytest.fixture
def directory():
    return InMemoryDirectory()


@pytest.fixture
def engine(identity, app_insights):
    return RecordingEngine(identity, app_insights)
