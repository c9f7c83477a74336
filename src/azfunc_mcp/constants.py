"""Fixed values shared across the deployment planner.

Anything that is a platform contract rather than a computed value lives here
so that a change touches a single place.
"""

from __future__ import annotations

from typing import Final

# Regions that offer the Flex Consumption plan
ALLOWED_LOCATIONS: Final[tuple[str, ...]] = (
    "australiaeast",
    "australiasoutheast",
    "brazilsouth",
    "canadacentral",
    "centralindia",
    "centralus",
    "eastasia",
    "eastus",
    "eastus2",
    "eastus2euap",
    "francecentral",
    "germanywestcentral",
    "italynorth",
    "japaneast",
    "koreacentral",
    "northcentralus",
    "northeurope",
    "norwayeast",
    "southafricanorth",
    "southcentralus",
    "southeastasia",
    "southindia",
    "spaincentral",
    "swedencentral",
    "uaenorth",
    "uksouth",
    "ukwest",
    "westcentralus",
    "westeurope",
    "westus",
    "westus2",
    "westus3",
)

# Resource name prefixes
ABBREVIATIONS: Final[dict[str, str]] = {
    "resource_group": "rg-",
    "function_app": "func-",
    "storage_account": "st",
    "user_assigned_identity": "id-",
    "application_insights": "appi-",
    "log_analytics": "log-",
    "app_service_plan": "plan-",
}

RESOURCE_TOKEN_LENGTH: Final = 13
STORAGE_ACCOUNT_NAME_MAX_LENGTH: Final = 24
CONTENT_SHARE_MAX_LENGTH: Final = 63

# Application setting names
STORAGE_CREDENTIAL_SETTING: Final = "AzureWebJobsStorage__credential"
STORAGE_CLIENT_ID_SETTING: Final = "AzureWebJobsStorage__clientId"
STORAGE_ACCOUNT_NAME_SETTING: Final = "AzureWebJobsStorage__accountName"
STORAGE_BLOB_URI_SETTING: Final = "AzureWebJobsStorage__blobServiceUri"
STORAGE_QUEUE_URI_SETTING: Final = "AzureWebJobsStorage__queueServiceUri"
STORAGE_TABLE_URI_SETTING: Final = "AzureWebJobsStorage__tableServiceUri"
RUNTIME_CLIENT_ID_SETTING: Final = "AZURE_CLIENT_ID"
CONTENT_SHARE_SETTING: Final = "WEBSITE_CONTENTSHARE"
APPINSIGHTS_AUTH_STRING_SETTING: Final = "APPLICATIONINSIGHTS_AUTHENTICATION_STRING"
APPINSIGHTS_CONNECTION_STRING_SETTING: Final = "APPLICATIONINSIGHTS_CONNECTION_STRING"
AUTH_DEFAULT_SCOPES_SETTING: Final = "WEBSITE_AUTH_PRM_DEFAULT_WITH_SCOPES"
AUTH_FIC_CLIENT_ID_SETTING: Final = "OVERRIDE_USE_MI_FIC_ASSERTION_CLIENTID"
AUTH_ALLOWED_TENANTS_SETTING: Final = "WEBSITE_AUTH_AAD_ALLOWED_TENANTS"
TOKEN_EXCHANGE_AUDIENCE_SETTING: Final = "TokenExchangeAudience"

STORAGE_CREDENTIAL_MODE: Final = "managedidentity"
APPINSIGHTS_AUTHORIZATION: Final = "AAD"

# Order in which partial settings maps are folded; later blocks win
SETTINGS_MERGE_ORDER: Final[tuple[str, ...]] = (
    "passthrough",
    "storage_endpoints",
    "baseline",
    "app_insights",
    "auth",
    "token_exchange",
)

# Authentication policy (authsettingsV2) constants
AUTH_RUNTIME_VERSION: Final = "~1"
AUTH_API_PREFIX: Final = "/.auth"
AUTH_LOGOUT_ENDPOINT: Final = "/.auth/logout"
AUTH_CALLBACK_PATH: Final = "/.auth/login/aad/callback"
UNAUTHENTICATED_CLIENT_ACTION: Final = "Return401"
FORWARD_PROXY_CONVENTION: Final = "NoProxy"
TOKEN_REFRESH_EXTENSION_HOURS: Final = 72
COOKIE_EXPIRATION_CONVENTION: Final = "FixedTime"
COOKIE_EXPIRATION: Final = "08:00:00"
NONCE_EXPIRATION: Final = "00:05:00"

# Entra ID
DEFAULT_LOGIN_ENDPOINT: Final = "https://login.microsoftonline.com/"
USER_IMPERSONATION_SCOPE: Final = "user_impersonation"
DEFAULT_DELEGATED_PERMISSIONS: Final[tuple[str, ...]] = ("User.Read",)
MICROSOFT_GRAPH_APP_ID: Final = "00000003-0000-0000-c000-000000000000"
IDENTIFIER_URI_SCHEME: Final = "api://"

# Storage data-plane roles granted per enabled service
STORAGE_ROLES: Final[dict[str, str]] = {
    "blob": "Storage Blob Data Owner",
    "queue": "Storage Queue Data Contributor",
    "table": "Storage Table Data Contributor",
}
MONITORING_ROLE: Final = "Monitoring Metrics Publisher"
