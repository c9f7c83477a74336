"""Application-settings composition for the MCP function app.

Each conditional block below is a pure function returning a partial settings
map, empty when its prerequisites are not met. `compose` folds the blocks in
`SETTINGS_MERGE_ORDER`, later blocks overriding earlier ones, so that values
computed here always win over caller-supplied passthrough settings.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass

from azfunc_mcp.auth_policy import AuthPolicy, build_auth_policy
from azfunc_mcp.constants import (
    APPINSIGHTS_AUTH_STRING_SETTING,
    APPINSIGHTS_AUTHORIZATION,
    APPINSIGHTS_CONNECTION_STRING_SETTING,
    AUTH_ALLOWED_TENANTS_SETTING,
    AUTH_DEFAULT_SCOPES_SETTING,
    AUTH_FIC_CLIENT_ID_SETTING,
    CONTENT_SHARE_SETTING,
    DEFAULT_LOGIN_ENDPOINT,
    RUNTIME_CLIENT_ID_SETTING,
    SETTINGS_MERGE_ORDER,
    STORAGE_ACCOUNT_NAME_SETTING,
    STORAGE_BLOB_URI_SETTING,
    STORAGE_CLIENT_ID_SETTING,
    STORAGE_CREDENTIAL_MODE,
    STORAGE_CREDENTIAL_SETTING,
    STORAGE_QUEUE_URI_SETTING,
    STORAGE_TABLE_URI_SETTING,
    TOKEN_EXCHANGE_AUDIENCE_SETTING,
    USER_IMPERSONATION_SCOPE,
)
from azfunc_mcp.exceptions import CompositionError, InvalidInput
from azfunc_mcp.models import (
    AppInsightsRef,
    AuthParams,
    FeatureFlags,
    Identity,
    SettingsMap,
    StorageEndpoints,
)
from azfunc_mcp.utilities.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Composition:
    """Result of a composition pass."""

    app_settings: SettingsMap
    auth_policy: AuthPolicy | None

    @property
    def auth_enabled(self) -> bool:
        return self.auth_policy is not None


def storage_endpoint_settings(flags: FeatureFlags, storage: StorageEndpoints) -> SettingsMap:
    """Service URIs for the storage services the host is allowed to use."""
    settings: SettingsMap = {}
    if flags.enable_blob:
        settings[STORAGE_BLOB_URI_SETTING] = storage.blob
    if flags.enable_queue:
        settings[STORAGE_QUEUE_URI_SETTING] = storage.queue
    if flags.enable_table:
        settings[STORAGE_TABLE_URI_SETTING] = storage.table
    return settings


def baseline_settings(
    identity: Identity, storage: StorageEndpoints, content_share: str
) -> SettingsMap:
    """Settings every deployment carries.

    Raises:
        InvalidInput: if the storage account, identity client ID or content
            share name is empty
    """
    if not storage.account_name:
        raise InvalidInput("storage account name is required")
    if not identity.client_id:
        raise InvalidInput("managed identity client_id is required")
    if not content_share:
        raise InvalidInput("content share name is required")

    return {
        STORAGE_CREDENTIAL_SETTING: STORAGE_CREDENTIAL_MODE,
        STORAGE_CLIENT_ID_SETTING: identity.client_id,
        STORAGE_ACCOUNT_NAME_SETTING: storage.account_name,
        RUNTIME_CLIENT_ID_SETTING: identity.client_id,
        CONTENT_SHARE_SETTING: content_share,
    }


def app_insights_settings(
    identity: Identity, app_insights: AppInsightsRef | None
) -> SettingsMap:
    """Telemetry settings, authenticating to Application Insights with Entra ID."""
    if app_insights is None:
        return {}
    return {
        APPINSIGHTS_AUTH_STRING_SETTING: (
            f"ClientId={identity.client_id};Authorization={APPINSIGHTS_AUTHORIZATION}"
        ),
        APPINSIGHTS_CONNECTION_STRING_SETTING: app_insights.connection_string,
    }


def auth_settings(identity: Identity, auth: AuthParams | None) -> SettingsMap:
    """Settings the hosting platform needs to validate tokens for the app.

    All three settings are emitted together or not at all.
    """
    if auth is None or not auth.enabled:
        return {}
    if not auth.identifier_uri or not identity.client_id:
        logger.debug(
            "Auth settings skipped: identifier_uri or identity client_id missing"
        )
        return {}
    return {
        AUTH_DEFAULT_SCOPES_SETTING: f"{auth.identifier_uri}/{USER_IMPERSONATION_SCOPE}",
        AUTH_FIC_CLIENT_ID_SETTING: identity.client_id,
        AUTH_ALLOWED_TENANTS_SETTING: auth.tenant_id,
    }


def token_exchange_settings(token_exchange_audience: str) -> SettingsMap:
    if not token_exchange_audience:
        return {}
    return {TOKEN_EXCHANGE_AUDIENCE_SETTING: token_exchange_audience}


def merge_settings(blocks: Mapping[str, SettingsMap]) -> SettingsMap:
    """Fold partial maps in `SETTINGS_MERGE_ORDER`; later blocks win.

    Passthrough values may be overridden. Computed blocks must agree with
    each other on any key they share.

    Raises:
        CompositionError: if two computed blocks set one key to different values
    """
    unknown = set(blocks) - set(SETTINGS_MERGE_ORDER)
    if unknown:
        raise CompositionError(f"Unknown settings blocks: {sorted(unknown)}")

    merged: SettingsMap = {}
    owners: dict[str, str] = {}
    for block_name in SETTINGS_MERGE_ORDER:
        for key, value in blocks.get(block_name, {}).items():
            owner = owners.get(key)
            if owner is not None and merged[key] != value:
                if owner != "passthrough":
                    raise CompositionError(
                        f"Setting {key!r} computed by both {owner!r} and {block_name!r}"
                    )
                logger.debug(
                    "Passthrough setting %s overridden by %s block", key, block_name
                )
            merged[key] = value
            owners[key] = block_name
    return merged


def compose(
    flags: FeatureFlags,
    identity: Identity,
    storage: StorageEndpoints,
    app_insights: AppInsightsRef | None = None,
    auth: AuthParams | None = None,
    *,
    content_share: str,
    app_settings: Mapping[str, str] | None = None,
    token_exchange_audience: str = "",
    login_endpoint: str = DEFAULT_LOGIN_ENDPOINT,
) -> Composition:
    """Compose the function app's settings map and authentication policy.

    Args:
        flags: storage services to wire up
        identity: managed identity the app runs as
        storage: host storage account endpoints
        app_insights: Application Insights component, if any
        auth: Entra application parameters, if any
        content_share: name of the content share for the app
        app_settings: caller-supplied settings, overridden by computed ones
        token_exchange_audience: audience for on-behalf-of token exchange
        login_endpoint: Entra login endpoint used for the policy issuer

    Returns:
        The merged settings and the optional authentication policy

    Raises:
        InvalidInput: if a required identifier is empty
    """
    block_builders: dict[str, Callable[[], SettingsMap]] = {
        "passthrough": lambda: dict(app_settings or {}),
        "storage_endpoints": lambda: storage_endpoint_settings(flags, storage),
        "baseline": lambda: baseline_settings(identity, storage, content_share),
        "app_insights": lambda: app_insights_settings(identity, app_insights),
        "auth": lambda: auth_settings(identity, auth),
        "token_exchange": lambda: token_exchange_settings(token_exchange_audience),
    }
    blocks = {name: block_builders[name]() for name in SETTINGS_MERGE_ORDER}

    for name, block in blocks.items():
        if block:
            logger.debug("Including %s settings: %s", name, ", ".join(block))

    settings = merge_settings(blocks)
    policy = build_auth_policy(auth, login_endpoint=login_endpoint)
    if policy is not None and AUTH_FIC_CLIENT_ID_SETTING not in settings:
        logger.warning(
            "Authentication policy references %s but the auth settings were not "
            "emitted; set identifier_uri and the identity client ID",
            AUTH_FIC_CLIENT_ID_SETTING,
        )
    return Composition(app_settings=settings, auth_policy=policy)
