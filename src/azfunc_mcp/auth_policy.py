"""Authentication policy for the function app (App Service ``authsettingsV2``).

The policy exists only when both the Entra application (client) ID and the
tenant ID are known. It is never partially constructed: either
`build_auth_policy` returns a complete `AuthPolicy` or it returns None.
"""

from __future__ import annotations

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict

from azfunc_mcp.constants import (
    AUTH_API_PREFIX,
    AUTH_FIC_CLIENT_ID_SETTING,
    AUTH_LOGOUT_ENDPOINT,
    AUTH_RUNTIME_VERSION,
    COOKIE_EXPIRATION,
    COOKIE_EXPIRATION_CONVENTION,
    DEFAULT_LOGIN_ENDPOINT,
    FORWARD_PROXY_CONVENTION,
    IDENTIFIER_URI_SCHEME,
    NONCE_EXPIRATION,
    TOKEN_REFRESH_EXTENSION_HOURS,
    UNAUTHENTICATED_CLIENT_ACTION,
)
from azfunc_mcp.models import AuthParams
from azfunc_mcp.utilities.logging import get_logger
from azfunc_mcp.utilities.parsing import unique

logger = get_logger(__name__)


class AuthPolicy(BaseModel):
    """Computed parts of the authentication policy plus its fixed constants."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    client_id: str
    tenant_id: str
    open_id_issuer: str
    allowed_audiences: tuple[str, ...]
    allowed_applications: tuple[str, ...]

    require_https: ClassVar[bool] = True
    unauthenticated_client_action: ClassVar[str] = UNAUTHENTICATED_CLIENT_ACTION
    token_refresh_extension_hours: ClassVar[int] = TOKEN_REFRESH_EXTENSION_HOURS
    cookie_expiration: ClassVar[str] = COOKIE_EXPIRATION
    nonce_expiration: ClassVar[str] = NONCE_EXPIRATION

    def to_document(self) -> dict[str, Any]:
        """Render the policy in the shape the hosting platform expects."""
        return {
            "platform": {
                "enabled": True,
                "runtimeVersion": AUTH_RUNTIME_VERSION,
            },
            "globalValidation": {
                "requireAuthentication": True,
                "unauthenticatedClientAction": self.unauthenticated_client_action,
            },
            "httpSettings": {
                "requireHttps": self.require_https,
                "routes": {"apiPrefix": AUTH_API_PREFIX},
                "forwardProxy": {"convention": FORWARD_PROXY_CONVENTION},
            },
            "identityProviders": {
                "azureActiveDirectory": {
                    "enabled": True,
                    "registration": {
                        "openIdIssuer": self.open_id_issuer,
                        "clientId": self.client_id,
                        "clientSecretSettingName": AUTH_FIC_CLIENT_ID_SETTING,
                    },
                    "validation": {
                        "jwtClaimChecks": {},
                        "allowedAudiences": list(self.allowed_audiences),
                        "defaultAuthorizationPolicy": {
                            "allowedPrincipals": {},
                            "allowedApplications": list(self.allowed_applications),
                        },
                    },
                    "isAutoProvisioned": False,
                }
            },
            "login": {
                "routes": {"logoutEndpoint": AUTH_LOGOUT_ENDPOINT},
                "tokenStore": {
                    "enabled": True,
                    "tokenRefreshExtensionHours": self.token_refresh_extension_hours,
                    "fileSystem": {},
                    "azureBlobStorage": {},
                },
                "preserveUrlFragmentsForLogins": False,
                "allowedExternalRedirectUrls": [],
                "cookieExpiration": {
                    "convention": COOKIE_EXPIRATION_CONVENTION,
                    "timeToExpiration": self.cookie_expiration,
                },
                "nonce": {
                    "validateNonce": True,
                    "nonceExpirationInterval": self.nonce_expiration,
                },
            },
        }


def open_id_issuer(tenant_id: str, login_endpoint: str = DEFAULT_LOGIN_ENDPOINT) -> str:
    return f"{login_endpoint.rstrip('/')}/{tenant_id}/v2.0"


def build_auth_policy(
    auth: AuthParams | None,
    *,
    login_endpoint: str = DEFAULT_LOGIN_ENDPOINT,
) -> AuthPolicy | None:
    """Build the authentication policy, or None when authentication is off.

    Args:
        auth: Entra application parameters
        login_endpoint: Entra login endpoint the issuer is derived from

    Returns:
        The policy when both ``client_id`` and ``tenant_id`` are non-empty

    The document names ``OVERRIDE_USE_MI_FIC_ASSERTION_CLIENTID`` as its client
    secret setting, which only exists when the auth settings block was emitted
    (see `azfunc_mcp.composer.auth_settings`).
    """
    if auth is None or not auth.enabled:
        logger.debug("Authentication policy skipped: client or tenant ID missing")
        return None

    # identifier_uri defaults to api://{client_id}, the Entra default
    audience = auth.identifier_uri or f"{IDENTIFIER_URI_SCHEME}{auth.client_id}"

    return AuthPolicy(
        client_id=auth.client_id,
        tenant_id=auth.tenant_id,
        open_id_issuer=open_id_issuer(auth.tenant_id, login_endpoint),
        allowed_audiences=(audience,),
        allowed_applications=tuple(
            unique([auth.client_id, *auth.pre_authorized_client_ids])
        ),
    )
