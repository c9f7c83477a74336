"""Tests for the authentication policy document."""

import pytest
from inline_snapshot import snapshot
from pydantic import ValidationError

from azfunc_mcp.auth_policy import AuthPolicy, build_auth_policy, open_id_issuer
from azfunc_mcp.models import AuthParams


class TestBuildAuthPolicy:
    @pytest.mark.parametrize(
        "client_id,tenant_id,expected",
        [
            ("app-client-id", "tenant-id", True),
            ("app-client-id", "", False),
            ("", "tenant-id", False),
            ("", "", False),
        ],
    )
    def test_present_iff_client_and_tenant(self, client_id, tenant_id, expected):
        auth = AuthParams(client_id=client_id, tenant_id=tenant_id)
        assert (build_auth_policy(auth) is not None) is expected

    def test_none_without_auth(self):
        assert build_auth_policy(None) is None

    def test_allowed_applications_always_include_client(self):
        """The primary client ID is allowed even with no pre-authorized clients."""
        policy = build_auth_policy(
            AuthParams(client_id="app-client-id", tenant_id="tenant-id")
        )
        assert policy is not None
        assert policy.allowed_applications == ("app-client-id",)

    def test_allowed_applications_collapse_duplicates(self):
        policy = build_auth_policy(
            AuthParams(
                client_id="app-client-id",
                tenant_id="tenant-id",
                pre_authorized_client_ids="b, app-client-id,, b ,a",
            )
        )
        assert policy is not None
        assert policy.allowed_applications == ("app-client-id", "b", "a")

    def test_allowed_audience_is_identifier_uri(self, auth):
        policy = build_auth_policy(auth)
        assert policy is not None
        assert policy.allowed_audiences == ("api://mcp-app-xyz",)

    def test_identifier_uri_defaults_to_client_id(self):
        policy = build_auth_policy(
            AuthParams(client_id="app-client-id", tenant_id="tenant-id")
        )
        assert policy is not None
        assert policy.allowed_audiences == ("api://app-client-id",)

    def test_policy_constants(self, auth):
        policy = build_auth_policy(auth)
        assert policy is not None
        assert policy.require_https is True
        assert policy.unauthenticated_client_action == "Return401"
        assert policy.token_refresh_extension_hours == 72
        assert policy.cookie_expiration == "08:00:00"
        assert policy.nonce_expiration == "00:05:00"

    @pytest.mark.parametrize(
        "override",
        [
            {"require_https": False},
            {"unauthenticated_client_action": "AllowAnonymous"},
            {"token_refresh_extension_hours": 1},
            {"cookie_expiration": "99:00:00"},
            {"nonce_expiration": "01:00:00"},
        ],
    )
    def test_policy_constants_cannot_be_overridden(self, auth, override):
        policy = build_auth_policy(auth)
        assert policy is not None
        with pytest.raises(ValidationError):
            AuthPolicy(**policy.model_dump(), **override)


class TestOpenIdIssuer:
    def test_default_endpoint(self):
        assert (
            open_id_issuer("tenant-id")
            == "https://login.microsoftonline.com/tenant-id/v2.0"
        )

    def test_endpoint_without_trailing_slash(self):
        assert (
            open_id_issuer("tenant-id", "https://login.chinacloudapi.cn")
            == "https://login.chinacloudapi.cn/tenant-id/v2.0"
        )


class TestAuthPolicyDocument:
    def test_document_shape(self, auth):
        policy = build_auth_policy(auth)
        assert policy is not None

        assert policy.to_document() == snapshot(
            {
                "platform": {"enabled": True, "runtimeVersion": "~1"},
                "globalValidation": {
                    "requireAuthentication": True,
                    "unauthenticatedClientAction": "Return401",
                },
                "httpSettings": {
                    "requireHttps": True,
                    "routes": {"apiPrefix": "/.auth"},
                    "forwardProxy": {"convention": "NoProxy"},
                },
                "identityProviders": {
                    "azureActiveDirectory": {
                        "enabled": True,
                        "registration": {
                            "openIdIssuer": "https://login.microsoftonline.com/tenant-id/v2.0",
                            "clientId": "app-client-id",
                            "clientSecretSettingName": "OVERRIDE_USE_MI_FIC_ASSERTION_CLIENTID",
                        },
                        "validation": {
                            "jwtClaimChecks": {},
                            "allowedAudiences": ["api://mcp-app-xyz"],
                            "defaultAuthorizationPolicy": {
                                "allowedPrincipals": {},
                                "allowedApplications": [
                                    "app-client-id",
                                    "client-a",
                                    "client-b",
                                ],
                            },
                        },
                        "isAutoProvisioned": False,
                    }
                },
                "login": {
                    "routes": {"logoutEndpoint": "/.auth/logout"},
                    "tokenStore": {
                        "enabled": True,
                        "tokenRefreshExtensionHours": 72,
                        "fileSystem": {},
                        "azureBlobStorage": {},
                    },
                    "preserveUrlFragmentsForLogins": False,
                    "allowedExternalRedirectUrls": [],
                    "cookieExpiration": {
                        "convention": "FixedTime",
                        "timeToExpiration": "08:00:00",
                    },
                    "nonce": {
                        "validateNonce": True,
                        "nonceExpirationInterval": "00:05:00",
                    },
                },
            }
        )
