"""Tests for resource naming."""

import re

import pytest

from azfunc_mcp.naming import ResourceNames, resource_token
from azfunc_mcp.parameters import DeploymentParameters


@pytest.fixture
def params():
    return DeploymentParameters(environment_name="dev", location="eastus2")


class TestResourceToken:
    def test_deterministic(self):
        assert resource_token("sub", "dev", "eastus2") == resource_token(
            "sub", "dev", "eastus2"
        )

    def test_shape(self):
        token = resource_token("sub", "dev", "eastus2")
        assert len(token) == 13
        assert re.fullmatch(r"[a-z0-9]+", token)

    def test_inputs_change_token(self):
        assert resource_token("sub", "dev", "eastus2") != resource_token(
            "sub", "prod", "eastus2"
        )

    def test_custom_length(self):
        assert len(resource_token("a", length=7)) == 7


class TestResourceNames:
    def test_generated_names(self, params):
        names = ResourceNames.from_parameters(params, "sub")
        token = resource_token("sub", "dev", "eastus2")

        assert names.resource_token == token
        assert names.resource_group == "rg-dev"
        assert names.function_app == f"func-api-{token}"
        assert names.app_service_plan == f"plan-{token}"
        assert names.storage_account == f"st{token}"
        assert names.user_assigned_identity == f"id-api-{token}"
        assert names.application_insights == f"appi-{token}"
        assert names.log_analytics == f"log-{token}"
        assert names.entra_app_unique_name == f"mcp-app-{token}"
        assert names.content_share == names.function_app
        assert names.function_app_hostname == f"func-api-{token}.azurewebsites.net"

    def test_subscription_from_parameters(self):
        params = DeploymentParameters(
            environment_name="dev", location="eastus2", subscription_id="sub"
        )
        assert ResourceNames.from_parameters(params).resource_token == resource_token(
            "sub", "dev", "eastus2"
        )

    def test_explicit_names_win(self):
        params = DeploymentParameters(
            environment_name="dev",
            location="eastus2",
            resource_group_name="rg-custom",
            api_service_name="My-Func",
            api_user_assigned_identity_name="id-custom",
            application_insights_name="appi-custom",
            log_analytics_name="log-custom",
            storage_account_name="stcustom",
        )
        names = ResourceNames.from_parameters(params, "sub")

        assert names.resource_group == "rg-custom"
        assert names.function_app == "My-Func"
        assert names.content_share == "my-func"
        assert names.user_assigned_identity == "id-custom"
        assert names.application_insights == "appi-custom"
        assert names.log_analytics == "log-custom"
        assert names.storage_account == "stcustom"

    def test_storage_account_name_sanitized(self):
        params = DeploymentParameters(
            environment_name="dev",
            location="eastus2",
            storage_account_name="My-Storage_Account-Name-Too-Long-123",
        )
        names = ResourceNames.from_parameters(params, "sub")

        assert names.storage_account == "mystorageaccountnametool"
        assert len(names.storage_account) == 24

    def test_deployment_container(self, params):
        names = ResourceNames.from_parameters(params, "sub")
        prefix = f"app-package-{names.function_app[:32]}-"

        assert names.deployment_container.startswith(prefix)
        assert len(names.deployment_container) == len(prefix) + 7

    def test_stable_across_calls(self, params):
        assert ResourceNames.from_parameters(
            params, "sub"
        ) == ResourceNames.from_parameters(params, "sub")
