"""Deployment planning for an MCP server hosted on Azure Functions."""

from importlib.metadata import PackageNotFoundError, version

from azfunc_mcp.settings import Settings

settings = Settings()

from azfunc_mcp.auth_policy import AuthPolicy, build_auth_policy  # noqa: E402
from azfunc_mcp.composer import Composition, compose  # noqa: E402
from azfunc_mcp.parameters import DeploymentParameters, load_parameters  # noqa: E402
from azfunc_mcp.planner import DeploymentPlan, deploy, plan_deployment  # noqa: E402

try:
    __version__ = version("azfunc-mcp")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "AuthPolicy",
    "Composition",
    "DeploymentParameters",
    "DeploymentPlan",
    "build_auth_policy",
    "compose",
    "deploy",
    "load_parameters",
    "plan_deployment",
    "settings",
]
