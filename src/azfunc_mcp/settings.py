from __future__ import annotations

import os
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing_extensions import Self

from azfunc_mcp.constants import DEFAULT_LOGIN_ENDPOINT
from azfunc_mcp.utilities.logging import configure_logging

LOG_LEVEL = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]

ENV_FILE = os.getenv("AZFUNC_MCP_ENV_FILE", ".env")


class Settings(BaseSettings):
    """azfunc-mcp settings."""

    model_config = SettingsConfigDict(
        env_prefix="AZFUNC_MCP_",
        env_file=ENV_FILE,
        extra="ignore",
        validate_assignment=True,
    )

    log_enabled: bool = True
    log_level: LOG_LEVEL = "INFO"
    enable_rich_tracebacks: bool = Field(
        default=True,
        description="Render tracebacks with rich when logging exceptions.",
    )
    login_endpoint: str = Field(
        default=DEFAULT_LOGIN_ENDPOINT,
        description=(
            "Entra ID login endpoint used to build the OpenID issuer of the "
            "authentication policy. Sovereign clouds use a different host."
        ),
    )

    @model_validator(mode="after")
    def setup_logging(self) -> Self:
        """Finalize the settings."""
        if self.log_enabled:
            configure_logging(
                self.log_level,
                enable_rich_tracebacks=self.enable_rich_tracebacks,
            )
        return self
