"""Application and uvicorn configuration."""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings


class Config(BaseSettings, env_prefix="SERVER_"):
    """App config model.

    Read from SERVER_* environment variables, command line flags take
    precedence when parsed with ``_cli_parse_args``.
    """

    host: str = "127.0.0.1"
    port: int = Field(ge=1, le=65535, default=8080)
    environment: Literal["development", "production"] = "development"
    tlscert: str | None = Field(default=None, description="TLS certificate file")
    tlskey: str | None = Field(default=None, description="TLS key file")
    idle_timeout: int = Field(ge=1, default=60, description="Keep-alive seconds")

    @property
    def tls_enabled(self) -> bool:
        return bool(self.tlscert and self.tlskey)
