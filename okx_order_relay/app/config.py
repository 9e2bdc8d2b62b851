"""Configuration loading and validation."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class CredentialsError(RuntimeError):
    """Raised when any of the OKX secrets is missing from the environment."""

    def __init__(self, missing: list[str]) -> None:
        super().__init__("Missing OKX credentials in environment variables")
        self.missing = missing


class OkxCredentials(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    api_key: str = Field(min_length=1)
    secret_key: str = Field(min_length=1)
    passphrase: str = Field(min_length=1)


class RelayConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")

    base_url: str = "https://www.okx.com"
    request_path: str = Field(default="/api/v5/trade/order", pattern=r"^/")
    request_timeout: float | None = Field(default=None, gt=0)
    simulated_trading: bool = False
    log_dir: str | None = "logs"
    log_level: str = Field(default="INFO", pattern=r"^(TRACE|DEBUG|INFO|SUCCESS|WARNING|ERROR|CRITICAL)$")
    log_rotation: str = "5 MB"
    log_retention: int = Field(default=5, ge=1)
    host: str = "0.0.0.0"
    port: int = Field(default=8000, ge=1, le=65535)

    @property
    def log_path(self) -> Path | None:
        return Path(self.log_dir) if self.log_dir is not None else None


CREDENTIAL_ENV_VARS = {
    "api_key": "OKX_API_KEY",
    "secret_key": "OKX_SECRET_KEY",
    "passphrase": "OKX_PASSPHRASE",
}


def load_config(path: str | Path = "config.yml") -> RelayConfig:
    """Load relay settings from YAML, falling back to defaults when the file is absent."""
    config_path = Path(path)
    if not config_path.exists():
        return RelayConfig()

    with config_path.open("r", encoding="utf-8") as fh:
        raw_data = yaml.safe_load(fh) or {}

    try:
        return RelayConfig.model_validate(raw_data)
    except ValidationError as exc:
        raise ValueError(f"Invalid config '{config_path}': {exc}") from exc


def load_credentials(environ: Mapping[str, str] | None = None) -> OkxCredentials:
    """Read the three OKX secrets from the environment; called once per request."""
    if environ is None:
        environ = os.environ

    values = {field: (environ.get(var) or "") for field, var in CREDENTIAL_ENV_VARS.items()}
    missing = [CREDENTIAL_ENV_VARS[field] for field, value in values.items() if not value]
    if missing:
        raise CredentialsError(missing)
    return OkxCredentials(**values)
