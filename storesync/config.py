"""Configuration loading for storesync."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass
class AuthorityConfig:
    """Where the provisioning engine's REST API lives."""

    url: str = "http://localhost:5000"
    timeout_seconds: float = 30.0

    @property
    def base_url(self) -> str:
        return self.url.rstrip("/")


@dataclass
class StorefrontConfig:
    url: str = "http://127.0.0.1:8080/shop"


@dataclass
class DashboardConfig:
    host: str = "0.0.0.0"
    port: int = 8080


@dataclass
class Config:
    authority: AuthorityConfig = field(default_factory=AuthorityConfig)
    storefront: StorefrontConfig = field(default_factory=StorefrontConfig)
    dashboard: DashboardConfig = field(default_factory=DashboardConfig)


def _get_env(key: str, default: Any = None) -> Any:
    """Get environment variable with STORESYNC_ prefix."""
    return os.environ.get(f"STORESYNC_{key}", default)


def _apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides to config."""
    if url := _get_env("AUTHORITY_URL"):
        config.authority.url = url
    if timeout := _get_env("AUTHORITY_TIMEOUT"):
        config.authority.timeout_seconds = float(timeout)

    if storefront := _get_env("STOREFRONT_URL"):
        config.storefront.url = storefront

    if host := _get_env("DASHBOARD_HOST"):
        config.dashboard.host = host
    if port := _get_env("DASHBOARD_PORT"):
        config.dashboard.port = int(port)

    return config


def load_config(config_path: str | Path | None = None) -> Config:
    """Load configuration from YAML file with environment variable overrides.

    Args:
        config_path: Path to YAML config file. If None or missing, defaults
            are used.

    Returns:
        Loaded Config object.
    """
    config = Config()

    if config_path:
        path = Path(config_path)
        if path.exists():
            with open(path) as f:
                data = yaml.safe_load(f) or {}

            if "authority" in data:
                authority_data = data["authority"]
                config.authority = AuthorityConfig(
                    url=authority_data.get("url", config.authority.url),
                    timeout_seconds=float(
                        authority_data.get(
                            "timeout_seconds", config.authority.timeout_seconds
                        )
                    ),
                )

            if "storefront" in data:
                config.storefront = StorefrontConfig(
                    url=data["storefront"].get("url", config.storefront.url)
                )

            if "dashboard" in data:
                dashboard_data = data["dashboard"]
                config.dashboard = DashboardConfig(
                    host=dashboard_data.get("host", config.dashboard.host),
                    port=dashboard_data.get("port", config.dashboard.port),
                )

    return _apply_env_overrides(config)
