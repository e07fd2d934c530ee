"""Pricing configuration — defaults, .pricewright/config.yaml and env overrides."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pricewright.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_URL = "https://pricing.us-east-1.amazonaws.com/offers/v1.0/aws/AmazonEC2/current/index.json"
DEFAULT_LOCATION = "US West (Oregon)"
DEFAULT_CACHE_DIR = Path("/tmp/.aws_pricing")
DEFAULT_MAX_AGE = 86400.0  # seconds
DEFAULT_TIMEOUT = 30.0  # seconds

PROJECT_DIR = ".pricewright"

# env var -> config field
_ENV_OVERRIDES: dict[str, str] = {
    "PRICEWRIGHT_URL": "url",
    "PRICEWRIGHT_LOCATION": "location",
    "PRICEWRIGHT_CACHE_DIR": "cache_dir",
    "PRICEWRIGHT_MAX_AGE": "max_age",
    "PRICEWRIGHT_TIMEOUT": "timeout",
}


class PricingConfig(BaseModel):
    """Policy values shared by the store, fetcher, resolver and query cache.

    One freshness window (max_age) applies to both the raw catalog and every
    cached query result.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    url: str = DEFAULT_URL
    location: str = DEFAULT_LOCATION
    cache_dir: Path = DEFAULT_CACHE_DIR
    max_age: float = Field(default=DEFAULT_MAX_AGE, gt=0)
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    currencies: tuple[str, ...] = ("USD",)

    @field_validator("url", "location")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be empty")
        return v

    @field_validator("cache_dir")
    @classmethod
    def _expand_dir(cls, v: Path) -> Path:
        return v.expanduser()


def find_project_root(start: Path | None = None) -> Path | None:
    """Walk up from start (default: cwd) looking for a .pricewright/ directory."""
    current = (start or Path.cwd()).resolve()
    for parent in [current, *current.parents]:
        if (parent / PROJECT_DIR).is_dir():
            return parent
    return None


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigError(f"Cannot read config {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(data).__name__}")
    return data


def _env_values(environ: Mapping[str, str]) -> dict[str, Any]:
    values: dict[str, Any] = {}
    for var, field in _ENV_OVERRIDES.items():
        raw = environ.get(var)
        if raw:
            values[field] = raw
    return values


def load_config(
    path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    **overrides: Any,
) -> PricingConfig:
    """Build a PricingConfig from defaults < YAML file < environment < overrides.

    Args:
        path: Explicit YAML config path. If None, .pricewright/config.yaml in the
              nearest project root is used when present.
        environ: Environment mapping (default: os.environ).
        overrides: Field values that win over everything else; None values are ignored.
    """
    values: dict[str, Any] = {}

    if path is not None:
        config_path: Path | None = Path(path)
        if not config_path.exists():
            raise ConfigError(f"Config file not found: {config_path}")
    else:
        root = find_project_root()
        config_path = root / PROJECT_DIR / "config.yaml" if root else None
        if config_path is not None and not config_path.exists():
            config_path = None

    if config_path is not None:
        logger.debug("Loading config from %s", config_path)
        values.update(_read_yaml(config_path))

    values.update(_env_values(os.environ if environ is None else environ))
    values.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return PricingConfig(**values)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
