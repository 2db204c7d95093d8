"""YAML configuration loader with environment variable overrides.

Configuration is loaded in layers (later layers override earlier):

  1. config/config.yaml  -- static tunables checked into the repo
  2. .env file           -- local developer overrides (not committed)
  3. Environment vars    -- set at deploy time

Credentials never live in the YAML file; they stay on :class:`Settings`.
The YAML file only carries tunables such as provider priority, fixed
confidence values and Azure polling cadence.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

import yaml

from smartocr.config.settings import Settings
from smartocr.utils.errors import ConfigurationError

DEFAULT_CONFIG: dict[str, Any] = {
    "ocr": {
        "provider_priority": ["ocr_space", "openai_vision", "google_vision", "azure_vision"],
        "fallback_policy": "chain",
        "confidence": {
            "ocr_space": 0.92,
            "openai_vision": 0.95,
            "google_vision": 0.95,
            "azure_vision": 0.95,
            "tesseract": 0.70,
        },
        "ocr_space": {
            "language": "eng",
            "engine": 2,
        },
        "openai_vision": {
            "model": "gpt-4o",
            "max_tokens": 4000,
        },
        "azure_vision": {
            "poll_interval": 1.0,
            "max_poll_attempts": 30,
        },
        "tesseract": {
            "language": "eng",
        },
    },
    "logging": {
        "level": "INFO",
    },
}


def load_config(
    path: str = "config/config.yaml",
    settings: Settings | None = None,
) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.  A missing file is not an
            error; built-in defaults are used instead.
        settings: Already-constructed settings.  A fresh ``Settings()`` is
            read from the environment when omitted.

    Returns:
        Fully resolved configuration dictionary.

    Raises:
        ConfigurationError: If the file is not valid YAML or not a mapping.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    config_path = Path(path)
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            try:
                yaml_config = yaml.safe_load(f) or {}
            except yaml.YAMLError as exc:
                raise ConfigurationError(f"Invalid YAML in {config_path}: {exc}") from exc
        if not isinstance(yaml_config, dict):
            raise ConfigurationError(f"{config_path} must contain a mapping at the top level")
        _deep_merge(config, yaml_config)

    settings = settings or Settings()
    # Only values actually supplied by the environment (or .env) win over
    # the YAML file; Settings defaults must not mask YAML tunables.
    explicit = settings.model_fields_set
    env_overrides: dict[str, Any] = {
        "ocr": {},
        "logging": {},
    }
    if "ocr_fallback_policy" in explicit:
        env_overrides["ocr"]["fallback_policy"] = settings.ocr_fallback_policy.value
    if "log_level" in explicit:
        env_overrides["logging"]["level"] = settings.log_level

    _deep_merge(config, env_overrides)
    return config


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
