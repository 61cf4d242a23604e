"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ───────────────────────────────────────────
#
#   1. config/config.yaml  — static defaults checked into the repo
#   2. .env file           — local developer overrides (not committed)
#   3. Environment vars    — set at deploy time
#
# load_config() reads the YAML file first, then deep-merges the values
# pydantic-settings resolved from .env / the environment on top of it.
# Keys the environment does not set explicitly keep their YAML value.
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path

import yaml
from pydantic import ValidationError as PydanticValidationError

from src.config.settings import Settings
from src.models.verification import VerificationPolicy
from src.utils.errors import ConfigurationError


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.
        settings: Pre-built settings; a fresh ``Settings()`` when omitted.

    Returns:
        Fully resolved configuration dictionary.
    """
    config_path = Path(path)
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            yaml_config = yaml.safe_load(f) or {}
    else:
        yaml_config = {}

    settings = settings or Settings()
    explicit = settings.model_fields_set

    env_overrides: dict = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "logging": {
            "level": settings.log_level,
        },
        "places": {
            "enabled": settings.places_enabled(),
        },
    }

    # Tunables below only override YAML when the environment set them.
    if "places_default_radius_m" in explicit:
        env_overrides["places"]["default_radius_m"] = settings.places_default_radius_m

    verification: dict = {}
    if "verification_min_samples" in explicit:
        verification["min_samples"] = settings.verification_min_samples
    if "verification_min_ratio" in explicit:
        verification["min_ratio"] = settings.verification_min_ratio
    if verification:
        env_overrides["verification"] = verification

    _deep_merge(yaml_config, env_overrides)
    return yaml_config


def policy_from_config(config: dict, settings: Settings | None = None) -> VerificationPolicy:
    """Build the verified-badge policy from the merged config.

    Falls back to the Settings defaults for keys the config does not set.

    Raises:
        ConfigurationError: if the configured thresholds are out of range.
    """
    settings = settings or Settings()
    section = config.get("verification") or {}
    try:
        return VerificationPolicy(
            min_samples=section.get("min_samples", settings.verification_min_samples),
            min_ratio=section.get("min_ratio", settings.verification_min_ratio),
        )
    except PydanticValidationError as exc:
        raise ConfigurationError(f"Invalid verification policy: {exc}") from exc


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
