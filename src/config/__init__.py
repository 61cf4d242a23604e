"""Configuration module — exports Settings, the loaders, and a module-level singleton."""

from src.config.loader import load_config, policy_from_config
from src.config.settings import Settings

settings = Settings()

__all__ = ["Settings", "load_config", "policy_from_config", "settings"]
