"""Configuration module for jobbrowser."""

from jobbrowser.config.loader import load_config, get_config_path
from jobbrowser.config.schema import Config
from jobbrowser.config.access import get_config, clear_config_cache, resolve_config

__all__ = ["Config", "load_config", "get_config_path", "get_config", "clear_config_cache", "resolve_config"]
