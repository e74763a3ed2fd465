"""Process-wide configuration shared by the wiring helpers in ``jobbrowser.jobs.service``."""

from __future__ import annotations

import threading
from pathlib import Path

from loguru import logger

from jobbrowser.config.loader import get_config_path, load_config
from jobbrowser.config.schema import Config

_lock = threading.RLock()
_loaded: dict[Path, Config] = {}


def _resolve(config_path: Path | None) -> Path:
    return Path(config_path or get_config_path()).expanduser().resolve()


def get_config(config_path: Path | None = None, *, force_reload: bool = False) -> Config:
    """Config for ``config_path`` (default location when omitted), read from disk once per path."""
    path = _resolve(config_path)
    with _lock:
        config = None if force_reload else _loaded.get(path)
        if config is None:
            config = load_config(path)
            _loaded[path] = config
            logger.debug(f"Job browser config loaded from {path}")
        return config


def resolve_config(config: Config | None) -> Config:
    """An explicit config wins; otherwise the cached default-location one."""
    return config if config is not None else get_config()


def clear_config_cache(config_path: Path | None = None) -> None:
    with _lock:
        if config_path is None:
            _loaded.clear()
        else:
            _loaded.pop(_resolve(config_path), None)
