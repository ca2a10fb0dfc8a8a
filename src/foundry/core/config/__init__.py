"""Foundry configuration system.

Usage:
    from foundry.core.config import ConfigManager, FoundryConfig

    manager = ConfigManager(Path("foundry.yaml"))
    data = manager.load_config()

    cfg = FoundryConfig.load(Path("foundry.yaml"))
    cfg.default_strategy
"""
from __future__ import annotations

from .manager import CONFIG_PATH_ENV, ENV_PREFIX, ConfigManager
from .settings import AliasPattern, FoundryConfig, configure_logging

__all__ = [
    "AliasPattern",
    "CONFIG_PATH_ENV",
    "ConfigManager",
    "ENV_PREFIX",
    "FoundryConfig",
    "configure_logging",
]
