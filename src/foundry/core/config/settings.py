"""Typed accessors over the merged Foundry configuration."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from .manager import ConfigManager


@dataclass(frozen=True)
class AliasPattern:
    match: str
    replace: str


class FoundryConfig:
    """Read-only view of configuration used by the registry and strategies.

    Usage:
        cfg = FoundryConfig.load()
        cfg.default_strategy  # "create"

        cfg = FoundryConfig({"factories": {"default_strategy": "build"}})
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None) -> None:
        self._data: Dict[str, Any] = data or {}

    @classmethod
    def load(
        cls,
        config_path: Optional[Path] = None,
        *,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "FoundryConfig":
        return cls(ConfigManager(config_path, environ=environ).load_config())

    @classmethod
    def defaults(cls) -> "FoundryConfig":
        """Bundled defaults only, ignoring project files and the environment."""
        return cls(ConfigManager(environ={}).load_config())

    def section(self, key: str) -> Dict[str, Any]:
        return self._data.get(key, {}) or {}

    def as_dict(self) -> Dict[str, Any]:
        return dict(self._data)

    @cached_property
    def default_strategy(self) -> str:
        return str(self.section("factories").get("default_strategy", "create"))

    @cached_property
    def allow_overrides(self) -> bool:
        return bool(self.section("factories").get("allow_overrides", False))

    @cached_property
    def persist_method(self) -> str:
        create = self.section("strategies").get("create") or {}
        return str(create.get("persist_method", "save"))

    @cached_property
    def stub_id_start(self) -> int:
        stub = self.section("strategies").get("stub") or {}
        return int(stub.get("id_start", 1001))

    @cached_property
    def alias_patterns(self) -> List[AliasPattern]:
        raw = self.section("aliases").get("patterns") or []
        return [AliasPattern(str(p["match"]), str(p["replace"])) for p in raw]

    @cached_property
    def warn_default_strategy(self) -> bool:
        return bool(self.section("deprecations").get("warn_default_strategy", True))

    @cached_property
    def log_level(self) -> str:
        return str(self.section("logging").get("level", "WARNING")).upper()


def configure_logging(config: FoundryConfig) -> None:
    """Apply ``logging.level`` to the ``foundry`` logger hierarchy."""
    logging.getLogger("foundry").setLevel(config.log_level)


__all__ = ["AliasPattern", "FoundryConfig", "configure_logging"]
