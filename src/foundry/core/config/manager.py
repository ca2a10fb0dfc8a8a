"""
Foundry configuration management (YAML + environment overrides).
"""
from __future__ import annotations

import copy
import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

import jsonschema
from jsonschema import Draft202012Validator

from foundry.core.exceptions import ConfigError
from foundry.core.utils.io import read_yaml
from foundry.core.utils.merge import deep_merge as _deep_merge
from foundry.data import get_data_path
from foundry.data import read_yaml as read_bundled_yaml

logger = logging.getLogger(__name__)

ENV_PREFIX = "FOUNDRY_"
CONFIG_PATH_ENV = "FOUNDRY_CONFIG"


class ConfigManager:
    """Load, merge, and validate Foundry configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: FOUNDRY_<SECTION>__<KEY>
    2. Project config file: explicit ``config_path`` or ``$FOUNDRY_CONFIG``
    3. Bundled defaults: foundry.data/config/defaults.yaml

    ``FOUNDRY_CONFIG`` itself names the project file and is never treated as
    an override.
    """

    def __init__(
        self,
        config_path: Optional[Path] = None,
        *,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.environ: Mapping[str, str] = os.environ if environ is None else environ
        if config_path is None and self.environ.get(CONFIG_PATH_ENV):
            config_path = Path(self.environ[CONFIG_PATH_ENV]).expanduser()
        self.config_path = config_path
        self.schema_path = get_data_path("schemas", "config.schema.yaml")

    def deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge dictionaries. Delegates to shared implementation."""
        return _deep_merge(base, override)

    def load_defaults(self) -> Dict[str, Any]:
        # The bundled dict is lru-cached; callers get their own copy.
        return copy.deepcopy(read_bundled_yaml("config", "defaults.yaml"))

    def load_project(self) -> Dict[str, Any]:
        if self.config_path is None:
            return {}
        try:
            # Fail closed: configuration must never silently ignore invalid YAML.
            data = read_yaml(self.config_path, default={}, raise_on_error=True)
        except FileNotFoundError as exc:
            raise ConfigError(
                f"Config file not found: {self.config_path}",
                context={"path": str(self.config_path)},
            ) from exc
        except Exception as exc:
            raise ConfigError(
                f"Invalid YAML in {self.config_path}: {exc}",
                context={"path": str(self.config_path)},
            ) from exc
        if not isinstance(data, dict):
            raise ConfigError(
                f"Config file must contain a mapping: {self.config_path}",
                context={"path": str(self.config_path)},
            )
        return data

    # ========== Environment overrides ==========

    ARRAY_APPEND_MARKER = object()

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _parse_env_key(self, raw: str) -> List[Union[str, int, object]]:
        processed: List[Union[str, int, object]] = []
        for seg in raw.split("__"):
            if seg == "":
                raise ConfigError(
                    f"Malformed {ENV_PREFIX}* key: empty segment in '{raw}'.",
                    context={"key": raw},
                )
            if seg.isdigit():
                processed.append(int(seg))
            elif seg.upper() == "APPEND":
                processed.append(self.ARRAY_APPEND_MARKER)
            else:
                processed.append(seg.lower())
        return processed

    def _iter_env_overrides(self) -> Iterator[Tuple[List[Union[str, int, object]], Any]]:
        for key in sorted(self.environ.keys()):
            if not key.startswith(ENV_PREFIX) or key == CONFIG_PATH_ENV:
                continue
            raw = key[len(ENV_PREFIX):]
            if not raw:
                raise ConfigError(f"Malformed {ENV_PREFIX}* key", context={"key": key})
            yield self._parse_env_key(raw), self._coerce_type(self.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[Union[str, int, object]], value: Any) -> None:
        cur: Any = root
        for i, part in enumerate(path[:-1]):
            nxt = path[i + 1]
            if isinstance(part, int) or part is self.ARRAY_APPEND_MARKER:
                raise ConfigError("Invalid path: list index/APPEND may only appear at leaf")
            if not isinstance(cur, dict):
                raise ConfigError("Path traverses non-dict container")
            if part not in cur:
                cur[part] = [] if (isinstance(nxt, int) or nxt is self.ARRAY_APPEND_MARKER) else {}
            cur = cur[part]

        leaf = path[-1]
        if leaf is self.ARRAY_APPEND_MARKER:
            if not isinstance(cur, list):
                raise ConfigError("APPEND requires list")
            cur.append(value)
        elif isinstance(leaf, int):
            if not isinstance(cur, list):
                raise ConfigError("Index assignment requires list")
            while len(cur) <= leaf:
                cur.append(None)
            cur[leaf] = value
        else:
            if not isinstance(cur, dict):
                raise ConfigError("Key assignment requires dict")
            cur[leaf] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, typed_value in self._iter_env_overrides():
            logger.debug("Applying env override %s", path)
            self._set_nested(cfg, path, typed_value)

    # ========== Validation ==========

    def validate_schema(self, config: Dict[str, Any]) -> None:
        schema = read_yaml(self.schema_path, default={}, raise_on_error=True)
        Draft202012Validator.check_schema(schema)
        validator = Draft202012Validator(schema)
        errors = sorted(validator.iter_errors(config), key=lambda e: list(e.path))
        if errors:
            err: jsonschema.ValidationError = errors[0]
            path = "/".join(str(p) for p in err.path) or "<root>"
            raise ConfigError(
                f"Invalid configuration at {path}: {err.message}",
                context={"path": path, "errors": [e.message for e in errors]},
            )

    def load_config(self, validate: bool = True) -> Dict[str, Any]:
        """Load and merge configuration from all sources."""
        cfg = self.load_defaults()
        cfg = self.deep_merge(cfg, self.load_project())
        self.apply_env_overrides(cfg)
        if validate:
            self.validate_schema(cfg)
        return cfg


__all__ = ["ConfigManager", "ENV_PREFIX", "CONFIG_PATH_ENV"]
