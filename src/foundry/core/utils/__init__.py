"""Shared helpers: name canonicalization, deep merge and YAML I/O."""
from __future__ import annotations

from .io import read_yaml
from .merge import deep_merge, merge_arrays
from .text import canonical_name, humanize, underscore

__all__ = [
    "canonical_name",
    "deep_merge",
    "humanize",
    "merge_arrays",
    "read_yaml",
    "underscore",
]
