"""Foundry core: factories, registry, definitions and build strategies."""
from __future__ import annotations

from . import exceptions  # noqa: F401
from .config import FoundryConfig, configure_logging
from .definition import (
    AssociationDeclaration,
    AttributeList,
    Callback,
    DynamicDeclaration,
    ImplicitDeclaration,
    MergeMode,
    StaticDeclaration,
    Trait,
)
from .factory import CompileState, Factory
from .registry import Registry
from .strategies import Strategy

__all__ = [
    "AssociationDeclaration",
    "AttributeList",
    "Callback",
    "CompileState",
    "DynamicDeclaration",
    "Factory",
    "FoundryConfig",
    "ImplicitDeclaration",
    "MergeMode",
    "Registry",
    "StaticDeclaration",
    "Strategy",
    "Trait",
    "configure_logging",
]
