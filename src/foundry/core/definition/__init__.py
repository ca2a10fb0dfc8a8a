"""Definition building blocks: declarations, attributes, traits and callbacks."""
from __future__ import annotations

from .attribute_list import AttributeList, MergeMode
from .attributes import AssociationAttribute, Attribute, DynamicAttribute, StaticAttribute
from .callbacks import VALID_CALLBACK_NAMES, Callback
from .declarations import (
    AssociationDeclaration,
    Declaration,
    DynamicDeclaration,
    ImplicitDeclaration,
    StaticDeclaration,
)
from .traits import Trait

__all__ = [
    "AssociationAttribute",
    "AssociationDeclaration",
    "Attribute",
    "AttributeList",
    "Callback",
    "Declaration",
    "DynamicAttribute",
    "DynamicDeclaration",
    "ImplicitDeclaration",
    "MergeMode",
    "StaticAttribute",
    "StaticDeclaration",
    "Trait",
    "VALID_CALLBACK_NAMES",
]
