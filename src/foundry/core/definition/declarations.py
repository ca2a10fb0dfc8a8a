"""Declarations: the definition-time form of an attribute.

A declaration is recorded while a factory is being defined and expanded into
finalized attributes when the factory compiles.
"""
from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional

from foundry.core.utils.text import canonical_name

from .attributes import AssociationAttribute, Attribute, DynamicAttribute, StaticAttribute


class Declaration:
    def __init__(self, name: str, *, ignored: bool = False, aliases: Iterable[str] = ()) -> None:
        self.name = canonical_name(name)
        self.ignored = ignored
        self.aliases = tuple(aliases)

    def to_attributes(self) -> List[Attribute]:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class StaticDeclaration(Declaration):
    def __init__(self, name: str, value: Any, **kwargs: Any) -> None:
        super().__init__(name, **kwargs)
        self.value = value

    def to_attributes(self) -> List[Attribute]:
        return [StaticAttribute(self.name, self.value, ignored=self.ignored, aliases=self.aliases)]


class DynamicDeclaration(Declaration):
    def __init__(self, name: str, block: Callable[..., Any], **kwargs: Any) -> None:
        super().__init__(name, **kwargs)
        self.block = block

    def to_attributes(self) -> List[Attribute]:
        return [DynamicAttribute(self.name, self.block, ignored=self.ignored, aliases=self.aliases)]


class AssociationDeclaration(Declaration):
    def __init__(
        self,
        name: str,
        factory: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
        *,
        strategy: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(name, **kwargs)
        self.factory = canonical_name(factory) if factory else self.name
        self.overrides = dict(overrides or {})
        self.strategy = strategy

    def to_attributes(self) -> List[Attribute]:
        return [
            AssociationAttribute(
                self.name,
                self.factory,
                self.overrides,
                strategy=self.strategy,
                ignored=self.ignored,
                aliases=self.aliases,
            )
        ]


class ImplicitDeclaration(Declaration):
    """A bare name: an association with the factory of the same name."""

    def to_attributes(self) -> List[Attribute]:
        return [AssociationAttribute(self.name, self.name, ignored=self.ignored, aliases=self.aliases)]


__all__ = [
    "Declaration",
    "StaticDeclaration",
    "DynamicDeclaration",
    "AssociationDeclaration",
    "ImplicitDeclaration",
]
