"""Finalized attributes.

An attribute knows how to hand its value to a proxy. Overrides bypass
:meth:`Attribute.add_to` entirely, so a dynamic block is only evaluated when
nothing overrides it.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, Iterable, Optional, Tuple

from foundry.core.utils.text import canonical_name

if TYPE_CHECKING:
    from foundry.core.strategies.base import Proxy


class Attribute:
    is_association = False

    def __init__(self, name: str, *, ignored: bool = False, aliases: Iterable[str] = ()) -> None:
        self.name = canonical_name(name)
        self.ignored = ignored
        self.aliases: Tuple[str, ...] = tuple(canonical_name(a) for a in aliases)

    def add_to(self, proxy: "Proxy") -> None:
        raise NotImplementedError

    def aliases_for(self, key: str) -> bool:
        """True if an override keyed ``key`` targets this attribute."""
        return key == self.name or key in self.aliases

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class StaticAttribute(Attribute):
    def __init__(self, name: str, value: Any, **kwargs: Any) -> None:
        super().__init__(name, **kwargs)
        self.value = value

    def add_to(self, proxy: "Proxy") -> None:
        proxy.set(self.name, self.value, ignored=self.ignored)


class DynamicAttribute(Attribute):
    """Value computed by ``block(proxy)`` at build time."""

    def __init__(self, name: str, block: Callable[["Proxy"], Any], **kwargs: Any) -> None:
        super().__init__(name, **kwargs)
        if not callable(block):
            raise TypeError(f"Dynamic attribute {self.name!r} requires a callable")
        self.block = block

    def add_to(self, proxy: "Proxy") -> None:
        proxy.set(self.name, self.block(proxy), ignored=self.ignored)


class AssociationAttribute(Attribute):
    """Value built through another factory."""

    is_association = True

    def __init__(
        self,
        name: str,
        factory: str,
        overrides: Optional[Dict[str, Any]] = None,
        *,
        strategy: Any = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(name, **kwargs)
        self.factory = canonical_name(factory)
        self.overrides = dict(overrides or {})
        self.strategy = strategy

    def add_to(self, proxy: "Proxy") -> None:
        proxy.associate(self.name, self.factory, self.overrides, strategy=self.strategy)

    def __repr__(self) -> str:
        return f"AssociationAttribute({self.name!r}, factory={self.factory!r})"


__all__ = ["Attribute", "StaticAttribute", "DynamicAttribute", "AssociationAttribute"]
