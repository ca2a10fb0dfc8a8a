"""Traits: named, reusable bundles of declarations."""
from __future__ import annotations

from typing import Any, Iterable, List, Optional, Tuple

from foundry.core.utils.text import canonical_name

from .attribute_list import AttributeList
from .callbacks import Callback
from .declarations import Declaration


class Trait:
    """Immutable bundle of declarations and callbacks.

    ``callbacks`` accepts ``Callback`` objects or ``(name, handler)`` pairs.
    The expanded attribute list is built on first access and reused.
    """

    def __init__(
        self,
        name: str,
        declarations: Iterable[Declaration] = (),
        callbacks: Iterable[Any] = (),
    ) -> None:
        self.name = canonical_name(name)
        self.declarations: Tuple[Declaration, ...] = tuple(declarations)
        self.callbacks: Tuple[Callback, ...] = tuple(_as_callback(c) for c in callbacks)
        self._attributes: Optional[AttributeList] = None

    @property
    def attributes(self) -> AttributeList:
        if self._attributes is None:
            attributes = AttributeList()
            for declaration in self.declarations:
                for attribute in declaration.to_attributes():
                    attributes.define_attribute(attribute)
            for callback in self.callbacks:
                attributes.add_callback(callback)
            self._attributes = attributes
        return self._attributes

    def names(self) -> List[str]:
        return [d.name for d in self.declarations]

    def __repr__(self) -> str:
        return f"Trait({self.name!r})"


def _as_callback(value: Any) -> Callback:
    if isinstance(value, Callback):
        return value
    name, handler = value
    return Callback(name, handler)


__all__ = ["Trait"]
