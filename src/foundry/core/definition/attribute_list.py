"""Ordered, name-unique attribute collection.

Merge policy (see :meth:`AttributeList.apply_attributes`):

``MergeMode.OVERRIDE``
    Attributes being applied replace same-named ones already present, in
    place; new names are appended. The last list applied wins.

``MergeMode.INHERIT``
    Only names not yet present are taken, and they are placed ahead of the
    existing attributes. Whatever is already present wins.

Callbacks are always accumulated in application order.
"""
from __future__ import annotations

import enum
from typing import Dict, Iterable, Iterator, List, Optional

from foundry.core.exceptions import DuplicateDefinitionError

from .attributes import Attribute
from .callbacks import Callback
from .declarations import Declaration


class MergeMode(str, enum.Enum):
    OVERRIDE = "override"
    INHERIT = "inherit"


class AttributeList:
    def __init__(self, attributes: Iterable[Attribute] = (), *, overridable: bool = False) -> None:
        self._declarations: List[Declaration] = []
        self._attributes: List[Attribute] = []
        self._callbacks: List[Callback] = []
        self._overridable = overridable
        for attribute in attributes:
            self.define_attribute(attribute)

    # ---------- Override policy ----------

    def overridable(self) -> "AttributeList":
        self._overridable = True
        return self

    def is_overridable(self) -> bool:
        return self._overridable

    # ---------- Declarations ----------

    def declare_attribute(self, declaration: Declaration) -> None:
        self._declarations.append(declaration)

    @property
    def declarations(self) -> List[Declaration]:
        return list(self._declarations)

    # ---------- Attributes ----------

    def define_attribute(self, attribute: Attribute) -> None:
        index = self._index_of(attribute.name)
        if index is None:
            self._attributes.append(attribute)
        elif self._overridable:
            self._attributes[index] = attribute
        else:
            raise DuplicateDefinitionError(
                f"Attribute already defined: {attribute.name}",
                attribute=attribute.name,
            )

    def apply_attributes(self, other: "AttributeList", mode: MergeMode = MergeMode.OVERRIDE) -> None:
        for callback in other.callbacks:
            self.add_callback(callback)

        if mode is MergeMode.INHERIT:
            inherited = [a for a in other if a.name not in self]
            self._attributes = inherited + self._attributes
            return

        for attribute in other:
            index = self._index_of(attribute.name)
            if index is None:
                self._attributes.append(attribute)
            else:
                self._attributes[index] = attribute

    def find(self, name: str) -> Optional[Attribute]:
        index = self._index_of(name)
        return None if index is None else self._attributes[index]

    def names(self) -> List[str]:
        return [a.name for a in self._attributes]

    def as_dict(self) -> Dict[str, Attribute]:
        return {a.name: a for a in self._attributes}

    def _index_of(self, name: str) -> Optional[int]:
        for i, attribute in enumerate(self._attributes):
            if attribute.name == name:
                return i
        return None

    # ---------- Callbacks ----------

    def add_callback(self, callback: Callback) -> None:
        self._callbacks.append(callback)

    @property
    def callbacks(self) -> List[Callback]:
        return list(self._callbacks)

    # ---------- Container protocol ----------

    def __iter__(self) -> Iterator[Attribute]:
        return iter(list(self._attributes))

    def __len__(self) -> int:
        return len(self._attributes)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._index_of(name) is not None

    def __repr__(self) -> str:
        return f"AttributeList({self.names()!r})"


__all__ = ["AttributeList", "MergeMode"]
