"""Build strategies.

A strategy is a :class:`Proxy` subclass. The factory drives it through a
narrow capability set: ``add_callback``, ``set``, ``associate`` and
``result``. Values are collected first and the instance is constructed in
:meth:`Proxy.result` with the non-ignored values as keyword arguments.
"""
from __future__ import annotations

import enum
import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Set, Type, Union

from foundry.core.exceptions import UnknownStrategyError

if TYPE_CHECKING:
    from foundry.core.definition.callbacks import Callback
    from foundry.core.registry import Registry

logger = logging.getLogger(__name__)

Finalizer = Callable[[Any], Any]


class Strategy(str, enum.Enum):
    BUILD = "build"
    CREATE = "create"
    ATTRIBUTES_FOR = "attributes_for"
    STUB = "stub"


StrategyLike = Union[Strategy, str]


class Proxy(ABC):
    strategy: Strategy

    def __init__(self, build_class: Callable[..., Any], registry: "Registry") -> None:
        self.build_class = build_class
        self.registry = registry
        self._values: Dict[str, Any] = {}
        self._ignored: Set[str] = set()
        self._callbacks: Dict[str, List["Callback"]] = {}

    # ---------- Capability set ----------

    def add_callback(self, callback: "Callback") -> None:
        self._callbacks.setdefault(callback.name, []).append(callback)

    def set(self, name: str, value: Any, ignored: bool = False) -> None:
        self._values[name] = value
        if ignored:
            self._ignored.add(name)
        else:
            self._ignored.discard(name)

    @abstractmethod
    def associate(
        self,
        name: str,
        factory: str,
        overrides: Dict[str, Any],
        strategy: Optional[StrategyLike] = None,
    ) -> None:
        ...

    @abstractmethod
    def result(self, finalizer: Optional[Finalizer]) -> Any:
        ...

    # ---------- Helpers for subclasses and dynamic attributes ----------

    def get(self, name: str) -> Any:
        """Value already assigned to ``name`` (ignored values included)."""
        try:
            return self._values[name]
        except KeyError:
            raise KeyError(f"Attribute {name!r} has not been set yet") from None

    def has(self, name: str) -> bool:
        return name in self._values

    @property
    def persisted_values(self) -> Dict[str, Any]:
        return {k: v for k, v in self._values.items() if k not in self._ignored}

    def run_callbacks(self, name: str, instance: Any) -> None:
        for callback in self._callbacks.get(name, []):
            callback.run(instance, self)

    def instantiate(self) -> Any:
        return self.build_class(**self.persisted_values)

    def build_association(
        self,
        factory: str,
        overrides: Dict[str, Any],
        strategy: StrategyLike,
    ) -> Any:
        proxy_class = proxy_for(strategy)
        logger.debug("Building association %s with %s", factory, proxy_class.strategy.value)
        return self.registry.factory_by_name(factory).run(proxy_class, overrides)


_PROXIES: Dict[Strategy, Type[Proxy]] = {}


def register_proxy(proxy_class: Type[Proxy]) -> Type[Proxy]:
    """Class decorator binding a proxy class to its ``strategy`` tag."""
    _PROXIES[proxy_class.strategy] = proxy_class
    return proxy_class


def coerce_strategy(tag: StrategyLike) -> Strategy:
    if isinstance(tag, Strategy):
        return tag
    try:
        return Strategy(str(tag).strip().lower())
    except ValueError:
        raise UnknownStrategyError(f"Unknown strategy: {tag}", strategy=tag) from None


def is_known_strategy(tag: StrategyLike) -> bool:
    try:
        return coerce_strategy(tag) in _PROXIES
    except UnknownStrategyError:
        return False


def proxy_for(tag: Union[StrategyLike, Type[Proxy]]) -> Type[Proxy]:
    """Resolve a strategy tag (or an explicit proxy class) to a proxy class."""
    if isinstance(tag, type) and issubclass(tag, Proxy):
        return tag
    strategy = coerce_strategy(tag)
    try:
        return _PROXIES[strategy]
    except KeyError:
        raise UnknownStrategyError(f"Unknown strategy: {tag}", strategy=tag) from None


__all__ = [
    "Finalizer",
    "Proxy",
    "Strategy",
    "StrategyLike",
    "coerce_strategy",
    "is_known_strategy",
    "proxy_for",
    "register_proxy",
]
