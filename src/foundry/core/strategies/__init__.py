"""Build strategies, one proxy class per :class:`Strategy` tag."""
from __future__ import annotations

from .base import (
    Finalizer,
    Proxy,
    Strategy,
    StrategyLike,
    coerce_strategy,
    is_known_strategy,
    proxy_for,
    register_proxy,
)
from .build import BuildProxy
from .create import CreateProxy
from .attributes_for import AttributesForProxy
from .stub import StubProxy

__all__ = [
    "AttributesForProxy",
    "BuildProxy",
    "CreateProxy",
    "Finalizer",
    "Proxy",
    "Strategy",
    "StrategyLike",
    "StubProxy",
    "coerce_strategy",
    "is_known_strategy",
    "proxy_for",
    "register_proxy",
]
