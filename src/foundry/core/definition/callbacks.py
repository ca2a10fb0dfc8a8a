"""Lifecycle callbacks attached to factories and traits."""
from __future__ import annotations

import inspect
from typing import TYPE_CHECKING, Any, Callable

from foundry.core.exceptions import InvalidCallbackNameError

if TYPE_CHECKING:
    from foundry.core.strategies.base import Proxy

VALID_CALLBACK_NAMES = ("after_build", "after_create", "after_stub")


class Callback:
    """A handler bound to one lifecycle event.

    Handlers take either ``(instance)`` or ``(instance, proxy)``; the proxy
    gives access to ignored values through ``proxy.get(name)``.
    """

    def __init__(self, name: str, handler: Callable[..., Any]) -> None:
        name = str(name)
        if name not in VALID_CALLBACK_NAMES:
            raise InvalidCallbackNameError(
                f"{name} is not a valid callback name. "
                f"Valid callback names are {', '.join(VALID_CALLBACK_NAMES)}",
                name=name,
            )
        self.name = name
        self.handler = handler
        self._wants_proxy = _positional_arity(handler) >= 2

    def run(self, instance: Any, proxy: "Proxy") -> None:
        if self._wants_proxy:
            self.handler(instance, proxy)
        else:
            self.handler(instance)

    def __repr__(self) -> str:
        return f"Callback({self.name!r}, {self.handler!r})"


def _positional_arity(handler: Callable[..., Any]) -> int:
    try:
        params = inspect.signature(handler).parameters.values()
    except (TypeError, ValueError):
        return 1
    count = 0
    for param in params:
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return 2
        if param.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD):
            count += 1
    return count


__all__ = ["Callback", "VALID_CALLBACK_NAMES"]
