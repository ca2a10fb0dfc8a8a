from __future__ import annotations

from typing import Any, Optional

from .base import Finalizer, Strategy, register_proxy
from .build import BuildProxy


@register_proxy
class CreateProxy(BuildProxy):
    """Build, then persist through the finalizer or ``instance.<persist_method>()``."""

    strategy = Strategy.CREATE

    def result(self, finalizer: Optional[Finalizer]) -> Any:
        instance = self.instantiate()
        self.run_callbacks("after_build", instance)
        if finalizer is not None:
            finalizer(instance)
        else:
            self.persist(instance)
        self.run_callbacks("after_create", instance)
        return instance

    def persist(self, instance: Any) -> None:
        method = self.registry.config.persist_method
        save = getattr(instance, method, None)
        if not callable(save):
            raise TypeError(
                f"{type(instance).__name__} has no {method}() method; "
                "set a finalizer on the factory to create it"
            )
        save()
