from __future__ import annotations

from typing import Any, Dict, Optional

from .base import Finalizer, Proxy, Strategy, StrategyLike, register_proxy


@register_proxy
class StubProxy(Proxy):
    """Build an instance that looks persisted without touching storage.

    The instance gets an ``id`` from the registry's stub counter unless one
    was supplied; associations are stubbed as well.
    """

    strategy = Strategy.STUB

    def associate(
        self,
        name: str,
        factory: str,
        overrides: Dict[str, Any],
        strategy: Optional[StrategyLike] = None,
    ) -> None:
        self.set(name, self.build_association(factory, overrides, Strategy.STUB))

    def result(self, finalizer: Optional[Finalizer]) -> Any:
        if not self.has("id"):
            self.set("id", self.registry.next_stub_id())
        instance = self.instantiate()
        self.run_callbacks("after_stub", instance)
        return instance
