from __future__ import annotations

from typing import Any, Dict, Optional

from .base import Finalizer, Proxy, Strategy, StrategyLike, register_proxy


@register_proxy
class BuildProxy(Proxy):
    """Construct an unsaved instance.

    Associations are created (persisted) unless the association names its
    own strategy.
    """

    strategy = Strategy.BUILD
    association_strategy: Strategy = Strategy.CREATE

    def associate(
        self,
        name: str,
        factory: str,
        overrides: Dict[str, Any],
        strategy: Optional[StrategyLike] = None,
    ) -> None:
        value = self.build_association(factory, overrides, strategy or self.association_strategy)
        self.set(name, value)

    def result(self, finalizer: Optional[Finalizer]) -> Any:
        instance = self.instantiate()
        self.run_callbacks("after_build", instance)
        return instance
