from __future__ import annotations

from typing import Any, Dict, Optional

from .base import Finalizer, Proxy, Strategy, StrategyLike, register_proxy


@register_proxy
class AttributesForProxy(Proxy):
    """Return the resolved values as a plain dict; associations are skipped."""

    strategy = Strategy.ATTRIBUTES_FOR

    def associate(
        self,
        name: str,
        factory: str,
        overrides: Dict[str, Any],
        strategy: Optional[StrategyLike] = None,
    ) -> None:
        return None

    def result(self, finalizer: Optional[Finalizer]) -> Dict[str, Any]:
        return self.persisted_values
