"""Registry of factories, traits and build classes.

The registry has two phases. While defining, factories, traits and classes
are registered (names must be unique). :meth:`Registry.seal` compiles every
factory, checks that each string class identifier resolves, and ends the
definition phase; from then on the registry is read-only and safe to share
between threads that only build.
"""
from __future__ import annotations

import itertools
import logging
import re
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Pattern, Tuple, Type, Union

from foundry.core.config import FoundryConfig
from foundry.core.definition.traits import Trait
from foundry.core.exceptions import (
    ClassNotRegisteredError,
    DuplicateDefinitionError,
    FactoryNotFoundError,
    RegistrySealedError,
    TraitNotFoundError,
)
from foundry.core.factory import Factory
from foundry.core.strategies.base import Proxy, Strategy, StrategyLike
from foundry.core.utils.text import canonical_name

logger = logging.getLogger(__name__)


class Registry:
    """Name -> Factory, name -> Trait and type identifier -> constructor tables.

    Example:
        registry = Registry()
        registry.register_class(User)
        user = registry.define_factory("user", aliases=["author"])
        user.declare_attribute(StaticDeclaration("name", "Alice"))
        registry.seal()

        registry.build("author", name="Bob")
    """

    def __init__(self, config: Optional[FoundryConfig] = None) -> None:
        self.config = config if config is not None else FoundryConfig.load()
        self._factories: Dict[str, Factory] = {}
        self._traits: Dict[str, Trait] = {}
        self._classes: Dict[str, Callable[..., Any]] = {}
        self._sealed = False
        self._stub_ids = itertools.count(self.config.stub_id_start)
        self._alias_patterns: List[Tuple[Pattern[str], str]] = [
            (re.compile(p.match), p.replace) for p in self.config.alias_patterns
        ]

    # =========================================================================
    # Definition phase
    # =========================================================================

    @property
    def sealed(self) -> bool:
        return self._sealed

    def define_factory(
        self,
        name: str,
        options: Optional[Mapping[str, Any]] = None,
        **kw: Any,
    ) -> Factory:
        """Construct a factory bound to this registry and register it.

        ``class`` is a reserved word, so it can be passed as ``class_``.
        """
        merged = dict(options or {})
        if "class_" in kw:
            kw["class"] = kw.pop("class_")
        merged.update(kw)
        factory = Factory(name, merged, registry=self)
        self.register_factory(factory)
        return factory

    def register_factory(self, factory: Factory) -> Factory:
        self._assert_defining("register factory", factory.name)
        for name in factory.names():
            if name in self._factories:
                raise DuplicateDefinitionError(
                    f"Factory already registered: {name}",
                    factory=name,
                )
        for name in factory.names():
            self._factories[name] = factory
        logger.debug("Registered factory %s", factory.name)
        return factory

    def register_trait(self, trait: Trait) -> Trait:
        self._assert_defining("register trait", trait.name)
        if trait.name in self._traits:
            raise DuplicateDefinitionError(
                f"Trait already registered: {trait.name}",
                context={"trait": trait.name},
            )
        self._traits[trait.name] = trait
        return trait

    def register_class(self, constructor: Callable[..., Any], identifier: Optional[str] = None) -> Callable[..., Any]:
        """Map a type identifier to a constructor.

        The identifier defaults to the snake-cased ``__name__`` of
        ``constructor`` (``UserProfile`` -> ``"user_profile"``). Usable as a
        decorator on classes.
        """
        self._assert_defining("register class", identifier or getattr(constructor, "__name__", None))
        key = canonical_name(identifier or constructor.__name__)
        existing = self._classes.get(key)
        if existing is not None and existing is not constructor:
            raise DuplicateDefinitionError(
                f"Class identifier already registered: {key}",
                context={"class": key},
            )
        self._classes[key] = constructor
        return constructor

    def seal(self) -> None:
        """Compile every factory and end the definition phase."""
        if self._sealed:
            return
        for factory in self.factories:
            factory.seal()
        for factory in self.factories:
            # Resolve string identifiers now rather than at first build.
            _ = factory.build_class
        self._sealed = True
        logger.info("Registry sealed with %d factories", len(self.factories))

    def _assert_defining(self, action: str, subject: Optional[str]) -> None:
        if self._sealed:
            raise RegistrySealedError(
                f"Cannot {action} '{subject}': registry is sealed",
                context={"subject": subject},
            )

    # =========================================================================
    # Lookups
    # =========================================================================

    def factory_by_name(self, name: str) -> Factory:
        key = canonical_name(name)
        try:
            return self._factories[key]
        except KeyError:
            raise FactoryNotFoundError(key) from None

    def trait_by_name(self, name: str) -> Trait:
        key = canonical_name(name)
        try:
            return self._traits[key]
        except KeyError:
            raise TraitNotFoundError(key) from None

    def class_for(self, identifier: Any) -> Callable[..., Any]:
        """Resolve a class identifier: constructors pass through, strings are looked up."""
        if callable(identifier):
            return identifier
        key = canonical_name(identifier)
        try:
            return self._classes[key]
        except KeyError:
            raise ClassNotRegisteredError(key) from None

    def aliases_for(self, name: str) -> List[str]:
        """Attribute names an override keyed ``name`` also applies to."""
        aliases: List[str] = []
        for pattern, replace in self._alias_patterns:
            match = pattern.fullmatch(name)
            if match:
                aliases.append(match.expand(replace))
        aliases.append(name)
        return aliases

    def next_stub_id(self) -> int:
        return next(self._stub_ids)

    @property
    def factories(self) -> List[Factory]:
        """Registered factories, each once, in registration order."""
        seen: Dict[int, Factory] = {}
        for factory in self._factories.values():
            seen.setdefault(id(factory), factory)
        return list(seen.values())

    @property
    def traits(self) -> List[Trait]:
        return list(self._traits.values())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and canonical_name(name) in self._factories

    def __iter__(self) -> Iterator[Factory]:
        return iter(self.factories)

    # =========================================================================
    # Build phase
    # =========================================================================

    def run(
        self,
        factory_name: str,
        strategy: Union[StrategyLike, Type[Proxy], None] = None,
        overrides: Optional[Mapping[Any, Any]] = None,
    ) -> Any:
        """Build through ``factory_name``; ``strategy=None`` uses its default strategy."""
        factory = self.factory_by_name(factory_name)
        return factory.run(strategy if strategy is not None else factory.default_strategy, overrides)

    def build(self, factory_name: str, /, **overrides: Any) -> Any:
        return self.run(factory_name, Strategy.BUILD, overrides)

    def create(self, factory_name: str, /, **overrides: Any) -> Any:
        return self.run(factory_name, Strategy.CREATE, overrides)

    def attributes_for(self, factory_name: str, /, **overrides: Any) -> Dict[str, Any]:
        return self.run(factory_name, Strategy.ATTRIBUTES_FOR, overrides)

    def build_stubbed(self, factory_name: str, /, **overrides: Any) -> Any:
        return self.run(factory_name, Strategy.STUB, overrides)

    def build_list(self, factory_name: str, count: int, /, **overrides: Any) -> List[Any]:
        return [self.build(factory_name, **overrides) for _ in range(count)]

    def create_list(self, factory_name: str, count: int, /, **overrides: Any) -> List[Any]:
        return [self.create(factory_name, **overrides) for _ in range(count)]


__all__ = ["Registry"]
