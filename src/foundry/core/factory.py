"""Factories: compile declarations, resolve attributes, drive a build.

Architecture:
    Registry (names -> factories, traits, classes)
    └── Factory (this module)
        ├── own AttributeList (declarations, callbacks, compiled attributes)
        ├── Traits (local, inherited via parent, or registry-wide)
        └── Proxy (one subclass per build strategy)

Precedence of the resolved attribute set, highest first:

    own attributes > traits (first referenced wins) > parent's resolved set
"""
from __future__ import annotations

import enum
import logging
import weakref
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Mapping, Optional, Set, Type, Union

from foundry.core.definition.attribute_list import AttributeList, MergeMode
from foundry.core.definition.attributes import Attribute
from foundry.core.definition.callbacks import Callback
from foundry.core.definition.declarations import Declaration
from foundry.core.definition.traits import Trait
from foundry.core.exceptions import (
    AmbiguousOverrideError,
    AssociationDefinitionError,
    CyclicDefinitionError,
    FactorySealedError,
    InvalidOptionsError,
    UnknownStrategyError,
)
from foundry.core.strategies.base import (
    Finalizer,
    Proxy,
    Strategy,
    StrategyLike,
    coerce_strategy,
    is_known_strategy,
    proxy_for,
)
from foundry.core.utils.text import canonical_name, humanize

if TYPE_CHECKING:
    from foundry.core.registry import Registry

logger = logging.getLogger(__name__)

VALID_OPTIONS = frozenset({"class", "parent", "aliases", "traits", "default_strategy"})


class CompileState(str, enum.Enum):
    UNSEALED = "unsealed"
    COMPILING = "compiling"
    SEALED = "sealed"


class Factory:
    """A named blueprint for constructing one kind of object.

    Args:
        name: Factory name; canonicalized to lower snake case.
        options: Any of ``class``, ``parent``, ``aliases``, ``traits`` and
            ``default_strategy``. Other keys raise ``InvalidOptionsError``.
        registry: Registry used for parent, trait and class lookups.

    Example:
        factory = Factory("user", {"aliases": ["author"]}, registry=registry)
        factory.declare_attribute(StaticDeclaration("name", "Alice"))
        registry.register_factory(factory)
        user = factory.run(BuildProxy, {"email": "alice@example.com"})
    """

    def __init__(
        self,
        name: str,
        options: Optional[Mapping[str, Any]] = None,
        *,
        registry: "Registry",
    ) -> None:
        options = dict(options or {})
        self.registry = registry
        self._assert_valid_options(options)

        self.name = canonical_name(name)
        self.parent_ref: Optional[str] = canonical_name(options["parent"]) if options.get("parent") else None
        self.aliases: List[str] = [canonical_name(a) for a in options.get("aliases") or []]
        self.trait_refs: List[str] = [canonical_name(t) for t in options.get("traits") or []]
        self._class_identifier: Any = options.get("class")
        self._default_strategy: Optional[Strategy] = (
            coerce_strategy(options["default_strategy"]) if options.get("default_strategy") else None
        )

        self.defined_traits: List[Trait] = []
        self._definition = AttributeList(overridable=registry.config.allow_overrides)
        self._compiled: Optional[AttributeList] = None
        self._parent_factory: Optional["weakref.ReferenceType[Factory]"] = None
        self._children: List["weakref.ReferenceType[Factory]"] = []
        self._finalizer: Optional[Finalizer] = None
        self._build_class: Optional[Callable[..., Any]] = None
        self._state = CompileState.UNSEALED

    # =========================================================================
    # Identity and inherited settings
    # =========================================================================

    @property
    def class_identifier(self) -> Any:
        return self._class_identifier if self._class_identifier is not None else self.name

    @property
    def default_strategy(self) -> Strategy:
        if self._default_strategy is not None:
            return self._default_strategy
        return coerce_strategy(self.registry.config.default_strategy)

    @property
    def build_class(self) -> Callable[..., Any]:
        """Constructor for built objects, resolved once through the registry."""
        if self._build_class is None:
            self._build_class = self.registry.class_for(self.class_identifier)
        return self._build_class

    @property
    def parent_factory(self) -> Optional["Factory"]:
        return self._parent_factory() if self._parent_factory is not None else None

    @property
    def children(self) -> List["Factory"]:
        return [child for child in (ref() for ref in self._children) if child is not None]

    @property
    def state(self) -> CompileState:
        return self._state

    @property
    def compiled(self) -> bool:
        return self._state is CompileState.SEALED

    @property
    def overrides_allowed(self) -> bool:
        return self._definition.is_overridable()

    @property
    def finalizer(self) -> Optional[Finalizer]:
        return self._finalizer

    def names(self) -> List[str]:
        """Names for this factory, including aliases.

        Because an attribute declared without a value or block builds an
        association with the factory of the same name, aliases let a post
        declare a bare ``author`` attribute that builds through ``user``.
        """
        return [self.name, *self.aliases]

    def human_names(self) -> List[str]:
        return [humanize(name).lower() for name in self.names()]

    # =========================================================================
    # Definition-time mutators
    # =========================================================================

    def declare_attribute(self, declaration: Declaration) -> None:
        self._assert_unsealed("declare attribute", declaration.name)
        self._definition.declare_attribute(declaration)

    def define_trait(self, trait: Trait) -> None:
        self._assert_unsealed("define trait", trait.name)
        self.defined_traits.append(trait)

    def add_callback(self, name: str, handler: Callable[..., Any]) -> None:
        self._assert_unsealed("add callback", str(name))
        self._definition.add_callback(Callback(name, handler))

    def set_finalizer(self, handler: Finalizer) -> None:
        self._assert_unsealed("set finalizer")
        self._finalizer = handler

    def allow_overrides(self) -> "Factory":
        """Let later declarations replace same-named ones, here and in descendants."""
        if not self._definition.is_overridable():
            self._definition.overridable()
            if self._compiled is not None:
                self._compiled.overridable()
        for child in self.children:
            if not child.overrides_allowed:
                child.allow_overrides()
        return self

    def add_child(self, factory: "Factory") -> None:
        if factory not in self.children:
            self._children.append(weakref.ref(factory))

    @property
    def declarations(self) -> List[Declaration]:
        return self._definition.declarations

    # =========================================================================
    # Compilation
    # =========================================================================

    def compile(self) -> None:
        """Expand declarations into attributes, inheriting from the parent first.

        Idempotent. A parent chain that loops back here raises
        ``CyclicDefinitionError``; any failure leaves the factory unsealed.
        """
        if self._state is CompileState.SEALED:
            return
        if self._state is CompileState.COMPILING:
            chain = self._parent_chain()
            raise CyclicDefinitionError(
                f"Cyclic parent reference detected for factory '{self.name}': {' -> '.join(chain)}",
                chain=chain,
            )

        self._state = CompileState.COMPILING
        try:
            if self.parent_ref:
                self.inherit_factory(self.registry.factory_by_name(self.parent_ref))

            compiled = AttributeList(overridable=self.overrides_allowed)
            for declaration in self.declarations:
                for attribute in declaration.to_attributes():
                    self._define_attribute(compiled, attribute)
            for callback in self._definition.callbacks:
                compiled.add_callback(callback)
        except BaseException:
            self._state = CompileState.UNSEALED
            raise

        self._compiled = compiled
        self._state = CompileState.SEALED
        logger.debug("Compiled factory %s: %s", self.name, compiled.names())

    seal = compile

    def ensure_compiled(self) -> None:
        if self._state is not CompileState.SEALED:
            self.compile()

    def inherit_factory(self, parent: "Factory") -> None:
        parent.ensure_compiled()
        if self._class_identifier is None:
            self._class_identifier = parent.class_identifier
        if self._default_strategy is None:
            self._default_strategy = parent._default_strategy
        self._parent_factory = weakref.ref(parent)

        if parent.overrides_allowed:
            self.allow_overrides()
        parent.add_child(self)

    # =========================================================================
    # Resolution
    # =========================================================================

    def attributes(self) -> AttributeList:
        """Resolve traits, own attributes and the parent's set into a new list."""
        self.ensure_compiled()
        assert self._compiled is not None

        result = AttributeList()
        for trait in [self.trait_by_name(name) for name in reversed(self.trait_refs)]:
            result.apply_attributes(trait.attributes, MergeMode.OVERRIDE)

        result.apply_attributes(self._compiled, MergeMode.OVERRIDE)

        parent = self.parent_factory
        if parent is not None:
            result.apply_attributes(parent.attributes(), MergeMode.INHERIT)
        return result

    def callbacks(self) -> List[Callback]:
        return self.attributes().callbacks

    def associations(self) -> List[Attribute]:
        return [attribute for attribute in self.attributes() if attribute.is_association]

    def trait_by_name(self, name: str) -> Trait:
        """Local traits first, then the parent chain, then registry-wide traits."""
        return self._resolve_trait(canonical_name(name), set())

    def _resolve_trait(self, name: str, seen: Set[str]) -> Trait:
        trait = self._trait_for(name)
        if trait is not None:
            return trait
        if self.parent_ref:
            seen = seen | {self.name}
            if self.parent_ref in seen:
                chain = self._parent_chain()
                raise CyclicDefinitionError(
                    f"Cyclic parent reference while resolving trait '{name}': {' -> '.join(chain)}",
                    chain=chain,
                )
            # Fresh lookup: the chain reflects the registry's current state.
            return self.registry.factory_by_name(self.parent_ref)._resolve_trait(name, seen)
        return self.registry.trait_by_name(name)

    def _trait_for(self, name: str) -> Optional[Trait]:
        for trait in self.defined_traits:
            if trait.name == name:
                return trait
        return None

    # =========================================================================
    # Build
    # =========================================================================

    def run(
        self,
        proxy_class: Union[Type[Proxy], StrategyLike],
        overrides: Optional[Mapping[Any, Any]] = None,
    ) -> Any:
        """Build an object with ``proxy_class``, applying ``overrides`` on top."""
        self.ensure_compiled()
        proxy = proxy_for(proxy_class)(self.build_class, self.registry)

        attributes = self.attributes()
        for callback in attributes.callbacks:
            proxy.add_callback(callback)

        pending = self._canonical_overrides(overrides)

        # Keys naming an attribute (or a declared alias) belong to it; only the
        # rest may reach an attribute through the registry's alias patterns.
        reserved: Dict[str, Attribute] = {}
        for key in pending:
            for attribute in attributes:
                if attribute.aliases_for(key):
                    reserved[key] = attribute
                    break

        for attribute in attributes:
            matched = [key for key in pending if self._override_targets(attribute, key, reserved)]
            if not matched:
                attribute.add_to(proxy)
                continue
            for key in matched:
                proxy.set(key, pending.pop(key), ignored=attribute.ignored)

        for key, value in pending.items():
            proxy.set(key, value)

        logger.debug("Running factory %s with %s", self.name, type(proxy).__name__)
        return proxy.result(self._finalizer)

    def _override_targets(self, attribute: Attribute, key: str, reserved: Mapping[str, Attribute]) -> bool:
        owner = reserved.get(key)
        if owner is not None:
            return owner is attribute
        return attribute.name in self.registry.aliases_for(key)

    def _canonical_overrides(self, overrides: Optional[Mapping[Any, Any]]) -> Dict[str, Any]:
        pending: Dict[str, Any] = {}
        given: Dict[str, Any] = {}
        for key, value in (overrides or {}).items():
            name = canonical_name(key)
            if name in pending:
                raise AmbiguousOverrideError(
                    f"Override keys {given[name]!r} and {key!r} both name '{name}' in factory '{self.name}'",
                    keys=[given[name], key],
                )
            pending[name] = value
            given[name] = key
        return pending

    # =========================================================================
    # Validation helpers
    # =========================================================================

    def _define_attribute(self, target: AttributeList, attribute: Attribute) -> None:
        if getattr(attribute, "factory", None) in self.names():
            raise AssociationDefinitionError(
                f"Self-referencing association '{attribute.name}' in factory '{self.name}'",
                factory=self.name,
                attribute=attribute.name,
            )
        target.define_attribute(attribute)

    def _assert_valid_options(self, options: Dict[str, Any]) -> None:
        unknown = sorted(str(k) for k in options if k not in VALID_OPTIONS)
        if unknown:
            raise InvalidOptionsError(
                f"Unknown key(s): {', '.join(unknown)}. "
                f"Valid keys are: {', '.join(sorted(VALID_OPTIONS))}",
                unknown=unknown,
            )

        strategy = options.get("default_strategy")
        if strategy:
            if not is_known_strategy(strategy):
                raise UnknownStrategyError(f"Unknown strategy: {strategy}", strategy=strategy)
            if self.registry.config.warn_default_strategy:
                logger.warning(
                    "default_strategy is deprecated. "
                    "Set a finalizer if you need to prevent a call to %s().",
                    self.registry.config.persist_method,
                )

    def _assert_unsealed(self, action: str, subject: Optional[str] = None) -> None:
        if self._state is not CompileState.UNSEALED:
            target = f" '{subject}'" if subject else ""
            raise FactorySealedError(
                f"Cannot {action}{target} on factory '{self.name}' after it has been compiled",
                factory=self.name,
                attribute=subject,
            )

    def _parent_chain(self) -> List[str]:
        chain = [self.name]
        ref = self.parent_ref
        while ref and ref not in chain:
            chain.append(ref)
            ref = self.registry.factory_by_name(ref).parent_ref
        if ref:
            chain.append(ref)
        return chain

    def __repr__(self) -> str:
        return f"Factory({self.name!r}, state={self._state.value!r})"


__all__ = ["CompileState", "Factory", "VALID_OPTIONS"]
