from __future__ import annotations

from typing import Any, Dict, Mapping


class FoundryError(Exception):
    """Base exception for Foundry."""

    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "context": self.context,
        }


class DefinitionError(FoundryError, RuntimeError):
    """Raised when a factory, trait or attribute definition is invalid."""

    def __init__(
        self,
        message: str = "",
        *,
        factory: str | None = None,
        attribute: str | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if factory:
            ctx["factory"] = factory
        if attribute:
            ctx["attribute"] = attribute
        FoundryError.__init__(self, message, context=ctx)
        RuntimeError.__init__(self, message)
        self.factory = factory
        self.attribute = attribute


class AssociationDefinitionError(DefinitionError):
    """Raised when a factory is defined that attempts to instantiate itself."""


class DuplicateDefinitionError(DefinitionError):
    """Raised when a name is defined twice where names must be unique."""


class CyclicDefinitionError(DefinitionError):
    """Raised when a parent chain loops back onto a factory being compiled."""

    def __init__(self, message: str = "", *, chain: list[str] | None = None) -> None:
        super().__init__(message, context={"chain": list(chain or [])})
        self.chain = list(chain or [])


class FactorySealedError(DefinitionError):
    """Raised when a definition-time mutator is called on a compiled factory."""


class RegistrySealedError(DefinitionError):
    """Raised when registering into a registry whose definition phase ended."""


class InvalidCallbackNameError(FoundryError, ValueError):
    """Raised when a callback is defined that has an invalid name."""

    def __init__(self, message: str = "", *, name: str | None = None) -> None:
        FoundryError.__init__(self, message, context={"callback": name} if name else None)
        ValueError.__init__(self, message)
        self.name = name


class InvalidOptionsError(FoundryError, ValueError):
    """Raised when a factory is constructed with unrecognized options."""

    def __init__(self, message: str = "", *, unknown: list[str] | None = None) -> None:
        FoundryError.__init__(self, message, context={"unknown": list(unknown or [])})
        ValueError.__init__(self, message)
        self.unknown = list(unknown or [])


class UnknownStrategyError(FoundryError, ValueError):
    """Raised when a strategy identifier has no proxy implementation."""

    def __init__(self, message: str = "", *, strategy: Any = None) -> None:
        FoundryError.__init__(self, message, context={"strategy": str(strategy)})
        ValueError.__init__(self, message)
        self.strategy = strategy


class AmbiguousOverrideError(FoundryError, ValueError):
    """Raised when two override keys canonicalize to the same attribute name."""

    def __init__(self, message: str = "", *, keys: list[Any] | None = None) -> None:
        FoundryError.__init__(self, message, context={"keys": [str(k) for k in keys or []]})
        ValueError.__init__(self, message)
        self.keys = list(keys or [])


class NotFoundError(FoundryError, KeyError):
    """Base for registry lookups that fail."""

    kind: str = "entry"

    def __init__(self, name: str) -> None:
        message = f"No {self.kind} registered under {name!r}"
        FoundryError.__init__(self, message, context={"name": name, "kind": self.kind})
        KeyError.__init__(self, message)
        self.name = name

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message instead.
        return str(self.args[0]) if self.args else ""


class FactoryNotFoundError(NotFoundError):
    kind = "factory"


class TraitNotFoundError(NotFoundError):
    kind = "trait"


class ClassNotRegisteredError(NotFoundError):
    kind = "class"


class ConfigError(FoundryError, ValueError):
    """Raised when configuration cannot be loaded or fails validation."""

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        FoundryError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "FoundryError",
    "DefinitionError",
    "AssociationDefinitionError",
    "DuplicateDefinitionError",
    "CyclicDefinitionError",
    "FactorySealedError",
    "RegistrySealedError",
    "InvalidCallbackNameError",
    "InvalidOptionsError",
    "UnknownStrategyError",
    "AmbiguousOverrideError",
    "NotFoundError",
    "FactoryNotFoundError",
    "TraitNotFoundError",
    "ClassNotRegisteredError",
    "ConfigError",
]
