"""
Foundry - declarative object factories

Factories bundle attribute rules, inherit from parent factories and mix in
traits; a registry compiles them and builds objects through pluggable
strategies (build, create, attributes_for, stub).
"""

__version__ = "1.0.0"

from foundry.core import (  # noqa: E402
    AssociationDeclaration,
    CompileState,
    DynamicDeclaration,
    Factory,
    FoundryConfig,
    ImplicitDeclaration,
    Registry,
    StaticDeclaration,
    Strategy,
    Trait,
    configure_logging,
)

__all__ = [
    "__version__",
    "AssociationDeclaration",
    "CompileState",
    "DynamicDeclaration",
    "Factory",
    "FoundryConfig",
    "ImplicitDeclaration",
    "Registry",
    "StaticDeclaration",
    "Strategy",
    "Trait",
    "configure_logging",
]
