"""Three-tier trait lookup: local, parent chain, registry."""
from __future__ import annotations

import pytest

from foundry.core.definition import StaticDeclaration, Trait
from foundry.core.exceptions import (
    CyclicDefinitionError,
    DuplicateDefinitionError,
    TraitNotFoundError,
)


def test_local_trait_is_preferred_over_registry(registry) -> None:
    registry.register_trait(Trait("admin", [StaticDeclaration("admin", "global")]))
    user = registry.define_factory("user")
    local = Trait("admin", [StaticDeclaration("admin", "local")])
    user.define_trait(local)

    assert user.trait_by_name("admin") is local


def test_trait_is_resolved_through_parent(registry) -> None:
    parent = registry.define_factory("user")
    trait = Trait("admin", [StaticDeclaration("admin", True)])
    parent.define_trait(trait)
    child = registry.define_factory("moderator", parent="user", traits=["admin"])

    assert child.trait_by_name("admin") is trait
    assert child.attributes().find("admin").value is True


def test_parent_lookup_goes_through_registry_each_time(registry) -> None:
    registry.define_factory("user")
    child = registry.define_factory("admin", parent="user")
    global_trait = registry.register_trait(Trait("loud"))

    assert child.trait_by_name("loud") is global_trait


def test_registry_trait_is_the_last_resort(registry) -> None:
    trait = registry.register_trait(Trait("with_email", [StaticDeclaration("email", "x@example.com")]))
    user = registry.define_factory("user", traits=["with-email"])

    assert user.trait_by_name("WithEmail") is trait
    assert user.attributes().find("email").value == "x@example.com"


def test_unknown_trait_propagates_not_found(registry) -> None:
    user = registry.define_factory("user", traits=["missing"])

    with pytest.raises(TraitNotFoundError, match="No trait registered under 'missing'"):
        user.attributes()


def test_parent_cycle_during_trait_lookup_is_reported(registry) -> None:
    a = registry.define_factory("a", parent="b")
    registry.define_factory("b", parent="a")

    with pytest.raises(CyclicDefinitionError):
        a.trait_by_name("anything")


def test_trait_attributes_are_expanded_once() -> None:
    trait = Trait("admin", [StaticDeclaration("admin", True)])

    assert trait.attributes is trait.attributes
    assert trait.attributes.names() == ["admin"]
    assert trait.names() == ["admin"]


def test_trait_with_duplicate_declarations_fails_on_expansion() -> None:
    trait = Trait("broken", [StaticDeclaration("x", 1), StaticDeclaration("x", 2)])

    with pytest.raises(DuplicateDefinitionError):
        trait.attributes
