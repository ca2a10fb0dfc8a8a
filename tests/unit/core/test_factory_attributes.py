"""Effective attribute resolution across traits, own declarations and parents."""
from __future__ import annotations

from foundry.core.definition import (
    AssociationDeclaration,
    ImplicitDeclaration,
    StaticDeclaration,
    Trait,
)
from foundry.core.definition.attributes import StaticAttribute


def _value(factory, name):
    return factory.attributes().find(name).value


def test_child_inherits_parent_attribute(registry) -> None:
    user = registry.define_factory("user")
    user.declare_attribute(StaticDeclaration("name", "Alice"))
    user.declare_attribute(StaticDeclaration("email", "alice@example.com"))
    admin = registry.define_factory("admin", parent="user")
    admin.declare_attribute(StaticDeclaration("admin", True))

    attributes = admin.attributes()

    assert attributes.names() == ["name", "email", "admin"]
    assert _value(admin, "name") == "Alice"


def test_child_declaration_shadows_parent(registry) -> None:
    user = registry.define_factory("user")
    user.declare_attribute(StaticDeclaration("name", "Alice"))
    user.declare_attribute(StaticDeclaration("email", "alice@example.com"))
    admin = registry.define_factory("admin", parent="user")
    admin.declare_attribute(StaticDeclaration("name", "Root"))
    admin.declare_attribute(StaticDeclaration("admin", True))

    assert admin.attributes().names() == ["email", "name", "admin"]
    assert _value(admin, "name") == "Root"
    assert _value(user, "name") == "Alice"


def test_first_referenced_trait_wins(registry) -> None:
    registry.register_trait(Trait("t1", [StaticDeclaration("x", 1)]))
    registry.register_trait(Trait("t2", [StaticDeclaration("x", 2), StaticDeclaration("y", 2)]))
    user = registry.define_factory("user", traits=["t1", "t2"])

    assert _value(user, "x") == 1
    assert _value(user, "y") == 2


def test_own_attribute_beats_trait(registry) -> None:
    registry.register_trait(Trait("admin", [StaticDeclaration("admin", True)]))
    user = registry.define_factory("user", traits=["admin"])
    user.declare_attribute(StaticDeclaration("admin", False))

    assert _value(user, "admin") is False


def test_trait_attribute_beats_parent(registry) -> None:
    user = registry.define_factory("user")
    user.declare_attribute(StaticDeclaration("admin", False))
    registry.register_trait(Trait("admin", [StaticDeclaration("admin", True)]))
    admin = registry.define_factory("admin_user", parent="user", traits=["admin"])

    assert _value(admin, "admin") is True


def test_parent_traits_are_resolved_in_parent_context(registry) -> None:
    registry.register_trait(Trait("named", [StaticDeclaration("name", "Trait")]))
    registry.define_factory("user", traits=["named"])
    admin = registry.define_factory("admin", parent="user")

    assert _value(admin, "name") == "Trait"


def test_attributes_are_rebuilt_on_every_call(registry) -> None:
    user = registry.define_factory("user")
    user.declare_attribute(StaticDeclaration("name", "Alice"))

    first = user.attributes()
    first.define_attribute(StaticAttribute("extra", 1))

    second = user.attributes()
    assert first is not second
    assert "extra" not in second


def test_callbacks_follow_trait_own_parent_order(registry) -> None:
    def from_parent(instance):
        return None

    def from_trait(instance):
        return None

    def from_own(instance):
        return None

    user = registry.define_factory("user")
    user.add_callback("after_build", from_parent)
    registry.register_trait(Trait("loud", callbacks=[("after_build", from_trait)]))
    admin = registry.define_factory("admin", parent="user", traits=["loud"])
    admin.add_callback("after_build", from_own)

    assert [c.handler for c in admin.callbacks()] == [from_trait, from_own, from_parent]


def test_associations_lists_only_association_attributes(registry) -> None:
    registry.define_factory("user")
    post = registry.define_factory("post")
    post.declare_attribute(StaticDeclaration("title", "Hello"))
    post.declare_attribute(ImplicitDeclaration("user"))
    post.declare_attribute(AssociationDeclaration("author", factory="user"))

    associations = post.associations()

    assert [a.name for a in associations] == ["user", "author"]
    assert [a.factory for a in associations] == ["user", "user"]


def test_names_start_with_canonical_name(registry) -> None:
    user = registry.define_factory("user", aliases=["author"])
    admin = registry.define_factory("AdminUser", aliases=["super-user"])

    assert user.names() == ["user", "author"]
    assert admin.names() == ["admin_user", "super_user"]
    assert admin.human_names() == ["admin user", "super user"]
