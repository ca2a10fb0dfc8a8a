from __future__ import annotations

import pytest

from foundry.core.definition import StaticDeclaration, Trait
from foundry.core.exceptions import (
    ClassNotRegisteredError,
    DuplicateDefinitionError,
    FactoryNotFoundError,
    RegistrySealedError,
)
from foundry.core.factory import Factory
from helpers.models import Post, User


class UserProfile:
    def __init__(self, **values):
        self.__dict__.update(values)


def test_duplicate_factory_name_is_rejected(registry) -> None:
    registry.define_factory("user")

    with pytest.raises(DuplicateDefinitionError, match="Factory already registered: user"):
        registry.define_factory("User")


def test_alias_colliding_with_existing_name_is_rejected(registry) -> None:
    registry.define_factory("user")

    with pytest.raises(DuplicateDefinitionError):
        registry.define_factory("admin", aliases=["user"])
    assert "admin" not in registry


def test_factories_are_found_by_any_name(registry) -> None:
    user = registry.define_factory("user", aliases=["author"])

    assert registry.factory_by_name("user") is user
    assert registry.factory_by_name("Author") is user
    assert registry.factories == [user]
    assert list(registry) == [user]


def test_missing_factory_raises_key_error(registry) -> None:
    with pytest.raises(FactoryNotFoundError) as exc:
        registry.factory_by_name("missing")

    assert isinstance(exc.value, KeyError)
    assert str(exc.value) == "No factory registered under 'missing'"
    assert exc.value.to_json_error()["code"] == "FactoryNotFoundError"


def test_duplicate_trait_is_rejected(registry) -> None:
    registry.register_trait(Trait("admin"))

    with pytest.raises(DuplicateDefinitionError):
        registry.register_trait(Trait("admin"))


def test_register_class_uses_snake_case_name(registry) -> None:
    registry.register_class(UserProfile)

    assert registry.class_for("user_profile") is UserProfile
    assert registry.class_for("UserProfile") is UserProfile
    assert registry.class_for(UserProfile) is UserProfile


def test_register_class_accepts_explicit_identifier(registry) -> None:
    registry.register_class(UserProfile, "profile")

    assert registry.class_for("profile") is UserProfile


def test_register_class_rejects_conflicting_constructor(registry) -> None:
    registry.register_class(User)
    with pytest.raises(DuplicateDefinitionError):
        registry.register_class(Post, "user")


def test_unknown_class_identifier_raises(registry) -> None:
    with pytest.raises(ClassNotRegisteredError):
        registry.class_for("spaceship")


def test_seal_compiles_every_factory(registry) -> None:
    user = registry.define_factory("user")
    admin = registry.define_factory("admin", parent="user")

    registry.seal()

    assert registry.sealed
    assert user.compiled and admin.compiled
    registry.seal()


def test_seal_validates_class_identifiers(registry) -> None:
    registry.define_factory("widget")

    with pytest.raises(ClassNotRegisteredError):
        registry.seal()
    assert not registry.sealed


def test_sealed_registry_rejects_registration(registry) -> None:
    registry.seal()

    with pytest.raises(RegistrySealedError):
        registry.define_factory("user")
    with pytest.raises(RegistrySealedError):
        registry.register_trait(Trait("admin"))
    with pytest.raises(RegistrySealedError):
        registry.register_class(UserProfile)


def test_register_factory_accepts_prebuilt_factory(registry) -> None:
    factory = Factory("user", {"aliases": ["author"]}, registry=registry)

    assert registry.register_factory(factory) is factory
    assert "author" in registry


def test_define_factory_merges_options_and_keywords(registry) -> None:
    factory = registry.define_factory("admin", {"parent": "user"}, class_=User, aliases=["root"])

    assert factory.parent_ref == "user"
    assert factory.class_identifier is User
    assert factory.names() == ["admin", "root"]


def test_aliases_for_applies_configured_patterns(registry) -> None:
    assert registry.aliases_for("author_id") == ["author", "author_id_id", "author_id"]
    assert registry.aliases_for("author") == ["author_id", "author"]


def test_build_helpers_and_lists(registry) -> None:
    user = registry.define_factory("user")
    user.declare_attribute(StaticDeclaration("name", "Alice"))

    built = registry.build_list("user", 2, name="Bob")
    created = registry.create_list("user", 3)

    assert [u.name for u in built] == ["Bob", "Bob"]
    assert not any(u.persisted for u in built)
    assert len(created) == 3
    assert User.saved == created


def test_keyword_overrides_become_attributes(registry) -> None:
    registry.define_factory("user")

    values = registry.attributes_for("user", name="x", email="y")

    assert values == {"name": "x", "email": "y"}
