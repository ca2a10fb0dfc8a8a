from __future__ import annotations

import logging

import pytest

from foundry.core.config import FoundryConfig
from foundry.core.exceptions import InvalidOptionsError, UnknownStrategyError
from foundry.core.factory import Factory
from foundry.core.registry import Registry
from foundry.core.strategies import Strategy


def test_unknown_option_key_is_rejected(registry) -> None:
    with pytest.raises(InvalidOptionsError) as exc:
        Factory("user", {"colour": "red", "class": "user"}, registry=registry)

    assert exc.value.unknown == ["colour"]
    assert isinstance(exc.value, ValueError)
    assert "Valid keys are" in str(exc.value)


def test_unknown_default_strategy_is_rejected(registry) -> None:
    with pytest.raises(UnknownStrategyError, match="Unknown strategy: teleport"):
        Factory("user", {"default_strategy": "teleport"}, registry=registry)


def test_default_strategy_logs_deprecation(registry, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="foundry"):
        factory = Factory("user", {"default_strategy": "build"}, registry=registry)

    assert factory.default_strategy is Strategy.BUILD
    assert "default_strategy is deprecated" in caplog.text


def test_deprecation_warning_can_be_disabled(caplog) -> None:
    registry = Registry(FoundryConfig({"deprecations": {"warn_default_strategy": False}}))

    with caplog.at_level(logging.WARNING, logger="foundry"):
        Factory("user", {"default_strategy": "stub"}, registry=registry)

    assert caplog.text == ""


def test_default_strategy_falls_back_to_configuration() -> None:
    registry = Registry(FoundryConfig({"factories": {"default_strategy": "build"}}))

    assert Factory("user", registry=registry).default_strategy is Strategy.BUILD


def test_names_and_references_are_canonicalized(registry) -> None:
    factory = Factory(
        "AdminUser",
        {"parent": "User", "aliases": ["SuperUser"], "traits": ["with-posts"]},
        registry=registry,
    )

    assert factory.name == "admin_user"
    assert factory.parent_ref == "user"
    assert factory.aliases == ["super_user"]
    assert factory.trait_refs == ["with_posts"]


def test_class_identifier_defaults_to_name(registry) -> None:
    assert Factory("user", registry=registry).class_identifier == "user"
    assert Factory("user", {"class": "post"}, registry=registry).class_identifier == "post"


def test_overrides_follow_configured_default() -> None:
    registry = Registry(FoundryConfig({"factories": {"allow_overrides": True}}))

    assert Factory("user", registry=registry).overrides_allowed
