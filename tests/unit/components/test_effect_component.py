from __future__ import annotations

from typing import Any

import pytest
from memory_store import InMemoryStore

from store_effects import EffectComponent, EffectConfigurationError, EffectsRegistry


class UserCard(EffectComponent):
    def on_loaded(self, action: dict[str, Any], state: dict[str, Any]) -> None:
        self.events.append(("loaded", action["type"]))

    def on_name(self, mutation: dict[str, Any], state: dict[str, Any]) -> None:
        self.events.append(("name", mutation["payload"]))

    effects = {
        "actions": {
            "LOAD": {"after": on_loaded, "matchComponentProps": ["user_id"]},
        },
        "mutations": {
            "SET_NAME": on_name,
        },
    }

    def __init__(self, registry: EffectsRegistry | None = None, **props: Any) -> None:
        super().__init__(registry, **props)
        self.events: list[tuple[str, Any]] = []


def test_props_become_attributes(registry: EffectsRegistry) -> None:
    card = UserCard(registry, user_id=7, title="Card")

    assert card.user_id == 7
    assert card.title == "Card"
    assert card.registry is registry
    assert card.is_created is False


def test_effects_live_between_create_and_destroy(
    store: InMemoryStore, registry: EffectsRegistry
) -> None:
    card = UserCard(registry, user_id=7)

    with card:
        assert card.is_created
        store.dispatch("LOAD", {"match": [{"user_id": 7}]})
        store.dispatch("LOAD", {"match": [{"user_id": 8}]})

    assert card.is_created is False
    store.dispatch("LOAD", {"match": [{"user_id": 7}]})
    store.commit("SET_NAME", "later")

    # LOAD commits SET_NAME "loaded" before the after-notification
    assert card.events == [
        ("name", "loaded"),
        ("loaded", "LOAD"),
        ("name", "loaded"),
    ]
    assert store.listener_count == 0


def test_each_instance_uses_its_own_props(
    store: InMemoryStore, registry: EffectsRegistry
) -> None:
    first = UserCard(registry, user_id=1)
    second = UserCard(registry, user_id=2)
    first.on_create()
    second.on_create()

    store.dispatch("LOAD", {"match": [{"user_id": 2}]})

    assert ("loaded", "LOAD") not in first.events
    assert ("loaded", "LOAD") in second.events

    first.on_destroy()
    second.on_destroy()
    assert store.listener_count == 0


def test_component_without_effects_or_registry_attaches_nothing(
    store: InMemoryStore, registry: EffectsRegistry
) -> None:
    with EffectComponent(registry):
        assert store.listener_count == 0

    with UserCard(None, user_id=1) as card:
        assert card.is_created is False
    assert store.listener_count == 0


def test_destroy_without_create_is_a_noop(registry: EffectsRegistry) -> None:
    card = UserCard(registry, user_id=1)
    card.on_destroy()

    assert card.is_created is False


def test_misconfigured_component_fails_on_create(
    store: InMemoryStore, registry: EffectsRegistry
) -> None:
    class Broken(EffectComponent):
        effects = {"getters": {"name": lambda *_: None}}

    with pytest.raises(EffectConfigurationError, match="Broken"):
        Broken(registry).on_create()

    assert store.listener_count == 0


def test_component_members_are_not_props(
    store: InMemoryStore, registry: EffectsRegistry
) -> None:
    class Gated(EffectComponent):
        def on_ping(self, action: dict[str, Any], state: dict[str, Any]) -> None:
            self.pinged = True

        effects = {
            "actions": {"PING": {"before": on_ping, "matchComponentProps": ["registry"]}},
        }

    with Gated(registry) as gated:
        store.dispatch("PING", {"match": [{"registry": registry}]})

    assert not hasattr(gated, "pinged")
