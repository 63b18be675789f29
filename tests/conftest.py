from __future__ import annotations

from typing import Any

import pytest
from memory_store import InMemoryStore

from store_effects import EffectsRegistry


@pytest.fixture()
def store() -> InMemoryStore:
    def set_name(state: dict[str, Any], payload: Any) -> None:
        state["name"] = payload

    def load(store: InMemoryStore, payload: Any) -> str:
        store.commit("SET_NAME", "loaded")
        return "done"

    return InMemoryStore(
        state={"name": None},
        mutations={"SET_NAME": set_name},
        actions={"LOAD": load},
    )


@pytest.fixture()
def registry(store: InMemoryStore) -> EffectsRegistry:
    return EffectsRegistry(store)


class Context:
    """Plain attribute-bearing owner used where a component is not needed."""

    def __init__(self, **attributes: Any) -> None:
        for name, value in attributes.items():
            setattr(self, name, value)


@pytest.fixture()
def make_context():
    return Context
