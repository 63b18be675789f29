from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, ClassVar, TypeVar

if TYPE_CHECKING:
    from ..core.lifecycle import EffectsRegistry, SubscriptionGroup

logger = logging.getLogger(__name__)


T_EffectComponent = TypeVar("T_EffectComponent", bound="EffectComponent")


class EffectComponent:
    """Base class for host components that declare store effects.

    PURPOSE: Ties a component's creation and destruction hooks to an
    ``EffectsRegistry`` so its effects are attached exactly while it lives.

    DECLARING EFFECTS:
    Effects are declared at class level. Functions defined in the class body
    receive the component as their first argument, like methods:
    ```python
    class UserCard(EffectComponent):
        def on_loaded(self, action, state):
            self.loaded = True

        effects = {
            "actions": {
                "LOAD_USER": {"after": on_loaded, "matchComponentProps": ["user_id"]},
            },
        }

    card = UserCard(registry, user_id=7)
    with card:
        store.dispatch("LOAD_USER", {"match": [{"user_id": 7}]})
    ```

    LIFECYCLE:
    1. Instantiation: props become plain attributes (the attribute bag the
       property matcher reads)
    2. ``on_create()``: effects attached (two listeners per category)
    3. Runtime: effects fire from store notifications
    4. ``on_destroy()``: every subscription disposed, no further invocations

    Components without ``effects`` or without a registry attach nothing.
    """

    effects: ClassVar[Mapping[str, Any] | None] = None

    def __init__(self, registry: EffectsRegistry | None = None, **props: Any):
        for name, value in props.items():
            setattr(self, name, value)
        self._registry = registry
        self._subscriptions: SubscriptionGroup | None = None

    @property
    def registry(self) -> EffectsRegistry | None:
        return self._registry

    @property
    def is_created(self) -> bool:
        return self._subscriptions is not None and not self._subscriptions.disposed

    def on_create(self) -> None:
        """Creation hook: attach this component's effects."""
        if self._registry is None or not self.effects:
            return
        self._subscriptions = self._registry.register_component_effects(
            self, self.effects
        )

    def on_destroy(self) -> None:
        """Destruction hook: detach this component's effects."""
        if self._subscriptions is None or self._registry is None:
            return
        if not self._registry.unregister_component_effects(self):
            # Registry lost track of us (re-registered elsewhere); dispose directly
            self._subscriptions.dispose()
        self._subscriptions = None

    def __enter__(self: T_EffectComponent) -> T_EffectComponent:
        self.on_create()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.on_destroy()
