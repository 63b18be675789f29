"""Shared protocols, type aliases and exceptions for the effects engine.

The state container and the host component framework are external; this
module only describes the surface the engine consumes from them.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from enum import StrEnum
from typing import Any, Protocol, TypeAlias, runtime_checkable

EventType: TypeAlias = str
"""Name of an action or mutation (``"LOAD"``, ``"SET_NAME"``)."""

Disposer: TypeAlias = Callable[[], None]
"""Zero-argument callable returned by the container to detach a listener."""

EffectCallable: TypeAlias = Callable[[Any, Any, Any], Any]
"""Effect signature: ``fn(context, event, state)``."""

Declarations: TypeAlias = Mapping[str, Mapping[EventType, Any]]
"""Raw effect declarations: ``{"actions": {...}, "mutations": {...}}``."""


class EffectCategory(StrEnum):
    """Root sections of an effect declaration tree."""

    ACTIONS = "actions"
    MUTATIONS = "mutations"


class Stage(StrEnum):
    """Notification points of an action.

    Mutations are observed once, after they apply, and have no stage.
    """

    BEFORE = "before"
    AFTER = "after"


class DispatchOutcome(StrEnum):
    """Terminal state of a single listener pass over a single event."""

    IDLE = "idle"
    """Event type not declared, or no callable for this stage/pass."""

    GATED = "gated"
    """Callable resolved but the property matcher rejected the event."""

    FIRED = "fired"
    """Callable invoked."""


class EffectConfigurationError(ValueError):
    """Raised at registration time for an unrecognized effect section.

    This is the only error the engine raises on its own; every other anomaly
    is logged and results in a skipped invocation.
    """

    def __init__(self, section: str, owner: Any = None):
        self.section = section
        self.owner = owner
        where = f" on {type(owner).__name__}" if owner is not None else ""
        super().__init__(
            f"Unrecognized effect section {section!r}{where}. "
            f"Maybe you mean 'actions' or 'mutations'?"
        )


@runtime_checkable
class ActionSubscriber(Protocol):
    """Listener shape for the action stream: notified before and after."""

    def before(self, action: Any, state: Any) -> Any: ...

    def after(self, action: Any, state: Any) -> Any: ...


MutationSubscriber: TypeAlias = Callable[[Any, Any], Any]


@runtime_checkable
class EffectStore(Protocol):
    """Subscription surface the engine needs from a state container.

    Listeners attached with ``prepend=True`` must be notified before listeners
    attached without it. Delivery is synchronous.
    """

    def subscribe_actions(
        self, listener: ActionSubscriber, *, prepend: bool = False
    ) -> Disposer: ...

    def subscribe_mutations(
        self, listener: MutationSubscriber, *, prepend: bool = False
    ) -> Disposer: ...
