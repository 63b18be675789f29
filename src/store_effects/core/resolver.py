"""Dispatch resolution: which effect fires for an observed event, and when.

CONTENTS:
- EffectResolver: resolves one event notification against one context's tree
- ActionListener: action-stream listener (``before``/``after``) for one pass
- MutationListener: mutation-stream listener for one pass

Each registering context gets one resolver and, per declared category, two
listeners: a normal one and a prepend one. The container orders the two
passes; the resolver only checks that a descriptor's ``prepend`` flag
agrees with the pass it is observed from.

Resolution for an event of type ``T`` seen by a pass:

1. ``T`` not declared for the category -> ``IDLE``
2. no callable for this stage and pass -> ``IDLE``
3. property matcher rejects the payload -> ``GATED``
4. ``callable(owner, event, state)`` -> ``FIRED``

Exceptions raised by effects are not caught here; they propagate to
whoever triggered the notification.
"""

from __future__ import annotations

import logging
from typing import Any

from .descriptors import HandlerDescriptor, SimpleHandler
from .matching import attribute_bag, event_field, match_list_of, matches
from .protocols import DispatchOutcome, EffectCallable, EffectCategory, Stage
from .tracing import DispatchTracer
from .tree import EffectTree

logger = logging.getLogger(__name__)


class EffectResolver:
    """Resolves event notifications against one context's ``EffectTree``.

    Stateless between events, so re-entrant notifications (an effect that
    dispatches another action) resolve independently.
    """

    def __init__(
        self,
        owner: Any,
        tree: EffectTree,
        *,
        tracer: DispatchTracer | None = None,
        debug: bool = False,
    ):
        self.owner = owner
        self.tree = tree
        self._attributes = attribute_bag(owner)
        self._tracer = tracer
        self._debug = debug

    def _select(
        self,
        category: EffectCategory,
        descriptor: HandlerDescriptor,
        stage: Stage | None,
        prepend: bool,
    ) -> EffectCallable | None:
        """Pick the callable for this notification point and pass, if any."""
        if isinstance(descriptor, SimpleHandler):
            # Simple handlers have no stage to align with the prepend pass
            if prepend or descriptor.prepend:
                return None
            if category is EffectCategory.ACTIONS and stage is not Stage.BEFORE:
                return None
            return descriptor.handler

        if descriptor.prepend != prepend:
            return None
        if category is EffectCategory.MUTATIONS:
            return descriptor.mutation_handler
        return descriptor.for_stage(stage or Stage.BEFORE)

    def _resolve(
        self,
        category: EffectCategory,
        event: Any,
        state: Any,
        stage: Stage | None,
        prepend: bool,
    ) -> DispatchOutcome:
        event_type = event_field(event, "type")
        descriptor = self.tree.get(category, event_type)
        if descriptor is None:
            return DispatchOutcome.IDLE

        fn = self._select(category, descriptor, stage, prepend)
        if fn is None:
            outcome = DispatchOutcome.IDLE
        elif not matches(
            descriptor.match_properties, self._attributes, match_list_of(event)
        ):
            outcome = DispatchOutcome.GATED
        else:
            outcome = DispatchOutcome.FIRED

        if self._debug:
            point = category.value if stage is None else f"{category.value}:{stage.value}"
            logger.debug(
                f"{event_type!r} {point} prepend={prepend} -> {outcome.value} "
                f"for {type(self.owner).__name__}"
            )
        if self._tracer is not None:
            self._tracer.record(
                category,
                event_type,
                outcome,
                stage=stage,
                prepend=prepend,
                owner=self.owner,
                payload=event_field(event, "payload"),
            )

        if outcome is DispatchOutcome.FIRED:
            fn(self.owner, event, state)
        return outcome

    def resolve_action(
        self, stage: Stage, action: Any, state: Any, *, prepend: bool = False
    ) -> DispatchOutcome:
        """Resolve one action notification (``stage`` is before or after)."""
        return self._resolve(EffectCategory.ACTIONS, action, state, stage, prepend)

    def resolve_mutation(
        self, mutation: Any, state: Any, *, prepend: bool = False
    ) -> DispatchOutcome:
        """Resolve the single, post-apply mutation notification."""
        return self._resolve(EffectCategory.MUTATIONS, mutation, state, None, prepend)


class _Listener:
    __slots__ = ("resolver", "prepend", "closed")

    def __init__(self, resolver: EffectResolver, *, prepend: bool = False):
        self.resolver = resolver
        self.prepend = prepend
        self.closed = False

    def close(self) -> None:
        """Stop reacting, even to a notification the container already queued."""
        self.closed = True

    def __repr__(self) -> str:
        owner = type(self.resolver.owner).__name__
        return (
            f"<{type(self).__name__} owner={owner} prepend={self.prepend} "
            f"closed={self.closed}>"
        )


class ActionListener(_Listener):
    """Action-stream listener; the container calls ``before`` then ``after``."""

    __slots__ = ()

    def before(self, action: Any, state: Any) -> DispatchOutcome:
        if self.closed:
            return DispatchOutcome.IDLE
        return self.resolver.resolve_action(
            Stage.BEFORE, action, state, prepend=self.prepend
        )

    def after(self, action: Any, state: Any) -> DispatchOutcome:
        if self.closed:
            return DispatchOutcome.IDLE
        return self.resolver.resolve_action(
            Stage.AFTER, action, state, prepend=self.prepend
        )


class MutationListener(_Listener):
    """Mutation-stream listener; called once per applied mutation."""

    __slots__ = ()

    def __call__(self, mutation: Any, state: Any) -> DispatchOutcome:
        if self.closed:
            return DispatchOutcome.IDLE
        return self.resolver.resolve_mutation(mutation, state, prepend=self.prepend)
