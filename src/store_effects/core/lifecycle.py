"""Subscription lifecycle: binding resolvers to the container's streams.

CONTENTS:
- SubscriptionGroup: the listeners and disposers attached for one context
- EffectsRegistry: registers component-scoped and global effects

One ``EffectsRegistry`` is built per store at process start and passed to
every component that declares effects. Component effects live from the
creation hook to the destruction hook; global effects live as long as the
process.

THREAD SAFETY: Registry bookkeeping is protected by ``threading.RLock``.
Event delivery itself is expected to be synchronous and single-threaded.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from typing import Any

from ..config import EffectsSettings
from .protocols import Disposer, EffectCategory, EffectStore
from .resolver import ActionListener, EffectResolver, MutationListener
from .tracing import DispatchTracer
from .tree import EffectTree

logger = logging.getLogger(__name__)


class SubscriptionGroup:
    """Listeners and container disposers attached on behalf of one owner.

    ``dispose()`` closes every listener before detaching it, so a
    notification the container already snapshotted cannot reach an effect of
    a destroyed owner. Each disposer runs exactly once.
    """

    def __init__(self, owner: Any, resolver: EffectResolver):
        self.owner = owner
        self.resolver = resolver
        self._listeners: list[ActionListener | MutationListener] = []
        self._disposers: list[Disposer] = []
        self._disposed = False

    def add(self, listener: ActionListener | MutationListener, disposer: Disposer) -> None:
        self._listeners.append(listener)
        self._disposers.append(disposer)

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def listeners(self) -> tuple[ActionListener | MutationListener, ...]:
        return tuple(self._listeners)

    def __len__(self) -> int:
        return len(self._disposers)

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True

        for listener in self._listeners:
            listener.close()

        disposers, self._disposers = self._disposers, []
        failures: list[Exception] = []
        for disposer in disposers:
            try:
                disposer()
            except Exception as e:
                failures.append(e)

        if failures:
            for extra in failures[1:]:
                logger.error(
                    f"Disposer failed for {type(self.owner).__name__}: {extra!r}",
                    exc_info=extra,
                )
            raise failures[0]

        logger.debug(
            f"Disposed {len(disposers)} subscriptions for {type(self.owner).__name__}"
        )


class EffectsRegistry:
    """Attaches effect resolvers to a store's action and mutation streams.

    TYPICAL USAGE:
    ```python
    registry = EffectsRegistry(store, global_effects=[(analytics, analytics_effects)])

    # component creation hook
    registry.register_component_effects(component, component.effects)

    # component destruction hook
    registry.unregister_component_effects(component)
    ```

    Every declared category gets exactly two listeners, one normal and one
    prepend, rather than one listener per effect.
    """

    def __init__(
        self,
        store: EffectStore,
        global_effects: Iterable[Any] = (),
        *,
        settings: EffectsSettings | None = None,
    ):
        self.store = store
        self.settings = settings or EffectsSettings()
        self.tracer = DispatchTracer(
            enabled=self.settings.trace,
            verbosity=self.settings.trace_verbosity,
            use_rich=self.settings.trace_use_rich,
        )

        self._lock = threading.RLock()
        self._components: dict[int, SubscriptionGroup] = {}
        self._globals: list[SubscriptionGroup] = []

        global_effects = list(global_effects)
        if global_effects:
            self.register_global_effects(global_effects)

    def set_trace(
        self, enabled: bool, verbosity: int | None = None, use_rich: bool | None = None
    ) -> None:
        """Enable or disable dispatch tracing for every registered owner."""
        self.tracer.configure(enabled, verbosity=verbosity, use_rich=use_rich)
        logger.info(f"Effect tracing {'enabled' if enabled else 'disabled'}")

    def _attach(self, owner: Any, tree: EffectTree) -> SubscriptionGroup:
        resolver = EffectResolver(
            owner, tree, tracer=self.tracer, debug=self.settings.debug
        )
        group = SubscriptionGroup(owner, resolver)

        try:
            for category in tree.categories():
                for prepend in (False, True):
                    if category is EffectCategory.ACTIONS:
                        listener: ActionListener | MutationListener = ActionListener(
                            resolver, prepend=prepend
                        )
                        disposer = self.store.subscribe_actions(listener, prepend=prepend)
                    else:
                        listener = MutationListener(resolver, prepend=prepend)
                        disposer = self.store.subscribe_mutations(
                            listener, prepend=prepend
                        )
                    group.add(listener, disposer)
        except Exception:
            # Partial attachment never outlives a failed registration
            logger.error(
                f"Attaching effects for {type(owner).__name__} failed after "
                f"{len(group)} subscriptions; detaching them"
            )
            group.dispose()
            raise

        if self.settings.debug:
            logger.debug(
                f"Attached {len(group)} listeners for {type(owner).__name__} "
                f"({len(tree)} effects)"
            )
        return group

    def register_component_effects(
        self, context: Any, declarations: Any
    ) -> SubscriptionGroup:
        """Attach ``context``'s effects; call from the creation hook.

        Registering the same context again replaces its previous
        subscriptions once the new ones are attached. If attaching fails,
        the partial subscriptions are disposed and any previous ones stay.

        Raises:
            EffectConfigurationError: ``declarations`` has a root key other
                than ``actions``/``mutations``. Nothing is attached.
        """
        tree = EffectTree.from_declarations(declarations, owner=context)
        with self._lock:
            group = self._attach(context, tree)
            previous = self._components.get(id(context))
            self._components[id(context)] = group
        if previous is not None:
            logger.warning(
                f"{type(context).__name__} registered effects twice; "
                f"replacing the previous subscriptions"
            )
            previous.dispose()
        return group

    def unregister_component_effects(self, context: Any) -> bool:
        """Dispose ``context``'s subscriptions; call from the destruction hook."""
        with self._lock:
            group = self._components.pop(id(context), None)
        if group is None:
            return False
        group.dispose()
        return True

    def is_registered(self, context: Any) -> bool:
        with self._lock:
            return id(context) in self._components

    @staticmethod
    def _unpack_registrant(item: Any) -> tuple[Any, Any]:
        if isinstance(item, tuple) and len(item) == 2:
            return item[0], item[1]
        if isinstance(item, Mapping):
            return item, item.get("effects")
        return item, getattr(item, "effects", None)

    def register_global_effects(self, registrants: Iterable[Any]) -> list[SubscriptionGroup]:
        """Attach effects that live for the rest of the process.

        Each item is a ``(registrant, declarations)`` pair or an object (or
        mapping) exposing ``effects``; the registrant is passed to its
        effects as their context. All items are validated before anything
        is attached.
        """
        trees = []
        for item in registrants:
            registrant, declarations = self._unpack_registrant(item)
            trees.append(
                (registrant, EffectTree.from_declarations(declarations, owner=registrant))
            )

        groups = []
        with self._lock:
            for registrant, tree in trees:
                group = self._attach(registrant, tree)
                self._globals.append(group)
                groups.append(group)
        return groups

    @property
    def subscription_count(self) -> int:
        """Number of live container subscriptions held by this registry."""
        with self._lock:
            groups = [*self._components.values(), *self._globals]
        return sum(len(group) for group in groups)
