"""Handler descriptors and their normalization.

Effects are declared in several shapes::

    effects = {
        "actions": {
            "LOAD": on_load,                                  # bare callable
            "SAVE": {"handler": on_save},                     # explicit handler
            "SYNC": {"before": start, "after": finish},       # staged
            "PING": {"before": ping, "prepend": True},        # prepend pass
            "OPEN": {"before": open_, "matchComponentProps": ["id"]},
        }
    }

``normalize`` turns each shape into one of two frozen variants once, at
registration time, so the resolver never re-inspects raw declarations.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, TypeAlias

from .protocols import EffectCallable, Stage

logger = logging.getLogger(__name__)

_KNOWN_KEYS = frozenset(
    {"handler", "before", "after", "prepend", "matchComponentProps", "match_component_props"}
)


@dataclass(frozen=True, slots=True)
class SimpleHandler:
    """A single handler fired when the event is first observed.

    For actions this is the before-notification; for mutations it is the
    only notification.
    """

    handler: EffectCallable
    prepend: bool = False
    match_properties: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class StagedHandler:
    """Handlers bound to explicit ``before``/``after`` stages."""

    before: EffectCallable | None = None
    after: EffectCallable | None = None
    prepend: bool = False
    match_properties: tuple[str, ...] = ()

    def for_stage(self, stage: Stage) -> EffectCallable | None:
        return self.before if stage is Stage.BEFORE else self.after

    @property
    def mutation_handler(self) -> EffectCallable | None:
        """Callable used for the single mutation notification."""
        return self.after if self.after is not None else self.before


HandlerDescriptor: TypeAlias = SimpleHandler | StagedHandler


def _label(event_type: str | None) -> str:
    return repr(event_type) if event_type is not None else "effect"


def _match_properties(raw: Any, event_type: str | None) -> tuple[str, ...]:
    if raw is None:
        return ()
    if isinstance(raw, str):
        return (raw,)
    if isinstance(raw, Sequence) and all(isinstance(name, str) for name in raw):
        return tuple(raw)
    logger.warning(
        f"matchComponentProps for {_label(event_type)} must be a list of property "
        f"names, got {raw!r}; ignoring it"
    )
    return ()


def _stage_callable(
    raw: Mapping[str, Any], key: str, event_type: str | None
) -> EffectCallable | None:
    value = raw.get(key)
    if value is None:
        return None
    if not callable(value):
        logger.warning(
            f"{key!r} for {_label(event_type)} is not callable ({type(value).__name__}); "
            f"it will never fire"
        )
        return None
    return value


def normalize(raw: Any, *, event_type: str | None = None) -> HandlerDescriptor:
    """Resolve a raw effect declaration into a ``HandlerDescriptor``.

    Malformed declarations never raise: they are logged and normalized to a
    descriptor with empty slots, which the resolver skips.

    Args:
        raw: Bare callable, mapping, or an already-normalized descriptor.
        event_type: Action/mutation name, used in diagnostics only.
    """
    if isinstance(raw, (SimpleHandler, StagedHandler)):
        return raw

    if callable(raw):
        return SimpleHandler(handler=raw)

    if not isinstance(raw, Mapping):
        logger.warning(
            f"Effect {_label(event_type)} must be a callable or a mapping, "
            f"got {type(raw).__name__}; it will never fire"
        )
        return StagedHandler()

    unknown = sorted(str(key) for key in raw if key not in _KNOWN_KEYS)
    if unknown:
        logger.warning(f"Ignoring unknown keys {unknown} in effect {_label(event_type)}")

    prepend = bool(raw.get("prepend", False))
    properties = _match_properties(
        raw.get("matchComponentProps", raw.get("match_component_props")), event_type
    )

    handler = _stage_callable(raw, "handler", event_type)
    if handler is not None:
        if "before" in raw or "after" in raw:
            logger.warning(
                f"Effect {_label(event_type)} declares 'handler' together with "
                f"stage keys; 'before'/'after' are ignored"
            )
        if prepend:
            logger.warning(
                f"Effect {_label(event_type)} uses 'handler' with prepend=True; only "
                f"'before'/'after' effects can be prepended, it will never fire"
            )
        return SimpleHandler(
            handler=handler, prepend=prepend, match_properties=properties
        )

    return StagedHandler(
        before=_stage_callable(raw, "before", event_type),
        after=_stage_callable(raw, "after", event_type),
        prepend=prepend,
        match_properties=properties,
    )
