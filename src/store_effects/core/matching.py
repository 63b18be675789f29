"""Property matching between an event's match list and a context's attributes.

An effect declared with ``matchComponentProps: ["id"]`` only fires when the
triggering action carries ``payload.match`` with at least one entry whose
``id`` equals the registering component's own ``id``. Every listed property
must be satisfied (all-of); each property may be satisfied by any entry
(any-of).

    >>> matches(["id"], {"id": 7}, [{"id": 9}, {"id": 7}])
    True
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Any

logger = logging.getLogger(__name__)

_MISSING = object()


def event_field(obj: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a mapping-shaped or attribute-shaped event."""
    if obj is None:
        return default
    if isinstance(obj, Mapping):
        return obj.get(name, default)
    return getattr(obj, name, default)


def match_list_of(event: Any) -> Sequence[Any] | None:
    """Return ``event.payload.match`` if present, else ``None``."""
    payload = event_field(event, "payload")
    match = event_field(payload, "match")
    if match is None or isinstance(match, (str, bytes, Mapping)):
        return None
    if not isinstance(match, Sequence):
        return None
    return match


def _own_attribute(owner: Any, name: str) -> Any:
    """Look up a prop the owner holds as data, or ``_MISSING``.

    Instance attributes come first. Class-level data counts as a default
    prop; methods, properties and other descriptors do not, except slots.
    """
    instance_dict = getattr(owner, "__dict__", None)
    if isinstance(instance_dict, dict) and name in instance_dict:
        return instance_dict[name]

    class_attr = inspect.getattr_static(type(owner), name, _MISSING)
    if class_attr is _MISSING or inspect.isroutine(class_attr):
        return _MISSING
    if inspect.ismemberdescriptor(class_attr):
        try:
            return getattr(owner, name)
        except AttributeError:
            # unset slot
            return _MISSING
    if hasattr(type(class_attr), "__get__"):
        return _MISSING
    return class_attr


class _AttributeBag(Mapping[str, Any]):
    """Read-only mapping view over the props an object holds as data."""

    __slots__ = ("_owner",)

    def __init__(self, owner: Any):
        self._owner = owner

    def __getitem__(self, name: str) -> Any:
        value = _own_attribute(self._owner, name)
        if value is _MISSING:
            raise KeyError(name)
        return value

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and _own_attribute(self._owner, name) is not _MISSING

    def __iter__(self) -> Iterator[str]:
        return iter(getattr(self._owner, "__dict__", {}))

    def __len__(self) -> int:
        return len(getattr(self._owner, "__dict__", {}))

    def __repr__(self) -> str:
        return f"<attributes of {type(self._owner).__name__}>"


def attribute_bag(context: Any) -> Mapping[str, Any]:
    """Expose a registering context as the attribute mapping the matcher reads."""
    if isinstance(context, Mapping):
        return context
    return _AttributeBag(context)


def _entry_keys(entry: Any) -> list[str]:
    if isinstance(entry, Mapping):
        return [str(key) for key in entry.keys()]
    return []


def _match_property(
    name: str,
    required: Sequence[str],
    attributes: Mapping[str, Any],
    match_list: Sequence[Any],
) -> str | None:
    """Check one property; return a diagnostic message on failure."""
    if name not in attributes:
        return (
            f"matchComponentProps expects the component to have props "
            f"{list(required)!r}; {name!r} does not exist on the component"
        )

    expected = attributes[name]
    sent_keys: list[list[str]] = []
    compare_errors: list[str] = []
    for entry in match_list:
        if not isinstance(entry, Mapping) or name not in entry:
            sent_keys.append(_entry_keys(entry))
            continue
        try:
            equal = bool(entry[name] == expected)
        except Exception as e:
            compare_errors.append(f"{type(e).__name__}: {e}")
            continue
        if equal:
            return None

    if compare_errors:
        return (
            f"matchComponentProps could not compare {name!r} with the component "
            f"value {expected!r}: {compare_errors!r}"
        )
    if sent_keys:
        return (
            f"matchComponentProps expects the action to send {name!r} as a property "
            f"in the match list; entries without it sent keys {sent_keys!r}"
        )
    return (
        f"no match entry has {name!r} equal to the component value {expected!r}"
    )


def matches(
    required: Sequence[str],
    attributes: Mapping[str, Any],
    match_list: Sequence[Any] | None,
    *,
    report: Callable[[str], None] | None = None,
) -> bool:
    """Decide whether an effect gated on ``required`` properties may fire.

    Args:
        required: Property names that must match; empty means no gating.
        attributes: The registering context's attribute mapping.
        match_list: ``payload.match`` of the triggering event.
        report: Diagnostic sink; defaults to ``logger.error``.

    Returns:
        True when every required property is matched by at least one entry.
        Each failing property produces exactly one diagnostic.
    """
    if not required:
        return True

    emit = report or logger.error

    if not match_list:
        for name in required:
            emit(
                f"matchComponentProps is set for {name!r}; the payload must "
                f"include a match list"
            )
        return False

    result = True
    for name in required:
        problem = _match_property(name, required, attributes, match_list)
        if problem is not None:
            emit(problem)
            result = False
    return result
