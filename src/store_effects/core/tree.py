"""The per-context effect tree: category -> event type -> descriptor."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .descriptors import HandlerDescriptor, StagedHandler, normalize
from .protocols import EffectCategory, EffectConfigurationError, EventType

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EffectTree:
    """Normalized, read-only effect declarations of one registering context.

    Only categories present in the declarations are present in the tree, so
    a context declaring nothing but mutations never subscribes to actions.
    """

    sections: Mapping[EffectCategory, Mapping[EventType, HandlerDescriptor]] = field(
        default_factory=dict
    )

    @classmethod
    def from_declarations(cls, declarations: Any, owner: Any = None) -> EffectTree:
        """Validate and normalize raw declarations.

        Raises:
            EffectConfigurationError: A root key is neither ``actions`` nor
                ``mutations``. Raised before anything is normalized.
        """
        if isinstance(declarations, EffectTree):
            return declarations
        if not declarations:
            return cls()
        if not isinstance(declarations, Mapping):
            raise EffectConfigurationError(type(declarations).__name__, owner)

        categories: list[EffectCategory] = []
        for key in declarations:
            try:
                categories.append(EffectCategory(key))
            except ValueError:
                raise EffectConfigurationError(str(key), owner) from None

        sections: dict[EffectCategory, Mapping[EventType, HandlerDescriptor]] = {}
        for category in categories:
            entries = declarations[category.value] or {}
            if not isinstance(entries, Mapping):
                logger.warning(
                    f"Effect section {category.value!r} must map event types to "
                    f"effects, got {type(entries).__name__}; ignoring it"
                )
                continue
            normalized: dict[EventType, HandlerDescriptor] = {}
            for event_type, raw in entries.items():
                descriptor = normalize(raw, event_type=event_type)
                if (
                    category is EffectCategory.MUTATIONS
                    and isinstance(descriptor, StagedHandler)
                    and descriptor.before is not None
                    and descriptor.after is not None
                ):
                    logger.warning(
                        f"Mutation effect {event_type!r} declares both 'before' and "
                        f"'after'; mutations are observed once, only 'after' fires"
                    )
                normalized[event_type] = descriptor
            sections[category] = MappingProxyType(normalized)

        return cls(sections=MappingProxyType(sections))

    def categories(self) -> Iterator[EffectCategory]:
        return iter(self.sections)

    def section(self, category: EffectCategory) -> Mapping[EventType, HandlerDescriptor]:
        return self.sections.get(category, MappingProxyType({}))

    def get(
        self, category: EffectCategory, event_type: EventType
    ) -> HandlerDescriptor | None:
        return self.section(category).get(event_type)

    def __contains__(self, category: object) -> bool:
        return category in self.sections

    def __len__(self) -> int:
        return sum(len(entries) for entries in self.sections.values())
