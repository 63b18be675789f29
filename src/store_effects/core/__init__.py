"""Re-export the effects engine's public API under one import path."""

from __future__ import annotations

# Handler descriptors
from .descriptors import HandlerDescriptor, SimpleHandler, StagedHandler, normalize

# Subscription lifecycle
from .lifecycle import EffectsRegistry, SubscriptionGroup

# Property matching
from .matching import attribute_bag, event_field, match_list_of, matches

# Core protocols and types
from .protocols import (
    ActionSubscriber,
    Declarations,
    DispatchOutcome,
    Disposer,
    EffectCallable,
    EffectCategory,
    EffectConfigurationError,
    EffectStore,
    EventType,
    MutationSubscriber,
    Stage,
)

# Dispatch resolution
from .resolver import ActionListener, EffectResolver, MutationListener

# Tracing
from .tracing import DispatchTracer

# Effect tree
from .tree import EffectTree

__all__ = [
    # Core classes
    "EffectsRegistry",
    "SubscriptionGroup",
    "EffectResolver",
    "ActionListener",
    "MutationListener",
    "EffectTree",
    "DispatchTracer",
    # Descriptors
    "HandlerDescriptor",
    "SimpleHandler",
    "StagedHandler",
    "normalize",
    # Matching
    "matches",
    "attribute_bag",
    "event_field",
    "match_list_of",
    # Protocols and type aliases
    "ActionSubscriber",
    "MutationSubscriber",
    "EffectStore",
    "EffectCallable",
    "Declarations",
    "Disposer",
    "EventType",
    # Enums
    "EffectCategory",
    "Stage",
    "DispatchOutcome",
    # Errors
    "EffectConfigurationError",
]
