"""Store effects: lifecycle-scoped side effects for action/mutation stores.

Components and global registrants declare effects keyed by action or
mutation name; an ``EffectsRegistry`` attaches them to the store's
subscription streams and decides, for every notification, which effect
fires, at which stage, in which pass, and whether its match gate passes.
"""

from __future__ import annotations

from store_effects.components import EffectComponent
from store_effects.config import EffectsSettings
from store_effects.core import (
    ActionListener,
    ActionSubscriber,
    Declarations,
    DispatchOutcome,
    DispatchTracer,
    Disposer,
    EffectCallable,
    EffectCategory,
    EffectConfigurationError,
    EffectResolver,
    EffectsRegistry,
    EffectStore,
    EffectTree,
    EventType,
    HandlerDescriptor,
    MutationListener,
    MutationSubscriber,
    SimpleHandler,
    Stage,
    StagedHandler,
    SubscriptionGroup,
    attribute_bag,
    matches,
    normalize,
)
from store_effects.utilities import configure_library_logging

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Registry and components
    "EffectsRegistry",
    "EffectsSettings",
    "EffectComponent",
    "SubscriptionGroup",
    # Engine
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
    # Protocols and types
    "ActionSubscriber",
    "MutationSubscriber",
    "EffectStore",
    "EffectCallable",
    "Declarations",
    "Disposer",
    "EventType",
    "EffectCategory",
    "Stage",
    "DispatchOutcome",
    "EffectConfigurationError",
    # Utilities
    "configure_library_logging",
]
