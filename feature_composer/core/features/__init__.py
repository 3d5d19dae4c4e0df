from .errors import ConfigurationError, ConstructionError, FeatureError, HookError, MissingModuleError
from .models import (
    DISABLE_PROPERTY,
    DISABLED,
    ClassNode,
    Directive,
    OverrideEntry,
    PropertyDescriptor,
    ProvisionEntry,
    ResolvedFeature,
    ResolvedFeatureSet,
)
from .chain import ChainWalker
from .provisions import resolve_provisions
from .overrides import deep_merge, resolve_overrides
from .schema import collect_property_schema
from .registry import FeatureRegistry, get_registry
from .composer import InstanceComposer
from .lifecycle import LifecycleDispatcher, LifecycleEvent
from .manager import FeatureManager
from .feature import Feature
from .reactive import Event, ReactiveElement
from .host import FeatureHost
from .elements import create_element, define, get_element

__all__ = [
    "ChainWalker",
    "ClassNode",
    "ConfigurationError",
    "ConstructionError",
    "DISABLED",
    "DISABLE_PROPERTY",
    "Directive",
    "Event",
    "Feature",
    "FeatureError",
    "FeatureHost",
    "FeatureManager",
    "FeatureRegistry",
    "HookError",
    "InstanceComposer",
    "LifecycleDispatcher",
    "LifecycleEvent",
    "MissingModuleError",
    "OverrideEntry",
    "PropertyDescriptor",
    "ProvisionEntry",
    "ReactiveElement",
    "ResolvedFeature",
    "ResolvedFeatureSet",
    "collect_property_schema",
    "create_element",
    "deep_merge",
    "define",
    "get_element",
    "get_registry",
    "resolve_overrides",
    "resolve_provisions",
]
