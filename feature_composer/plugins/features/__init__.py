from .counter import CounterFeature
from .focus import FocusFeature
from .layout import LayoutFeature, LayoutHost
from .lifecycle_logger import LifecycleLoggerFeature

BUILTIN_FEATURES = {
    "layout": LayoutFeature,
    "focus": FocusFeature,
    "counter": CounterFeature,
    "lifecycle_logger": LifecycleLoggerFeature,
}

__all__ = [
    "BUILTIN_FEATURES",
    "CounterFeature",
    "FocusFeature",
    "LayoutFeature",
    "LayoutHost",
    "LifecycleLoggerFeature",
]
