from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from .elements import define
from .lifecycle import LifecycleEvent
from .manager import FeatureManager
from .models import PropertyDescriptor, ResolvedFeatureSet
from .reactive import ReactiveElement
from .registry import get_registry


class FeatureHost(ReactiveElement):
    """Reactive element whose behaviour is composed from feature modules.

    Subclasses declare what they make available and how they adjust what
    they inherit::

        class Button(FeatureHost):
            provides = {
                "focus": {"module": FocusFeature, "config": {"make_host_focusable": True}},
            }
            feature_overrides = {
                "layout": {"config": {"size": "lg"}, "properties": {"on_dark": DISABLE_PROPERTY}},
                "counter": DISABLED,
            }

    Each lifecycle method runs before-hooks, the element's own handling,
    the event hooks, then after-hooks across all composed modules.
    """

    # Features this class makes available to itself and descendants.
    provides: Mapping[str, Any] = {}

    # Adjustments to features provided here or by any ancestor.
    feature_overrides: Mapping[str, Any] = {}

    def __init__(self):
        type(self).prepare_features()
        super().__init__()
        self.feature_manager = FeatureManager(self)

    @classmethod
    def prepare_features(cls) -> ResolvedFeatureSet:
        return FeatureManager.prepare_features(cls)

    @classmethod
    def resolved_features(cls) -> ResolvedFeatureSet:
        return cls.prepare_features()

    @classmethod
    def element_properties(cls) -> Mapping[str, PropertyDescriptor]:
        resolved = get_registry().get(cls)
        if resolved is None:
            resolved = cls.prepare_features()
        return resolved.schema

    @classmethod
    def register(cls, tag: str) -> type:
        """Prepare features, then define ``tag`` for this class."""
        cls.prepare_features()
        define(tag, cls)
        return cls

    def module_instance(self, name: str) -> Optional[Any]:
        manager = self.__dict__.get("feature_manager")
        return manager.module_instance(name) if manager is not None else None

    def dispatch_lifecycle(self, event: Union[LifecycleEvent, str], *args: Any) -> int:
        return self.feature_manager.dispatch(event, *args)

    def _around(self, kind: str, own, *args: Any) -> Any:
        # modules may poke the host while it is still being composed
        manager = self.__dict__.get("feature_manager")
        if manager is None:
            return own(*args)
        return manager.around(kind, own, *args)

    # --- lifecycle passthrough ---

    def connected_callback(self) -> None:
        self._around("connected_callback", super().connected_callback)

    def disconnected_callback(self) -> None:
        self._around("disconnected_callback", super().disconnected_callback)

    def first_updated(self, changed_properties: Mapping[str, Any]) -> None:
        self._around("first_updated", super().first_updated, changed_properties)

    def updated(self, changed_properties: Mapping[str, Any]) -> None:
        self._around("updated", super().updated, changed_properties)

    def attribute_changed_callback(self, name: str, old_value: Optional[str], new_value: Optional[str]) -> None:
        self._around(
            "attribute_changed_callback",
            super().attribute_changed_callback,
            name,
            old_value,
            new_value,
        )


# the class chain above FeatureHost holds no feature declarations
FeatureHost.feature_boundary = FeatureHost
