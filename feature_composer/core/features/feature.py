from __future__ import annotations

from typing import Any, Dict, FrozenSet, Mapping, Optional

from .composer import published_properties
from .lifecycle import LifecycleEvent
from .models import PropertyDescriptor
from .schema import module_schema


class MirroredProperty:
    """Feature attribute whose writes are mirrored onto the host.

    The feature keeps the value of record; the host holds a copy its reactive
    layer can observe.
    """

    def __init__(self, name: str):
        self.name = name

    def __get__(self, obj: Any, owner: type) -> Any:
        if obj is None:
            return self
        return obj.get_internal_value(self.name)

    def __set__(self, obj: Any, value: Any) -> None:
        obj.mirror(self.name, value)


class Feature:
    """Base class for capability modules.

    Subclasses declare ``properties`` (name -> descriptor mapping); each one
    becomes a ``MirroredProperty``. The constructor receives the host and the
    merged config for this feature.
    """

    properties: Mapping[str, Any] = {}

    def __init_subclass__(cls, **kwargs: Any):
        super().__init_subclass__(**kwargs)
        for name in module_schema(cls):
            if not isinstance(getattr(cls, name, None), MirroredProperty):
                setattr(cls, name, MirroredProperty(name))

    def __init__(self, host: Any, config: Mapping[str, Any]):
        self.host = host
        self.config = config
        self._internal_values: Dict[str, Any] = {}
        self._published: Optional[FrozenSet[str]] = published_properties.get()
        for name in self.declared_properties():
            self.set_internal_value(name, getattr(host, name, None) if self.publishes(name) else None)

    @classmethod
    def declared_properties(cls) -> Dict[str, PropertyDescriptor]:
        return module_schema(cls)

    @classmethod
    def supports(cls, event: LifecycleEvent) -> bool:
        return callable(getattr(cls, LifecycleEvent(event).value, None))

    def publishes(self, name: str) -> bool:
        """Whether this module's ``name`` is mirrored onto the host.

        Inside a composed host that is decided per feature: a property the
        feature's patch stripped, or one another module owns, stays internal.
        Built by hand, the module falls back to the host's published schema.
        """
        if self._published is not None:
            return name in self._published
        element_properties = getattr(type(self.host), "element_properties", None)
        if element_properties is None:
            return True
        return name in element_properties()

    def mirror(self, name: str, value: Any) -> None:
        if self.publishes(name):
            setattr(self.host, name, value)
        self.set_internal_value(name, value)

    def set_internal_value(self, name: str, value: Any) -> None:
        self._internal_values[name] = value

    def get_internal_value(self, name: str) -> Any:
        return self._internal_values.get(name)

    def first_updated(self, changed_properties: Mapping[str, Any]) -> None:
        for name in self.declared_properties():
            if self.publishes(name):
                self.set_internal_value(name, getattr(self.host, name, None))

    def updated(self, changed_properties: Mapping[str, Any]) -> None:
        for name in self.declared_properties():
            if name in changed_properties and self.publishes(name):
                self.set_internal_value(name, getattr(self.host, name, None))
