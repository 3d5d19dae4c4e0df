"""Minimal reactive element the feature engine publishes its schema to.

Only what hosts need: declared properties merged across the class chain,
change tracking (name -> previous value), a synchronous update cycle,
attribute <-> property coercion and a small event-listener surface.
No rendering.
"""

from __future__ import annotations

import threading
import weakref
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Mapping, Optional

from .models import PropertyDescriptor, coerce_schema

_DECLARED: "weakref.WeakKeyDictionary[type, Mapping[str, PropertyDescriptor]]" = weakref.WeakKeyDictionary()
_DECLARED_LOCK = threading.Lock()


@dataclass
class Event:
    type: str
    detail: Any = None
    target: Any = None


def declared_properties(cls: type) -> Dict[str, PropertyDescriptor]:
    """Own ``properties`` of every class in the chain; subclasses win."""
    out: Dict[str, PropertyDescriptor] = {}
    for klass in reversed(cls.__mro__):
        raw = vars(klass).get("properties")
        if isinstance(raw, Mapping):
            out.update(coerce_schema(raw))
    return out


def _coerce_attribute(desc: PropertyDescriptor, value: Optional[str]) -> Any:
    if desc.type is bool:
        return value is not None
    if value is None:
        return None
    if desc.type in (int, float):
        return desc.type(value)
    return value


class ReactiveElement:
    properties: Dict[str, Any] = {}

    def __init__(self):
        object.__setattr__(self, "_changed_properties", {})
        object.__setattr__(self, "_has_updated", False)
        object.__setattr__(self, "_listeners", defaultdict(list))
        object.__setattr__(self, "attributes", {})
        object.__setattr__(self, "is_connected", False)

    @classmethod
    def element_properties(cls) -> Mapping[str, PropertyDescriptor]:
        cached = _DECLARED.get(cls)
        if cached is None:
            with _DECLARED_LOCK:
                cached = _DECLARED.setdefault(cls, declared_properties(cls))
        return cached

    def __getattr__(self, name: str) -> Any:
        # declared but never assigned reads as None
        if not name.startswith("_") and name in type(self).element_properties():
            return None
        raise AttributeError(f"{type(self).__name__!s} has no attribute {name!r}")

    def __setattr__(self, name: str, value: Any) -> None:
        props = type(self).element_properties()
        if name in props and "_changed_properties" in self.__dict__:
            missing = name not in self.__dict__
            old = self.__dict__.get(name)
            if missing or old != value:
                self._changed_properties.setdefault(name, old)
                if props[name].reflect:
                    self._reflect(name, props[name], value)
        object.__setattr__(self, name, value)

    def _reflect(self, name: str, desc: PropertyDescriptor, value: Any) -> None:
        attr = desc.attribute_name(name)
        if attr is None:
            return
        if value is None or value is False:
            self.attributes.pop(attr, None)
        elif value is True:
            self.attributes[attr] = ""
        else:
            self.attributes[attr] = str(value)

    # --- attributes ---

    def set_attribute(self, name: str, value: Optional[str]) -> None:
        old = self.attributes.get(name)
        if value is None:
            self.attributes.pop(name, None)
        else:
            self.attributes[name] = str(value)
        self.attribute_changed_callback(name, old, None if value is None else str(value))

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def attribute_changed_callback(self, name: str, old_value: Optional[str], new_value: Optional[str]) -> None:
        for prop, desc in type(self).element_properties().items():
            if desc.attribute_name(prop) == name:
                coerced = _coerce_attribute(desc, new_value)
                if self.__dict__.get(prop) != coerced:
                    setattr(self, prop, coerced)
                return

    # --- lifecycle ---

    def connected_callback(self) -> None:
        object.__setattr__(self, "is_connected", True)

    def disconnected_callback(self) -> None:
        object.__setattr__(self, "is_connected", False)

    @property
    def update_pending(self) -> bool:
        return bool(self._changed_properties)

    def perform_update(self) -> Dict[str, Any]:
        """Flush pending changes: first_updated (once) then updated. Returns the change map."""
        changed = dict(self._changed_properties)
        self._changed_properties.clear()
        if not self._has_updated:
            object.__setattr__(self, "_has_updated", True)
            self.first_updated(changed)
        self.updated(changed)
        return changed

    def first_updated(self, changed_properties: Mapping[str, Any]) -> None:
        pass

    def updated(self, changed_properties: Mapping[str, Any]) -> None:
        pass

    # --- events ---

    def add_event_listener(self, type_: str, listener: Callable[[Event], Any]) -> None:
        self._listeners[type_].append(listener)

    def remove_event_listener(self, type_: str, listener: Callable[[Event], Any]) -> None:
        listeners: List[Callable[[Event], Any]] = self._listeners.get(type_, [])
        if listener in listeners:
            listeners.remove(listener)

    def dispatch_event(self, event: Event) -> bool:
        if event.target is None:
            event.target = self
        for listener in list(self._listeners.get(event.type, [])):
            listener(event)
        return True

    def focus(self) -> None:
        self.dispatch_event(Event("focus"))

    def blur(self) -> None:
        self.dispatch_event(Event("blur"))
