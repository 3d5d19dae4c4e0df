from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Tuple, Union

from feature_composer.core.observability import metrics

from .errors import HookError

log = logging.getLogger(__name__)


class LifecycleEvent(str, Enum):
    BEFORE_CONNECTED = "before_connected_callback"
    CONNECTED = "connected_callback"
    AFTER_CONNECTED = "after_connected_callback"

    BEFORE_DISCONNECTED = "before_disconnected_callback"
    DISCONNECTED = "disconnected_callback"
    AFTER_DISCONNECTED = "after_disconnected_callback"

    BEFORE_FIRST_UPDATED = "before_first_updated"
    FIRST_UPDATED = "first_updated"
    AFTER_FIRST_UPDATED = "after_first_updated"

    BEFORE_UPDATED = "before_updated"
    UPDATED = "updated"
    AFTER_UPDATED = "after_updated"

    BEFORE_ATTRIBUTE_CHANGED = "before_attribute_changed_callback"
    ATTRIBUTE_CHANGED = "attribute_changed_callback"
    AFTER_ATTRIBUTE_CHANGED = "after_attribute_changed_callback"


# host lifecycle method -> (before, event, after)
PHASES: Dict[str, Tuple[LifecycleEvent, LifecycleEvent, LifecycleEvent]] = {
    "connected_callback": (
        LifecycleEvent.BEFORE_CONNECTED,
        LifecycleEvent.CONNECTED,
        LifecycleEvent.AFTER_CONNECTED,
    ),
    "disconnected_callback": (
        LifecycleEvent.BEFORE_DISCONNECTED,
        LifecycleEvent.DISCONNECTED,
        LifecycleEvent.AFTER_DISCONNECTED,
    ),
    "first_updated": (
        LifecycleEvent.BEFORE_FIRST_UPDATED,
        LifecycleEvent.FIRST_UPDATED,
        LifecycleEvent.AFTER_FIRST_UPDATED,
    ),
    "updated": (
        LifecycleEvent.BEFORE_UPDATED,
        LifecycleEvent.UPDATED,
        LifecycleEvent.AFTER_UPDATED,
    ),
    "attribute_changed_callback": (
        LifecycleEvent.BEFORE_ATTRIBUTE_CHANGED,
        LifecycleEvent.ATTRIBUTE_CHANGED,
        LifecycleEvent.AFTER_ATTRIBUTE_CHANGED,
    ),
}


def supports(module: Any, event: LifecycleEvent) -> bool:
    probe = getattr(module, "supports", None)
    if callable(probe):
        return bool(probe(event))
    return callable(getattr(module, event.value, None))


class LifecycleDispatcher:
    """Fans lifecycle events out to registered modules in registration order.

    Hook tables are built when a module is registered; dispatch never looks
    methods up by name.
    """

    def __init__(self):
        self._modules: Dict[str, Any] = {}
        self._hooks: Dict[LifecycleEvent, List[Tuple[str, Callable[..., Any]]]] = {}

    def register(self, name: str, module: Any) -> None:
        if name in self._modules:
            raise ValueError(f"Duplicate feature module: {name}")
        self._modules[name] = module
        for event in LifecycleEvent:
            if supports(module, event):
                self._hooks.setdefault(event, []).append((name, getattr(module, event.value)))

    def names(self) -> List[str]:
        return list(self._modules.keys())

    def hooked(self, event: Union[LifecycleEvent, str]) -> List[str]:
        return [name for name, _ in self._hooks.get(LifecycleEvent(event), [])]

    def dispatch(self, event: Union[LifecycleEvent, str], *args: Any) -> int:
        """Call ``event`` on every module that implements it; returns the number called.

        The first hook that raises aborts the rest (HookError, original as __cause__).
        """
        ev = LifecycleEvent(event)
        called = 0
        for name, hook in self._hooks.get(ev, []):
            try:
                hook(*args)
            except Exception as e:
                metrics.inc_hook_failure(ev.value, name)
                log.warning("features.dispatch failed event=%s feature=%s err=%s", ev.value, name, e)
                raise HookError(event=ev.value, feature=name, reason=str(e)) from e
            called += 1
        metrics.inc_named("hook_calls", called)
        return called

    def around(self, kind: str, own: Callable[..., Any], *args: Any) -> Any:
        """before-hooks -> host's own handling -> event hooks -> after-hooks."""
        before, main, after = PHASES[kind]
        self.dispatch(before, *args)
        result = own(*args)
        self.dispatch(main, *args)
        self.dispatch(after, *args)
        return result
