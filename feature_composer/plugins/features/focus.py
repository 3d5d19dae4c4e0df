from __future__ import annotations

from typing import Any, Callable, Mapping

from feature_composer.core.features import Event, Feature


def _noop() -> None:
    pass


class FocusFeature(Feature):
    """Tracks host focus in ``has_focus``.

    config:
      make_host_focusable: bool (default True) -> sets tabindex="0" on the host
      on_focus / on_blur: zero-arg callbacks
    """

    properties = {
        "has_focus": {"type": bool, "attribute": "hasfocus", "reflect": True},
    }

    def __init__(self, host: Any, config: Mapping[str, Any]):
        super().__init__(host, config)
        self._attached = False
        self.has_focus = False

        if config.get("make_host_focusable", True):
            host.set_attribute("tabindex", "0")
        self._attach()

    def _callback(self, key: str) -> Callable[[], Any]:
        cb = self.config.get(key)
        return cb if callable(cb) else _noop

    def _on_focus(self, event: Event) -> None:
        self.has_focus = True
        self._callback("on_focus")()

    def _on_blur(self, event: Event) -> None:
        self.has_focus = False
        self._callback("on_blur")()

    def _attach(self) -> None:
        if self._attached:
            return
        self.host.add_event_listener("focus", self._on_focus)
        self.host.add_event_listener("blur", self._on_blur)
        self._attached = True

    def _detach(self) -> None:
        if not self._attached:
            return
        self.host.remove_event_listener("focus", self._on_focus)
        self.host.remove_event_listener("blur", self._on_blur)
        self._attached = False

    def connected_callback(self) -> None:
        self._attach()

    def disconnected_callback(self) -> None:
        self._detach()
