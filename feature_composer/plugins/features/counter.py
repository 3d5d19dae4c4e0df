from __future__ import annotations

from typing import Any, Mapping

from feature_composer.core.features import Event, Feature


class CounterFeature(Feature):
    """Integer ``count`` with increment/decrement that fire host events."""

    properties = {
        "count": {"type": int, "attribute": "count", "reflect": True},
    }

    def __init__(self, host: Any, config: Mapping[str, Any]):
        super().__init__(host, config)
        self.count = int(config.get("start") or 0)

    def increment(self) -> int:
        self.count = self.count + 1
        self.host.dispatch_event(Event("counter-incremented", detail={"count": self.count}))
        return self.count

    def decrement(self) -> int:
        self.count = self.count - 1
        self.host.dispatch_event(Event("counter-decremented", detail={"count": self.count}))
        return self.count
