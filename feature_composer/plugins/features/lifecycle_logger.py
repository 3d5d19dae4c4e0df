from __future__ import annotations

import logging
from typing import Any, Mapping

from feature_composer.core.features import Feature

log = logging.getLogger("feature_composer.lifecycle")


class LifecycleLoggerFeature(Feature):
    def connected_callback(self) -> None:
        log.info("connected_callback on %s", type(self.host).__name__)

    def disconnected_callback(self) -> None:
        log.info("disconnected_callback on %s", type(self.host).__name__)

    def first_updated(self, changed_properties: Mapping[str, Any]) -> None:
        super().first_updated(changed_properties)
        log.info("first_updated on %s", type(self.host).__name__)

    def updated(self, changed_properties: Mapping[str, Any]) -> None:
        super().updated(changed_properties)
        log.info("updated on %s changed=%s", type(self.host).__name__, sorted(changed_properties))
