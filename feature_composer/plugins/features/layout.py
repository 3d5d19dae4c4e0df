from __future__ import annotations

from typing import Any, Dict, Mapping

from feature_composer.core.features import Feature, FeatureHost


class LayoutFeature(Feature):
    """Layout / shape / size state plus the derived ``layout_classes`` map."""

    properties = {
        "layout": {"type": str, "attribute": "layout", "reflect": True},
        "shape": {"type": str, "attribute": "shape", "reflect": True},
        "size": {"type": str, "attribute": "size", "reflect": True},
        "on_dark": {"type": bool, "attribute": "ondark", "reflect": True},
        "layout_classes": {"type": dict, "attribute": False, "reflect": False},
    }

    def __init__(self, host: Any, config: Mapping[str, Any]):
        super().__init__(host, config)
        self.layout = config.get("layout") or "classic"
        self.shape = config.get("shape") or "pill"
        self.size = config.get("size") or "md"
        self.on_dark = bool(config.get("on_dark", False))
        self.layout_classes = {}

        self.update_component_architecture()

    def _without_prefix(self, prefix: str) -> Dict[str, bool]:
        return {k: v for k, v in (self.layout_classes or {}).items() if not k.startswith(prefix)}

    def update_shape_classes(self) -> None:
        classes = self._without_prefix("shape-")
        if self.shape and self.size:
            classes[f"shape-{self.shape.lower()}-{self.size.lower()}"] = True
        else:
            classes["shape-none"] = True
        self.layout_classes = classes

    def update_layout_classes(self) -> None:
        if not self.layout:
            return
        classes = self._without_prefix("layout-")
        classes[f"layout-{self.layout.lower()}"] = True
        self.layout_classes = classes

    def update_component_architecture(self) -> None:
        self.update_layout_classes()
        self.update_shape_classes()

    def updated(self, changed_properties: Mapping[str, Any]) -> None:
        super().updated(changed_properties)
        if any(p in changed_properties for p in ("layout", "shape", "size")):
            self.update_component_architecture()


class LayoutHost(FeatureHost):
    """Base host that ships the ``layout`` feature, enabled by default."""

    provides = {
        "layout": {"module": LayoutFeature},
    }
