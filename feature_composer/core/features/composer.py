from __future__ import annotations

import contextvars
import logging
import time
from typing import Any, Callable, Dict, FrozenSet, Optional

from feature_composer.core.observability import metrics

from .errors import ConstructionError
from .models import ResolvedFeature, ResolvedFeatureSet
from .overrides import copy_tree

log = logging.getLogger(__name__)

# host properties the module under construction may write
published_properties: contextvars.ContextVar[Optional[FrozenSet[str]]] = contextvars.ContextVar(
    "published_properties", default=None
)


class InstanceComposer:
    """Builds the per-host module instances for one resolved class."""

    def __init__(self, resolved: ResolvedFeatureSet):
        self.resolved = resolved

    def _seed(self, host: Any, feature: ResolvedFeature) -> None:
        for prop, desc in feature.properties.items():
            if not desc.has_initial_value:
                continue
            # host-declared properties shadow the module's descriptor; leave them alone
            if self.resolved.schema.get(prop) != desc:
                continue
            setattr(host, prop, copy_tree(desc.value))

    def _construct(self, host: Any, feature: ResolvedFeature) -> Any:
        token = published_properties.set(self.resolved.published_by(feature.name))
        try:
            module = feature.module(host, copy_tree(feature.config))
        except Exception as e:
            metrics.inc_named("construction_failures")
            raise ConstructionError(host=self.resolved.host, feature=feature.name, reason=str(e)) from e
        finally:
            published_properties.reset(token)

        apply = getattr(module, "apply_to_host", None)
        if callable(apply):
            apply(host)
        return module

    def compose(
        self,
        host: Any,
        *,
        register: Optional[Callable[[str, Any], None]] = None,
    ) -> Dict[str, Any]:
        """Instantiate every enabled feature in resolution order.

        ``register`` is called as each module is built, so modules constructed
        before a failing one stay registered.
        """
        t0 = time.perf_counter()
        instances: Dict[str, Any] = {}

        for feature in self.resolved.enabled_features():
            self._seed(host, feature)
            module = self._construct(host, feature)
            instances[feature.name] = module
            if register is not None:
                register(feature.name, module)
            metrics.inc_constructed(feature.name)

        log.debug(
            "features.compose host=%s modules=%s ms=%s",
            self.resolved.host,
            list(instances.keys()),
            int(round((time.perf_counter() - t0) * 1000)),
        )
        return instances
