from __future__ import annotations

from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

from .composer import InstanceComposer
from .lifecycle import LifecycleDispatcher, LifecycleEvent
from .models import ResolvedFeatureSet
from .registry import FeatureRegistry, get_registry


class FeatureManager:
    """
    Connects one host instance to the features its class resolved.

    Class-level work (chain walk, merge, schema) happens once per class in the
    registry; each manager only composes modules and dispatches lifecycle events.
    """

    def __init__(
        self,
        host: Any,
        host_class: Optional[type] = None,
        *,
        registry: Optional[FeatureRegistry] = None,
    ):
        self.host = host
        self.host_class = host_class or type(host)
        self._registry = registry or get_registry()
        self.resolved: ResolvedFeatureSet = self._registry.prepare(self.host_class)

        self._instances: Dict[str, Any] = {}
        self._dispatcher = LifecycleDispatcher()
        InstanceComposer(self.resolved).compose(host, register=self._register)

    @staticmethod
    def prepare_features(
        cls: type,
        *,
        registry: Optional[FeatureRegistry] = None,
    ) -> ResolvedFeatureSet:
        """Resolve and cache ``cls``'s features; repeat calls return the cached set."""
        reg = registry or get_registry()
        return reg.prepare(cls)

    def _register(self, name: str, module: Any) -> None:
        self._instances[name] = module
        self._dispatcher.register(name, module)

    @property
    def instances(self) -> Mapping[str, Any]:
        return MappingProxyType(self._instances)

    def module_instance(self, name: str) -> Optional[Any]:
        return self._instances.get(name)

    def dispatch(self, event: Union[LifecycleEvent, str], *args: Any) -> int:
        return self._dispatcher.dispatch(event, *args)

    def around(self, kind: str, own, *args: Any) -> Any:
        return self._dispatcher.around(kind, own, *args)
