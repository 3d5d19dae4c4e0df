from __future__ import annotations

import hashlib
import json
import logging
import threading
import time
import weakref
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple

from feature_composer.core.observability import metrics
from feature_composer.core.settings import load_settings

from .chain import ChainWalker
from .errors import MissingModuleError
from .models import ClassNode, PropertyDescriptor, ProvisionEntry, ResolvedFeature, ResolvedFeatureSet
from .overrides import is_effectively_enabled, merged_config, resolve_overrides
from .provisions import resolve_provisions
from .reactive import declared_properties
from .schema import collect_property_schema, patched_schema, property_owners

log = logging.getLogger(__name__)


def _stable_default(obj: Any) -> str:
    # callables in config: name them, never repr() them (addresses change per process)
    return getattr(obj, "__qualname__", None) or type(obj).__name__


def fingerprint(features: Tuple[ResolvedFeature, ...]) -> str:
    """
    Stable fingerprint for a resolved feature set.

    - Order-sensitive (resolution order is dispatch order)
    - Deterministic across processes
    """
    h = hashlib.sha256()
    for f in features:
        cfg = json.dumps(f.config, sort_keys=True, default=_stable_default)
        h.update(f"{f.name}:{f.provision.module_name}:{int(f.enabled)}:{cfg}".encode("utf-8"))
        h.update(b"\0")
    return h.hexdigest()[:16]


def _missing_targets(
    host: str,
    chain: Tuple[ClassNode, ...],
    provisions: Mapping[str, ProvisionEntry],
) -> List[Dict[str, Any]]:
    strict = load_settings().strict_overrides
    seen: Dict[str, Dict[str, Any]] = {}

    for node in chain:
        for name in node.overrides:
            if name in provisions or name in seen:
                continue
            err = MissingModuleError(host=host, feature=str(name), declared_by=node.name)
            if strict:
                raise err
            log.warning("%s", err)
            metrics.inc_override_diagnostic(str(name))
            seen[name] = {
                "code": "features.override_target_missing",
                "severity": "warn",
                "message": str(err),
                "data": {"feature": str(name), "declared_by": node.name},
            }

    return list(seen.values())


def resolve_feature_set(
    cls: type,
    *,
    boundary: Optional[type] = None,
    host_properties: Optional[Mapping[str, PropertyDescriptor]] = None,
) -> ResolvedFeatureSet:
    """Pure resolution of one host class; callers cache the result."""
    host = cls.__qualname__
    t0 = time.perf_counter()

    chain = tuple(ChainWalker(cls, boundary=boundary))
    provisions = resolve_provisions(chain)
    overrides = resolve_overrides(chain)
    diagnostics = _missing_targets(host, chain, provisions)

    features: List[ResolvedFeature] = []
    for name, entry in provisions.items():
        override = overrides.get(name)
        features.append(
            ResolvedFeature(
                name=name,
                provision=entry,
                override=override,
                enabled=is_effectively_enabled(entry.enabled, override),
                config=merged_config(entry.config, override),
                properties=patched_schema(entry.module, override),
            )
        )

    schema = collect_property_schema(host, features, host_properties)
    resolved = ResolvedFeatureSet(
        host=host,
        chain=chain,
        features=tuple(features),
        schema=schema,
        diagnostics=tuple(diagnostics),
        fingerprint=fingerprint(tuple(features)),
        owners=MappingProxyType(property_owners(features, host_properties)),
    )

    log.debug(
        "features.resolve host=%s chain=%s features=%s enabled=%s props=%s ms=%s",
        host,
        len(chain),
        len(features),
        sum(1 for f in features if f.enabled),
        len(schema),
        int(round((time.perf_counter() - t0) * 1000)),
    )
    return resolved


# Resolved sets live on the class they describe, so they go away with it.
_RESOLVED_ATTR = "__resolved_features__"


class FeatureRegistry:
    """One-time resolution results keyed by host class.

    ``prepare`` is the only writer. Everything it resolves from comes from
    the class itself: the chain stops at ``cls.feature_boundary`` and the
    host's own ``properties`` shadow module ones. Concurrent first use
    resolves once; every caller gets the same object.
    """

    def __init__(self):
        self._prepared: "weakref.WeakSet[type]" = weakref.WeakSet()
        self._lock = threading.RLock()

    def get(self, cls: type) -> Optional[ResolvedFeatureSet]:
        if cls not in self._prepared:
            return None
        return vars(cls).get(_RESOLVED_ATTR)

    def is_prepared(self, cls: type) -> bool:
        return self.get(cls) is not None

    def prepare(self, cls: type) -> ResolvedFeatureSet:
        cached = self.get(cls)
        if cached is not None:
            return cached

        with self._lock:
            cached = self.get(cls)
            if cached is not None:
                return cached
            resolved = resolve_feature_set(
                cls,
                boundary=getattr(cls, "feature_boundary", None),
                host_properties=declared_properties(cls),
            )
            setattr(cls, _RESOLVED_ATTR, resolved)
            self._prepared.add(cls)

        metrics.inc_resolution(resolved.host)
        return resolved

    def clear(self) -> None:
        with self._lock:
            for cls in list(self._prepared):
                if _RESOLVED_ATTR in vars(cls):
                    delattr(cls, _RESOLVED_ATTR)
            self._prepared.clear()


_REGISTRY = FeatureRegistry()


def get_registry() -> FeatureRegistry:
    return _REGISTRY
