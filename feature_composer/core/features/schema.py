from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, Mapping, Optional

from .errors import ConfigurationError
from .models import DISABLED, Override, PropertyDescriptor, ResolvedFeature, coerce_schema, is_disable

log = logging.getLogger(__name__)


def module_schema(module: Any) -> Dict[str, PropertyDescriptor]:
    raw = getattr(module, "properties", None)
    if raw is not None and not isinstance(raw, Mapping) and callable(raw):
        raw = raw()
    if raw is not None and not isinstance(raw, Mapping):
        raise ConfigurationError(f"{module!r}.properties must be a mapping")
    return coerce_schema(raw)


def apply_property_patch(
    schema: Mapping[str, PropertyDescriptor],
    patch: Mapping[str, Any],
) -> Dict[str, PropertyDescriptor]:
    out = dict(schema)
    for prop, value in patch.items():
        if is_disable(value):
            out.pop(prop, None)
        else:
            out[prop] = PropertyDescriptor.coerce(value)
    return out


def patched_schema(module: Any, override: Optional[Override]) -> Dict[str, PropertyDescriptor]:
    schema = module_schema(module)
    if override is None or override is DISABLED:
        return schema
    return apply_property_patch(schema, override.properties)


def collect_property_schema(
    host: str,
    features: Iterable[ResolvedFeature],
    host_properties: Optional[Mapping[str, PropertyDescriptor]] = None,
) -> Mapping[str, PropertyDescriptor]:
    """Union of enabled features' patched schemas plus the host's own properties.

    Host-declared properties win without complaint. Two different modules
    contributing the same name is a configuration error.
    """
    own = dict(host_properties or {})
    published: Dict[str, PropertyDescriptor] = {}
    owners: Dict[str, ResolvedFeature] = {}

    for feature in features:
        if not feature.enabled:
            continue
        for prop, desc in feature.properties.items():
            if prop in own:
                log.debug("host %s shadows property %s from feature %s", host, prop, feature.name)
                continue
            first = owners.get(prop)
            if first is None:
                published[prop] = desc
                owners[prop] = feature
                continue
            if first.module is feature.module:
                continue
            raise ConfigurationError(
                f"{host}: property '{prop}' is contributed by both '{first.name}' and "
                f"'{feature.name}'; disable it on one of them",
                host=host,
                prop=prop,
            )

    published.update(own)
    return MappingProxyType(published)


def property_owners(
    features: Iterable[ResolvedFeature],
    host_properties: Optional[Mapping[str, PropertyDescriptor]] = None,
) -> Dict[str, str]:
    """Published property -> name of the first enabled feature contributing it."""
    own = host_properties or {}
    owners: Dict[str, str] = {}
    for feature in features:
        if not feature.enabled:
            continue
        for prop in feature.properties:
            if prop not in own:
                owners.setdefault(prop, feature.name)
    return owners
