from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterator, Mapping, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .errors import ConfigurationError


class Directive(str, Enum):
    DISABLE = "disable"


# Whole-feature and single-property switches share the wire value "disable".
DISABLED = Directive.DISABLE
DISABLE_PROPERTY = Directive.DISABLE


def is_disable(value: Any) -> bool:
    return isinstance(value, str) and value == Directive.DISABLE.value


class PropertyDescriptor(BaseModel):
    """Reactive property declaration.

    Unknown keys are kept (``extra="allow"``) so a host's reactive layer can
    carry its own options through untouched.
    """

    model_config = ConfigDict(frozen=True, extra="allow", arbitrary_types_allowed=True)

    type: Any = None
    attribute: Union[str, bool, None] = None
    reflect: bool = False
    value: Any = None

    @property
    def has_initial_value(self) -> bool:
        return "value" in self.model_fields_set

    def attribute_name(self, prop: str) -> Optional[str]:
        if self.attribute is False:
            return None
        if isinstance(self.attribute, str) and self.attribute:
            return self.attribute
        return prop.lower()

    @classmethod
    def coerce(cls, raw: Any) -> "PropertyDescriptor":
        if isinstance(raw, cls):
            return raw
        if raw is None:
            return cls()
        if isinstance(raw, Mapping):
            return cls.model_validate(dict(raw))
        raise ConfigurationError(f"Invalid property descriptor: {raw!r}")


def coerce_schema(raw: Optional[Mapping[str, Any]]) -> Dict[str, PropertyDescriptor]:
    return {str(k): PropertyDescriptor.coerce(v) for k, v in (raw or {}).items()}


class ProvisionEntry(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    module: Any
    config: Dict[str, Any] = Field(default_factory=dict)
    enabled: bool = True
    declared_by: str = ""

    @property
    def module_name(self) -> str:
        m = self.module
        return f"{getattr(m, '__module__', '?')}.{getattr(m, '__qualname__', type(m).__name__)}"

    @classmethod
    def from_declaration(cls, name: str, raw: Any, *, declared_by: str) -> "ProvisionEntry":
        """
        Accepts:
          - ProvisionEntry
          - {"module": Factory, "config": {...}, "enabled": bool}
          - {"class": Factory, ...}   (alias)
          - Factory                    (bare callable, defaults for the rest)
        """
        if isinstance(raw, cls):
            return raw.model_copy(update={"name": name, "declared_by": raw.declared_by or declared_by})

        if isinstance(raw, Mapping):
            module = raw.get("module", raw.get("class"))
            config = raw.get("config") or {}
            if not callable(module):
                raise ConfigurationError(
                    f"{declared_by}: provision '{name}' must name a callable module",
                    host=declared_by,
                )
            if not isinstance(config, Mapping):
                raise ConfigurationError(
                    f"{declared_by}: provision '{name}' config must be a mapping",
                    host=declared_by,
                )
            try:
                return cls(
                    name=name,
                    module=module,
                    config=dict(config),
                    enabled=raw.get("enabled", True),
                    declared_by=declared_by,
                )
            except ValidationError as e:
                raise ConfigurationError(
                    f"{declared_by}: invalid provision '{name}': {e.errors()[0]['msg']}",
                    host=declared_by,
                ) from e

        if callable(raw):
            return cls(name=name, module=raw, declared_by=declared_by)

        raise ConfigurationError(f"{declared_by}: invalid provision '{name}': {raw!r}", host=declared_by)


class OverrideEntry(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    config: Dict[str, Any] = Field(default_factory=dict)
    # name -> PropertyDescriptor | DISABLE_PROPERTY
    properties: Dict[str, Any] = Field(default_factory=dict)


Override = Union[OverrideEntry, Directive]


def parse_override(raw: Any, *, feature: str, declared_by: str) -> Override:
    if is_disable(raw):
        return DISABLED
    if isinstance(raw, OverrideEntry):
        return raw
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"{declared_by}: invalid override for '{feature}': {raw!r}", host=declared_by)

    config = raw.get("config") or {}
    props = raw.get("properties") or {}
    if not isinstance(config, Mapping) or not isinstance(props, Mapping):
        raise ConfigurationError(
            f"{declared_by}: override for '{feature}' needs mapping 'config' / 'properties'",
            host=declared_by,
        )

    patch: Dict[str, Any] = {}
    for prop, value in props.items():
        patch[str(prop)] = DISABLE_PROPERTY if is_disable(value) else PropertyDescriptor.coerce(value)
    return OverrideEntry(config=dict(config), properties=patch)


@dataclass(frozen=True)
class ClassNode:
    owner: type
    provides: Mapping[str, Any] = field(default_factory=dict)
    overrides: Mapping[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.owner.__qualname__

    @property
    def is_empty(self) -> bool:
        return not self.provides and not self.overrides


@dataclass(frozen=True)
class ResolvedFeature:
    name: str
    provision: ProvisionEntry
    override: Optional[Override]
    enabled: bool
    config: Mapping[str, Any]
    properties: Mapping[str, PropertyDescriptor]

    @property
    def module(self) -> Any:
        return self.provision.module


@dataclass(frozen=True)
class ResolvedFeatureSet:
    host: str
    chain: Tuple[ClassNode, ...]
    features: Tuple[ResolvedFeature, ...]
    schema: Mapping[str, PropertyDescriptor]
    diagnostics: Tuple[Dict[str, Any], ...] = ()
    fingerprint: str = ""
    # published property -> feature that owns it (host-declared ones are absent)
    owners: Mapping[str, str] = field(default_factory=dict)

    def get(self, name: str) -> Optional[ResolvedFeature]:
        for f in self.features:
            if f.name == name:
                return f
        return None

    def names(self) -> Tuple[str, ...]:
        return tuple(f.name for f in self.features)

    def enabled_features(self) -> Iterator[ResolvedFeature]:
        return (f for f in self.features if f.enabled)

    def published_by(self, name: str) -> FrozenSet[str]:
        """Host properties feature ``name`` may write.

        A property another module owns, or one this feature's patch stripped,
        stays internal to the module.
        """
        feature = self.get(name)
        if feature is None or not feature.enabled:
            return frozenset()
        out = set()
        for prop in feature.properties:
            if prop not in self.schema:
                continue
            owner = self.owners.get(prop)
            if owner is None or owner == name or self.get(owner).module is feature.module:
                out.add(prop)
        return frozenset(out)
