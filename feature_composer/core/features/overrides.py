from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping

from .models import DISABLED, ClassNode, Override, OverrideEntry, parse_override


def copy_tree(value: Any) -> Any:
    """Copy nested mappings/lists; leaves (callables, objects) are shared."""
    if isinstance(value, Mapping):
        return {k: copy_tree(v) for k, v in value.items()}
    if isinstance(value, list):
        return [copy_tree(v) for v in value]
    return value


def deep_merge(base: Mapping[str, Any], patch: Mapping[str, Any]) -> Dict[str, Any]:
    """Return ``base`` updated by ``patch``; ``patch`` wins at every depth.

    Mappings merge key by key, anything else (lists included) replaces.
    """
    out: Dict[str, Any] = copy_tree(base)
    for k, v in patch.items():
        if isinstance(v, Mapping) and isinstance(out.get(k), Mapping):
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = copy_tree(v)
    return out


def merge_property_patch(ancestor: Mapping[str, Any], descendant: Mapping[str, Any]) -> Dict[str, Any]:
    # DISABLE_PROPERTY markers are kept; they are applied against the module schema later.
    out = dict(ancestor)
    out.update(descendant)
    return out


def fold_override(stored: Override, visited: Override) -> Override:
    """Fold an ancestor's override (``visited``) into the accumulated one."""
    if stored is DISABLED:
        return DISABLED
    if visited is DISABLED:
        return DISABLED
    return OverrideEntry(
        config=deep_merge(visited.config, stored.config),
        properties=merge_property_patch(visited.properties, stored.properties),
    )


def resolve_overrides(chain: Iterable[ClassNode]) -> Dict[str, Override]:
    resolved: Dict[str, Override] = {}
    for node in chain:
        for name, raw in node.overrides.items():
            entry = parse_override(raw, feature=str(name), declared_by=node.name)
            if name not in resolved:
                resolved[name] = entry
            else:
                resolved[name] = fold_override(resolved[name], entry)
    return resolved


def is_effectively_enabled(enabled_by_default: bool, override: Override | None) -> bool:
    if override is DISABLED:
        return False
    # any surviving override entry opts the feature in
    if override is not None:
        return True
    return bool(enabled_by_default)


def merged_config(default: Mapping[str, Any], override: Override | None) -> Dict[str, Any]:
    if override is None or override is DISABLED:
        return copy_tree(default)
    return deep_merge(default, override.config)
