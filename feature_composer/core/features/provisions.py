from __future__ import annotations

from typing import Dict, Iterable

from .models import ClassNode, ProvisionEntry


def resolve_provisions(chain: Iterable[ClassNode]) -> Dict[str, ProvisionEntry]:
    """Most-derived declaration of a name wins outright.

    An ancestor's provision of an already-seen name is dropped whole, never
    merged field by field. Insertion order is first-resolution order.
    """
    resolved: Dict[str, ProvisionEntry] = {}
    for node in chain:
        for name, raw in node.provides.items():
            if name in resolved:
                continue
            resolved[name] = ProvisionEntry.from_declaration(str(name), raw, declared_by=node.name)
    return resolved
