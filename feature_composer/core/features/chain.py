from __future__ import annotations

from typing import Any, Iterator, Mapping, Optional

from .errors import ConfigurationError
from .models import ClassNode


PROVIDES_ATTR = "provides"
OVERRIDES_ATTR = "feature_overrides"


def _own_declaration(cls: type, attr: str) -> Mapping[str, Any]:
    # Only the class's own namespace; inherited attributes belong to the ancestor's node.
    raw = vars(cls).get(attr)
    if raw is None:
        return {}
    if isinstance(raw, (classmethod, staticmethod)):
        raw = raw.__get__(None, cls)()
    if not isinstance(raw, Mapping):
        raise ConfigurationError(f"{cls.__qualname__}.{attr} must be a mapping", host=cls.__qualname__)
    return dict(raw)


class ChainWalker:
    """Leaf-to-root view over a host class's ancestors.

    Iterating twice walks twice; the registry snapshots the result once per class.
    """

    def __init__(self, leaf: type, *, boundary: Optional[type] = None):
        self.leaf = leaf
        self.boundary = boundary

    def __iter__(self) -> Iterator[ClassNode]:
        for cls in self.leaf.__mro__:
            if cls is object or cls is self.boundary:
                return
            yield ClassNode(
                owner=cls,
                provides=_own_declaration(cls, PROVIDES_ATTR),
                overrides=_own_declaration(cls, OVERRIDES_ATTR),
            )
