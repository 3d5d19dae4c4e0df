"""Tag name -> host class registry (stand-in for custom element definitions)."""

from __future__ import annotations

import re
import threading
from typing import Any, Dict, List, Optional

_TAG_RE = re.compile(r"^[a-z][a-z0-9._]*-[a-z0-9._-]*$")

_ELEMENTS: Dict[str, type] = {}
_LOCK = threading.Lock()


def define(tag: str, cls: type) -> None:
    if not _TAG_RE.match(tag or ""):
        raise ValueError(f"Invalid element name: {tag!r} (lowercase, must contain '-')")
    with _LOCK:
        if tag in _ELEMENTS:
            raise ValueError(f"Duplicate element name: {tag}")
        for existing_tag, existing in _ELEMENTS.items():
            if existing is cls:
                raise ValueError(f"{cls.__qualname__} is already defined as {existing_tag}")
        _ELEMENTS[tag] = cls


def get_element(tag: str) -> Optional[type]:
    return _ELEMENTS.get(tag)


def create_element(tag: str) -> Any:
    cls = get_element(tag)
    if cls is None:
        raise KeyError(tag)
    return cls()


def defined_elements() -> List[str]:
    return sorted(_ELEMENTS.keys())


def reset_elements() -> None:
    """Test helper."""
    with _LOCK:
        _ELEMENTS.clear()
