from __future__ import annotations

import os
from dataclasses import dataclass


def _truthy(raw: str) -> bool:
    return raw.strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class Settings:
    strict_overrides: bool = False
    metrics_enabled: bool = True


def load_settings() -> Settings:
    """Read settings from the environment at call time (tests monkeypatch env)."""
    return Settings(
        strict_overrides=_truthy(os.getenv("FEATURES_STRICT_OVERRIDES") or "0"),
        metrics_enabled=_truthy(os.getenv("FEATURES_METRICS_ENABLED") or "1"),
    )
