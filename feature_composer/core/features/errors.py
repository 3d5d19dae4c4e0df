"""Feature composition exceptions.

Every error raised by the engine derives from ``FeatureError`` and carries the
feature / event it concerns as attributes so callers can react without
parsing messages.
"""

from __future__ import annotations

from typing import Optional


class FeatureError(Exception):
    pass


class ConfigurationError(FeatureError):
    def __init__(self, message: str, *, host: Optional[str] = None, prop: Optional[str] = None):
        self.host = host
        self.prop = prop
        super().__init__(message)


class MissingModuleError(FeatureError):
    def __init__(self, *, host: str, feature: str, declared_by: str):
        self.host = host
        self.feature = feature
        self.declared_by = declared_by
        super().__init__(
            f"{declared_by} overrides feature '{feature}' which no class in the chain of {host} provides"
        )


class ConstructionError(FeatureError):
    def __init__(self, *, host: str, feature: str, reason: str):
        self.host = host
        self.feature = feature
        super().__init__(f"Failed to construct feature '{feature}' for {host}: {reason}")


class HookError(FeatureError):
    def __init__(self, *, event: str, feature: str, reason: str):
        self.event = event
        self.feature = feature
        super().__init__(f"Feature '{feature}' failed in {event}: {reason}")
