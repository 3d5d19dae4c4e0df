from __future__ import annotations

from collections import Counter
from typing import Dict

from prometheus_client import Counter as PromCounter

from feature_composer.core.settings import load_settings

# Named counters (in-process snapshot)
_NAMED = Counter()

RESOLUTIONS_TOTAL = PromCounter(
    "feature_composer_resolutions_total",
    "Host classes resolved",
    ["host"],
)

MODULES_CONSTRUCTED_TOTAL = PromCounter(
    "feature_composer_modules_constructed_total",
    "Feature modules constructed",
    ["feature"],
)

HOOK_FAILURES_TOTAL = PromCounter(
    "feature_composer_hook_failures_total",
    "Lifecycle hooks that raised",
    ["event", "feature"],
)

OVERRIDE_DIAGNOSTICS_TOTAL = PromCounter(
    "feature_composer_override_diagnostics_total",
    "Overrides naming a feature nobody provides",
    ["feature"],
)


def reset_metrics() -> None:
    """
    Test helper: clears the in-process counters.
    Prometheus counters are process-global and are left alone.
    """
    _NAMED.clear()


def inc_named(name: str, value: int = 1) -> None:
    if not name:
        return
    _NAMED[name] += int(value)


def snapshot_named() -> Dict[str, int]:
    return dict(_NAMED)


def inc_resolution(host: str) -> None:
    inc_named("resolutions")
    if load_settings().metrics_enabled:
        RESOLUTIONS_TOTAL.labels(host=host).inc()


def inc_constructed(feature: str) -> None:
    inc_named("modules_constructed")
    if load_settings().metrics_enabled:
        MODULES_CONSTRUCTED_TOTAL.labels(feature=feature).inc()


def inc_hook_failure(event: str, feature: str) -> None:
    inc_named("hook_failures")
    if load_settings().metrics_enabled:
        HOOK_FAILURES_TOTAL.labels(event=event, feature=feature).inc()


def inc_override_diagnostic(feature: str) -> None:
    inc_named("missing_override_targets")
    if load_settings().metrics_enabled:
        OVERRIDE_DIAGNOSTICS_TOTAL.labels(feature=feature).inc()
