import pytest

from feature_composer.core.features import FeatureHost, HookError
from feature_composer.core.observability.metrics import reset_metrics, snapshot_named


class _Hooked:
    def __init__(self, host, config):
        self.fail = False

    def connected_callback(self):
        if self.fail:
            raise RuntimeError("nope")


def test_named_counters_track_engine_activity():
    class Host(FeatureHost):
        provides = {"a": _Hooked, "b": _Hooked}

    host = Host()
    host.connected_callback()

    snap = snapshot_named()
    assert snap["resolutions"] == 1
    assert snap["modules_constructed"] == 2
    assert snap["hook_calls"] == 2

    host.module_instance("b").fail = True
    with pytest.raises(HookError):
        host.connected_callback()
    assert snapshot_named()["hook_failures"] == 1


def test_counters_still_count_with_prometheus_disabled(monkeypatch):
    monkeypatch.setenv("FEATURES_METRICS_ENABLED", "0")

    class Host(FeatureHost):
        provides = {"a": _Hooked}

    Host()
    assert snapshot_named()["modules_constructed"] == 1

    reset_metrics()
    assert snapshot_named() == {}
