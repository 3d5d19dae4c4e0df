import logging

import pytest

from feature_composer.core.features import FeatureHost, MissingModuleError
from feature_composer.core.observability.metrics import snapshot_named


class _Mod:
    def __init__(self, host, config):
        self.config = config


def test_override_of_unknown_feature_is_a_logged_noop(caplog):
    class Root(FeatureHost):
        provides = {"x": _Mod}

    class Leaf(Root):
        feature_overrides = {"ghost": {"config": {"a": 1}}, "x": {"config": {"b": 2}}}

    with caplog.at_level(logging.WARNING):
        resolved = Leaf.prepare_features()

    assert resolved.names() == ("x",)
    assert len(resolved.diagnostics) == 1
    diag = resolved.diagnostics[0]
    assert diag["code"] == "features.override_target_missing"
    assert diag["data"]["feature"] == "ghost"
    assert diag["data"]["declared_by"].endswith("Leaf")
    assert any("ghost" in r.getMessage() for r in caplog.records)
    assert snapshot_named().get("missing_override_targets") == 1

    host = Leaf()
    assert list(host.feature_manager.instances) == ["x"]
    assert host.module_instance("x").config == {"b": 2}


def test_strict_mode_raises(monkeypatch):
    monkeypatch.setenv("FEATURES_STRICT_OVERRIDES", "true")

    class Host(FeatureHost):
        feature_overrides = {"ghost": "disable"}

    with pytest.raises(MissingModuleError) as exc:
        Host.prepare_features()
    assert exc.value.feature == "ghost"
