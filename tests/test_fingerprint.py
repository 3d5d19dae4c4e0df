from feature_composer.core.features import FeatureHost


class _Mod:
    def __init__(self, host, config):
        pass


def _callback():
    pass


def _host(config):
    class Host(FeatureHost):
        provides = {"x": {"module": _Mod, "config": config}}

    return Host


def test_fingerprint_is_stable_for_identical_declarations():
    a = _host({"k": 1, "cb": _callback}).prepare_features()
    b = _host({"cb": _callback, "k": 1}).prepare_features()

    assert a.fingerprint == b.fingerprint
    assert len(a.fingerprint) == 16


def test_fingerprint_changes_with_config_and_enablement():
    base = _host({"k": 1}).prepare_features()
    changed = _host({"k": 2}).prepare_features()

    class Disabled(_host({"k": 1})):
        feature_overrides = {"x": "disable"}

    assert base.fingerprint != changed.fingerprint
    assert base.fingerprint != Disabled.prepare_features().fingerprint
