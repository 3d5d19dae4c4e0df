import pytest

from feature_composer.core.features import (
    ChainWalker,
    ConfigurationError,
    FeatureHost,
    ProvisionEntry,
    resolve_provisions,
)


class ModA:
    def __init__(self, host, config):
        self.config = config


class ModB(ModA):
    pass


def _resolve(cls):
    return resolve_provisions(ChainWalker(cls, boundary=FeatureHost))


def test_most_derived_provision_wins_wholesale():
    class Root(FeatureHost):
        provides = {"x": {"module": ModA, "config": {"a": 1, "b": 2}, "enabled": False}}

    class Leaf(Root):
        provides = {"x": {"module": ModB, "config": {"c": 3}}}

    resolved = _resolve(Leaf)

    assert list(resolved) == ["x"]
    entry = resolved["x"]
    assert entry.module is ModB
    # ancestor config is discarded, not merged
    assert entry.config == {"c": 3}
    assert entry.enabled is True
    assert entry.declared_by.endswith("Leaf")


def test_resolution_order_is_leaf_first():
    class Root(FeatureHost):
        provides = {"layout": ModA, "size": ModA}

    class Mid(Root):
        provides = {"focus": ModA}

    class Leaf(Mid):
        provides = {"counter": ModA, "size": ModB}

    assert list(_resolve(Leaf)) == ["counter", "size", "focus", "layout"]


def test_provision_declaration_forms():
    entry = ProvisionEntry(name="ignored", module=ModA, config={"k": "v"})

    class Host(FeatureHost):
        provides = {
            "bare": ModA,
            "alias": {"class": ModB},
            "model": entry,
        }

    resolved = _resolve(Host)

    assert resolved["bare"].module is ModA
    assert resolved["bare"].config == {}
    assert resolved["alias"].module is ModB
    assert resolved["model"].name == "model"
    assert resolved["model"].config == {"k": "v"}


def test_malformed_provision_raises():
    class Host(FeatureHost):
        provides = {"broken": {"module": "not-callable"}}

    with pytest.raises(ConfigurationError):
        _resolve(Host)


def test_enabled_flag_is_validated_not_truthiness():
    class Off(FeatureHost):
        provides = {"x": {"module": ModA, "enabled": "false"}}

    assert _resolve(Off)["x"].enabled is False

    class Bad(FeatureHost):
        provides = {"x": {"module": ModA, "enabled": "sometimes"}}

    with pytest.raises(ConfigurationError) as exc:
        _resolve(Bad)

    assert "'x'" in str(exc.value)
