import logging

from feature_composer.core.features import DISABLE_PROPERTY, Event, FeatureHost
from feature_composer.plugins.features import (
    BUILTIN_FEATURES,
    CounterFeature,
    FocusFeature,
    LayoutFeature,
    LayoutHost,
    LifecycleLoggerFeature,
)


def test_builtins_are_listed():
    assert set(BUILTIN_FEATURES) == {"layout", "focus", "counter", "lifecycle_logger"}
    assert BUILTIN_FEATURES["layout"] is LayoutFeature


def test_layout_defaults_and_classes():
    host = LayoutHost()

    assert (host.layout, host.shape, host.size, host.on_dark) == ("classic", "pill", "md", False)
    assert host.layout_classes == {"layout-classic": True, "shape-pill-md": True}


def test_layout_recomputes_on_shape_change():
    host = LayoutHost()
    host.perform_update()

    host.shape = "rounded"
    host.size = "lg"
    host.perform_update()

    assert host.layout_classes == {"layout-classic": True, "shape-rounded-lg": True}


def test_focus_tracks_host_focus_and_calls_callbacks():
    events = []

    class Host(FeatureHost):
        provides = {
            "focus": {
                "module": FocusFeature,
                "config": {"on_focus": lambda: events.append("focus"), "on_blur": lambda: events.append("blur")},
            },
        }

    host = Host()
    assert host.get_attribute("tabindex") == "0"
    assert host.has_focus is False

    host.focus()
    assert host.has_focus is True
    host.blur()
    assert host.has_focus is False
    assert events == ["focus", "blur"]


def test_focus_detaches_while_disconnected():
    class Host(FeatureHost):
        provides = {"focus": {"module": FocusFeature, "config": {"make_host_focusable": False}}}

    host = Host()
    assert host.get_attribute("tabindex") is None

    host.connected_callback()
    host.disconnected_callback()
    host.focus()
    assert host.has_focus is False

    host.connected_callback()
    host.focus()
    assert host.has_focus is True


def test_counter_fires_host_events():
    received = []

    class Host(FeatureHost):
        provides = {"counter": {"module": CounterFeature, "config": {"start": 5}}}

    host = Host()
    host.add_event_listener("counter-incremented", received.append)
    host.add_event_listener("counter-decremented", received.append)

    counter = host.module_instance("counter")
    counter.increment()
    counter.decrement()
    counter.decrement()

    assert [(e.type, e.detail["count"]) for e in received] == [
        ("counter-incremented", 6),
        ("counter-decremented", 5),
        ("counter-decremented", 4),
    ]
    assert all(isinstance(e, Event) and e.target is host for e in received)


def test_lifecycle_logger_logs_events(caplog):
    class Host(FeatureHost):
        provides = {"logger": LifecycleLoggerFeature}

    host = Host()
    with caplog.at_level(logging.INFO, logger="feature_composer.lifecycle"):
        host.connected_callback()
        host.perform_update()
        host.disconnected_callback()

    messages = [r.getMessage() for r in caplog.records if r.name == "feature_composer.lifecycle"]
    assert messages[0] == "connected_callback on Host"
    assert messages[1] == "first_updated on Host"
    assert messages[2].startswith("updated on Host")
    assert messages[3] == "disconnected_callback on Host"


def test_demo_style_composition():
    class Demo(LayoutHost):
        provides = {
            "focus": {"module": FocusFeature, "config": {"make_host_focusable": False}},
            "counter": {"module": CounterFeature, "config": {"start": 5}},
            "logger": {"module": LifecycleLoggerFeature},
        }
        feature_overrides = {
            "layout": {
                "config": {"layout": "emphasized", "shape": "rounded", "size": "lg", "on_dark": False},
                "properties": {"on_dark": DISABLE_PROPERTY},
            },
            "focus": {"config": {"make_host_focusable": True}},
            "counter": {"config": {"start": 10}},
        }

    host = Demo()

    assert list(host.feature_manager.instances) == ["focus", "counter", "logger", "layout"]
    assert host.count == 10
    assert host.get_attribute("tabindex") == "0"
    assert host.layout_classes == {"layout-emphasized": True, "shape-rounded-lg": True}
    assert "on_dark" not in Demo.element_properties()
