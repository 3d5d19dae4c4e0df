import gc
import threading
import weakref

from feature_composer.core.features import Feature, FeatureHost, FeatureManager, get_registry
from feature_composer.core.observability.metrics import snapshot_named


class XFeature(Feature):
    properties = {"p": {"type": str, "attribute": "module-p"}}


def _host():
    class A(FeatureHost):
        properties = {"p": {"type": str, "attribute": "host-p"}}
        provides = {"x": XFeature}

    return A


def test_manager_entry_point_keeps_host_precedence():
    A = _host()

    FeatureManager.prepare_features(A)

    assert A.element_properties()["p"].attribute == "host-p"
    assert len(A.resolved_features().chain) == 1


def test_entry_points_agree_in_either_order():
    A = _host()
    B = _host()

    a_first = FeatureManager.prepare_features(A)
    b_first = B.prepare_features()

    assert a_first is A.prepare_features()
    assert b_first is FeatureManager.prepare_features(B)
    assert a_first.schema["p"] == b_first.schema["p"]
    assert a_first.fingerprint == b_first.fingerprint
    assert snapshot_named().get("resolutions") == 2


def test_concurrent_first_use_resolves_once():
    A = _host()
    registry = get_registry()
    barrier = threading.Barrier(8)
    results = []

    def _prepare() -> None:
        barrier.wait()
        results.append(registry.prepare(A))

    threads = [threading.Thread(target=_prepare) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 8
    assert all(r is results[0] for r in results)
    assert snapshot_named().get("resolutions") == 1


def test_resolved_set_does_not_outlive_its_class():
    A = _host()
    A.prepare_features()
    assert get_registry().is_prepared(A)

    ref = weakref.ref(A)
    del A
    gc.collect()

    assert ref() is None
