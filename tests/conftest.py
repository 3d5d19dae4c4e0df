import pytest

from feature_composer.core.features import elements
from feature_composer.core.observability.metrics import reset_metrics


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    # Deterministic defaults; tests opt in to strict mode explicitly
    monkeypatch.delenv("FEATURES_STRICT_OVERRIDES", raising=False)
    monkeypatch.delenv("FEATURES_METRICS_ENABLED", raising=False)
    reset_metrics()
    yield
    elements.reset_elements()


class Recorder:
    """Plain capability module: keeps what it was built with."""

    properties = {}

    def __init__(self, host, config):
        self.host = host
        self.config = config


@pytest.fixture()
def recorder():
    return Recorder
