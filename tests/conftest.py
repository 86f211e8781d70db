"""Global test configuration and fixtures."""

import os
import sys
from pathlib import Path
from unittest.mock import Mock

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from resilient_provisioning.config import GENERIC_CLASSIFICATION  # noqa: E402
from resilient_provisioning.domain.base.ports import LoggingPort  # noqa: E402
from resilient_provisioning.infrastructure.resilience import ErrorClassifier  # noqa: E402
from resilient_provisioning.providers.aws import classification_for  # noqa: E402


class FakeClock:
    """Monotonic clock advanced only by its own ``sleep``."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    """Deterministic clock; pass ``clock`` and ``clock.sleep`` to components."""
    return FakeClock()


@pytest.fixture
def logger():
    """Mock logger."""
    return Mock(spec=LoggingPort)


@pytest.fixture
def generic_classifier() -> ErrorClassifier:
    """Classifier over the provider-independent tables."""
    return ErrorClassifier(GENERIC_CLASSIFICATION)


@pytest.fixture
def classifier() -> ErrorClassifier:
    """Classifier over the generic plus AWS tables."""
    return ErrorClassifier(classification_for("aws"))


@pytest.fixture
def aws_credentials(monkeypatch):
    """Mocked AWS credentials for moto."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", "us-east-1")
    monkeypatch.delenv("AWS_PROFILE", raising=False)
    for name in [key for key in os.environ if key.startswith("RP_")]:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.delenv("RESILIENT_PROVISIONING_CONFIG", raising=False)
