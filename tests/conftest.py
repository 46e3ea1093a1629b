"""Root conftest - shared fixtures for all test layers.

Markers:
    @pytest.mark.unit  - No external deps
    @pytest.mark.e2e   - Full request flow with fake providers
"""

from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from tests.fakes import RecordingCapability
from walsis.brain.metrics.sli import RouterSLI
from walsis.shared.types import Action


@pytest.fixture
def registry() -> CollectorRegistry:
    """Isolated Prometheus registry; read values with get_sample_value()."""
    return CollectorRegistry()


@pytest.fixture
def sli(registry: CollectorRegistry) -> RouterSLI:
    """Router SLIs on the isolated registry."""
    return RouterSLI(registry=registry)


@pytest.fixture
def recording_capabilities() -> dict[Action, RecordingCapability]:
    return {action: RecordingCapability(action) for action in Action}
