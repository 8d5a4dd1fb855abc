"""
Pytest configuration and fixtures for SafeImage tests.
"""

import os
import pytest
import sys
from pathlib import Path

# Add src to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

# Run Qt headless unless a platform is chosen explicitly
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtWidgets import QApplication


@pytest.fixture(scope="session")
def qapp():
    """Create QApplication once per test session."""
    app = QApplication.instance()
    if app is None:
        app = QApplication([])
    yield app


@pytest.fixture
def connectivity(qapp):
    """Manually driven connectivity source, initially online."""
    from safe_image.core.connectivity import ManualConnectivitySource
    return ManualConnectivitySource(connected=True)


@pytest.fixture
def make_controller(qapp):
    """
    Factory for RetryControllers that record their emissions.

    Returns (controller, requests, snapshots).
    """
    from safe_image.core.retry_controller import RetryController
    from safe_image.utils.config import RetryConfig

    created = []

    def _make(max_retries=3, retry_delay_ms=20, connectivity=None,
              connectivity_enabled=True):
        ctrl = RetryController(
            RetryConfig(
                max_retries=max_retries,
                retry_delay_ms=retry_delay_ms,
                connectivity_enabled=connectivity_enabled,
            ),
            connectivity=connectivity,
        )
        requests = []
        snapshots = []
        ctrl.load_requested.connect(requests.append)
        ctrl.visual_state_changed.connect(snapshots.append)
        created.append(ctrl)
        return ctrl, requests, snapshots

    yield _make

    for ctrl in created:
        ctrl.dispose()


@pytest.fixture
def fetcher(qapp):
    """Simulated fetcher that always succeeds on the next event loop pass."""
    from safe_image.core.fetcher import SimulatedFetcher
    return SimulatedFetcher(latency_ms=0, seed=7, size=32)
