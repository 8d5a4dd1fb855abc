"""
Unit tests for the fetcher contract and SimulatedFetcher.
"""

import pytest
import shiboken6

from safe_image.core.fetcher import ImageFetcher, SimulatedFetcher
from safe_image.core.models import LoadRequest


def test_base_fetcher_is_abstract(qapp):
    """Test that fetch() must be implemented."""
    with pytest.raises(NotImplementedError):
        ImageFetcher().fetch(LoadRequest("a"))


class TestSimulatedFetcher:
    """Tests for SimulatedFetcher."""

    def test_success_delivers_pixmap(self, qtbot):
        """Test a successful fetch."""
        fetcher = SimulatedFetcher(latency_ms=0, size=16)
        request = LoadRequest("a")
        with qtbot.waitSignal(fetcher.succeeded, timeout=500) as blocker:
            fetcher.fetch(request)

        got_request, pixmap = blocker.args
        assert got_request == request
        assert pixmap.width() == 16
        assert fetcher.requests == [request]

    def test_fail_first_then_succeed(self, qtbot):
        """Test forced failures per resource."""
        fetcher = SimulatedFetcher(latency_ms=0, fail_first=1)

        with qtbot.waitSignal(fetcher.failed, timeout=500) as blocker:
            fetcher.fetch(LoadRequest("a"))
        assert "a" in blocker.args[1]

        with qtbot.waitSignal(fetcher.succeeded, timeout=500):
            fetcher.fetch(LoadRequest("a", 1))
        assert fetcher.attempts_for("a") == 2

    def test_always_fail(self, qtbot):
        """Test failure_rate=1.0."""
        fetcher = SimulatedFetcher(latency_ms=0, failure_rate=1.0)
        with qtbot.waitSignal(fetcher.failed, timeout=500):
            fetcher.fetch(LoadRequest("a"))

    def test_loading_emitted_synchronously(self, qapp):
        """Test that loading fires when fetch is called."""
        fetcher = SimulatedFetcher(latency_ms=1000)
        seen = []
        fetcher.loading.connect(seen.append)
        fetcher.fetch(LoadRequest("a"))
        assert seen == [LoadRequest("a")]

    def test_invalid_failure_rate(self, qapp):
        """Test failure_rate bounds."""
        with pytest.raises(ValueError):
            SimulatedFetcher(failure_rate=1.5)

    def test_stable_color_per_key(self, qapp):
        """Test that the same key always maps to the same color."""
        assert SimulatedFetcher._color_for("a") == SimulatedFetcher._color_for("a")

    def test_deleted_fetcher_drops_pending_completion(self, qtbot):
        """Test that a fetcher deleted mid-flight never completes."""
        fetcher = SimulatedFetcher(latency_ms=20)
        fetcher.fetch(LoadRequest("a"))
        shiboken6.delete(fetcher)
        assert not shiboken6.isValid(fetcher)
        qtbot.wait(100)
