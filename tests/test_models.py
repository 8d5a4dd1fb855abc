"""
Unit tests for the core data model.
"""

import pytest

from safe_image.core.models import (
    LoadRequest, RetryState, VisualSnapshot, VisualState
)


class TestLoadRequest:
    """Tests for LoadRequest."""

    def test_initial_attempt_uses_plain_key(self):
        """Test that attempt 0 caches under the resource key itself."""
        assert LoadRequest("https://x/a.png").cache_key == "https://x/a.png"

    def test_retry_attempt_busts_cache_key(self):
        """Test that retries get a distinct cache key."""
        request = LoadRequest("https://x/a.png", 2)
        assert request.cache_key == "https://x/a.png_retry_2"

    def test_equality_by_key_and_attempt(self):
        """Test value equality used to match outcomes to requests."""
        assert LoadRequest("a", 1) == LoadRequest("a", 1)
        assert LoadRequest("a", 1) != LoadRequest("a", 2)

    def test_to_dict(self):
        """Test dict export."""
        assert LoadRequest("a", 3).to_dict() == {"resource_key": "a", "attempt_suffix": 3}


class TestRetryState:
    """Tests for RetryState helpers."""

    @pytest.mark.parametrize("key,expected", [(None, False), ("", False), ("a", True)])
    def test_has_resource(self, key, expected):
        """Test that null and empty keys mean no resource."""
        assert RetryState(resource_key=key).has_resource is expected

    def test_exhausted(self):
        """Test exhaustion at the ceiling."""
        state = RetryState(resource_key="a", retry_count=2, max_retries=3)
        assert not state.exhausted
        state.retry_count = 3
        assert state.exhausted

    def test_zero_budget_is_exhausted_immediately(self):
        """Test that max_retries=0 allows no retries."""
        assert RetryState(resource_key="a", max_retries=0).exhausted

    def test_offline_gated_needs_both_flags(self):
        """Test that gating applies only when enabled and disconnected."""
        assert RetryState(is_connected=False).offline_gated
        assert not RetryState(is_connected=False, connectivity_enabled=False).offline_gated
        assert not RetryState(is_connected=True).offline_gated


class TestVisualSnapshot:
    """Tests for VisualSnapshot."""

    def test_retry_label(self):
        """Test the indicator label format."""
        snap = VisualSnapshot(VisualState.RETRY_PENDING, attempt=1, max_retries=3)
        assert snap.retry_label == "Retry 1/3"

    def test_to_dict_uses_state_name(self):
        """Test dict export with the state name."""
        data = VisualSnapshot(VisualState.OFFLINE, max_retries=3).to_dict()
        assert data["state"] == "OFFLINE"
        assert data["max_retries"] == 3
