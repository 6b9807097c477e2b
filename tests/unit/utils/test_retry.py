"""
Unit tests for retry policy helpers.
"""

from datetime import datetime, timezone

import pytest

from smelt.utils.retry import compute_backoff, parse_retry_after


class TestParseRetryAfter:
    """Test Retry-After header parsing."""

    @pytest.mark.parametrize("value", [None, "", "soon", "1.5"])
    def test_invalid_values(self, value):
        assert parse_retry_after(value) is None

    def test_delta_seconds(self):
        assert parse_retry_after("7") == 7.0
        assert parse_retry_after(" 0 ") == 0.0

    def test_negative_seconds_clamped(self):
        assert parse_retry_after("-5") == 0.0

    def test_http_date(self):
        now = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

        assert parse_retry_after("Mon, 01 Jan 2024 12:00:10 GMT", now=now) == 10.0

    def test_http_date_in_past(self):
        now = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

        assert parse_retry_after("Mon, 01 Jan 2024 11:59:00 GMT", now=now) == 0.0


class TestComputeBackoff:
    """Test exponential backoff with jitter."""

    def test_doubles_without_jitter(self):
        delays = [compute_backoff(n, 1.0, 30.0, 0.3, rng=lambda: 0.0) for n in range(4)]

        assert delays == [1.0, 2.0, 4.0, 8.0]

    def test_jitter_is_bounded_by_ratio(self):
        assert compute_backoff(1, 1.0, 30.0, 0.3, rng=lambda: 1.0) == pytest.approx(2.6)

    def test_capped_at_max_delay(self):
        assert compute_backoff(10, 1.0, 30.0, 0.3, rng=lambda: 0.5) == 30.0

    def test_retry_after_wins(self):
        assert compute_backoff(0, 1.0, 30.0, 0.3, rng=lambda: 0.9, retry_after=5.0) == 5.0

    def test_retry_after_capped(self):
        assert compute_backoff(0, 1.0, 30.0, 0.3, retry_after=120.0) == 30.0

    def test_zero_retry_after_uses_backoff(self):
        assert compute_backoff(2, 1.0, 30.0, 0.3, rng=lambda: 0.0, retry_after=0.0) == 4.0
