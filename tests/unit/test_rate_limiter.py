# ============================================
# Unit Tests for the Rate Limiter
# ============================================
"""
Tests for fixed-window admission control.
"""

import threading

import pytest

from clinical_documentation.core.exceptions import RateLimitedError
from clinical_documentation.throttling import RateLimiter, rate_limit_key


@pytest.fixture
def limiter(fake_clock):
    with RateLimiter(clock=fake_clock) as rate_limiter:
        yield rate_limiter


class TestFixedWindow:
    """Tests for window counting and reset."""

    def test_first_request(self, limiter, fake_clock):
        result = limiter.admit("doctor-1")

        assert result.allowed is True
        assert result.remaining == 19
        entry = limiter.entry("doctor-1")
        assert entry.count == 1
        assert entry.window_reset_at == fake_clock.now + 60

    def test_twenty_admitted_then_denied_then_reset(self, limiter, fake_clock):
        """20 calls pass, the 21st is denied, a call 61 s after the first is admitted."""
        results = []
        for _ in range(20):
            results.append(limiter.admit("doctor-1"))
            fake_clock.advance(1)

        assert all(r.allowed for r in results)
        assert [r.remaining for r in results] == list(range(19, -1, -1))

        denied = limiter.admit("doctor-1")
        assert denied.allowed is False
        assert denied.remaining == 0
        assert denied.retry_after == pytest.approx(40)

        fake_clock.advance(41)
        reset = limiter.admit("doctor-1")
        assert reset.allowed is True
        assert reset.remaining == 19
        assert limiter.entry("doctor-1").count == 1

    def test_denials_are_counted(self, limiter):
        for _ in range(25):
            limiter.admit("doctor-1")
        assert limiter.entry("doctor-1").count == 25

    def test_window_boundary_is_exclusive(self, limiter, fake_clock):
        """At exactly window_reset_at the old window still applies."""
        for _ in range(20):
            limiter.admit("doctor-1")

        fake_clock.advance(60)
        assert limiter.admit("doctor-1").allowed is False

        fake_clock.advance(0.001)
        assert limiter.admit("doctor-1").allowed is True

    def test_users_are_independent(self, limiter):
        for _ in range(21):
            limiter.admit("doctor-1")

        assert limiter.admit("doctor-2").allowed is True

    def test_purposes_are_independent(self, limiter):
        for _ in range(21):
            limiter.admit("doctor-1")

        assert limiter.admit("doctor-1", purpose="export").allowed is True
        assert set(limiter.tracked_keys) == {"docgen:doctor-1", "export:doctor-1"}

    def test_key_format(self):
        assert rate_limit_key("doctor-1") == "docgen:doctor-1"


class TestCheckOrRaise:
    def test_raises_when_denied(self, limiter):
        for _ in range(20):
            limiter.check_or_raise("doctor-1")

        with pytest.raises(RateLimitedError) as exc_info:
            limiter.check_or_raise("doctor-1")

        assert exc_info.value.user_id == "doctor-1"
        assert exc_info.value.retry_after == pytest.approx(60)


class TestStore:
    """Tests for the injectable store and its hygiene."""

    def test_injected_store_is_used(self, fake_clock):
        store = {}
        limiter = RateLimiter(store=store, clock=fake_clock)

        limiter.admit("doctor-1")

        assert list(store) == ["docgen:doctor-1"]

    def test_sweep_removes_only_expired(self, limiter, fake_clock):
        limiter.admit("old")
        fake_clock.advance(30)
        limiter.admit("recent")
        fake_clock.advance(31)

        assert limiter.sweep_expired() == 1
        assert limiter.tracked_keys == ["docgen:recent"]

    def test_close_clears_store(self, fake_clock):
        store = {}
        limiter = RateLimiter(store=store, clock=fake_clock)
        limiter.admit("doctor-1")

        limiter.close()

        assert store == {}

    def test_sweeper_lifecycle(self, fake_clock):
        limiter = RateLimiter(clock=fake_clock)

        limiter.start_sweeper(interval_seconds=0.01)
        assert limiter.sweeper_running is True

        limiter.close()
        assert limiter.sweeper_running is False


class TestConcurrency:
    @pytest.mark.slow
    def test_concurrent_admissions_never_exceed_quota(self):
        limiter = RateLimiter()
        admitted = []
        barrier = threading.Barrier(50)

        def worker():
            barrier.wait()
            admitted.append(limiter.admit("doctor-1").allowed)

        threads = [threading.Thread(target=worker) for _ in range(50)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert admitted.count(True) == 20
        assert limiter.entry("doctor-1").count == 50
