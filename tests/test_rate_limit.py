import threading
import unittest
from concurrent.futures import ThreadPoolExecutor

from storefront.rate_limit import RateLimiter, get_client_ip


class FakeClock:
    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class TestRateLimiter(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.limiter = RateLimiter(window_seconds=900, max_requests=5, clock=self.clock)

    def test_first_five_allowed_sixth_denied(self):
        remaining = []
        for _ in range(5):
            d = self.limiter.check("1.2.3.4")
            self.assertTrue(d.allowed)
            remaining.append(d.remaining)
        self.assertEqual(remaining, [4, 3, 2, 1, 0])

        d = self.limiter.check("1.2.3.4")
        self.assertFalse(d.allowed)
        self.assertEqual(d.remaining, 0)

    def test_window_expiry_resets_count(self):
        for _ in range(6):
            self.limiter.check("1.2.3.4")
        self.clock.advance(901)
        d = self.limiter.check("1.2.3.4")
        self.assertTrue(d.allowed)
        self.assertEqual(d.remaining, 4)

    def test_still_denied_just_before_expiry(self):
        for _ in range(5):
            self.limiter.check("x")
        self.clock.advance(899)
        self.assertFalse(self.limiter.check("x").allowed)

    def test_identifiers_are_independent(self):
        for _ in range(5):
            self.limiter.check("a")
        self.assertFalse(self.limiter.check("a").allowed)
        self.assertTrue(self.limiter.check("b").allowed)

    def test_reset_at_is_window_end(self):
        d = self.limiter.check("a")
        self.assertEqual(d.reset_at, self.clock.now + 900)

    def test_sweep_removes_expired_entries_when_store_grows(self):
        limiter = RateLimiter(window_seconds=10, max_requests=5, sweep_threshold=3, clock=self.clock)
        for ip in ("a", "b", "c", "d"):
            limiter.check(ip)
        self.assertEqual(len(limiter), 4)
        self.clock.advance(11)
        limiter.check("e")
        # a..d expired and were swept, only the fresh entry remains
        self.assertEqual(len(limiter), 1)

    def test_no_sweep_below_threshold(self):
        limiter = RateLimiter(window_seconds=10, max_requests=5, sweep_threshold=3, clock=self.clock)
        for ip in ("a", "b"):
            limiter.check(ip)
        self.clock.advance(11)
        limiter.check("c")
        self.assertEqual(len(limiter), 3)

    def test_concurrent_checks_never_exceed_limit(self):
        workers = 50
        barrier = threading.Barrier(workers)

        def hit(_):
            barrier.wait(timeout=10)
            return self.limiter.check("same-id")

        with ThreadPoolExecutor(max_workers=workers) as pool:
            decisions = list(pool.map(hit, range(workers)))

        allowed = [d for d in decisions if d.allowed]
        self.assertEqual(len(allowed), self.limiter.max_requests)
        self.assertEqual(sorted(d.remaining for d in allowed), [0, 1, 2, 3, 4])
        self.assertEqual(self.limiter._entries["same-id"].count, self.limiter.max_requests)


class TestClientIP(unittest.TestCase):
    def test_forwarded_for_first_entry(self):
        headers = {"x-forwarded-for": " 203.0.113.9 , 10.0.0.1", "x-real-ip": "10.0.0.2"}
        self.assertEqual(get_client_ip(headers), "203.0.113.9")

    def test_real_ip_before_cloudflare(self):
        headers = {"x-real-ip": "10.0.0.2", "cf-connecting-ip": "10.0.0.3"}
        self.assertEqual(get_client_ip(headers), "10.0.0.2")

    def test_cloudflare_header(self):
        self.assertEqual(get_client_ip({"cf-connecting-ip": "10.0.0.3"}), "10.0.0.3")

    def test_unknown_fallback(self):
        self.assertEqual(get_client_ip({}), "unknown")


if __name__ == "__main__":
    unittest.main()
