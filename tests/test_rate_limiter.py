from src.core.rate_limiter import RateLimiter

from conftest import FakeClock


def test_rate_limiter_blocks_at_ceiling_and_reports_wait():
    clock = FakeClock(now=0)
    limiter = RateLimiter(max_requests=3, window_ms=60_000, clock=clock)

    for _ in range(3):
        assert limiter.can_make_request() is True
        limiter.record_request()
        clock.advance(1_000)

    # Requests at t=0, 1000, 2000; now t=3000
    assert limiter.can_make_request() is False
    assert limiter.get_wait_time_ms() == 57_000


def test_rate_limiter_window_slides():
    clock = FakeClock(now=0)
    limiter = RateLimiter(max_requests=2, window_ms=60_000, clock=clock)
    limiter.record_request()
    clock.advance(10_000)
    limiter.record_request()

    assert limiter.can_make_request() is False

    # Entry at t=0 is dropped once now - window >= 0
    clock.advance(50_000)
    assert limiter.can_make_request() is True
    assert limiter.recent_request_count == 1
    assert limiter.get_wait_time_ms() == 0


def test_try_acquire_is_atomic_and_does_not_record_when_full():
    clock = FakeClock(now=0)
    limiter = RateLimiter(max_requests=2, window_ms=1_000, clock=clock)

    assert limiter.try_acquire() is True
    assert limiter.try_acquire() is True
    assert limiter.try_acquire() is False
    assert limiter.recent_request_count == 2


def test_record_is_unconditional_bookkeeping():
    clock = FakeClock(now=0)
    limiter = RateLimiter(max_requests=1, window_ms=1_000, clock=clock)
    limiter.record_request()
    limiter.record_request()

    assert limiter.recent_request_count == 2
    assert limiter.can_make_request() is False
    assert limiter.get_wait_time_ms() == 1_000


def test_sixty_calls_within_a_minute_refuses_the_sixty_first():
    clock = FakeClock(now=0)
    limiter = RateLimiter(max_requests=60, window_ms=60_000, clock=clock)

    # One call per second, t=0 through t=59000
    for i in range(60):
        if i:
            clock.advance(1_000)
        assert limiter.try_acquire() is True

    assert limiter.can_make_request() is False
    assert limiter.try_acquire() is False
    assert limiter.recent_request_count == 60
    assert limiter.get_wait_time_ms() == 1_000


def test_wait_time_never_grows_while_clock_advances():
    clock = FakeClock(now=0)
    limiter = RateLimiter(max_requests=3, window_ms=10_000, clock=clock)
    for _ in range(3):
        limiter.record_request()
        clock.advance(700)

    waits = [limiter.get_wait_time_ms()]
    while waits[-1] > 0:
        clock.advance(250)
        waits.append(limiter.get_wait_time_ms())

    assert waits[0] > 0
    assert all(later <= earlier for earlier, later in zip(waits, waits[1:]))
    assert limiter.can_make_request() is True
