import time

import pytest
from selenium.common.exceptions import StaleElementReferenceException

from recplay.selectors import InvalidLocatorError, NotFoundError, TransientQueryError, WaitTimeoutError
from recplay.utils.timing import WaitOutcome, measure, poll, wait_until


class Counter:
    def __init__(self, fail_times: int = 0, error: Exception | None = None, true_after: int = 1):
        self.calls = 0
        self.fail_times = fail_times
        self.error = error
        self.true_after = true_after

    def __call__(self):
        self.calls += 1
        if self.calls <= self.fail_times:
            raise self.error
        return self.calls >= self.true_after


def test_satisfied_after_three_evaluations():
    pred = Counter(true_after=3)
    res = poll(pred, timeout=2, interval=0.01)
    assert res.outcome == WaitOutcome.SATISFIED
    assert res.satisfied and bool(res)
    assert pred.calls == 3
    assert res.attempts == 3


def test_never_true_times_out_after_full_duration():
    started = time.monotonic()
    res = poll(lambda: False, timeout=0.2, interval=0.02)
    elapsed = time.monotonic() - started
    assert res.outcome == WaitOutcome.TIMED_OUT
    assert res.timed_out and not res
    assert elapsed >= 0.2
    assert res.last_error is None


def test_zero_timeout_still_evaluates_once():
    pred = Counter(true_after=1)
    assert poll(pred, timeout=0, interval=0.01).satisfied
    assert pred.calls == 1


@pytest.mark.parametrize(
    "error",
    [
        TransientQueryError("detached"),
        NotFoundError("id=x"),
        StaleElementReferenceException("stale"),
    ],
)
def test_transient_errors_are_absorbed(error):
    pred = Counter(fail_times=2, error=error)
    res = poll(pred, timeout=2, interval=0.01)
    assert res.satisfied
    assert pred.calls == 3


def test_persistent_transient_error_is_reported_on_timeout():
    res = poll(Counter(fail_times=10**6, error=TransientQueryError("gone")), timeout=0.05, interval=0.01)
    assert res.outcome == WaitOutcome.ERRED
    assert res.timed_out and not res
    assert isinstance(res.last_error, TransientQueryError)


def test_transient_error_then_false_is_plain_timeout():
    calls = {"n": 0}

    def pred():
        calls["n"] += 1
        if calls["n"] == 1:
            raise TransientQueryError("detached")
        return False

    res = poll(pred, timeout=0.05, interval=0.01)
    assert res.outcome == WaitOutcome.TIMED_OUT
    assert res.last_error is None


@pytest.mark.parametrize("error", [ValueError("boom"), InvalidLocatorError("foo=bar")])
def test_fatal_errors_propagate_immediately(error):
    pred = Counter(fail_times=1, error=error)
    with pytest.raises(type(error)):
        poll(pred, timeout=2, interval=0.01)
    assert pred.calls == 1


def test_wait_until_returns_value():
    assert wait_until(lambda: "ready", timeout=1, interval=0.01) == "ready"


def test_wait_until_raises_with_last_error():
    with pytest.raises(WaitTimeoutError) as ei:
        wait_until(
            Counter(fail_times=10**6, error=NotFoundError("id=x")),
            timeout=0.05,
            interval=0.01,
            description="id=x displayed",
        )
    assert isinstance(ei.value, TimeoutError)
    assert isinstance(ei.value.last_error, NotFoundError)
    assert "id=x displayed" in str(ei.value)


def test_measure_keeps_return_value():
    @measure("adder")
    def add(a, b):
        return a + b

    assert add(2, 3) == 5
