import pytest

from src.shared.batch.retry import ErrorClass, RetryPolicy, classify_error, with_retry


class StatusError(Exception):
    def __init__(self, message, status_code):
        super().__init__(message)
        self.status_code = status_code


class FlakyCall:
    def __init__(self, failures, result="ok"):
        self._failures = list(failures)
        self._result = result
        self.attempts = 0

    def __call__(self):
        self.attempts += 1
        if self._failures:
            raise self._failures.pop(0)
        return self._result


@pytest.mark.parametrize(
    "error,expected",
    [
        (StatusError("Too many requests", 429), ErrorClass.TRANSIENT),
        (StatusError("Internal error", 500), ErrorClass.TRANSIENT),
        (StatusError("Unavailable", 503), ErrorClass.TRANSIENT),
        (TimeoutError(), ErrorClass.TRANSIENT),
        (ConnectionError("reset"), ErrorClass.TRANSIENT),
        (RuntimeError("Rate limit reached"), ErrorClass.TRANSIENT),
        (RuntimeError("quota exhausted"), ErrorClass.TRANSIENT),
        (StatusError("Bad request", 400), ErrorClass.PERMANENT),
        (StatusError("Forbidden", 403), ErrorClass.PERMANENT),
        (ValueError("bad prompt"), ErrorClass.PERMANENT),
    ],
)
def test_classify_error(error, expected):
    assert classify_error(error) is expected


def test_transient_failures_are_retried_with_backoff():
    delays = []
    call = FlakyCall([StatusError("busy", 503), TimeoutError("slow")])

    assert with_retry(call, max_retries=3, base_delay=1.0, sleep=delays.append) == "ok"
    assert call.attempts == 3
    assert delays == [1.0, 2.0]


def test_permanent_failure_is_raised_immediately():
    call = FlakyCall([StatusError("Bad request", 400)])

    with pytest.raises(StatusError):
        with_retry(call, max_retries=3, base_delay=0.0, sleep=lambda _seconds: None)
    assert call.attempts == 1


def test_last_transient_error_is_raised_after_exhausting_retries():
    call = FlakyCall([ConnectionError(str(index)) for index in range(5)])

    with pytest.raises(ConnectionError, match="2"):
        RetryPolicy.immediate(max_retries=2).call(call)
    assert call.attempts == 3


def test_negative_retry_count_is_rejected():
    with pytest.raises(ValueError):
        with_retry(lambda: None, max_retries=-1)
