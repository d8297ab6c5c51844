# tests/test_waits.py
"""
Tests for wait utilities.
"""

import pytest
import time
from domnode.waits import wait_until_passes
from domnode.exceptions import ObsoleteElementError, StaleElementError, TimeoutError


class TestWaitUntilPasses:
    """Tests for wait_until_passes function."""

    def test_returns_immediately_on_success(self):
        """Should return immediately when function succeeds."""
        result = wait_until_passes(
            lambda: "success",
            timeout=5,
            description="test"
        )
        assert result == "success"

    def test_retries_on_exception(self):
        """Should retry when function raises exception."""
        counter = {"value": 0}

        def flaky_func():
            counter["value"] += 1
            if counter["value"] < 3:
                raise ValueError("not yet")
            return "success"

        result = wait_until_passes(
            flaky_func,
            timeout=5,
            interval=0.05,
            exceptions=(ValueError,),
            description="flaky function"
        )

        assert result == "success"
        assert counter["value"] == 3

    def test_timeout_with_exception_info(self):
        """Should include exception info in TimeoutError."""
        def always_fails():
            raise RuntimeError("always fails")

        start = time.time()
        with pytest.raises(TimeoutError) as exc_info:
            wait_until_passes(
                always_fails,
                timeout=0.3,
                interval=0.1,
                exceptions=(RuntimeError,),
                description="failing operation",
                stage="synchronize",
            )
        elapsed = time.time() - start

        error = exc_info.value
        assert isinstance(error.original_exception, RuntimeError)
        assert error.__cause__ is error.original_exception
        assert error.attempt_count >= 1
        assert error.timeout == 0.3
        assert error.stage == "synchronize"
        assert "failing operation" in str(error)
        assert elapsed < 1.0

    def test_zero_timeout_single_attempt(self):
        """Should make exactly one attempt with a zero timeout."""
        counter = {"value": 0}

        def always_fails():
            counter["value"] += 1
            raise ValueError("nope")

        with pytest.raises(TimeoutError) as exc_info:
            wait_until_passes(always_fails, timeout=0, interval=0.1)

        assert counter["value"] == 1
        assert exc_info.value.attempt_count == 1

    def test_with_args_and_kwargs(self):
        """Should pass args and kwargs to function."""
        def add(a, b, multiplier=1):
            return (a + b) * multiplier

        result = wait_until_passes(
            add,
            timeout=5,
            description="addition",
            a=2, b=3,
            multiplier=2
        )

        assert result == 10

    def test_only_catches_specified_exceptions(self):
        """Should only catch specified exception types."""
        def raises_type_error():
            raise TypeError("wrong type")

        with pytest.raises(TypeError):
            wait_until_passes(
                raises_type_error,
                timeout=1,
                exceptions=(ValueError,),
                description="test"
            )


class TestRetryFilters:
    """Tests for retry_if and before_retry hooks."""

    def test_retry_if_false_reraises_immediately(self):
        """Should re-raise without retrying when retry_if rejects the error."""
        counter = {"value": 0}

        def fails():
            counter["value"] += 1
            raise KeyError("fatal")

        with pytest.raises(KeyError):
            wait_until_passes(
                fails,
                timeout=5,
                interval=0.01,
                retry_if=lambda e: not isinstance(e, KeyError),
            )

        assert counter["value"] == 1

    def test_before_retry_called_between_attempts(self):
        """Should call before_retry with each failure before retrying."""
        seen = []
        counter = {"value": 0}

        def flaky():
            counter["value"] += 1
            if counter["value"] < 3:
                raise ValueError(f"attempt {counter['value']}")
            return "done"

        result = wait_until_passes(
            flaky,
            timeout=5,
            interval=0.01,
            before_retry=lambda e: seen.append(str(e)),
        )

        assert result == "done"
        assert seen == ["attempt 1", "attempt 2"]

    def test_before_retry_not_called_on_timeout(self):
        """Should not call before_retry after the final failure."""
        seen = []

        with pytest.raises(TimeoutError):
            wait_until_passes(
                lambda: 1 / 0,
                timeout=0,
                before_retry=seen.append,
            )

        assert seen == []

    def test_before_retry_errors_propagate(self):
        """Failures inside before_retry are not swallowed."""
        def boom(error):
            raise RuntimeError("reload failed")

        with pytest.raises(RuntimeError, match="reload failed"):
            wait_until_passes(
                lambda: 1 / 0,
                timeout=5,
                interval=0.01,
                before_retry=boom,
            )


class TestTimeoutErrorAttributes:
    """Tests for TimeoutError attributes."""

    def test_get_root_cause(self):
        """Should get root cause from nested exceptions."""
        inner = ValueError("root cause")

        error = TimeoutError("outer error")
        error.original_exception = inner

        root = error.get_root_cause()
        assert root is inner
        assert str(root) == "root cause"

    def test_get_traceback_str(self):
        """Should get formatted traceback string."""
        try:
            raise ValueError("test error")
        except ValueError as e:
            error = TimeoutError("timeout")
            error.original_exception = e

            tb_str = error.get_traceback_str()
            assert "ValueError" in tb_str
            assert "test error" in tb_str

    def test_obsolete_from_timeout(self):
        """ObsoleteElementError should copy the timeout metadata."""
        error = TimeoutError("timed out")
        error.original_exception = StaleElementError("detached")
        error.attempt_count = 4
        error.timeout = 0.5
        error.stage = "synchronize"

        obsolete = ObsoleteElementError.from_timeout(error, "id 'name'")

        assert isinstance(obsolete, TimeoutError)
        assert obsolete.element_description == "id 'name'"
        assert obsolete.original_exception is error.original_exception
        assert obsolete.attempt_count == 4
        assert "obsolete" in str(obsolete)
        assert "Attempts: 4" in str(obsolete)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
