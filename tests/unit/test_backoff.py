r"""Unit tests for the backoff strategies."""

from __future__ import annotations

import pytest

from callout.backoff import BaseBackoffStrategy, ConstantBackoff, ExponentialBackoff

#########################################
#     Tests for BaseBackoffStrategy     #
#########################################


def test_base_backoff_strategy_is_abstract() -> None:
    with pytest.raises(TypeError):
        BaseBackoffStrategy()  # type: ignore[abstract]


def test_custom_backoff_strategy() -> None:
    """Test that a subclass only needs to implement calculate."""

    class LinearBackoff(BaseBackoffStrategy):
        def calculate(self, retry: int) -> float:
            return 0.1 * (retry + 1)

    assert [LinearBackoff().calculate(i) for i in range(3)] == pytest.approx([0.1, 0.2, 0.3])


#####################################
#     Tests for ConstantBackoff     #
#####################################


def test_constant_backoff_default() -> None:
    assert ConstantBackoff().delay == 1.0


@pytest.mark.parametrize("retry", [0, 1, 5, 100])
def test_constant_backoff_calculate(retry: int) -> None:
    assert ConstantBackoff(delay=0.25).calculate(retry) == 0.25


def test_constant_backoff_zero_delay() -> None:
    assert ConstantBackoff(delay=0).calculate(3) == 0


def test_constant_backoff_negative_delay() -> None:
    with pytest.raises(ValueError, match=r"delay must be >= 0, got -1"):
        ConstantBackoff(delay=-1)


def test_constant_backoff_repr() -> None:
    assert repr(ConstantBackoff(delay=2.0)) == "ConstantBackoff(delay=2.0)"


########################################
#     Tests for ExponentialBackoff     #
########################################


def test_exponential_backoff_default() -> None:
    backoff = ExponentialBackoff()
    assert backoff.base_delay == 0.3
    assert backoff.max_delay is None


def test_exponential_backoff_calculate() -> None:
    backoff = ExponentialBackoff(base_delay=1.0)
    assert [backoff.calculate(i) for i in range(5)] == [1.0, 2.0, 4.0, 8.0, 16.0]


def test_exponential_backoff_max_delay() -> None:
    """Test that the delay is capped by max_delay."""
    backoff = ExponentialBackoff(base_delay=1.0, max_delay=5.0)
    assert [backoff.calculate(i) for i in range(5)] == [1.0, 2.0, 4.0, 5.0, 5.0]


def test_exponential_backoff_negative_base_delay() -> None:
    with pytest.raises(ValueError, match=r"base_delay must be >= 0, got -0.5"):
        ExponentialBackoff(base_delay=-0.5)


@pytest.mark.parametrize("max_delay", [0, -1.0])
def test_exponential_backoff_invalid_max_delay(max_delay: float) -> None:
    with pytest.raises(ValueError, match=r"max_delay must be > 0"):
        ExponentialBackoff(max_delay=max_delay)


def test_exponential_backoff_repr() -> None:
    assert (
        repr(ExponentialBackoff(base_delay=0.5, max_delay=10.0))
        == "ExponentialBackoff(base_delay=0.5, max_delay=10.0)"
    )
