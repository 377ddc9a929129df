import numpy as np
import pytest

from array_rpn import *
from infix import VariableValueMissing


def test_calc_array_broadcasts():
    x = np.arange(4.0)
    assert np.array_equal(calc_array("x^2 + 1", {"x": x}), x**2 + 1)
    assert np.array_equal(calc_array("x * y", {"x": [1, 2], "y": [[1], [10]]}), [[1, 2], [10, 20]])
    assert calc_array("2^3^2").shape == ()
    assert calc_array("2^3^2") == 512.0


def test_calc_array_float_semantics():
    ans = calc_array("1 / x", {"x": [-1.0, 0.0, 2.0]})
    assert np.array_equal(ans, [-1.0, np.inf, 0.5])
    assert np.isnan(calc_array("x / x", {"x": [0.0]})).all()


def test_calc_array_propagates_errors():
    with pytest.raises(VariableValueMissing):
        calc_array("x + y", {"x": [1.0]})


def test_array_reduction():
    assert asum(np.array([])) == 0.0
    assert asum(np.array([1.0, 2.0])) == 3.0
    assert asum(np.array([1.0, 2.0, 3.0])) == 6.0
    assert asum(np.array([1.0, 2.0, 3.0]), 4.0) == 10.0

    assert aprod(np.array([])) == 1.0
    assert aprod(np.array([1.0, 2.0])) == 2.0
    assert aprod(np.array([1.0, 2.0, 3.0])) == 6.0
    assert aprod(np.array([1.0, 2.0, 3.0]), 4.0) == 24.0

    assert asum(range(100)) == sum(range(100))


def test_custom_aggregator():
    sum_sq = make_array_aggregator("sum_sq", ["t", "x"], "t + x^2", 0.0)
    assert sum_sq.__name__ == "sum_sq"
    assert sum_sq([1, 2, 3]) == 14.0
    # The fold is ordered: ((((0 - 1) - 2) - 3)
    assert make_array_aggregator("asub", ["t", "x"], "t - x", 0.0)([1, 2, 3]) == -6.0


def test_aggregator_needs_both_variables():
    with pytest.raises(ValueError):
        make_array_aggregator("bad", ["t", "x"], "t + 1", 0.0)
    with pytest.raises(ValueError):
        make_array_aggregator("bad", ["t", "x"], "t + x + y", 0.0)
    with pytest.raises(ValueError):
        make_array_aggregator("bad", ["t"], "t + t", 0.0)
