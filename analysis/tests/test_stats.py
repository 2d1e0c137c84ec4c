"""
Tests for statistics primitives.
Synthetic data with hand-computed moments.
"""

import math
import pytest
import numpy as np

from analysis.calculations.stats import mean, variance, stddev, z_score
from analysis.errors import EmptyInputError, InvalidInputError


class TestMoments:
    """Tests for mean, variance and standard deviation."""

    def test_mean_basic(self):
        assert mean([1, 2, 3, 4]) == pytest.approx(2.5)

    def test_population_variance(self):
        # Deviations from 5: -3, -1, -1, -1, 0, 0, 2, 4 -> sum of squares 32, n = 8
        values = [2, 4, 4, 4, 5, 5, 7, 9]
        assert variance(values) == pytest.approx(4.0)
        assert stddev(values) == pytest.approx(2.0)

    def test_constant_series_has_zero_dispersion(self):
        assert stddev([7.0, 7.0, 7.0]) == 0.0

    def test_single_value(self):
        assert mean([3.5]) == 3.5
        assert variance([3.5]) == 0.0

    def test_numpy_input(self):
        assert mean(np.array([1.0, 3.0])) == pytest.approx(2.0)

    def test_returns_python_float(self):
        assert isinstance(mean([1, 2]), float)
        assert isinstance(stddev([1, 2]), float)

    @pytest.mark.parametrize("func", [mean, variance, stddev])
    def test_empty_input(self, func):
        with pytest.raises(EmptyInputError, match="Empty input"):
            func([])

    def test_nan_rejected(self):
        with pytest.raises(InvalidInputError, match="NaN"):
            mean([1.0, float('nan')])

    def test_infinite_rejected(self):
        with pytest.raises(InvalidInputError, match="Infinite"):
            stddev([1.0, float('inf')])

    def test_non_numeric_rejected(self):
        with pytest.raises(InvalidInputError, match="Non-numeric"):
            mean([1.0, 'two'])

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            mean([None])


class TestZScore:
    """Tests for z-score calculation."""

    def test_z_score_signed(self):
        assert z_score(14, 10, 2) == pytest.approx(2.0)
        assert z_score(6, 10, 2) == pytest.approx(-2.0)

    def test_zero_stddev_is_no_signal(self):
        assert z_score(50, 10, 0) == 0.0

    def test_negative_stddev_rejected(self):
        with pytest.raises(InvalidInputError, match="non-negative"):
            z_score(1, 0, -1)

    def test_nan_rejected(self):
        with pytest.raises(InvalidInputError, match="finite"):
            z_score(math.nan, 0, 1)
