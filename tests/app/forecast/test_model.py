"""Unit tests for the outbreak forecast model."""

import pytest
from pydantic import ValidationError

from app.forecast.model import ForecastInputs, combined_factor, forecast, round_half_up


class TestRoundHalfUp:
    @pytest.mark.parametrize("value,expected", [(0.5, 1), (1.5, 2), (2.5, 3), (86.4, 86), (103.68, 104)])
    def test_halves_round_up(self, value, expected):
        """Halves always round up, unlike Python's round()."""
        assert round_half_up(value) == expected


class TestForecast:
    """Tests for the four-week forecast."""

    def test_defaults(self):
        """Baseline inputs give 60, 72, 86 and 104 cases."""
        result = forecast(ForecastInputs())

        assert [w.week for w in result.weeks] == ["Week 1", "Week 2", "Week 3", "Week 4"]
        assert [w.predicted_cases for w in result.weeks] == [60, 72, 86, 104]
        assert [w.required_resources for w in result.weeks] == [180, 216, 258, 312]
        assert result.total_cases == 322
        assert result.total_resources == 966

    def test_combined_factor(self):
        """Rainfall and temperature factors multiply."""
        assert combined_factor(0, 0) == 1.0
        assert combined_factor(50, 0) == pytest.approx(1.75)
        assert combined_factor(0, 5) == pytest.approx(1.8)
        assert combined_factor(50, 5) == pytest.approx(3.15)

    def test_density_scales_cases(self):
        """Doubling density doubles the unrounded case count."""
        result = forecast(ForecastInputs(population_density=1000))

        assert [w.predicted_cases for w in result.weeks] == [120, 144, 173, 207]

    def test_resources_are_three_per_case(self):
        result = forecast(ForecastInputs(rainfall_increase=25, temperature_increase=2.5))

        for week in result.weeks:
            assert week.required_resources == week.predicted_cases * 3

    def test_totals_are_sums(self):
        result = forecast(ForecastInputs(rainfall_increase=50, temperature_increase=5))

        assert result.total_cases == sum(w.predicted_cases for w in result.weeks)
        assert result.total_resources == sum(w.required_resources for w in result.weeks)

    def test_cases_grow_weekly(self):
        result = forecast(ForecastInputs(rainfall_increase=10, temperature_increase=1))

        cases = [w.predicted_cases for w in result.weeks]
        assert cases == sorted(cases)


class TestForecastInputs:
    """Tests for slider validation."""

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"rainfall_increase": -5},
            {"rainfall_increase": 55},
            {"rainfall_increase": 7},
            {"temperature_increase": 5.5},
            {"temperature_increase": 0.3},
            {"population_density": 0},
        ],
    )
    def test_rejects_invalid_inputs(self, kwargs):
        with pytest.raises(ValidationError):
            ForecastInputs(**kwargs)

    def test_accepts_slider_steps(self):
        inputs = ForecastInputs(rainfall_increase=45, temperature_increase=3.5, population_density=750)

        assert inputs.rainfall_increase == 45
