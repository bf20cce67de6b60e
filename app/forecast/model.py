"""
Outbreak forecast model.

A parametric scenario formula for post-flood vector-borne disease
(dengue, leptospirosis) case counts and resource demand. It is a
stand-in for an epidemiological model, not a fitted one.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, Field

BASELINE_CASES = 50
RESOURCES_PER_CASE = 3
BASELINE_DENSITY = 500.0
WEEKLY_GROWTH = 1.2
FORECAST_WEEKS = 4

RAINFALL_MAX = 50.0
RAINFALL_STEP = 5.0
TEMPERATURE_MAX = 5.0
TEMPERATURE_STEP = 0.5


class ForecastInputs(BaseModel):
    """Scenario sliders."""

    rainfall_increase: float = Field(
        default=0.0, ge=0.0, le=RAINFALL_MAX, multiple_of=RAINFALL_STEP,
        description="Rainfall increase scenario, percent",
    )
    temperature_increase: float = Field(
        default=0.0, ge=0.0, le=TEMPERATURE_MAX, multiple_of=TEMPERATURE_STEP,
        description="Temperature anomaly above baseline, degrees C",
    )
    population_density: float = Field(
        default=BASELINE_DENSITY, gt=0.0,
        description="Population density of the affected area",
    )


class ForecastWeek(BaseModel):
    week: str
    predicted_cases: int
    required_resources: int


class Forecast(BaseModel):
    inputs: ForecastInputs
    weeks: list[ForecastWeek]
    total_cases: int
    total_resources: int


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (not banker's rounding)."""
    return math.floor(value + 0.5)


def combined_factor(rainfall_increase: float, temperature_increase: float) -> float:
    rainfall_factor = 1 + (rainfall_increase / 100) * 1.5
    temperature_factor = 1 + (temperature_increase / 5) * 0.8
    return rainfall_factor * temperature_factor


def forecast(inputs: ForecastInputs) -> Forecast:
    """Predict weekly cases and resource units for the next four weeks."""
    factor = combined_factor(inputs.rainfall_increase, inputs.temperature_increase)
    density_ratio = inputs.population_density / BASELINE_DENSITY

    weeks = []
    for w in range(1, FORECAST_WEEKS + 1):
        cases = round_half_up(BASELINE_CASES * factor * (WEEKLY_GROWTH**w) * density_ratio)
        weeks.append(
            ForecastWeek(
                week=f"Week {w}",
                predicted_cases=cases,
                required_resources=round_half_up(cases * RESOURCES_PER_CASE),
            )
        )

    return Forecast(
        inputs=inputs,
        weeks=weeks,
        total_cases=sum(w.predicted_cases for w in weeks),
        total_resources=sum(w.required_resources for w in weeks),
    )
