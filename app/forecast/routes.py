"""
Outbreak forecast routes.

- GET /forecast - four-week case and resource forecast for a scenario
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query
from pydantic import ValidationError

from app.forecast.model import (
    BASELINE_DENSITY,
    RAINFALL_MAX,
    TEMPERATURE_MAX,
    Forecast,
    ForecastInputs,
    forecast,
)

router = APIRouter()


@router.get("", response_model=Forecast)
def outbreak_forecast(
    rainfall_increase: float = Query(default=0.0, ge=0.0, le=RAINFALL_MAX, description="Percent, step 5"),
    temperature_increase: float = Query(default=0.0, ge=0.0, le=TEMPERATURE_MAX, description="Degrees C, step 0.5"),
    population_density: float = Query(default=BASELINE_DENSITY, gt=0.0),
):
    """Run the scenario formula for the given slider values."""
    try:
        inputs = ForecastInputs(
            rainfall_increase=rainfall_increase,
            temperature_increase=temperature_increase,
            population_density=population_density,
        )
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.errors(include_url=False, include_context=False))
    return forecast(inputs)
