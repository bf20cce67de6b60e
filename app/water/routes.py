"""
Water-level routes.

- GET /water/levels - current simulated river readings
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from app.context import AppContext, get_app_context
from app.water.simulator import RiverReading

router = APIRouter()


class WaterLevelsResponse(BaseModel):
    """Simulated readings; not sourced from real gauges."""

    simulated: bool = True
    tick: int
    rivers: list[RiverReading]


@router.get("/levels", response_model=WaterLevelsResponse)
async def water_levels(context: AppContext = Depends(get_app_context)):
    """Return the latest simulated level of every monitored river."""
    simulator = context.water
    return WaterLevelsResponse(tick=simulator.tick_count, rivers=simulator.readings())
