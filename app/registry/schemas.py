"""
Schemas for the aid registry (Reconstruction Portal).
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class PropertyType(str, Enum):
    HOME = "Home"
    BUSINESS = "Business"


class AidNeeded(str, Enum):
    RECONSTRUCTION = "Reconstruction"
    MONETARY = "Monetary"
    SUPPLIES = "Supplies"


class PropertySubmission(BaseModel):
    """A damaged property submitted for aid."""

    name: str = Field(..., description="Owner or business name")
    description: str = Field(..., description="Damage description")
    location: str = Field(..., description="Town or district")
    type: PropertyType = PropertyType.HOME
    needed: AidNeeded = AidNeeded.RECONSTRUCTION
    contact: str = ""

    @field_validator("name", "description", "location")
    @classmethod
    def _required(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class PropertyRecord(PropertySubmission):
    """A stored registry entry."""

    id: str
    reporter_id: str
    timestamp: datetime
