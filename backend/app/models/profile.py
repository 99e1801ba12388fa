"""
Profile Schemas
===============
Optional body attributes that parameterise the exercise model.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field


class ProfileUpdate(BaseModel):
    """Payload for PUT /api/v1/profile. Every field may be left out."""

    age: Optional[int] = Field(default=None, ge=1, le=120)
    gender: Optional[Literal["male", "female", "other"]] = None
    height_cm: Optional[float] = Field(default=None, gt=0, le=300)
    weight_kg: Optional[float] = Field(default=None, gt=0, le=500)
    activity_level: Optional[
        Literal["sedentary", "lightly_active", "moderately_active", "very_active"]
    ] = None


class UserProfile(ProfileUpdate):
    user_id: str
    updated_at: datetime
