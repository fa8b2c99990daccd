"""Pydantic models for the tracking tables: profiles, cycles, symptom logs."""

from __future__ import annotations

import uuid
from datetime import date, datetime
from enum import Enum

from pydantic import Field

from src.models.base import FlowtrackBase, TimestampMixin, utc_now


# ---------- Enums ----------

class Mood(str, Enum):
    calm = "Calm"
    happy = "Happy"
    anxious = "Anxious"
    sad = "Sad"
    irritated = "Irritated"
    energetic = "Energetic"


class MenstrualFlow(str, Enum):
    none = "none"
    light = "light"
    medium = "medium"
    heavy = "heavy"


class Spotting(str, Enum):
    none = "none"
    light = "light"
    heavy = "heavy"


# ---------- Profile ----------

class ProfileUpdate(FlowtrackBase):
    name: str | None = Field(default=None, min_length=1)
    cycle_length: int | None = Field(default=None, gt=0)
    period_length: int | None = Field(default=None, gt=0)


class Profile(FlowtrackBase):
    """A user's profile row, keyed by the auth user id.

    Stored values are read as-is; blank or zero fields count as missing.
    """

    user_id: uuid.UUID = Field(alias="id")
    name: str | None = None
    cycle_length: int | None = None
    period_length: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------- Cycles ----------

class CycleCreate(FlowtrackBase):
    start_date: date | None = None
    length: int = Field(gt=0)


class CycleRecord(CycleCreate, TimestampMixin):
    cycle_id: uuid.UUID
    user_id: uuid.UUID
    # Stored lengths are not re-validated on read; the health check flags
    # out-of-range values instead of rejecting them.
    length: int


# ---------- Symptom logs ----------

class SymptomCreate(FlowtrackBase):
    date: date
    mood: Mood | None = None
    symptoms: list[str] = Field(default_factory=list)
    menstrual_flow: MenstrualFlow = MenstrualFlow.none
    spotting: Spotting = Spotting.none


class SymptomRecord(SymptomCreate):
    symptom_id: uuid.UUID
    user_id: uuid.UUID
    created_at: datetime = Field(default_factory=utc_now)
