from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime, date
from enum import Enum
import uuid


class AppointmentStatus(str, Enum):
    """Appointment status enum."""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def parse_iso_date(value: str) -> str:
    """Normalise a YYYY-MM-DD string, rejecting anything else."""
    value = (value or "").strip()
    if not value:
        raise ValueError("date is required")
    try:
        return date.fromisoformat(value).isoformat()
    except ValueError:
        raise ValueError(f"'{value}' is not a calendar date (YYYY-MM-DD)")


class BookingRequest(BaseModel):
    """Input for booking an appointment."""
    doctor_id: str = Field(..., min_length=1)
    patient_id: str = Field(..., min_length=1)
    patient_name: str
    date: str
    time: str
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        return parse_iso_date(v)

    @field_validator("time")
    @classmethod
    def validate_time(cls, v):
        cleaned = (v or "").strip()
        if not cleaned:
            raise ValueError("time is required")
        return cleaned

    @field_validator("notes")
    @classmethod
    def blank_notes_to_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v


class Appointment(BaseModel):
    """Complete appointment record."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))

    # References
    doctor_id: str
    patient_id: str
    patient_name: str  # snapshot taken at booking time

    # Slot
    date: str
    time: str

    status: AppointmentStatus = AppointmentStatus.SCHEDULED
    notes: Optional[str] = None

    # Metadata
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_active(self) -> bool:
        """Whether the appointment still occupies its slot."""
        return self.status != AppointmentStatus.CANCELLED

    def to_readable_string(self) -> str:
        """Convert appointment to human-readable string."""
        return (
            f"Appointment for {self.patient_name} "
            f"on {self.date} at {self.time} ({self.status.value})"
        )
