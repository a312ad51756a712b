"""Review data models."""

from typing import Optional
from pydantic import BaseModel, Field, field_validator, model_validator
import uuid

from .appointment import parse_iso_date


def _clean_comment(value: str) -> str:
    cleaned = (value or "").strip()
    if not cleaned:
        raise ValueError("comment must not be empty")
    return cleaned


class ReviewRequest(BaseModel):
    """Input for a patient review."""
    doctor_id: str = Field(..., min_length=1)
    patient_id: str = Field(..., min_length=1)
    patient_name: str
    rating: int = Field(..., ge=1, le=5, strict=True)
    comment: str
    date: str

    @field_validator("comment")
    @classmethod
    def validate_comment(cls, v):
        return _clean_comment(v)

    @field_validator("date")
    @classmethod
    def validate_date(cls, v):
        return parse_iso_date(v)


class ReviewEdit(BaseModel):
    """Admin edit of a review. Only the fields that are set get merged."""
    rating: Optional[int] = Field(None, ge=1, le=5, strict=True)
    comment: Optional[str] = None

    @field_validator("comment")
    @classmethod
    def validate_comment(cls, v):
        if v is None:
            return v
        return _clean_comment(v)

    @model_validator(mode="after")
    def require_a_field(self):
        if self.rating is None and self.comment is None:
            raise ValueError("edit must change rating or comment")
        return self


class Review(BaseModel):
    """Stored review."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    doctor_id: str
    patient_id: str
    patient_name: str
    rating: int
    comment: str
    date: str
    admin_reply: Optional[str] = None
