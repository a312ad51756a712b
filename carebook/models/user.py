"""Session user model."""

from typing import Optional
from pydantic import BaseModel, Field


class User(BaseModel):
    """Patient identity held by the session manager."""
    id: str = Field(..., min_length=1)
    name: str
    email: str
    phone: Optional[str] = None
