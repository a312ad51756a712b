from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Tuple


class Doctor(BaseModel):
    """Catalog entry for a doctor. Read-only once the catalog is seeded."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = Field(..., min_length=2, max_length=100)
    specialty: str
    rating: float = Field(..., ge=0, le=5)  # seed rating, used when no reviews exist
    experience: int = Field(..., ge=0)
    location: str
    consultation_fee: float = Field(..., ge=0)
    available_slots: Tuple[str, ...] = ()
    bio: str = ""
    image: Optional[str] = None

    def __str__(self):
        return f"{self.name} ({self.specialty})"

    def offers_slot(self, slot: str) -> bool:
        return slot in self.available_slots
