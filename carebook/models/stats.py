from pydantic import BaseModel


class StoreStats(BaseModel):
    """Dashboard figures derived from the current collections."""
    total_patients: int
    total_appointments: int
    total_reviews: int
    average_rating: float
