from .appointment import (
    BookingRequest,
    Appointment,
    AppointmentStatus
)
from .doctor import Doctor
from .review import (
    ReviewRequest,
    ReviewEdit,
    Review
)
from .stats import StoreStats
from .user import User

__all__ = [
    "BookingRequest",
    "Appointment",
    "AppointmentStatus",
    "Doctor",
    "ReviewRequest",
    "ReviewEdit",
    "Review",
    "StoreStats",
    "User",
]
