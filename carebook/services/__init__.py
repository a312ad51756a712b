from .availability import clinic_today, generate_available_dates, upcoming_dates
from .doctor_service import DoctorCatalog, SAMPLE_DOCTORS
from .domain_store import DomainStore, SAMPLE_REVIEWS
from .session_service import SessionManager

__all__ = [
    "clinic_today",
    "generate_available_dates",
    "upcoming_dates",
    "DoctorCatalog",
    "SAMPLE_DOCTORS",
    "DomainStore",
    "SAMPLE_REVIEWS",
    "SessionManager",
]
