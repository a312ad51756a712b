import threading
from datetime import date as date_type, datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError as PydanticValidationError

from carebook.config import Settings, settings as default_settings
from carebook.exceptions import (
    ConflictError,
    InvalidTransitionError,
    NotFoundError,
    UnauthorizedError,
    ValidationError,
)
from carebook.models.appointment import Appointment, AppointmentStatus, BookingRequest
from carebook.models.review import Review, ReviewEdit, ReviewRequest
from carebook.models.stats import StoreStats
from carebook.services.availability import clinic_today, generate_available_dates
from carebook.services.doctor_service import DoctorCatalog
from carebook.services.session_service import SessionManager
from carebook.utils.logger import app_logger as logger

ModelT = TypeVar("ModelT", bound=BaseModel)

SAMPLE_REVIEWS = [
    {
        "id": "1",
        "doctor_id": "1",
        "patient_id": "1",
        "patient_name": "John Doe",
        "rating": 5,
        "comment": "Dr. Johnson was excellent! Very thorough and caring.",
        "date": "2024-01-15"
    },
    {
        "id": "2",
        "doctor_id": "2",
        "patient_id": "2",
        "patient_name": "Jane Smith",
        "rating": 4,
        "comment": "Great doctor, very knowledgeable. The wait time was a bit long.",
        "date": "2024-01-10"
    }
]

# Terminal states are absent from the table.
ALLOWED_TRANSITIONS = {
    AppointmentStatus.SCHEDULED: {AppointmentStatus.COMPLETED, AppointmentStatus.CANCELLED},
}


def _validate(model: Type[ModelT], data: Dict[str, Any]) -> ModelT:
    """Build a request model, turning pydantic errors into ValidationError."""
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ())) or None
        raise ValidationError(first.get("msg", str(e)), field=field) from e


class DomainStore:
    """
    In-memory owner of appointments and reviews.

    Collections are dictionaries keyed by id, so listing follows insertion
    order. Every read returns copies; records only change through the
    methods below. Admin-only operations check the bound session.
    """

    def __init__(
        self,
        catalog: DoctorCatalog,
        session: Optional[SessionManager] = None,
        reviews: Optional[Iterable[Dict]] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Callable[[], date_type]] = None
    ):
        self.catalog = catalog
        self.session = session
        self.settings = settings or default_settings
        self._clock = clock
        self._appointments: Dict[str, Appointment] = {}
        self._reviews: Dict[str, Review] = {}
        self._lock = threading.RLock()

        for doc in reviews or []:
            review = Review.model_validate(doc)
            self.catalog.get_doctor(review.doctor_id)
            self._reviews[review.id] = review
        logger.info(f"Domain store initialized with {len(self._reviews)} reviews")

    # ------------------------------------------------------------------
    # Appointments
    # ------------------------------------------------------------------

    def book_appointment(
        self,
        doctor_id: str,
        patient_id: str,
        patient_name: str,
        date: str,
        time: str,
        notes: Optional[str] = None
    ) -> Appointment:
        """
        Book a slot with a doctor.

        Raises:
            NotFoundError: Unknown doctor
            ValidationError: Missing/invalid date or time, or a time the doctor does not offer
            ConflictError: The doctor already has a non-cancelled booking for that date and time
        """
        request = _validate(BookingRequest, {
            "doctor_id": doctor_id,
            "patient_id": patient_id,
            "patient_name": patient_name,
            "date": date,
            "time": time,
            "notes": notes,
        })
        doctor = self.catalog.get_doctor(request.doctor_id)

        if not doctor.offers_slot(request.time):
            logger.warning(f"Rejected booking: {request.time} is not a slot of doctor {doctor.id}")
            raise ValidationError(
                f"{doctor.name} has no {request.time} slot",
                field="time"
            )

        with self._lock:
            if not self._is_slot_available(doctor.id, request.date, request.time):
                logger.warning(
                    f"Rejected booking: doctor {doctor.id} already booked "
                    f"on {request.date} at {request.time}"
                )
                raise ConflictError(
                    "This time slot is not available",
                    {"doctor_id": doctor.id, "date": request.date, "time": request.time}
                )

            appointment = Appointment(
                doctor_id=doctor.id,
                patient_id=request.patient_id,
                patient_name=request.patient_name,
                date=request.date,
                time=request.time,
                notes=request.notes,
            )
            self._appointments[appointment.id] = appointment

        logger.info(f"Appointment created: {appointment.id} ({appointment.to_readable_string()})")
        return appointment.model_copy()

    def get_appointment(self, appointment_id: str) -> Appointment:
        """Get appointment by ID."""
        return self._get_appointment(appointment_id).model_copy()

    def list_appointments(self) -> List[Appointment]:
        return [apt.model_copy() for apt in self._appointment_snapshot()]

    def complete_appointment(self, appointment_id: str) -> Appointment:
        """Mark a scheduled appointment as completed. Admin only."""
        self._require_admin()
        return self._transition(appointment_id, AppointmentStatus.COMPLETED)

    def cancel_appointment(self, appointment_id: str) -> Appointment:
        """Cancel a scheduled appointment. Allowed for its patient or an admin."""
        appointment = self._get_appointment(appointment_id)
        if not self._is_admin() and not self._is_current_patient(appointment.patient_id):
            raise UnauthorizedError("Only the patient or an admin can cancel this appointment")
        return self._transition(appointment_id, AppointmentStatus.CANCELLED)

    def appointments_for_patient(self, patient_id: str) -> List[Appointment]:
        return [
            apt.model_copy() for apt in self._appointment_snapshot()
            if apt.patient_id == patient_id
        ]

    def upcoming_appointments(self, patient_id: str) -> List[Appointment]:
        return [
            apt for apt in self.appointments_for_patient(patient_id)
            if apt.status == AppointmentStatus.SCHEDULED
        ]

    def completed_appointments(self, patient_id: str) -> List[Appointment]:
        return [
            apt for apt in self.appointments_for_patient(patient_id)
            if apt.status == AppointmentStatus.COMPLETED
        ]

    def booked_times(self, doctor_id: str, date: str) -> List[str]:
        """Times already taken for a doctor on a date."""
        return [
            apt.time for apt in self._appointment_snapshot()
            if apt.doctor_id == doctor_id and apt.date == date and apt.is_active
        ]

    def open_slots(self, doctor_id: str, date: str) -> List[str]:
        """The doctor's slots still free on a date, in slot order."""
        doctor = self.catalog.get_doctor(doctor_id)
        taken = set(self.booked_times(doctor_id, date))
        return [slot for slot in doctor.available_slots if slot not in taken]

    def distinct_patient_count(self) -> int:
        return len({apt.patient_id for apt in self._appointment_snapshot()})

    def today(self) -> date_type:
        """Current date from the injected clock, or the configured clinic timezone."""
        if self._clock is not None:
            return self._clock()
        return clinic_today(self.settings.CLINIC_TIMEZONE)

    def bookable_dates(self) -> List[str]:
        """Weekdays after today within the configured booking horizon."""
        return generate_available_dates(self.today(), self.settings.BOOKING_HORIZON_DAYS)

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------

    def add_review(
        self,
        doctor_id: str,
        patient_id: str,
        patient_name: str,
        rating: int,
        comment: str,
        date: Optional[str] = None
    ) -> Review:
        """
        Add a patient review. ``date`` defaults to today in the clinic timezone.

        Raises:
            ValidationError: Rating outside 1..5 or blank comment
            NotFoundError: Unknown doctor
            ConflictError: The patient already reviewed this doctor
        """
        request = _validate(ReviewRequest, {
            "doctor_id": doctor_id,
            "patient_id": patient_id,
            "patient_name": patient_name,
            "rating": rating,
            "comment": comment,
            "date": self.today().isoformat() if date is None else date,
        })
        self.catalog.get_doctor(request.doctor_id)

        with self._lock:
            if self.has_reviewed(request.patient_id, request.doctor_id):
                logger.warning(
                    f"Rejected duplicate review by {request.patient_id} for doctor {request.doctor_id}"
                )
                raise ConflictError(
                    "Patient has already reviewed this doctor",
                    {"patient_id": request.patient_id, "doctor_id": request.doctor_id}
                )

            review = Review(**request.model_dump())
            self._reviews[review.id] = review

        logger.info(f"Review {review.id} added for doctor {review.doctor_id} (rating {review.rating})")
        return review.model_copy()

    def get_review(self, review_id: str) -> Review:
        return self._get_review(review_id).model_copy()

    def list_reviews(self) -> List[Review]:
        return [review.model_copy() for review in self._review_snapshot()]

    def update_review(
        self,
        review_id: str,
        edit: Union[ReviewEdit, Dict[str, Any]]
    ) -> Review:
        """Merge the fields set on ``edit`` into a review. Admin only."""
        self._require_admin()
        if not isinstance(edit, ReviewEdit):
            if not isinstance(edit, Mapping):
                raise ValidationError("edit must be a ReviewEdit or a mapping", field="edit")
            edit = _validate(ReviewEdit, dict(edit))

        with self._lock:
            review = self._get_review(review_id)
            updated = review.model_copy(update=edit.model_dump(exclude_none=True))
            self._reviews[review_id] = updated

        logger.info(f"Review {review_id} updated")
        return updated.model_copy()

    def delete_review(self, review_id: str) -> None:
        """Remove a review. Admin only."""
        self._require_admin()
        with self._lock:
            self._get_review(review_id)
            del self._reviews[review_id]
        logger.info(f"Review {review_id} deleted")

    def add_admin_reply(self, review_id: str, reply_text: str) -> Review:
        """Set the admin reply on a review, overwriting any previous one. Admin only."""
        self._require_admin()
        reply = (reply_text or "").strip()
        if not reply:
            raise ValidationError("reply must not be empty", field="reply_text")

        with self._lock:
            review = self._get_review(review_id)
            updated = review.model_copy(update={"admin_reply": reply})
            self._reviews[review_id] = updated

        logger.info(f"Admin replied to review {review_id}")
        return updated.model_copy()

    def reviews_for_doctor(self, doctor_id: str) -> List[Review]:
        return [
            review.model_copy() for review in self._review_snapshot()
            if review.doctor_id == doctor_id
        ]

    def reviews_for_patient(self, patient_id: str) -> List[Review]:
        return [
            review.model_copy() for review in self._review_snapshot()
            if review.patient_id == patient_id
        ]

    def has_reviewed(self, patient_id: str, doctor_id: str) -> bool:
        return any(
            review.patient_id == patient_id and review.doctor_id == doctor_id
            for review in self._review_snapshot()
        )

    def average_rating(self, doctor_id: str) -> float:
        """Mean review rating, or the doctor's seed rating when unreviewed."""
        doctor = self.catalog.get_doctor(doctor_id)
        ratings = [r.rating for r in self._review_snapshot() if r.doctor_id == doctor_id]
        if not ratings:
            return doctor.rating
        return sum(ratings) / len(ratings)

    def overall_average_rating(self) -> float:
        """Mean over every review, 0.0 when there are none."""
        ratings = [r.rating for r in self._review_snapshot()]
        if not ratings:
            return 0.0
        return sum(ratings) / len(ratings)

    def stats(self) -> StoreStats:
        with self._lock:
            return StoreStats(
                total_patients=self.distinct_patient_count(),
                total_appointments=len(self._appointments),
                total_reviews=len(self._reviews),
                average_rating=self.overall_average_rating(),
            )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _appointment_snapshot(self) -> List[Appointment]:
        with self._lock:
            return list(self._appointments.values())

    def _review_snapshot(self) -> List[Review]:
        with self._lock:
            return list(self._reviews.values())

    def _is_slot_available(self, doctor_id: str, date: str, time: str) -> bool:
        return time not in self.booked_times(doctor_id, date)

    def _transition(self, appointment_id: str, target: AppointmentStatus) -> Appointment:
        with self._lock:
            appointment = self._get_appointment(appointment_id)
            if target not in ALLOWED_TRANSITIONS.get(appointment.status, set()):
                raise InvalidTransitionError(
                    appointment_id, appointment.status.value, target.value
                )
            updated = appointment.model_copy(
                update={"status": target, "updated_at": datetime.now()}
            )
            self._appointments[appointment_id] = updated

        logger.info(f"Appointment {appointment_id} status updated to {target.value}")
        return updated.model_copy()

    def _get_appointment(self, appointment_id: str) -> Appointment:
        appointment = self._appointments.get(appointment_id)
        if appointment is None:
            raise NotFoundError("Appointment", appointment_id)
        return appointment

    def _get_review(self, review_id: str) -> Review:
        review = self._reviews.get(review_id)
        if review is None:
            raise NotFoundError("Review", review_id)
        return review

    def _is_admin(self) -> bool:
        return self.session is not None and self.session.is_admin

    def _is_current_patient(self, patient_id: str) -> bool:
        if self.session is None or self.session.current_user is None:
            return False
        return self.session.current_user.id == patient_id

    def _require_admin(self) -> None:
        if not self._is_admin():
            logger.warning("Rejected admin-only operation without admin session")
            raise UnauthorizedError()
