from typing import Dict, Iterable, List, Optional
from carebook.exceptions import NotFoundError
from carebook.models.doctor import Doctor
from carebook.utils.logger import app_logger as logger


SAMPLE_DOCTORS = [
    {
        "id": "1",
        "name": "Dr. Sarah Johnson",
        "specialty": "Cardiologist",
        "image": "/placeholder.svg",
        "rating": 4.8,
        "experience": 12,
        "location": "Heart Care Center, New York",
        "consultation_fee": 200,
        "available_slots": ["09:00", "10:00", "11:00", "14:00", "15:00", "16:00"],
        "bio": (
            "Dr. Sarah Johnson is a board-certified cardiologist with over 12 years "
            "of experience in treating heart conditions. She specializes in preventive "
            "cardiology and interventional procedures."
        )
    },
    {
        "id": "2",
        "name": "Dr. Michael Chen",
        "specialty": "Neurologist",
        "image": "/placeholder.svg",
        "rating": 4.9,
        "experience": 15,
        "location": "NeuroHealth Institute, Los Angeles",
        "consultation_fee": 250,
        "available_slots": ["08:00", "09:00", "10:00", "13:00", "14:00", "15:00"],
        "bio": (
            "Dr. Michael Chen is a renowned neurologist specializing in epilepsy, stroke, "
            "and neurodegenerative diseases."
        )
    },
    {
        "id": "3",
        "name": "Dr. Emily Davis",
        "specialty": "Pediatrician",
        "image": "/placeholder.svg",
        "rating": 4.7,
        "experience": 8,
        "location": "Children's Medical Center, Chicago",
        "consultation_fee": 150,
        "available_slots": ["08:30", "09:30", "10:30", "13:30", "14:30", "15:30"],
        "bio": (
            "Dr. Emily Davis is a compassionate pediatrician caring for children from "
            "infancy through adolescence, with a special interest in developmental pediatrics."
        )
    },
    {
        "id": "4",
        "name": "Dr. Robert Wilson",
        "specialty": "Orthopedic Surgeon",
        "image": "/placeholder.svg",
        "rating": 4.6,
        "experience": 20,
        "location": "Orthopedic Excellence Center, Miami",
        "consultation_fee": 300,
        "available_slots": ["07:00", "08:00", "09:00", "13:00", "14:00"],
        "bio": (
            "Dr. Robert Wilson is a leading orthopedic surgeon with expertise in joint "
            "replacement, sports medicine, and trauma surgery."
        )
    }
]


class DoctorCatalog:
    """Read-only catalog of doctors, seeded once."""

    def __init__(self, doctors: Optional[Iterable[Dict]] = None):
        """Seed the catalog. Defaults to the sample doctors."""
        self._doctors: Dict[str, Doctor] = {}
        for doc in (SAMPLE_DOCTORS if doctors is None else doctors):
            doctor = self._doc_to_model(doc)
            if doctor.id in self._doctors:
                raise ValueError(f"Duplicate doctor id in seed data: {doctor.id}")
            self._doctors[doctor.id] = doctor
        logger.info(f"Doctor catalog initialized with {len(self._doctors)} doctors")

    def __len__(self) -> int:
        return len(self._doctors)

    def __contains__(self, doctor_id: str) -> bool:
        return doctor_id in self._doctors

    def list_doctors(self) -> List[Doctor]:
        """All doctors in seed order."""
        return list(self._doctors.values())

    def get_doctor(self, doctor_id: str) -> Doctor:
        """Get doctor by ID, raising NotFoundError for unknown ids."""
        doctor = self._doctors.get(doctor_id)
        if doctor is None:
            raise NotFoundError("Doctor", doctor_id)
        return doctor

    def specialties(self) -> List[str]:
        """Distinct specialties in catalog order."""
        seen = []
        for doctor in self._doctors.values():
            if doctor.specialty not in seen:
                seen.append(doctor.specialty)
        return seen

    def search_doctors(
        self,
        query: str = "",
        specialty: Optional[str] = None
    ) -> List[Doctor]:
        """
        Search doctors by name or specialty.

        Args:
            query: Case-insensitive substring of the name or specialty
            specialty: Exact specialty to keep; None or "all" keeps every specialty

        Returns:
            Matching doctors in catalog order
        """
        needle = (query or "").strip().lower()
        results = []
        for doctor in self._doctors.values():
            matches_query = (
                needle in doctor.name.lower()
                or needle in doctor.specialty.lower()
            )
            matches_specialty = specialty in (None, "all") or doctor.specialty == specialty
            if matches_query and matches_specialty:
                results.append(doctor)
        return results

    def _doc_to_model(self, doc: Dict) -> Doctor:
        """Convert a seed dictionary to a Doctor model."""
        return Doctor(
            id=str(doc["id"]),
            name=doc["name"],
            specialty=doc["specialty"],
            rating=doc["rating"],
            experience=doc["experience"],
            location=doc["location"],
            consultation_fee=doc["consultation_fee"],
            available_slots=tuple(doc.get("available_slots", [])),
            bio=doc.get("bio", ""),
            image=doc.get("image")
        )
