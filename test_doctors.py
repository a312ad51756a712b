import pytest

from carebook.exceptions import NotFoundError
from carebook.services.doctor_service import DoctorCatalog


def test_list_doctors_in_seed_order(catalog):
    assert [d.id for d in catalog.list_doctors()] == ["1", "2", "3", "4"]


def test_get_doctor(catalog):
    doctor = catalog.get_doctor("1")
    assert doctor.name == "Dr. Sarah Johnson"
    assert doctor.rating == 4.8
    assert doctor.available_slots[0] == "09:00"


def test_get_unknown_doctor(catalog):
    with pytest.raises(NotFoundError) as exc_info:
        catalog.get_doctor("99")
    assert exc_info.value.to_dict()["error"] == "NOT_FOUND"


def test_doctors_are_immutable(catalog):
    doctor = catalog.get_doctor("1")
    with pytest.raises(Exception):
        doctor.rating = 1.0
    assert catalog.get_doctor("1").rating == 4.8


def test_specialties(catalog):
    assert catalog.specialties() == [
        "Cardiologist", "Neurologist", "Pediatrician", "Orthopedic Surgeon"
    ]


def test_search_doctors(catalog):
    assert [d.id for d in catalog.search_doctors("chen")] == ["2"]
    assert [d.id for d in catalog.search_doctors("SURGEON")] == ["4"]
    assert len(catalog.search_doctors("")) == 4
    assert [d.id for d in catalog.search_doctors("", specialty="Pediatrician")] == ["3"]
    assert len(catalog.search_doctors("dr.", specialty="all")) == 4
    assert catalog.search_doctors("chen", specialty="Cardiologist") == []


def test_duplicate_seed_ids_rejected():
    doc = {
        "id": "x", "name": "Dr. X", "specialty": "GP", "rating": 4.0,
        "experience": 1, "location": "Here", "consultation_fee": 10,
    }
    with pytest.raises(ValueError):
        DoctorCatalog([doc, doc])
