"""Shared fixtures: deterministic clock and identifiers, staff and patients."""

from datetime import date, datetime, time

import pytest

from src.domain import Administrator, Doctor, MedicalRecord, Nurse, Patient
from src.domain.ports import Clock, IdentityGenerator


class FixedClock(Clock):
    """Clock frozen at a given date (midday)."""

    def __init__(self, today: date):
        self._today = today

    def today(self) -> date:
        return self._today

    def now(self) -> datetime:
        return datetime.combine(self._today, time(12, 0))


class SequentialIdentityGenerator(IdentityGenerator):
    """Identity generator producing PREFIX-0001, PREFIX-0002, ..."""

    def __init__(self, prefix: str = "PAT"):
        self._prefix = prefix
        self._counter = 0

    def new_id(self) -> str:
        self._counter += 1
        return f"{self._prefix}-{self._counter:04d}"


@pytest.fixture
def fixed_clock():
    return FixedClock(date(2024, 6, 1))


@pytest.fixture
def clock_at():
    """Factory for clocks frozen at an arbitrary date."""
    return FixedClock


@pytest.fixture
def id_generator():
    return SequentialIdentityGenerator()


@pytest.fixture
def doctor():
    return Doctor(license_number="LIC123", specialty="Cardiology", certifications={"BoardCertified"})


@pytest.fixture
def nurse():
    return Nurse(nurse_id="NUR456", shift="Night", qualifications=["ICU Certified"])


@pytest.fixture
def admin():
    return Administrator(admin_id="ADM789", access_permissions=["AllAccess"])


@pytest.fixture
def medical_record():
    return MedicalRecord(
        record_id="R001",
        patient_dna="DNA-XYZ",
        birth_date=date(1990, 5, 15),
        blood_type="O+",
        allergies=["Peanuts"],
        medical_history=["Asthma"],
    )


@pytest.fixture
def patient(medical_record):
    return Patient(patient_id="P001", medical_record=medical_record, name="John Doe", room_number=12)
