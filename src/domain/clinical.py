"""Clinical Entities - Medical Records and Patients.

This module defines the immutable MedicalRecord value object and the Patient
entity that optionally owns one.

Security Impact:
    - Medical records are immutable; allergy and history lists are held as
      owned tuples and every accessor hands out a fresh copy
    - The patient identifier is only exposed through the internal summary,
      which is reserved for the registry; callers outside the domain get the
      public summary (name and room only)

Architecture:
    - Pure domain models with zero infrastructure dependencies
    - Every admission mode funnels through the same Pydantic validation
    - Clock and identity generation are injected through the domain ports
"""

import logging
from datetime import date
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

from src.domain.base import DomainEntity, clock_from
from src.domain.ports import Clock, IdentityGenerator, UUIDIdentityGenerator

logger = logging.getLogger(__name__)

_REQUIRED_RECORD_FIELDS = {
    "record_id": "Record ID required",
    "patient_dna": "DNA sequence required",
    "blood_type": "Blood type required",
}


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class MedicalRecord(DomainEntity):
    """Immutable medical record, validated once at construction.

    Equality and hashing use the record identifier and DNA sequence only.

    Parameters:
        record_id: Record identifier (non-blank)
        patient_dna: DNA sequence (non-blank)
        birth_date: Date of birth, must not be after the clock's current date
        blood_type: Blood type (non-blank)
        allergies: Known allergies (optional, copied)
        medical_history: Medical history entries (optional, copied)
    """

    record_id: str = Field(..., description="Record identifier")
    patient_dna: str = Field(..., description="DNA sequence")
    birth_date: date = Field(..., description="Date of birth")
    blood_type: str = Field(..., description="Blood type")
    allergy_list: tuple[str, ...] = Field(
        default=(), alias="allergies", repr=False,
        description="Known allergies"
    )
    history_entries: tuple[str, ...] = Field(
        default=(), alias="medical_history", repr=False,
        description="Medical history entries"
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("record_id", "patient_dna", "blood_type", mode="before")
    @classmethod
    def require_text(cls, v, info: ValidationInfo):
        if _is_blank(v):
            raise ValueError(_REQUIRED_RECORD_FIELDS[info.field_name])
        return v

    @field_validator("birth_date")
    @classmethod
    def validate_birth_date(cls, v: date, info: ValidationInfo) -> date:
        """Reject birth dates after the current date of the injected clock."""
        today = clock_from(info).today()
        if v > today:
            raise ValueError(f"Invalid birthdate: {v} is after {today}")
        return v

    @field_validator("allergy_list", "history_entries", mode="before")
    @classmethod
    def default_empty(cls, v):
        return () if v is None else v

    @classmethod
    def create(
        cls,
        record_id: str,
        patient_dna: str,
        birth_date: date,
        blood_type: str,
        allergies: Optional[Iterable[str]] = None,
        medical_history: Optional[Iterable[str]] = None,
        clock: Optional[Clock] = None
    ) -> 'MedicalRecord':
        """Build a record, checking the birth date against `clock`.

        Raises:
            ValidationError: If any invariant fails
        """
        return cls.validate_with(
            {
                "record_id": record_id,
                "patient_dna": patient_dna,
                "birth_date": birth_date,
                "blood_type": blood_type,
                "allergies": allergies,
                "medical_history": medical_history,
            },
            clock=clock,
        )

    @property
    def allergies(self) -> list[str]:
        """Fresh copy of the allergy list."""
        return list(self.allergy_list)

    @property
    def medical_history(self) -> list[str]:
        """Fresh copy of the medical history entries."""
        return list(self.history_entries)

    def is_allergic_to(self, substance: Optional[str]) -> bool:
        """Case-insensitive allergy check."""
        if substance is None:
            return False
        wanted = substance.casefold()
        return any(allergy.casefold() == wanted for allergy in self.allergy_list)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MedicalRecord):
            return NotImplemented
        return (self.record_id, self.patient_dna) == (other.record_id, other.patient_dna)

    def __hash__(self) -> int:
        return hash((self.record_id, self.patient_dna))

    def __str__(self) -> str:
        return (
            f"MedicalRecord(record_id={self.record_id!r}, blood_type={self.blood_type!r}, "
            f"birth_date={self.birth_date}, allergies={list(self.allergy_list)}, "
            f"medical_history_entries={len(self.history_entries)})"
        )


class InternalSummary(BaseModel):
    """Patient projection including the identifier. Registry use only."""

    patient_id: str
    name: str
    room_number: Optional[int] = None

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"PatientID={self.patient_id}, Name={self.name}, Room={self.room_number}"


class PublicSummary(BaseModel):
    """Patient projection safe to show outside the domain: no identifier."""

    name: str
    room_number: Optional[int] = None

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"Patient: {self.name} (Room {self.room_number})"


EMERGENCY_CONTACT_UNKNOWN = "Unknown"
PHYSICIAN_UNASSIGNED = "Unassigned"
UNASSIGNED_ROOM = -1


class Patient(DomainEntity):
    """Admitted patient with a fixed identity and re-validated mutable fields.

    `patient_id` and `medical_record` are frozen. `name` is re-validated on
    every assignment and rejects blank values; the remaining descriptive
    fields accept any value, including None.

    Parameters:
        patient_id: Patient identifier (non-blank, fixed)
        medical_record: Owned medical record (optional, fixed)
        name: Current patient name (non-blank)
        emergency_contact: Emergency contact
        insurance_info: Insurance information
        room_number: Assigned room
        attending_physician: Attending physician
    """

    patient_id: str = Field(..., frozen=True, description="Patient identifier")
    medical_record: Optional[MedicalRecord] = Field(
        None, frozen=True, description="Owned medical record"
    )
    name: str = Field(..., description="Current patient name")
    emergency_contact: Optional[str] = None
    insurance_info: Optional[str] = None
    room_number: Optional[int] = None
    attending_physician: Optional[str] = None

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("patient_id", mode="before")
    @classmethod
    def require_patient_id(cls, v):
        if _is_blank(v):
            raise ValueError("Patient ID required")
        return v

    @field_validator("name", mode="before")
    @classmethod
    def require_name(cls, v):
        if _is_blank(v):
            raise ValueError("Patient name required")
        return v

    @classmethod
    def emergency_admission(
        cls,
        name: str,
        id_generator: Optional[IdentityGenerator] = None
    ) -> 'Patient':
        """Admit an unidentified patient with placeholder details and no record."""
        generator = id_generator or UUIDIdentityGenerator()
        patient = cls(
            patient_id=generator.new_id(),
            medical_record=None,
            name=name,
            emergency_contact=EMERGENCY_CONTACT_UNKNOWN,
            insurance_info="Pending",
            room_number=UNASSIGNED_ROOM,
            attending_physician=PHYSICIAN_UNASSIGNED,
        )
        logger.info(f"Emergency admission created patient {patient.patient_id}")
        return patient

    @classmethod
    def transfer_admission(
        cls,
        medical_record: MedicalRecord,
        name: str,
        id_generator: Optional[IdentityGenerator] = None
    ) -> 'Patient':
        """Admit a patient transferred with an existing medical record."""
        generator = id_generator or UUIDIdentityGenerator()
        patient = cls(
            patient_id=generator.new_id(),
            medical_record=medical_record,
            name=name,
            emergency_contact=EMERGENCY_CONTACT_UNKNOWN,
            insurance_info="Imported",
            room_number=UNASSIGNED_ROOM,
            attending_physician=PHYSICIAN_UNASSIGNED,
        )
        logger.info(
            f"Transfer admission created patient {patient.patient_id} "
            f"from record {medical_record.record_id}"
        )
        return patient

    def _internal_summary(self) -> InternalSummary:
        # Includes the identifier: only for collaborators inside src.domain.
        return InternalSummary(
            patient_id=self.patient_id,
            name=self.name,
            room_number=self.room_number,
        )

    def public_summary(self) -> PublicSummary:
        return PublicSummary(name=self.name, room_number=self.room_number)

    def __str__(self) -> str:
        return (
            f"Patient(id={self.patient_id!r}, name={self.name!r}, "
            f"room={self.room_number}, attending_physician={self.attending_physician!r})"
        )
