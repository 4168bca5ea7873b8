"""Medical staff actors.

Each staff type carries a fixed StaffRole tag that the access policy reads;
the policy never inspects the concrete class. Collections are stored as owned
immutable copies and returned as fresh copies.
"""

from typing import ClassVar

from pydantic import ConfigDict, Field

from src.domain.base import DomainEntity
from src.domain.enums import StaffRole


class StaffMember(DomainEntity):
    """Base class for actors recognized by the access policy."""

    role: ClassVar[StaffRole] = StaffRole.OTHER

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class Doctor(StaffMember):
    """Physician with a license, specialty and certifications."""

    role: ClassVar[StaffRole] = StaffRole.DOCTOR

    license_number: str
    specialty: str
    certification_set: frozenset[str] = Field(default=frozenset(), alias="certifications")

    @property
    def certifications(self) -> set[str]:
        return set(self.certification_set)

    def __str__(self) -> str:
        return f"Doctor[license={self.license_number}, specialty={self.specialty}]"


class Nurse(StaffMember):
    """Nurse assigned to a shift."""

    role: ClassVar[StaffRole] = StaffRole.NURSE

    nurse_id: str
    shift: str
    qualification_list: tuple[str, ...] = Field(default=(), alias="qualifications")

    @property
    def qualifications(self) -> list[str]:
        return list(self.qualification_list)

    def __str__(self) -> str:
        return f"Nurse[id={self.nurse_id}, shift={self.shift}]"


class Administrator(StaffMember):
    """Hospital administrator."""

    role: ClassVar[StaffRole] = StaffRole.ADMINISTRATOR

    admin_id: str
    permission_list: tuple[str, ...] = Field(default=(), alias="access_permissions")

    @property
    def access_permissions(self) -> list[str]:
        return list(self.permission_list)

    def __str__(self) -> str:
        return f"Admin[id={self.admin_id}]"
