"""Domain enumerations shared by the clinical and commerce entities."""

from enum import Enum


class StaffRole(str, Enum):
    """Closed set of actor roles recognized by the access policy.

    OTHER stands for any actor that is not a recognized staff member; the
    policy resolves unrecognized actors to it and denies them.
    """
    DOCTOR = "doctor"
    NURSE = "nurse"
    ADMINISTRATOR = "administrator"
    OTHER = "other"


class AccessDecision(str, Enum):
    """Outcome of an access policy evaluation."""
    ALLOW = "allow"
    DENY = "deny"


class ProductCategory(str, Enum):
    """Categories with a preset product factory."""
    ELECTRONICS = "Electronics"
    CLOTHING = "Clothing"
    BOOKS = "Books"
