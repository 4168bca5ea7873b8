"""Domain Ports - Result Type, Error Hierarchy and Environment Contracts.

This module defines the contracts the domain core relies on without owning:
the current date/time and the generation of unique identifiers. It also holds
the Result type and the domain exception hierarchy shared by every entity.

Architecture:
    - Pure abstract interfaces, no infrastructure dependencies
    - System implementations are provided for production use; tests inject
      deterministic fakes through the same ports
    - Validation failures raise ValidationError; rejected operations return
      booleans or Result objects instead of raising
"""

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime
from typing import Generic, Optional, TypeVar, Union

T = TypeVar('T')


# ============================================================================
# Result Type for Success/Failure Communication
# ============================================================================

@dataclass(frozen=True)
class Result(Generic[T]):
    """Result type for communicating success or failure without exceptions.

    Attributes:
        success: True if the operation succeeded, False otherwise
        value: The successful result value (only present if success=True)
        error: Error information (only present if success=False)
        error_type: Type of error (ValidationError, ConfigurationError, etc.)
        error_details: Additional error context

    Example:
        ```python
        result = config_manager.load_pricing()
        if result.is_success():
            calculator = result.value.shipping_calculator()
        else:
            logger.error(result.error)
        ```
    """

    success: bool
    value: Optional[T] = None
    error: Optional[str] = None
    error_type: Optional[str] = None
    error_details: Optional[dict] = None

    @classmethod
    def success_result(cls, value: T) -> 'Result[T]':
        """Create a successful result."""
        return cls(success=True, value=value)

    @classmethod
    def failure_result(
        cls,
        error: Union[str, Exception],
        error_type: Optional[str] = None,
        error_details: Optional[dict] = None
    ) -> 'Result[T]':
        """Create a failure result.

        Parameters:
            error: Error message or exception
            error_type: Type of error (defaults to the exception class name)
            error_details: Additional context

        Returns:
            Result: Failure result with error information
        """
        error_message = str(error) if isinstance(error, Exception) else error
        error_type_name = error_type or (type(error).__name__ if isinstance(error, Exception) else "UnknownError")

        return cls(
            success=False,
            value=None,
            error=error_message,
            error_type=error_type_name,
            error_details=error_details or {}
        )

    def is_success(self) -> bool:
        """Check if result is successful."""
        return self.success

    def is_failure(self) -> bool:
        """Check if result is a failure."""
        return not self.success


# ============================================================================
# Custom Exception Hierarchy
# ============================================================================

class DomainError(Exception):
    """Base exception for all domain errors."""
    pass


class ValidationError(DomainError, ValueError):
    """Raised when an entity fails an invariant at construction or assignment.

    The entity is never left partially built: construction is aborted, and a
    rejected assignment leaves the previous value in place.

    Attributes:
        field: Name of the field that failed (None for whole-entity checks)
        entity: Name of the entity type being validated
        details: Additional error details (e.g. the raw Pydantic error list)
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        entity: Optional[str] = None,
        details: Optional[dict] = None
    ):
        super().__init__(message)
        self.field = field
        self.entity = entity
        self.details = details or {}


class ConfigurationError(DomainError):
    """Raised when pricing or application configuration is malformed.

    Attributes:
        source: The configuration source that failed (env var name or file path)
    """

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


# ============================================================================
# Environment Ports
# ============================================================================

class Clock(ABC):
    """Abstract contract for the current date and time.

    Birth-date validation and creation timestamps read the clock through this
    port so that checks near the current date can be tested deterministically.
    """

    @abstractmethod
    def today(self) -> date:
        """Return the current calendar date."""
        pass

    @abstractmethod
    def now(self) -> datetime:
        """Return the current date and time."""
        pass


class IdentityGenerator(ABC):
    """Abstract contract for generating unique string identifiers.

    Only the admission modes that do not receive an explicit identifier
    (emergency and transfer admission) consult the generator.
    """

    @abstractmethod
    def new_id(self) -> str:
        """Return a new unique identifier."""
        pass


class AdmissionAuditPort(ABC):
    """Abstract contract for recording registry admission decisions.

    Implemented in the infrastructure layer; the registry works without one.
    """

    @abstractmethod
    def record_admission(
        self,
        patient_id: str,
        actor_role: str,
        decision: str,
        admitted: bool
    ) -> None:
        """Record the outcome of one admission attempt."""
        pass


class SystemClock(Clock):
    """Clock backed by the local system time."""

    def today(self) -> date:
        return date.today()

    def now(self) -> datetime:
        return datetime.now()


class UUIDIdentityGenerator(IdentityGenerator):
    """Identity generator producing random UUID4 strings."""

    def new_id(self) -> str:
        return str(uuid.uuid4())
