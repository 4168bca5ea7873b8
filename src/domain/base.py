"""Base model for validated domain entities.

Entities are Pydantic V2 models. Pydantic's own ValidationError is converted
into the domain ValidationError at this boundary, both at construction and on
attribute assignment, so callers only ever handle one error type and always
learn which field failed.

Architecture:
    - Construction either returns a fully validated entity or raises; no
      partially built instance is observable
    - A rejected assignment leaves the previous value in place
    - An injected Clock travels through the Pydantic validation context
"""

import logging
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ValidationInfo, ValidationError as PydanticValidationError

from src.domain.ports import Clock, SystemClock, ValidationError

logger = logging.getLogger(__name__)

EntityT = TypeVar('EntityT', bound='DomainEntity')

CLOCK_CONTEXT_KEY = "clock"

_SYSTEM_CLOCK = SystemClock()


def to_domain_error(entity_name: str, error: PydanticValidationError) -> ValidationError:
    """Convert a Pydantic validation failure into a domain ValidationError.

    The first reported error determines the failing field. Pydantic reports
    errors in field declaration order, so entities declare their fields in
    the order their checks should run.

    Parameters:
        entity_name: Name of the entity class being validated
        error: The Pydantic error to convert

    Returns:
        ValidationError carrying the field name, entity name and raw errors
    """
    errors = error.errors(include_url=False)
    first = errors[0] if errors else {}
    loc = first.get("loc") or ()
    field = str(loc[0]) if loc else None
    reason = first.get("msg", str(error))

    if field:
        message = f"{entity_name}.{field}: {reason}"
    else:
        message = f"{entity_name}: {reason}"

    return ValidationError(
        message,
        field=field,
        entity=entity_name,
        details={
            'error_count': len(errors),
            'validation_errors': str(error),
        }
    )


def clock_from(info: ValidationInfo) -> Clock:
    """Return the clock injected into the validation context, or the system clock."""
    context = info.context or {}
    return context.get(CLOCK_CONTEXT_KEY) or _SYSTEM_CLOCK


class DomainEntity(BaseModel):
    """Base class for all validated entities.

    Subclasses declare fields and validators as regular Pydantic models and
    choose between `frozen=True` (value objects) and `validate_assignment=True`
    (entities with re-validated mutable attributes).

    Construction accepts a keyword-only `clock`, placed in the validation
    context for date checks. Pydantic routes `model_validate` through this
    `__init__` as well, so the clock is always passed here.
    """

    def __init__(self, /, clock: Optional[Clock] = None, **data: Any) -> None:
        context = {CLOCK_CONTEXT_KEY: clock} if clock is not None else None
        try:
            self.__pydantic_validator__.validate_python(data, self_instance=self, context=context)
        except PydanticValidationError as e:
            domain_error = to_domain_error(type(self).__name__, e)
            logger.debug(
                f"Construction rejected: {domain_error}",
                extra={'entity': domain_error.entity, 'field': domain_error.field}
            )
            raise domain_error from e

    def __setattr__(self, name: str, value: Any) -> None:
        try:
            super().__setattr__(name, value)
        except PydanticValidationError as e:
            domain_error = to_domain_error(type(self).__name__, e)
            logger.debug(
                f"Assignment rejected: {domain_error}",
                extra={'entity': domain_error.entity, 'field': domain_error.field}
            )
            raise domain_error from e

    @classmethod
    def validate_with(
        cls: type[EntityT],
        data: dict[str, Any],
        clock: Optional[Clock] = None
    ) -> EntityT:
        """Validate `data` into an entity, reading the current date from `clock`.

        Parameters:
            data: Field values keyed by field name or alias
            clock: Clock used by date checks (system clock if None)

        Raises:
            ValidationError: If any invariant fails
        """
        return cls(clock=clock, **data)
