"""Registries - Policy-Gated Patient Admission and Product Catalog.

Security Impact:
    - A patient enters the registry only if the access policy allows the
      submitting actor; every other attempt leaves the registry unchanged
    - Audit listings use the internal patient summary, which is not exposed
      outside the domain package

Architecture:
    - In-memory stores with no eviction or durability
    - Admission is a predicate: rejections return False, they do not raise
    - A single lock serializes admit/get on a shared registry instance
"""

import logging
from threading import Lock
from typing import Optional

from src.domain.access_policy import AccessPolicy, resolve_role
from src.domain.clinical import InternalSummary, Patient
from src.domain.commerce import Customer, Order, Product
from src.domain.enums import AccessDecision
from src.domain.ports import AdmissionAuditPort

logger = logging.getLogger(__name__)


class PatientRegistry:
    """Registry of admitted patients keyed by patient identifier.

    Re-admitting a patient identifier replaces the stored patient (last write
    wins); the registry size does not grow.

    Example Usage:
        ```python
        registry = PatientRegistry()
        if registry.admit(patient, doctor):
            assert registry.get(patient.patient_id) is patient
        ```

    Parameters:
        policy: Access policy consulted before every admission
        audit: Optional sink recording each allowed or denied admission
    """

    def __init__(
        self,
        policy: Optional[AccessPolicy] = None,
        audit: Optional[AdmissionAuditPort] = None
    ):
        self._policy = policy or AccessPolicy()
        self._audit = audit
        self._patients: dict[str, Patient] = {}
        self._lock = Lock()

    def admit(self, entity: object, actor: object) -> bool:
        """Admit `entity` on behalf of `actor`.

        Returns:
            bool: True if the patient was stored, False if `entity` is not a
                  Patient or the policy denies the actor
        """
        if not isinstance(entity, Patient):
            logger.warning(f"Admission rejected: {type(entity).__name__} is not a Patient")
            return False

        role = resolve_role(actor)
        with self._lock:
            decision = self._policy.decide(actor)
            admitted = decision is AccessDecision.ALLOW
            if admitted:
                replaced = entity.patient_id in self._patients
                self._patients[entity.patient_id] = entity

        log_context = {'patient_id': entity.patient_id, 'actor_role': role.value, 'decision': decision.value}
        if admitted:
            logger.info(
                f"Patient {entity.patient_id} admitted by {role.value}"
                f"{' (replaced existing entry)' if replaced else ''}",
                extra=log_context
            )
        else:
            logger.warning(
                f"Admission of patient {entity.patient_id} denied for role {role.value}",
                extra=log_context
            )

        if self._audit is not None:
            self._audit.record_admission(
                patient_id=entity.patient_id,
                actor_role=role.value,
                decision=decision.value,
                admitted=admitted,
            )
        return admitted

    def get(self, patient_id: str) -> Optional[Patient]:
        with self._lock:
            return self._patients.get(patient_id)

    def patient_ids(self) -> list[str]:
        with self._lock:
            return sorted(self._patients)

    def internal_audit(self) -> list[InternalSummary]:
        """Identifier, name and room of every admitted patient, by identifier."""
        with self._lock:
            patients = [self._patients[key] for key in sorted(self._patients)]
        return [patient._internal_summary() for patient in patients]

    def __len__(self) -> int:
        with self._lock:
            return len(self._patients)

    def __contains__(self, patient_id: object) -> bool:
        with self._lock:
            return patient_id in self._patients


class ProductCatalog:
    """In-memory product catalog keyed by product identifier."""

    def __init__(self):
        self._products: dict[str, Product] = {}

    def add(self, product_id: str, product: Product) -> None:
        self._products[product_id] = product

    def get(self, product_id: str) -> Optional[Product]:
        return self._products.get(product_id)

    def __len__(self) -> int:
        return len(self._products)


def process_order(order: object, customer: object) -> bool:
    """Check that `order` is an Order and `customer` a Customer.

    No side effects and no access policy check.
    """
    return isinstance(order, Order) and isinstance(customer, Customer)
