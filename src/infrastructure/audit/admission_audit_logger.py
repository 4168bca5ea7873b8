"""Admission Audit Logger.

This module records every registry admission attempt (allowed or denied)
with the actor role, the policy decision and a timestamp, and emits the
registry key listing used for periodic internal audits.

Security Impact:
    - Creates an append-only trail of who was allowed to register patients
    - Denied attempts are kept alongside successful ones for review
    - Only patient identifiers are recorded, never names or record contents

Architecture:
    - Infrastructure layer component implementing AdmissionAuditPort
    - Injected into PatientRegistry; the registry works without it
"""

import logging
import uuid
from threading import Lock
from typing import Iterable, List, Optional

from src.domain.ports import AdmissionAuditPort, Clock, SystemClock

logger = logging.getLogger(__name__)


class AdmissionAuditLogger(AdmissionAuditPort):
    """In-memory buffer of admission audit entries.

    Example Usage:
        ```python
        audit = AdmissionAuditLogger()
        registry = PatientRegistry(audit=audit)
        registry.admit(patient, doctor)
        for entry in audit.get_logs():
            print(entry["patient_id"], entry["decision"])
        ```

    Parameters:
        clock: Clock used to timestamp entries (system clock if None)
    """

    def __init__(self, clock: Optional[Clock] = None):
        """Initialize admission audit logger."""
        self._clock = clock or SystemClock()
        self._logs: List[dict] = []
        self._session_id: Optional[str] = None
        self._lock = Lock()

    def set_session_context(self, session_id: Optional[str] = None) -> None:
        """Set a session identifier attached to subsequent entries."""
        self._session_id = session_id

    def record_admission(
        self,
        patient_id: str,
        actor_role: str,
        decision: str,
        admitted: bool
    ) -> None:
        """Record a single admission attempt.

        Parameters:
            patient_id: Identifier of the patient submitted for admission
            actor_role: Role tag of the submitting actor
            decision: Policy decision ("allow" or "deny")
            admitted: Whether the patient was stored
        """
        log_entry = {
            "audit_id": str(uuid.uuid4()),
            "patient_id": patient_id,
            "actor_role": actor_role,
            "decision": decision,
            "admitted": admitted,
            "recorded_at": self._clock.now(),
            "session_id": self._session_id,
        }

        with self._lock:
            self._logs.append(log_entry)
        logger.debug(f"Recorded admission: {patient_id} by {actor_role} ({decision})")

    def log_registry_keys(self, patient_ids: Iterable[str]) -> None:
        """Emit the listing of registry keys at INFO level."""
        keys = list(patient_ids)
        logger.info(f"Audit: {keys}")

    def get_logs(self) -> List[dict]:
        """Get all recorded admission entries (copy)."""
        with self._lock:
            return self._logs.copy()

    def get_denied(self) -> List[dict]:
        """Entries for admission attempts that were not stored."""
        with self._lock:
            return [entry for entry in self._logs if not entry["admitted"]]

    def get_log_count(self) -> int:
        with self._lock:
            return len(self._logs)
