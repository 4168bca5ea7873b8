"""Audit infrastructure components.

This package provides infrastructure components for audit logging,
including the registry admission audit trail.
"""

from src.infrastructure.audit.admission_audit_logger import AdmissionAuditLogger

__all__ = ['AdmissionAuditLogger']
