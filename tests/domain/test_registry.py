"""Unit tests for PatientRegistry, ProductCatalog and process_order."""

import logging
from unittest.mock import Mock

from src.domain import (
    AccessDecision,
    AccessPolicy,
    Customer,
    Order,
    Patient,
    PatientRegistry,
    Product,
    ProductCatalog,
    StaffRole,
    process_order,
)
from src.domain.ports import AdmissionAuditPort


class TestPatientRegistry:
    """Test suite for policy-gated patient admission."""

    def test_admit_by_doctor(self, patient, doctor):
        """Test an allowed admission stores the patient."""
        registry = PatientRegistry()

        assert registry.admit(patient, doctor) is True
        assert registry.get("P001") is patient
        assert "P001" in registry
        assert len(registry) == 1

    def test_admit_by_nurse_and_admin(self, medical_record, nurse, admin):
        """Test nurses and administrators may admit patients."""
        registry = PatientRegistry()
        first = Patient(patient_id="P001", medical_record=medical_record, name="John Doe")
        second = Patient(patient_id="P002", name="Jane Roe")

        assert registry.admit(first, nurse)
        assert registry.admit(second, admin)
        assert registry.patient_ids() == ["P001", "P002"]

    def test_admit_denied_for_non_role_actor(self, patient):
        """Test a non-staff actor leaves the registry unchanged."""
        registry = PatientRegistry()

        assert registry.admit(patient, "not-a-role-object") is False
        assert registry.get("P001") is None
        assert len(registry) == 0

    def test_admit_rejects_non_patient(self, doctor):
        """Test entities that are not patients are rejected."""
        registry = PatientRegistry()

        assert registry.admit("not-a-patient", doctor) is False
        assert registry.admit(Product.create_books("P3", "Novel", 10, 0.4), doctor) is False
        assert len(registry) == 0

    def test_readmission_last_write_wins(self, medical_record, doctor):
        """Test re-admitting an identifier replaces the stored patient."""
        registry = PatientRegistry()
        original = Patient(patient_id="P001", medical_record=medical_record, name="John Doe")
        updated = Patient(patient_id="P001", medical_record=medical_record, name="John Doe", room_number=7)

        registry.admit(original, doctor)
        registry.admit(updated, doctor)

        assert len(registry) == 1
        assert registry.get("P001") is updated
        assert registry.get("P001").room_number == 7

    def test_custom_policy(self, patient, nurse):
        """Test the registry consults the injected policy."""
        registry = PatientRegistry(policy=AccessPolicy({StaffRole.DOCTOR: AccessDecision.ALLOW}))
        assert registry.admit(patient, nurse) is False

    def test_internal_audit(self, medical_record, doctor):
        """Test the audit listing is sorted by identifier."""
        registry = PatientRegistry()
        registry.admit(Patient(patient_id="P002", name="Jane Roe", room_number=3), doctor)
        registry.admit(Patient(patient_id="P001", medical_record=medical_record, name="John Doe"), doctor)

        summaries = registry.internal_audit()
        assert [s.patient_id for s in summaries] == ["P001", "P002"]
        assert summaries[1].room_number == 3

    def test_audit_port_receives_decisions(self, patient, doctor):
        """Test allowed and denied admissions are reported to the audit port."""
        audit = Mock(spec=AdmissionAuditPort)
        registry = PatientRegistry(audit=audit)

        registry.admit(patient, doctor)
        registry.admit(patient, "visitor")
        registry.admit("not-a-patient", doctor)

        assert audit.record_admission.call_count == 2
        audit.record_admission.assert_any_call(
            patient_id="P001", actor_role="doctor", decision="allow", admitted=True
        )
        audit.record_admission.assert_any_call(
            patient_id="P001", actor_role="other", decision="deny", admitted=False
        )

    def test_denied_admission_logged_as_warning(self, patient, caplog):
        """Test rejections are logged at WARNING."""
        registry = PatientRegistry()
        with caplog.at_level(logging.WARNING, logger="src.domain.registry"):
            registry.admit(patient, "visitor")

        assert any("denied" in record.message for record in caplog.records)


class TestProductCatalog:
    """Test suite for the in-memory catalog."""

    def test_add_and_get(self):
        """Test products are stored by identifier."""
        catalog = ProductCatalog()
        laptop = Product.create_electronics("P1", "Laptop", 800, 2.5)
        catalog.add("P1", laptop)

        assert catalog.get("P1") is laptop
        assert catalog.get("P9") is None
        assert len(catalog) == 1

    def test_catalogs_are_independent(self):
        """Test each catalog instance has its own storage."""
        first = ProductCatalog()
        second = ProductCatalog()
        first.add("P1", Product.create_electronics("P1", "Laptop", 800, 2.5))

        assert second.get("P1") is None


class TestProcessOrder:
    """Test suite for the order predicate."""

    def test_valid_order(self):
        """Test an order and a customer are accepted."""
        assert process_order(Order.place("O1"), Customer.register("C1", "user@email.com")) is True

    def test_wrong_types(self):
        """Test anything else is refused."""
        order = Order.place("O1")
        customer = Customer.register("C1", "user@email.com")

        assert process_order("O1", customer) is False
        assert process_order(order, "C1") is False
        assert process_order(customer, order) is False
