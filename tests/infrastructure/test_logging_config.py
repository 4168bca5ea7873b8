"""Unit tests for logging configuration."""

import json
import logging

import pytest

from src.domain import Nurse, PatientRegistry, ValidationError
from src.infrastructure.logging_config import StructuredFormatter, configure_from_settings, setup_logging
from src.infrastructure.settings import Settings


@pytest.fixture
def restore_root_logger():
    root_logger = logging.getLogger()
    level = root_logger.level
    yield root_logger
    # Drop only the plain stream handlers installed by setup_logging
    for handler in root_logger.handlers[:]:
        if type(handler) is logging.StreamHandler:
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)


class TestStructuredFormatter:
    """Test suite for the JSON formatter."""

    def test_format(self):
        """Test a record is rendered as a JSON object."""
        record = logging.LogRecord(
            name="src.domain.registry", level=logging.WARNING, pathname=__file__,
            lineno=10, msg="Admission of patient %s denied", args=("P001",), exc_info=None
        )

        data = json.loads(StructuredFormatter().format(record))

        assert data["level"] == "WARNING"
        assert data["logger"] == "src.domain.registry"
        assert data["message"] == "Admission of patient P001 denied"
        assert data["line"] == 10
        assert "timestamp" in data

    def test_context_fields(self):
        """Test domain context attributes are added when present."""
        record = logging.LogRecord(
            name="src.domain.registry", level=logging.INFO, pathname=__file__,
            lineno=1, msg="admitted", args=(), exc_info=None
        )
        record.patient_id = "P001"
        record.actor_role = "doctor"
        record.decision = "allow"

        data = json.loads(StructuredFormatter().format(record))

        assert data["patient_id"] == "P001"
        assert data["actor_role"] == "doctor"
        assert data["decision"] == "allow"
        assert "entity" not in data

    def test_registry_records_carry_context(self, patient, caplog):
        """Test registry decisions attach patient, role and decision to the record."""
        registry = PatientRegistry()
        with caplog.at_level(logging.WARNING, logger="src.domain.registry"):
            registry.admit(patient, "visitor")

        data = json.loads(StructuredFormatter().format(caplog.records[-1]))
        assert data["patient_id"] == "P001"
        assert data["actor_role"] == "other"
        assert data["decision"] == "deny"

    def test_validation_records_carry_entity_and_field(self, caplog):
        """Test rejected construction logs the entity and failing field."""
        with caplog.at_level(logging.DEBUG, logger="src.domain.base"):
            with pytest.raises(ValidationError):
                Nurse(nurse_id="N1")

        data = json.loads(StructuredFormatter().format(caplog.records[-1]))
        assert data["entity"] == "Nurse"
        assert data["field"] == "shift"


class TestSetupLogging:
    """Test suite for setup_logging."""

    def test_human_readable(self, restore_root_logger):
        """Test the default handler uses a plain formatter."""
        setup_logging(log_level="debug")

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert not isinstance(restore_root_logger.handlers[0].formatter, StructuredFormatter)

    def test_json(self, restore_root_logger):
        """Test JSON output installs the structured formatter."""
        setup_logging(use_json=True, log_level="WARNING")

        assert restore_root_logger.level == logging.WARNING
        assert isinstance(restore_root_logger.handlers[0].formatter, StructuredFormatter)

    def test_unknown_level_defaults_to_info(self, restore_root_logger):
        """Test an unrecognized level name falls back to INFO."""
        setup_logging(log_level="LOUD")
        assert restore_root_logger.level == logging.INFO

    def test_configure_from_settings(self, restore_root_logger, monkeypatch):
        """Test the level and format come from the settings."""
        monkeypatch.setenv("GE_LOG_LEVEL", "ERROR")
        monkeypatch.setenv("GE_LOG_JSON", "true")

        level = configure_from_settings(Settings())

        assert level == logging.ERROR
        assert restore_root_logger.level == logging.ERROR
        assert isinstance(restore_root_logger.handlers[0].formatter, StructuredFormatter)

    def test_configure_from_settings_verbose(self, restore_root_logger, monkeypatch):
        """Test verbose mode forces DEBUG."""
        monkeypatch.setenv("GE_LOG_LEVEL", "ERROR")

        assert configure_from_settings(Settings(), verbose=True) == logging.DEBUG
