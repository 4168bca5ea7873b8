"""Domain layer for Guarded Entities.

This package contains the validated entities, pricing rules and the access
policy that gates the patient registry. All domain models are pure Python
with no external dependencies beyond Pydantic.

The internal patient summary is deliberately not exported here.
"""

from .access_policy import AccessPolicy
from .clinical import MedicalRecord, Patient, PublicSummary
from .commerce import CartSummary, Customer, Order, PaymentProcessor, Product, ShoppingCart
from .enums import AccessDecision, ProductCategory, StaffRole
from .ports import ConfigurationError, DomainError, ValidationError
from .registry import PatientRegistry, ProductCatalog, process_order
from .rules import RuleTable, ShippingCalculator, StepRule, quantity_discount, tax_rate_for
from .staff import Administrator, Doctor, Nurse

__all__ = [
    "AccessPolicy",
    "AccessDecision",
    "Administrator",
    "ConfigurationError",
    "CartSummary",
    "Customer",
    "Doctor",
    "DomainError",
    "MedicalRecord",
    "Nurse",
    "Order",
    "Patient",
    "PatientRegistry",
    "PaymentProcessor",
    "Product",
    "ProductCatalog",
    "ProductCategory",
    "PublicSummary",
    "RuleTable",
    "ShippingCalculator",
    "ShoppingCart",
    "StaffRole",
    "StepRule",
    "ValidationError",
    "process_order",
    "quantity_discount",
    "tax_rate_for",
]
