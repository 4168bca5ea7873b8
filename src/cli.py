"""Command Line Interface for Guarded Entities.

This module provides a CLI using Typer for exercising the validated entities
and pricing/access rules: end-to-end hospital and shop walkthroughs, and
tax and shipping quotes driven by the pricing configuration.
"""

from datetime import date
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from src.domain import (
    Administrator,
    Customer,
    Doctor,
    MedicalRecord,
    Nurse,
    Order,
    Patient,
    PatientRegistry,
    PaymentProcessor,
    Product,
    ProductCatalog,
    ShoppingCart,
    ValidationError,
    process_order,
)
from src.domain.ports import ConfigurationError
from src.infrastructure.audit import AdmissionAuditLogger
from src.infrastructure.config_manager import ConfigManager
from src.infrastructure.logging_config import configure_from_settings
from src.infrastructure.settings import APP_VERSION, settings

# Initialize Typer app and Rich console
app = typer.Typer(
    name="guarded",
    help="Guarded Entities: validated entities with pricing and access rules",
    add_completion=False
)
console = Console()

# Shipping rates used by the shop walkthrough when none are configured
DEMO_SHIPPING_RATES = {"US": 15.0, "IN": 10.0}


def _load_config_manager(config: Optional[Path]) -> ConfigManager:
    try:
        if config is not None:
            return ConfigManager.from_file(str(config))
        return settings.config_manager
    except (FileNotFoundError, ConfigurationError) as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(code=1)


@app.command("hospital-demo")
def hospital_demo(
    session: Optional[str] = typer.Option(None, "--session", "-s", help="Session identifier attached to audit entries"),
) -> None:
    """Admit a transferred patient and run an internal registry audit."""
    record = MedicalRecord(
        record_id="R001",
        patient_dna="DNA-XYZ",
        allergies=["Peanuts"],
        medical_history=["Asthma"],
        birth_date=date(1990, 5, 15),
        blood_type="O+",
    )
    patient = Patient.transfer_admission(record, "John Doe")

    doctor = Doctor(license_number="LIC123", specialty="Cardiology", certifications={"BoardCertified"})
    nurse = Nurse(nurse_id="NUR456", shift="Night", qualifications=["ICU Certified"])
    admin = Administrator(admin_id="ADM789", access_permissions=["AllAccess"])

    audit = AdmissionAuditLogger()
    audit.set_session_context(session)
    registry = PatientRegistry(audit=audit)

    console.print("\n[bold blue]Hospital Walkthrough[/bold blue]")
    console.print(f"[dim]Staff on duty:[/dim] {escape(str(doctor))}, {escape(str(nurse))}, {escape(str(admin))}")
    console.print(f"Admit patient by doctor: {registry.admit(patient, doctor)}")
    console.print(f"Admit patient by visitor: {registry.admit(patient, 'visitor')}")
    console.print(f"Public info: {escape(str(patient.public_summary()))}")
    console.print(f"Allergic to Peanuts? {record.is_allergic_to('Peanuts')}")

    audit_table = Table(title="Internal Audit")
    audit_table.add_column("Patient ID")
    audit_table.add_column("Name")
    audit_table.add_column("Room", justify="right")
    for summary in registry.internal_audit():
        audit_table.add_row(summary.patient_id, summary.name, str(summary.room_number))
    console.print(audit_table)

    log_table = Table(title=f"Admission Log ({audit.get_log_count()} attempts)")
    log_table.add_column("Patient ID")
    log_table.add_column("Role")
    log_table.add_column("Decision")
    log_table.add_column("Session")
    for entry in audit.get_logs():
        log_table.add_row(entry["patient_id"], entry["actor_role"], entry["decision"], escape(entry["session_id"] or "-"))
    console.print(log_table)
    console.print(f"Denied admissions: {len(audit.get_denied())}")

    audit.log_registry_keys(registry.patient_ids())


@app.command("shop-demo")
def shop_demo(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Pricing configuration file (JSON)", exists=True),
) -> None:
    """Fill a cart, take a payment and quote shipping for an order."""
    pricing_result = _load_config_manager(config).load_pricing()
    if pricing_result.is_failure():
        console.print(f"[red]✗[/red] {escape(pricing_result.error or '')}")
        raise typer.Exit(code=1)
    pricing = pricing_result.value

    laptop = Product.create_electronics("P1", "Laptop", 800, 2.5)
    tshirt = Product.create_clothing("P2", "T-Shirt", 20, 0.3)

    customer = Customer.register("C1", "user@email.com", "Alice")
    customer.preferred_language = "English"

    cart = ShoppingCart("Cart1", customer.customer_id, discount_rule=pricing.discount_rule())
    cart.add_item(laptop, 1)
    cart.add_item(tshirt, 3)

    order = Order.place("O1")
    processor = PaymentProcessor(processor_id="Pay1", security_key="SEC123")

    rates = pricing.shipping_rates or DEMO_SHIPPING_RATES
    calculator = pricing.model_copy(update={"shipping_rates": rates}).shipping_calculator()

    catalog = ProductCatalog()
    catalog.add(laptop.product_id, laptop)

    console.print("\n[bold blue]Shop Walkthrough[/bold blue]")
    console.print(escape(str(customer.public_profile())))
    console.print(escape(str(cart.summary())))
    console.print(f"Order accepted: {process_order(order, customer)}")
    console.print(f"Payment success: {processor.process_payment(cart.total_amount)}")
    console.print(f"Shipping cost: {calculator.calculate_shipping('IN', laptop.weight):.2f}")
    console.print(f"Catalog Product: {escape(str(catalog.get('P1')))}")


@app.command()
def tax(
    region: str = typer.Argument(..., help="Region code (US, EU, IN; anything else uses the default rate)"),
    price: float = typer.Argument(..., help="Base price"),
) -> None:
    """Quote the tax owed on a base price in a region."""
    try:
        product = Product(
            product_id="quote",
            name="Quote",
            category="Quote",
            manufacturer="n/a",
            base_price=price,
            weight=0,
        )
    except ValidationError as e:
        console.print(f"[red]✗[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    console.print(f"Tax for {escape(region)}: {product.calculate_tax(region):.2f}")


@app.command()
def shipping(
    region: str = typer.Argument(..., help="Destination region code (exact match)"),
    weight: float = typer.Argument(..., help="Shipment weight"),
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Pricing configuration file (JSON)", exists=True),
) -> None:
    """Quote the shipping cost for a shipment."""
    pricing_result = _load_config_manager(config).load_pricing()
    if pricing_result.is_failure():
        console.print(f"[red]✗[/red] {escape(pricing_result.error or '')}")
        raise typer.Exit(code=1)

    calculator = pricing_result.value.shipping_calculator()
    console.print(f"Shipping to {escape(region)}: {calculator.calculate_shipping(region, weight):.2f}")


@app.command()
def info() -> None:
    """Display configuration."""
    console.print("[bold blue]System Information[/bold blue]\n")

    pricing_result = _load_config_manager(None).load_pricing()

    info_table = Table(show_header=False, box=None, padding=(0, 2))
    info_table.add_row("Application:", settings.app_name)
    info_table.add_row("Log Level:", settings.log_level)
    info_table.add_row("Config File:", settings.config_file or "(environment)")
    if pricing_result.is_success():
        pricing = pricing_result.value
        info_table.add_row("Shipping Rates:", escape(str(pricing.shipping_rates or {})))
        info_table.add_row("Fallback Shipping Rate:", f"{pricing.fallback_shipping_rate:.2f}")
        info_table.add_row("Per-kg Rate:", f"{pricing.per_kg_rate:.2f}")
        info_table.add_row("Bulk Discount:", f"{pricing.discount_amount:.2f} from {pricing.discount_threshold} items")
    else:
        info_table.add_row("Pricing:", f"[red]{escape(pricing_result.error or '')}[/red]")

    console.print(info_table)


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version information"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    """Guarded Entities: validated entities with pricing and access rules."""
    if version:
        console.print(f"Guarded Entities v{APP_VERSION}")
        raise typer.Exit()
    configure_from_settings(settings, verbose=verbose)
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit()


if __name__ == "__main__":
    app()
