"""Unit tests for pricing rules."""

import pytest

from src.domain import RuleTable, ShippingCalculator, StepRule, quantity_discount, tax_rate_for


class TestRuleTable:
    """Test suite for RuleTable lookups."""

    def test_lookup_mapped_key(self):
        """Test lookup of a configured key."""
        table = RuleTable({"US": 15.0}, default=10.0)
        assert table.lookup("US") == 15.0

    def test_lookup_default(self):
        """Test unmapped and None keys use the default."""
        table = RuleTable({"US": 15.0}, default=10.0)
        assert table.lookup("FR") == 10.0
        assert table.lookup(None) == 10.0

    def test_exact_match_by_default(self):
        """Test keys are case-sensitive unless folding is requested."""
        table = RuleTable({"US": 15.0}, default=10.0)
        assert table.lookup("us") == 10.0
        assert "us" not in table
        assert "US" in table

    def test_case_insensitive(self):
        """Test case folding on insert and lookup."""
        table = RuleTable({"us": 0.07}, default=0.10, case_insensitive=True)
        assert table.lookup("US") == 0.07
        assert table.lookup("Us") == 0.07

    def test_rates_copied_at_construction(self):
        """Test later changes to the source mapping are not observed."""
        source = {"US": 15.0}
        table = RuleTable(source, default=10.0)
        source["US"] = 99.0
        source["IN"] = 1.0

        assert table.lookup("US") == 15.0
        assert table.lookup("IN") == 10.0

    def test_rates_property_is_copy(self):
        """Test the rates accessor returns an independent dict."""
        table = RuleTable({"US": 15.0}, default=10.0)
        rates = table.rates
        rates["US"] = 0.0
        assert table.rates == {"US": 15.0}


class TestTaxRates:
    """Test suite for region tax rates."""

    @pytest.mark.parametrize("region,rate", [
        ("US", 0.07), ("us", 0.07), ("Us", 0.07),
        ("EU", 0.20), ("IN", 0.18),
        ("XX", 0.10), ("", 0.10), (None, 0.10),
    ])
    def test_tax_rate_for(self, region, rate):
        """Test mapped, unmapped and missing regions."""
        assert tax_rate_for(region) == rate


class TestQuantityDiscount:
    """Test suite for the bulk discount step."""

    @pytest.mark.parametrize("quantity,discount", [(0, 0.0), (4, 0.0), (5, 20.0), (12, 20.0)])
    def test_quantity_discount(self, quantity, discount):
        """Test the discount switches on at five units."""
        assert quantity_discount(quantity) == discount

    def test_custom_step_rule(self):
        """Test a step rule with a custom threshold and amount."""
        rule = StepRule(threshold=10, amount=5.0)
        assert rule.apply(9) == 0.0
        assert rule.apply(10) == 5.0


class TestShippingCalculator:
    """Test suite for regional shipping cost."""

    def test_mapped_region(self):
        """Test base rate plus per-kg charge for a mapped region."""
        calculator = ShippingCalculator({"US": 15.0, "IN": 10.0})
        assert calculator.calculate_shipping("IN", 2.5) == pytest.approx(11.25)
        assert calculator.calculate_shipping("US", 2.0) == pytest.approx(16.0)

    def test_unmapped_region_uses_fallback(self):
        """Test unmapped regions use the 10.0 fallback."""
        calculator = ShippingCalculator({"US": 15.0, "IN": 10.0})
        assert calculator.calculate_shipping("FR", 0) == 10.0
        assert calculator.calculate_shipping(None, 0) == 10.0

    def test_region_match_is_exact(self):
        """Test that shipping lookup does not fold case."""
        calculator = ShippingCalculator({"US": 15.0})
        assert calculator.calculate_shipping("us", 0) == 10.0

    def test_rates_copied_at_construction(self):
        """Test later changes to the caller's mapping are not observed."""
        rates = {"US": 15.0}
        calculator = ShippingCalculator(rates)
        rates["US"] = 1.0

        assert calculator.calculate_shipping("US", 0) == 15.0
        assert calculator.rates == {"US": 15.0}

    def test_custom_fallback_and_per_kg(self):
        """Test overriding the fallback rate and per-kg charge."""
        calculator = ShippingCalculator({}, fallback_rate=4.0, per_kg_rate=1.5)
        assert calculator.calculate_shipping("FR", 2.0) == pytest.approx(7.0)
