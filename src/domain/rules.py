"""Pricing Rules - Rule Tables and Step Functions.

Rules are pure functions of their inputs: no I/O, no clock, no shared mutable
state. Two shapes are supported:

    RuleTable   - a fixed key -> rate mapping with an explicit default for
                  unmapped keys (region tax rates, regional shipping rates)
    StepRule    - a flat amount once a quantity threshold is reached
                  (bulk discount)

Example Usage:
    ```python
    tax = product.base_price * tax_rate_for("eu")          # 0.20 * price
    shipping = ShippingCalculator({"US": 15.0}).calculate_shipping("FR", 1.0)  # 10.5
    ```
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional


class RuleTable:
    """Fixed mapping from a region-like key to a numeric rate.

    The mapping is copied at construction and cannot be modified afterwards.
    Absent keys, including None, resolve to `default`.

    Parameters:
        rates: Key -> rate mapping
        default: Rate returned for unmapped keys
        case_insensitive: Fold keys to upper case on both insert and lookup
    """

    def __init__(
        self,
        rates: Mapping[str, float],
        default: float,
        case_insensitive: bool = False
    ):
        self._case_insensitive = case_insensitive
        self._rates = MappingProxyType(
            {self._normalize(key): float(rate) for key, rate in rates.items()}
        )
        self.default = float(default)

    def _normalize(self, key: str) -> str:
        return key.upper() if self._case_insensitive else key

    def lookup(self, key: Optional[str]) -> float:
        """Return the rate for `key`, or the default when it is unmapped."""
        if key is None:
            return self.default
        return self._rates.get(self._normalize(key), self.default)

    @property
    def rates(self) -> dict[str, float]:
        """Copy of the configured key -> rate mapping."""
        return dict(self._rates)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self._normalize(key) in self._rates

    def __repr__(self) -> str:
        return f"RuleTable(rates={dict(self._rates)!r}, default={self.default!r})"


@dataclass(frozen=True)
class StepRule:
    """Flat amount granted once an accumulated quantity reaches a threshold.

    Attributes:
        threshold: Minimum accumulated quantity that triggers the amount
        amount: Flat amount returned at or above the threshold
    """
    threshold: int
    amount: float

    def apply(self, quantity: int) -> float:
        return self.amount if quantity >= self.threshold else 0.0


# ============================================================================
# Tax
# ============================================================================

DEFAULT_TAX_RATE = 0.10

TAX_RATES = RuleTable(
    {"US": 0.07, "EU": 0.20, "IN": 0.18},
    default=DEFAULT_TAX_RATE,
    case_insensitive=True,
)


def tax_rate_for(region: Optional[str]) -> float:
    """Tax rate for a region code, case-insensitive; 0.10 when unmapped or None."""
    return TAX_RATES.lookup(region)


# ============================================================================
# Discount
# ============================================================================

BULK_DISCOUNT_THRESHOLD = 5
BULK_DISCOUNT_AMOUNT = 20.0

QUANTITY_DISCOUNT = StepRule(threshold=BULK_DISCOUNT_THRESHOLD, amount=BULK_DISCOUNT_AMOUNT)


def quantity_discount(accumulated_quantity: int) -> float:
    """Flat bulk discount for an accumulated cart quantity (20.0 from 5 units)."""
    return QUANTITY_DISCOUNT.apply(accumulated_quantity)


# ============================================================================
# Shipping
# ============================================================================

DEFAULT_SHIPPING_RATE = 10.0
DEFAULT_PER_KG_RATE = 0.5


class ShippingCalculator:
    """Regional shipping cost: base rate for the region plus a per-kg charge.

    Region lookup is exact (no case folding). Regions missing from the
    caller-supplied table use `fallback_rate`.

    Parameters:
        rates: Region -> base shipping rate, copied at construction
        fallback_rate: Base rate for unmapped regions
        per_kg_rate: Charge per unit of weight
    """

    def __init__(
        self,
        rates: Mapping[str, float],
        fallback_rate: float = DEFAULT_SHIPPING_RATE,
        per_kg_rate: float = DEFAULT_PER_KG_RATE
    ):
        self._table = RuleTable(rates, default=fallback_rate)
        self.per_kg_rate = per_kg_rate

    @property
    def rates(self) -> dict[str, float]:
        return self._table.rates

    def calculate_shipping(self, region: Optional[str], weight: float) -> float:
        """Shipping cost for `weight` delivered to `region`."""
        return self._table.lookup(region) + weight * self.per_kg_rate
