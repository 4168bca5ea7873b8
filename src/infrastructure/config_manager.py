"""Configuration Manager for Pricing Rules.

This module loads the caller-supplied pricing configuration: regional
shipping rates, the shipping fallback and per-kg charge, and the bulk
discount step. Tax rates are fixed in the domain and are not configurable.

Architecture:
    - Infrastructure layer; the domain only receives built rule objects
    - Supports environment variables and JSON files
    - Type-safe configuration using Pydantic models
    - Fail-fast validation prevents runtime errors
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator, ValidationError as PydanticValidationError

from src.domain.ports import ConfigurationError, Result
from src.domain.rules import (
    BULK_DISCOUNT_AMOUNT,
    BULK_DISCOUNT_THRESHOLD,
    DEFAULT_PER_KG_RATE,
    DEFAULT_SHIPPING_RATE,
    ShippingCalculator,
    StepRule,
)

logger = logging.getLogger(__name__)

ENV_PREFIX = "GE_"


def parse_rate_string(raw: str) -> Dict[str, float]:
    """Parse a "US=15.0,IN=10.0" style string into a region -> rate map.

    Parameters:
        raw: Comma-separated REGION=RATE pairs (whitespace is ignored)

    Returns:
        Dictionary of region codes to rates

    Raises:
        ValueError: If a pair is malformed or a rate is not a number
    """
    rates: Dict[str, float] = {}
    for pair in raw.split(","):
        pair = pair.strip()
        if not pair:
            continue
        region, sep, rate = pair.partition("=")
        if not sep or not region.strip():
            raise ValueError(f"Malformed shipping rate entry: {pair!r}")
        try:
            rates[region.strip()] = float(rate)
        except ValueError:
            raise ValueError(f"Shipping rate for {region.strip()!r} is not a number: {rate!r}")
    return rates


class PricingConfig(BaseModel):
    """Pricing configuration model.

    Parameters:
        shipping_rates: Region -> base shipping rate (exact region match)
        fallback_shipping_rate: Base rate for regions missing from shipping_rates
        per_kg_rate: Shipping charge per unit of weight
        discount_threshold: Accumulated cart quantity that triggers the discount
        discount_amount: Flat discount applied per cart addition at or above the threshold
    """

    shipping_rates: Dict[str, float] = Field(default_factory=dict, description="Region -> base shipping rate")
    fallback_shipping_rate: float = Field(default=DEFAULT_SHIPPING_RATE, ge=0, description="Rate for unmapped regions")
    per_kg_rate: float = Field(default=DEFAULT_PER_KG_RATE, ge=0, description="Charge per unit of weight")
    discount_threshold: int = Field(default=BULK_DISCOUNT_THRESHOLD, ge=1, description="Bulk discount threshold")
    discount_amount: float = Field(default=BULK_DISCOUNT_AMOUNT, ge=0, description="Bulk discount amount")

    @field_validator("shipping_rates", mode="before")
    @classmethod
    def parse_shipping_rates(cls, v):
        """Accept the "US=15.0,IN=10.0" string form used by environment variables."""
        if v is None:
            return {}
        if isinstance(v, str):
            return parse_rate_string(v)
        return v

    @field_validator("shipping_rates")
    @classmethod
    def validate_rates_non_negative(cls, v: Dict[str, float]) -> Dict[str, float]:
        negative = sorted(region for region, rate in v.items() if rate < 0)
        if negative:
            raise ValueError(f"Shipping rates must be non-negative: {negative}")
        return v

    def shipping_calculator(self) -> ShippingCalculator:
        return ShippingCalculator(
            self.shipping_rates,
            fallback_rate=self.fallback_shipping_rate,
            per_kg_rate=self.per_kg_rate,
        )

    def discount_rule(self) -> StepRule:
        return StepRule(threshold=self.discount_threshold, amount=self.discount_amount)


class ConfigManager:
    """Configuration manager for pricing settings.

    Example Usage:
        ```python
        # Load from environment variables
        config = ConfigManager.from_environment()
        calculator = config.get_pricing_config().shipping_calculator()

        # Load from file
        config = ConfigManager.from_file("pricing.json")
        result = config.load_pricing()
        ```
    """

    def __init__(self, config_data: Dict[str, Any], source: Optional[str] = None):
        """Initialize configuration manager.

        Parameters:
            config_data: Configuration dictionary with an optional "pricing" section
            source: Where the configuration came from (for error messages)
        """
        self._config_data = config_data
        self._source = source
        self._pricing_config: Optional[PricingConfig] = None

    @classmethod
    def from_environment(cls) -> 'ConfigManager':
        """Load configuration from environment variables.

        Environment Variables:
            - GE_SHIPPING_RATES: Region rates, e.g. "US=15.0,IN=10.0"
            - GE_FALLBACK_SHIPPING_RATE: Base rate for unmapped regions
            - GE_PER_KG_RATE: Charge per unit of weight
            - GE_DISCOUNT_THRESHOLD: Bulk discount threshold
            - GE_DISCOUNT_AMOUNT: Bulk discount amount

        Unset variables fall back to the PricingConfig defaults.
        """
        env_keys = {
            "shipping_rates": "SHIPPING_RATES",
            "fallback_shipping_rate": "FALLBACK_SHIPPING_RATE",
            "per_kg_rate": "PER_KG_RATE",
            "discount_threshold": "DISCOUNT_THRESHOLD",
            "discount_amount": "DISCOUNT_AMOUNT",
        }
        pricing = {}
        for field_name, suffix in env_keys.items():
            value = os.getenv(f"{ENV_PREFIX}{suffix}")
            if value is not None and value != "":
                pricing[field_name] = value

        return cls({"pricing": pricing}, source="environment")

    @classmethod
    def from_file(cls, config_path: str) -> 'ConfigManager':
        """Load configuration from a JSON file.

        Parameters:
            config_path: Path to configuration file

        Raises:
            FileNotFoundError: If config file doesn't exist
            ConfigurationError: If config file is not valid JSON
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                config_data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in configuration file: {str(e)}", source=str(config_path))

        if not isinstance(config_data, dict):
            raise ConfigurationError("Configuration file must contain a JSON object", source=str(config_path))

        logger.debug(f"Loaded configuration from {config_path}")
        return cls(config_data, source=str(config_path))

    def get_pricing_config(self) -> PricingConfig:
        """Get pricing configuration.

        Raises:
            ConfigurationError: If the pricing section fails validation
        """
        if self._pricing_config is None:
            pricing_data = self._config_data.get("pricing") or {}
            try:
                self._pricing_config = PricingConfig(**pricing_data)
            except PydanticValidationError as e:
                raise ConfigurationError(
                    f"Invalid pricing configuration: {str(e)}",
                    source=self._source
                ) from e

        return self._pricing_config

    def load_pricing(self) -> Result[PricingConfig]:
        """Get pricing configuration as a Result instead of raising."""
        try:
            return Result.success_result(self.get_pricing_config())
        except ConfigurationError as e:
            logger.error(f"Failed to load pricing configuration from {self._source}: {e}")
            return Result.failure_result(e, error_details={"source": self._source})

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value by key.

        Parameters:
            key: Configuration key (supports dot notation, e.g., "pricing.per_kg_rate")
            default: Default value if key not found
        """
        keys = key.split(".")
        value = self._config_data

        for k in keys:
            if isinstance(value, dict):
                value = value.get(k)
            else:
                return default

        return value if value is not None else default


# ============================================================================
# Convenience Functions
# ============================================================================

def get_pricing_config() -> PricingConfig:
    """Convenience function to get pricing configuration from environment."""
    return ConfigManager.from_environment().get_pricing_config()
