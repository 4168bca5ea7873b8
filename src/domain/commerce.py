"""Commerce Entities - Products, Customers, Carts and Orders.

Security Impact:
    - Products are immutable; feature lists and specification maps are held
      as owned tuples and handed out as fresh copies
    - Payment processor keys are stored as SecretStr and never rendered

Architecture:
    - Pure domain models with zero infrastructure dependencies
    - Tax and discount amounts come from the pure rules in src.domain.rules
    - Rejected cart additions return False instead of raising
"""

import logging
from datetime import datetime
from typing import Iterable, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationInfo, field_validator

from src.domain.base import DomainEntity
from src.domain.enums import ProductCategory
from src.domain.ports import Clock, SystemClock
from src.domain.rules import QUANTITY_DISCOUNT, StepRule, tax_rate_for

logger = logging.getLogger(__name__)


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


# (manufacturer, features, specifications) applied by the category factories
_CATEGORY_PRESETS: dict[ProductCategory, tuple[str, tuple[str, ...], dict[str, str]]] = {
    ProductCategory.ELECTRONICS: ("Generic Electronics", ("Warranty", "User Manual"), {"Voltage": "220V"}),
    ProductCategory.CLOTHING: ("Generic Clothing", ("Washable", "Comfort Fit"), {"Material": "Cotton"}),
    ProductCategory.BOOKS: ("Generic Publisher", ("Paperback", "English"), {"Pages": "300"}),
}


class Product(DomainEntity):
    """Immutable catalog product.

    Equality and hashing use the product identifier only.

    Parameters:
        product_id: Product identifier (non-blank)
        name: Display name (non-blank)
        category: Category label (non-blank)
        manufacturer: Manufacturer name (non-blank)
        base_price: Unit price before tax (>= 0)
        weight: Shipping weight (>= 0)
        features: Feature list (optional, copied)
        specifications: Specification key -> value map (optional, copied)
    """

    product_id: str = Field(..., description="Product identifier")
    name: str = Field(..., description="Display name")
    category: str = Field(..., description="Category label")
    manufacturer: str = Field(..., description="Manufacturer name")
    base_price: float = Field(..., ge=0, description="Unit price before tax")
    weight: float = Field(..., ge=0, description="Shipping weight")
    feature_list: tuple[str, ...] = Field(default=(), alias="features", repr=False)
    specification_items: tuple[tuple[str, str], ...] = Field(
        default=(), alias="specifications", repr=False
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @field_validator("product_id", "name", "category", "manufacturer", mode="before")
    @classmethod
    def require_text(cls, v, info: ValidationInfo):
        if _is_blank(v):
            raise ValueError(f"{info.field_name} is required")
        return v

    @field_validator("feature_list", mode="before")
    @classmethod
    def default_features(cls, v):
        return () if v is None else v

    @field_validator("specification_items", mode="before")
    @classmethod
    def freeze_specifications(cls, v):
        if v is None:
            return ()
        if isinstance(v, Mapping):
            return tuple(v.items())
        return v

    @classmethod
    def _from_preset(
        cls,
        category: ProductCategory,
        product_id: str,
        name: str,
        price: float,
        weight: float
    ) -> 'Product':
        manufacturer, features, specifications = _CATEGORY_PRESETS[category]
        return cls(
            product_id=product_id,
            name=name,
            category=category.value,
            manufacturer=manufacturer,
            base_price=price,
            weight=weight,
            features=features,
            specifications=specifications,
        )

    @classmethod
    def create_electronics(cls, product_id: str, name: str, price: float, weight: float) -> 'Product':
        return cls._from_preset(ProductCategory.ELECTRONICS, product_id, name, price, weight)

    @classmethod
    def create_clothing(cls, product_id: str, name: str, price: float, weight: float) -> 'Product':
        return cls._from_preset(ProductCategory.CLOTHING, product_id, name, price, weight)

    @classmethod
    def create_books(cls, product_id: str, name: str, price: float, weight: float) -> 'Product':
        return cls._from_preset(ProductCategory.BOOKS, product_id, name, price, weight)

    @property
    def features(self) -> list[str]:
        """Fresh copy of the feature list."""
        return list(self.feature_list)

    @property
    def specifications(self) -> dict[str, str]:
        """Fresh copy of the specification map."""
        return dict(self.specification_items)

    def calculate_tax(self, region: Optional[str]) -> float:
        """Tax owed on the base price for a region (US 7%, EU 20%, IN 18%, else 10%)."""
        return self.base_price * tax_rate_for(region)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Product):
            return NotImplemented
        return self.product_id == other.product_id

    def __hash__(self) -> int:
        return hash(self.product_id)

    def __str__(self) -> str:
        return f"Product{{{self.name}, category={self.category}, price={self.base_price}}}"


class CustomerProfile(BaseModel):
    """Public customer projection: name and preferred language."""

    name: Optional[str] = None
    preferred_language: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"Customer: {self.name}, Language: {self.preferred_language}"


class Customer(DomainEntity):
    """Store customer with a fixed identity and editable contact details.

    `customer_id`, `email` and `account_created_at` are frozen. Assigning None
    to `name` is ignored; phone number and preferred language accept any value.
    """

    customer_id: str = Field(..., frozen=True, description="Customer identifier")
    email: str = Field(..., frozen=True, description="Account email")
    name: Optional[str] = None
    phone_number: Optional[str] = None
    preferred_language: Optional[str] = None
    account_created_at: datetime = Field(default_factory=datetime.now, frozen=True)

    model_config = ConfigDict(validate_assignment=True)

    @field_validator("customer_id", "email", mode="before")
    @classmethod
    def require_identity(cls, v, info: ValidationInfo):
        if _is_blank(v):
            raise ValueError(f"Required field missing: {info.field_name}")
        return v

    def __setattr__(self, name: str, value) -> None:
        if name == "name" and value is None:
            logger.debug(f"Ignoring empty name update for customer {self.customer_id}")
            return
        super().__setattr__(name, value)

    @classmethod
    def register(
        cls,
        customer_id: str,
        email: str,
        name: Optional[str] = None,
        clock: Optional[Clock] = None
    ) -> 'Customer':
        """Create a customer stamped with the account creation time from `clock`."""
        created_at = (clock or SystemClock()).now()
        return cls(
            customer_id=customer_id,
            email=email,
            name=name,
            account_created_at=created_at,
        )

    def public_profile(self) -> CustomerProfile:
        return CustomerProfile(name=self.name, preferred_language=self.preferred_language)

    def __str__(self) -> str:
        return f"Customer{{{self.customer_id}, name={self.name}}}"


class CartSummary(BaseModel):
    """Snapshot of a cart's running totals."""

    cart_id: str
    item_count: int
    total_amount: float

    model_config = ConfigDict(frozen=True)

    def __str__(self) -> str:
        return f"Cart{{{self.cart_id}, items={self.item_count}, total={self.total_amount}}}"


class ShoppingCart:
    """Cart with a running item count and total.

    The bulk discount is evaluated on every successful `add_item` call using
    the cumulative item count after that call, and subtracted once per call.
    Adding items one call at a time can therefore yield a different running
    total than adding them in a single call.

    Parameters:
        cart_id: Cart identifier
        customer_id: Owning customer identifier
        discount_rule: Step rule applied per call (20.0 from 5 items by default)
    """

    def __init__(
        self,
        cart_id: str,
        customer_id: str,
        discount_rule: StepRule = QUANTITY_DISCOUNT
    ):
        self.cart_id = cart_id
        self.customer_id = customer_id
        self._discount_rule = discount_rule
        self._items: list[Product] = []
        self._item_count = 0
        self._total_amount = 0.0

    def add_item(self, product: object, quantity: int) -> bool:
        """Add `quantity` units of `product`.

        Returns:
            bool: False, with the cart unchanged, if `product` is not a Product
                  or `quantity` is not a positive integer; True otherwise
        """
        if (
            not isinstance(product, Product)
            or isinstance(quantity, bool)
            or not isinstance(quantity, int)
            or quantity <= 0
        ):
            logger.debug(f"Cart {self.cart_id} rejected item {product!r} x {quantity!r}")
            return False

        self._items.extend([product] * quantity)
        self._item_count += quantity
        discount = self._discount_rule.apply(self._item_count)
        self._total_amount += product.base_price * quantity - discount
        return True

    @property
    def item_count(self) -> int:
        return self._item_count

    @property
    def total_amount(self) -> float:
        return self._total_amount

    def items(self) -> list[Product]:
        """Copy of the item list, one entry per unit."""
        return list(self._items)

    def summary(self) -> CartSummary:
        return CartSummary(
            cart_id=self.cart_id,
            item_count=self._item_count,
            total_amount=self._total_amount,
        )


class Order(DomainEntity):
    """Placed order with its placement time."""

    order_id: str
    order_time: datetime = Field(default_factory=datetime.now)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def place(cls, order_id: str, clock: Optional[Clock] = None) -> 'Order':
        return cls(order_id=order_id, order_time=(clock or SystemClock()).now())


class PaymentProcessor(DomainEntity):
    """Mock payment processor: any positive amount succeeds."""

    processor_id: str
    security_key: SecretStr

    model_config = ConfigDict(frozen=True)

    def process_payment(self, amount: float) -> bool:
        approved = amount > 0
        logger.info(
            f"Payment of {amount:.2f} via {self.processor_id}: "
            f"{'approved' if approved else 'declined'}"
        )
        return approved
