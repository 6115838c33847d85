"""
Senior Citizen and PWD discount engine for grocery checkout.

Implements the statutory checkout treatment for Philippine senior citizens
(RA 9994) and persons with disability (RA 10754):
- 12% VAT exemption on VAT-exemptable items
- 20% discount on discountable items, computed on the net-of-VAT amount
- Regular customers are never discounted, whatever the item flags say

All money is handled as Decimal. Values are rounded to centavos with
ROUND_HALF_UP, once per line after scaling by quantity. Within a line the VAT
and discount are rounded and the net and final amounts are derived from them,
so every line satisfies ``final = original - vat - discount`` exactly.

The functions here are pure: no I/O, no shared state, inputs are never mutated.
"""

import logging
from dataclasses import asdict, dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Dict, Iterable, List, Tuple, Union

logger = logging.getLogger(__name__)

Number = Union[Decimal, int, float, str]

CENTS = Decimal("0.01")
ZERO = Decimal("0.00")

# Current statutory rates, expressed as fractions
DEFAULT_VAT_RATE = Decimal("0.12")
DEFAULT_DISCOUNT_RATE = Decimal("0.20")


class InvalidInputError(ValueError):
    """Raised when a price, quantity, rate or customer type is not acceptable."""


class CustomerType:
    """Customer classification selected by the cashier at checkout."""

    REGULAR = "regular"
    SENIOR = "senior"
    PWD = "pwd"

    CHOICES = [
        (REGULAR, "Regular"),
        (SENIOR, "Senior Citizen"),
        (PWD, "Person with Disability"),
    ]

    VALUES = (REGULAR, SENIOR, PWD)

    @classmethod
    def validate(cls, value: str) -> str:
        if value not in cls.VALUES:
            raise InvalidInputError(
                f"Unknown customer type {value!r}. Expected one of: {', '.join(cls.VALUES)}"
            )
        return value

    @classmethod
    def is_privileged(cls, value: str) -> bool:
        """Senior citizens and PWDs are the only customers entitled to relief."""
        return value in (cls.SENIOR, cls.PWD)


@dataclass(frozen=True)
class LineItem:
    """A cart line as supplied by the catalog lookup."""

    product_id: str
    name: str
    unit_price: Decimal
    quantity: int
    is_discountable: bool = True
    is_vat_exemptable: bool = True


@dataclass(frozen=True)
class ItemDiscountResult:
    """Discount breakdown for a single amount (one unit, or one whole line)."""

    original_price: Decimal
    net_of_vat: Decimal
    vat_amount: Decimal
    discount_amount: Decimal
    final_price: Decimal
    vat_exempt: bool = False
    discount_applied: bool = False

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class LineItemDiscount:
    """Per-line breakdown carried to the receipt and the transaction record."""

    product_id: str
    product_name: str
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    net_of_vat: Decimal
    vat_amount: Decimal
    discount_amount: Decimal
    final_price: Decimal
    vat_exempt: bool
    discount_applied: bool

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class TransactionDiscountResult:
    """Aggregate checkout breakdown. ``items`` keeps the order lines were added."""

    customer_type: str
    subtotal: Decimal
    total_vat_exempt: Decimal
    total_discount_amount: Decimal
    amount_due: Decimal
    items: Tuple[LineItemDiscount, ...] = field(default_factory=tuple)
    discount_rate: Decimal = DEFAULT_DISCOUNT_RATE

    @property
    def discount_label(self) -> str:
        return get_discount_label(self.customer_type, self.discount_rate)

    @property
    def has_relief(self) -> bool:
        return self.total_vat_exempt > ZERO or self.total_discount_amount > ZERO

    def to_dict(self) -> Dict:
        data = asdict(self)
        data["items"] = [item.to_dict() for item in self.items]
        data["discount_label"] = self.discount_label
        return data


def quantize(amount: Decimal) -> Decimal:
    """Round an amount to centavos using ROUND_HALF_UP."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def to_decimal(value: Number, field_name: str = "amount") -> Decimal:
    """
    Convert a price-like value to Decimal.

    Floats go through ``str()`` so that 0.1 becomes Decimal("0.1") rather
    than its binary expansion. Booleans, NaN and infinities are rejected.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidInputError(f"{field_name} must be a number, got {value!r}")

    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError, TypeError):
            raise InvalidInputError(f"{field_name} must be a number, got {value!r}")

    if not result.is_finite():
        raise InvalidInputError(f"{field_name} must be a finite number, got {value!r}")
    return result


def _validate_rates(vat_rate: Number, discount_rate: Number) -> Tuple[Decimal, Decimal]:
    vat = to_decimal(vat_rate, "vat_rate")
    discount = to_decimal(discount_rate, "discount_rate")
    if vat < 0:
        raise InvalidInputError(f"vat_rate cannot be negative, got {vat}")
    if discount < 0 or discount > 1:
        raise InvalidInputError(f"discount_rate must be between 0 and 1, got {discount}")
    return vat, discount


def _validate_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidInputError(f"Quantity must be a whole number, got {quantity!r}")
    if quantity <= 0:
        raise InvalidInputError(f"Quantity must be at least 1, got {quantity}")
    return quantity


def _breakdown(
    amount: Decimal,
    is_discountable: bool,
    is_vat_exemptable: bool,
    customer_type: str,
    vat_rate: Decimal,
    discount_rate: Decimal,
) -> ItemDiscountResult:
    """Apply VAT exemption then discount to an already validated amount."""
    original = quantize(amount)

    if not CustomerType.is_privileged(customer_type) or not (
        is_discountable or is_vat_exemptable
    ):
        return ItemDiscountResult(
            original_price=original,
            net_of_vat=original,
            vat_amount=ZERO,
            discount_amount=ZERO,
            final_price=original,
        )

    vat_amount = ZERO
    net_of_vat = original
    if is_vat_exemptable:
        # Prices are VAT-inclusive: strip VAT by dividing, never by subtracting 12%
        vat_amount = quantize(amount - amount / (1 + vat_rate))
        net_of_vat = original - vat_amount

    discount_amount = ZERO
    if is_discountable:
        discount_amount = quantize(net_of_vat * discount_rate)

    return ItemDiscountResult(
        original_price=original,
        net_of_vat=net_of_vat,
        vat_amount=vat_amount,
        discount_amount=discount_amount,
        final_price=net_of_vat - discount_amount,
        vat_exempt=is_vat_exemptable,
        discount_applied=is_discountable,
    )


def compute_item_discount(
    unit_price: Number,
    is_discountable: bool,
    is_vat_exemptable: bool,
    customer_type: str,
    *,
    vat_rate: Number = DEFAULT_VAT_RATE,
    discount_rate: Number = DEFAULT_DISCOUNT_RATE,
) -> ItemDiscountResult:
    """
    Compute the Senior/PWD treatment of one unit.

    Args:
        unit_price: VAT-inclusive unit price
        is_discountable: Product qualifies for the 20% discount
        is_vat_exemptable: Product qualifies for VAT removal
        customer_type: One of CustomerType.VALUES
        vat_rate: VAT rate as a fraction (default 0.12)
        discount_rate: Discount rate as a fraction (default 0.20)

    Returns:
        ItemDiscountResult with every amount rounded to centavos

    Raises:
        InvalidInputError: If the price is negative or not a number, the
            customer type is unknown, or a rate is out of range

    Examples:
        >>> compute_item_discount("100.00", True, True, CustomerType.SENIOR).final_price
        Decimal('71.43')
    """
    CustomerType.validate(customer_type)
    vat, discount = _validate_rates(vat_rate, discount_rate)
    price = to_decimal(unit_price, "unit_price")
    if price < 0:
        raise InvalidInputError(f"unit_price cannot be negative, got {price}")

    return _breakdown(price, is_discountable, is_vat_exemptable, customer_type, vat, discount)


def compute_transaction_discount(
    items: Iterable[LineItem],
    customer_type: str,
    *,
    vat_rate: Number = DEFAULT_VAT_RATE,
    discount_rate: Number = DEFAULT_DISCOUNT_RATE,
) -> TransactionDiscountResult:
    """
    Compute the Senior/PWD treatment of a whole cart.

    The customer type applies to the whole transaction. Each line is priced
    as ``unit_price * quantity`` and rounded once; the totals are sums of
    the rounded line values, so
    ``amount_due == subtotal - total_vat_exempt - total_discount_amount``.

    Raises:
        InvalidInputError: On any invalid line. Nothing is returned for a
            partially valid cart.
    """
    CustomerType.validate(customer_type)
    vat, discount = _validate_rates(vat_rate, discount_rate)

    subtotal = ZERO
    total_vat_exempt = ZERO
    total_discount_amount = ZERO
    amount_due = ZERO
    processed: List[LineItemDiscount] = []

    for item in items:
        quantity = _validate_quantity(item.quantity)
        unit_price = to_decimal(item.unit_price, f"unit_price for {item.name}")
        if unit_price < 0:
            raise InvalidInputError(f"unit_price for {item.name} cannot be negative")

        line = _breakdown(
            unit_price * quantity,
            item.is_discountable,
            item.is_vat_exemptable,
            customer_type,
            vat,
            discount,
        )

        subtotal += line.original_price
        total_vat_exempt += line.vat_amount
        total_discount_amount += line.discount_amount
        amount_due += line.final_price

        processed.append(
            LineItemDiscount(
                product_id=str(item.product_id),
                product_name=item.name,
                quantity=quantity,
                unit_price=unit_price,
                total_price=line.original_price,
                net_of_vat=line.net_of_vat,
                vat_amount=line.vat_amount,
                discount_amount=line.discount_amount,
                final_price=line.final_price,
                vat_exempt=line.vat_exempt,
                discount_applied=line.discount_applied,
            )
        )

    logger.debug(
        "Computed %s checkout for %d line(s): subtotal=%s vat_exempt=%s discount=%s due=%s",
        customer_type,
        len(processed),
        subtotal,
        total_vat_exempt,
        total_discount_amount,
        amount_due,
    )

    return TransactionDiscountResult(
        customer_type=customer_type,
        subtotal=subtotal,
        total_vat_exempt=total_vat_exempt,
        total_discount_amount=total_discount_amount,
        amount_due=amount_due,
        items=tuple(processed),
        discount_rate=discount,
    )


def get_discount_label(customer_type: str, discount_rate: Number = DEFAULT_DISCOUNT_RATE) -> str:
    """
    Receipt label for the statutory discount line.

    Returns an empty string for regular customers.
    """
    percent = (to_decimal(discount_rate, "discount_rate") * 100).normalize()
    percent_text = f"{percent:f}"
    if customer_type == CustomerType.SENIOR:
        return f"Senior Citizen Discount ({percent_text}%)"
    if customer_type == CustomerType.PWD:
        return f"PWD Discount ({percent_text}%)"
    return ""
