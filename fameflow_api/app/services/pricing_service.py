"""
Pricing engine and money helpers.

Every charge in the system is ``quantity × rate[service]``, whether the
customer picked a catalog tier or typed a custom quantity.  The inverse,
used when a customer enters a budget, floors the quantity so the budget
is never exceeded.  The engine performs no bounds checks; callers reject
non-positive quantities and budgets first.

Money is handled as ``Decimal`` and persisted as integer minor units
(hundredths) so that balance comparisons in SQL are exact.
"""

from decimal import ROUND_FLOOR, Decimal, InvalidOperation
from typing import Dict

from ..core.errors import InvalidInput
from ..schemas.catalog import ServiceType

RATES: Dict[ServiceType, Decimal] = {
    ServiceType.FOLLOWERS: Decimal("0.75"),
    ServiceType.VIEWS: Decimal("0.10"),
    ServiceType.LIKES: Decimal("0.40"),
}

MINOR_UNITS = 100
CENT = Decimal("0.01")
# Largest value an SQLite INTEGER column holds; money and quantities must fit
MAX_MINOR_UNITS = 2**63 - 1


def to_minor_units(amount: Decimal) -> int:
    """Convert a currency amount to integer hundredths.

    Raises ``InvalidInput`` for values with more than two decimal places,
    that are not finite numbers, or whose minor units do not fit in
    ``MAX_MINOR_UNITS``.
    """
    if isinstance(amount, bool):
        raise InvalidInput(f"Invalid amount: {amount!r}")
    try:
        # str() keeps floats such as 0.1 at their shortest decimal form
        value = Decimal(str(amount)) if isinstance(amount, float) else Decimal(amount)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidInput(f"Invalid amount: {amount!r}")
    if not value.is_finite():
        raise InvalidInput(f"Invalid amount: {amount!r}")
    minor = value * MINOR_UNITS
    if minor != minor.to_integral_value():
        raise InvalidInput("Amounts may have at most two decimal places")
    if abs(minor) > MAX_MINOR_UNITS:
        raise InvalidInput("Amount is too large")
    return int(minor)


def from_minor_units(minor: int) -> Decimal:
    return (Decimal(minor) / MINOR_UNITS).quantize(CENT)


class PricingService:
    """Converts between quantities and prices using the fixed rate table."""

    @classmethod
    def rate(cls, service: ServiceType) -> Decimal:
        return RATES[ServiceType(service)]

    @classmethod
    def price_for_quantity(cls, service: ServiceType, quantity: int) -> Decimal:
        """Return ``quantity × rate[service]``, e.g. 500 followers cost 375.00."""
        return (cls.rate(service) * quantity).quantize(CENT)

    @classmethod
    def quantity_for_budget(cls, service: ServiceType, budget: Decimal) -> int:
        """Return the largest quantity whose price does not exceed ``budget``."""
        units = (Decimal(budget) / cls.rate(service)).to_integral_value(rounding=ROUND_FLOOR)
        return int(units)

    @classmethod
    def rates(cls) -> Dict[ServiceType, Decimal]:
        return dict(RATES)
