# ==================== UTILS/PRICING.PY ====================
"""Dynamic pricing for parking bookings.

A booking is charged the spot's base rate scaled by two situational
multipliers and by the booked duration::

    total = base_price * demand_factor * time_factor * duration_units

rounded half-up to two decimal places. The demand factor tracks how full
a spot is, the time factor tracks the hour of day (peak/shoulder/off-peak).
"""
import math
from dataclasses import dataclass, asdict
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext

from django.utils import timezone

from .exceptions import InvalidPricingInput

CENTS = Decimal('0.01')

# (occupancy rate strictly above, factor), evaluated top-down
DEMAND_TIERS = (
    (0.90, 2.0),
    (0.70, 1.5),
    (0.50, 1.2),
)
LOW_DEMAND_FACTOR = 1.0

PEAK_FACTOR = 1.5
SHOULDER_FACTOR = 1.3
OFF_PEAK_FACTOR = 0.8


def _to_decimal(value):
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def compute_price(base_price, demand_factor, time_factor, duration_units):
    """Multiply the base rate by both factors and the duration, rounded to cents.

    Inputs are not validated. Non-finite inputs give a non-finite result.
    """
    factors = [_to_decimal(value) for value in
               (base_price, demand_factor, time_factor, duration_units)]
    with localcontext() as ctx:
        ctx.traps[InvalidOperation] = False
        # Enough digits for the exact product
        ctx.prec = max(ctx.prec, sum(len(f.as_tuple().digits) for f in factors))
        total = factors[0] * factors[1] * factors[2] * factors[3]
        if not total.is_finite():
            return total
        # Every integer digit plus the cents
        ctx.prec = max(ctx.prec, total.adjusted() + 3)
        return total.quantize(CENTS, rounding=ROUND_HALF_UP)


def demand_factor(spots_available, total_spots):
    """Multiplier for how full a location is (1.0 - 2.0)."""
    occupancy_rate = (total_spots - spots_available) / total_spots
    for threshold, factor in DEMAND_TIERS:
        if occupancy_rate > threshold:
            return factor
    return LOW_DEMAND_FACTOR


def time_factor(hour):
    """Multiplier for the hour of day (0-23, local clock)."""
    if 9 <= hour <= 17:
        return PEAK_FACTOR
    if 7 <= hour < 9 or 17 < hour <= 19:
        return SHOULDER_FACTOR
    return OFF_PEAK_FACTOR


def current_time_factor(now=None):
    """Time factor for ``now`` (defaults to the current wall clock)."""
    local = timezone.localtime(now) if now is not None else timezone.localtime()
    return time_factor(local.hour)


@dataclass(frozen=True)
class PriceQuote:
    base_price: Decimal
    demand_factor: float
    time_factor: float
    duration_units: Decimal
    total_price: Decimal

    def to_dict(self):
        return asdict(self)


def _check_non_negative(name, value):
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise InvalidPricingInput(f'{name} must be a number')
    if not math.isfinite(number):
        raise InvalidPricingInput(f'{name} must be finite')
    if number < 0:
        raise InvalidPricingInput(f'{name} must not be negative')
    return number


def quote_price(base_price, spots_available, total_spots, hour, duration_units):
    """Validated price quote.

    Raises InvalidPricingInput for negative or non-finite numbers, an empty
    location (total_spots == 0), more free spots than exist, or an hour
    outside 0-23.
    """
    _check_non_negative('base_price', base_price)
    _check_non_negative('duration_units', duration_units)
    available = _check_non_negative('spots_available', spots_available)
    total = _check_non_negative('total_spots', total_spots)
    if total == 0:
        raise InvalidPricingInput('total_spots must be positive')
    if available > total:
        raise InvalidPricingInput('spots_available cannot exceed total_spots')

    try:
        hour = int(hour)
    except (TypeError, ValueError):
        raise InvalidPricingInput('hour must be an integer between 0 and 23')
    if not 0 <= hour <= 23:
        raise InvalidPricingInput('hour must be an integer between 0 and 23')

    demand = demand_factor(available, total)
    time_of_day = time_factor(hour)
    return PriceQuote(
        base_price=_to_decimal(base_price),
        demand_factor=demand,
        time_factor=time_of_day,
        duration_units=_to_decimal(duration_units),
        total_price=compute_price(base_price, demand, time_of_day, duration_units),
    )
