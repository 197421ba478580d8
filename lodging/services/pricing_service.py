"""
Stay Price Calculation
======================

Pure pricing engine for nightly stays and yearly contracts.

Calculation Flow (nightly):
1. Enumerate every night in [start_date, end_date)
2. Night price = unit type daily price
3. Highest-precedence active rule covering the night replaces it
   (priority, then narrowest window, then first given)
4. Total = sum of night prices (no rounding)

Calculation Flow (yearly):
1. Monthly rate = annual price / 12
2. Total = annual price × months / 12
3. End date = start date + months; nights are informational only

Usage:
    from lodging.services import load_pricing_context

    context = load_pricing_context(unit_type)
    result = context.compute(date(2025, 3, 1), date(2025, 3, 4))

    print(result.total_price, result.nights)
    for night in result.breakdown:
        print(night.date, night.price, night.is_season)
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from datetime import date, timedelta
from typing import Optional, Sequence, Tuple, Union

from dateutil.relativedelta import relativedelta

MODE_NIGHTLY = 'nightly'
MODE_YEARLY = 'yearly'

MONTHS_PER_YEAR = Decimal('12')
MAX_CONTRACT_MONTHS = 60


class PricingError(Exception):
    """Base class for price calculation failures."""


class InvalidDateRange(PricingError):
    """Raised when the stay does not end strictly after it starts."""


class MissingRateConfiguration(PricingError):
    """Raised when a yearly price is requested for a type with no annual rate."""


@dataclass(frozen=True)
class NightPrice:
    """One line of a breakdown."""
    date: date
    price: Decimal
    is_season: bool
    rule_name: Optional[str] = None

    def as_dict(self):
        return {
            'date': self.date.isoformat(),
            'price': str(self.price),
            'is_season': self.is_season,
            'rule': self.rule_name,
        }


@dataclass(frozen=True)
class NightlyResult:
    """Per-night priced stay."""
    start_date: date
    end_date: date
    base_price: Decimal
    per_night: Tuple[NightPrice, ...]

    mode = MODE_NIGHTLY

    @property
    def nights(self):
        return (self.end_date - self.start_date).days

    @property
    def total_price(self):
        return sum((night.price for night in self.per_night), Decimal('0'))

    @property
    def breakdown(self):
        return self.per_night

    @property
    def season_nights(self):
        return sum(1 for night in self.per_night if night.is_season)

    def as_dict(self):
        return _result_dict(self)


@dataclass(frozen=True)
class YearlyResult:
    """Contract priced from the annual rate, independent of calendar days."""
    start_date: date
    end_date: date
    annual_price: Decimal
    months: int

    mode = MODE_YEARLY

    @property
    def monthly_rate(self):
        return self.annual_price / MONTHS_PER_YEAR

    @property
    def total_price(self):
        return self.annual_price * self.months / MONTHS_PER_YEAR

    @property
    def base_price(self):
        return self.annual_price

    @property
    def nights(self):
        return (self.end_date - self.start_date).days

    @property
    def breakdown(self):
        # Single placeholder line so callers can treat both modes alike
        return (NightPrice(date=self.start_date, price=self.total_price, is_season=False),)

    def as_dict(self):
        data = _result_dict(self)
        data['monthly_rate'] = str(self.monthly_rate)
        data['months'] = self.months
        return data


PriceCalculation = Union[NightlyResult, YearlyResult]


def _result_dict(result):
    return {
        'mode': result.mode,
        'start_date': result.start_date.isoformat(),
        'end_date': result.end_date.isoformat(),
        'total_price': str(result.total_price),
        'base_price': str(result.base_price) if result.base_price is not None else None,
        'nights': result.nights,
        'breakdown': [night.as_dict() for night in result.breakdown],
    }


# =============================================================================
# RULE SELECTION
# =============================================================================

def active_rules_for(unit_type, rules):
    """Keep only active rules that apply to the unit type, preserving order."""
    return tuple(
        rule for rule in rules
        if rule.active is True and rule.applies_to_unit_type(unit_type)
    )


def select_rule_for_date(rules, check_date):
    """
    Pick the rule that prices a given night.

    Args:
        rules: sequence of active rules (order is the final tie-break)
        check_date: date of the night

    Returns:
        PricingRule or None
    """
    best = None
    best_key = None

    for position, rule in enumerate(rules):
        if not rule.covers_date(check_date):
            continue
        key = (-rule.priority, rule.window_days, position)
        if best_key is None or key < best_key:
            best, best_key = rule, key

    return best


def iter_nights(start_date, end_date):
    """Generator yielding every night in [start_date, end_date)."""
    current = start_date
    while current < end_date:
        yield current
        current += timedelta(days=1)


# =============================================================================
# CALCULATION
# =============================================================================

def calculate_nightly(unit_type, rules, start_date, end_date):
    """Price every night of a stay from the daily rate and pricing rules."""
    if end_date is None or end_date <= start_date:
        raise InvalidDateRange("Check-out date must be after check-in date")

    base_price = unit_type.daily_price
    default_price = base_price if base_price is not None else Decimal('0.00')
    applicable = active_rules_for(unit_type, rules)

    lines = []
    for night in iter_nights(start_date, end_date):
        rule = select_rule_for_date(applicable, night)
        if rule is None:
            lines.append(NightPrice(date=night, price=default_price, is_season=False))
        else:
            lines.append(NightPrice(
                date=night,
                price=rule.calculate_nightly_price(default_price),
                is_season=True,
                rule_name=rule.name,
            ))

    return NightlyResult(
        start_date=start_date,
        end_date=end_date,
        base_price=base_price,
        per_night=tuple(lines),
    )


def calculate_yearly(unit_type, start_date, duration_months):
    """Price a contract of duration_months from the unit type's annual rate."""
    if isinstance(duration_months, bool) or not isinstance(duration_months, int) or duration_months < 1:
        raise InvalidDateRange("Contract duration must be at least one month")
    if duration_months > MAX_CONTRACT_MONTHS:
        raise InvalidDateRange(f"Contract duration cannot exceed {MAX_CONTRACT_MONTHS} months")

    annual_price = unit_type.annual_price
    if not annual_price or annual_price <= 0:
        raise MissingRateConfiguration(f"No annual price is configured for {unit_type}")

    return YearlyResult(
        start_date=start_date,
        end_date=start_date + relativedelta(months=duration_months),
        annual_price=annual_price,
        months=duration_months,
    )


def compute_stay_price(unit_type, rules, start_date, end_date=None,
                       mode=MODE_NIGHTLY, duration_months=None):
    """
    Compute the price of a stay.

    Args:
        unit_type: object with daily_price / annual_price (UnitType)
        rules: iterable of PricingRule; inactive ones are ignored
        start_date: check-in date
        end_date: check-out date (exclusive). Derived in yearly mode.
        mode: 'nightly' or 'yearly'
        duration_months: contract length, required in yearly mode

    Returns:
        NightlyResult or YearlyResult

    Raises:
        InvalidDateRange: check-out not after check-in, or bad duration
        MissingRateConfiguration: yearly mode without an annual price
    """
    if mode == MODE_YEARLY:
        return calculate_yearly(unit_type, start_date, duration_months)
    if mode != MODE_NIGHTLY:
        raise ValueError(f"Unknown pricing mode: {mode}")
    return calculate_nightly(unit_type, list(rules), start_date, end_date)


# =============================================================================
# CONTEXT
# =============================================================================

@dataclass(frozen=True)
class PricingContext:
    """Immutable snapshot of a unit type and the rules that may price it."""
    unit_type: object
    rules: Tuple[object, ...]

    def compute(self, start_date, end_date=None, mode=MODE_NIGHTLY, duration_months=None):
        return compute_stay_price(
            self.unit_type, self.rules, start_date, end_date,
            mode=mode, duration_months=duration_months,
        )


def load_pricing_context(unit_type, rules: Optional[Sequence] = None):
    """
    Fetch the active rules for a unit type once.

    Rules without a unit type apply to every type.
    """
    if rules is None:
        from django.db.models import Q
        from lodging.models import PricingRule

        rules = PricingRule.objects.filter(
            Q(unit_type=unit_type) | Q(unit_type__isnull=True),
            active=True,
        ).order_by('id')

    return PricingContext(
        unit_type=unit_type,
        rules=active_rules_for(unit_type, rules),
    )


# =============================================================================
# DISPLAY HELPERS
# =============================================================================

def display_amount(value):
    """Round to whole currency units for display. Never use for totals."""
    if value is None:
        return None
    return Decimal(value).quantize(Decimal('1'), rounding=ROUND_HALF_UP)


def average_nightly_rate(result):
    """Average price per night, unrounded."""
    if not result.nights:
        return Decimal('0.00')
    return result.total_price / result.nights
