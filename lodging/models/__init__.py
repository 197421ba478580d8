"""
Lodging models package.

Re-exports all models so Django migrations and existing imports
continue to work unchanged:
    from lodging.models import UnitType, PricingRule, Booking
"""

# Inventory: unit categories and physical units
from .inventory import (
    UnitType,
    Unit,
)

# Pricing: date-scoped rate rules
from .pricing import (
    PricingRule,
)

# Bookings: stays, payments, invoices
from .bookings import (
    Booking,
    Payment,
    Invoice,
)

__all__ = [
    # Inventory
    'UnitType', 'Unit',
    # Pricing
    'PricingRule',
    # Bookings
    'Booking', 'Payment', 'Invoice',
]
