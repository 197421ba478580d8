"""
Custom template filters for lodging app.
"""

from decimal import Decimal, InvalidOperation

from django import template
from django.conf import settings

from lodging.services.pricing_service import display_amount

register = template.Library()


@register.filter
def whole_amount(value):
    """
    Round a price to whole currency units (half-up) for display.

    Usage in template:
        {{ booking.total_price|whole_amount }}
    """
    try:
        return display_amount(Decimal(str(value)))
    except (InvalidOperation, ValueError, TypeError):
        return value


@register.filter
def currency(value, code=None):
    """
    Format an amount with thousands separators and the currency code.

    Usage in template:
        {{ invoice.total_amount|currency }}
        {{ amount|currency:"USD" }}
    """
    code = code or getattr(settings, 'LODGING_CURRENCY', 'SAR')
    try:
        return f"{Decimal(str(value)):,.2f} {code}"
    except (InvalidOperation, ValueError, TypeError):
        return ''

