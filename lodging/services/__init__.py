"""
Services package.

Re-exports the service layer so callers can write:
    from lodging.services import BookingService, compute_stay_price
"""

from .pricing_service import (
    MODE_NIGHTLY,
    MODE_YEARLY,
    PricingError,
    InvalidDateRange,
    MissingRateConfiguration,
    NightPrice,
    NightlyResult,
    YearlyResult,
    PricingContext,
    compute_stay_price,
    load_pricing_context,
    display_amount,
    average_nightly_rate,
)
from .availability_service import (
    bookings_overlap,
    filter_available_units,
    find_available_units,
)
from .booking_service import (
    BookingError,
    UnitUnavailable,
    InvalidTransition,
    OutstandingBalance,
    InvalidPayment,
    BookingService,
)
from .dashboard_service import DashboardService, room_status_summary
from .invoice_service import InvoicePDFBuilder
from .contract_service import ContractPDFBuilder
from .import_service import PricingRuleImportService

__all__ = [
    'MODE_NIGHTLY',
    'MODE_YEARLY',
    'PricingError',
    'InvalidDateRange',
    'MissingRateConfiguration',
    'NightPrice',
    'NightlyResult',
    'YearlyResult',
    'PricingContext',
    'compute_stay_price',
    'load_pricing_context',
    'display_amount',
    'average_nightly_rate',
    'bookings_overlap',
    'filter_available_units',
    'find_available_units',
    'BookingError',
    'UnitUnavailable',
    'InvalidTransition',
    'OutstandingBalance',
    'InvalidPayment',
    'BookingService',
    'DashboardService',
    'room_status_summary',
    'InvoicePDFBuilder',
    'ContractPDFBuilder',
    'PricingRuleImportService',
]
