"""
Views package.

Re-exports all views so URL modules can import from one place:
    from lodging.views import quote_ajax, BookingCreateAPIView
"""

# Mixins
from .mixins import JsonApiMixin, BookingMixin

# Pricing views
from .pricing import (
    quote_ajax,
    availability_ajax,
)

# Booking views
from .bookings import (
    BookingCreateAPIView,
    BookingDetailAPIView,
    BookingPaymentAPIView,
    BookingCheckInAPIView,
    BookingCheckOutAPIView,
    BookingCancelAPIView,
    BookingInvoiceAPIView,
    BookingInvoicePDFView,
    BookingContractPDFView,
)

# Dashboard views
from .dashboard import dashboard_data_ajax

__all__ = [
    'JsonApiMixin',
    'BookingMixin',
    'quote_ajax',
    'availability_ajax',
    'BookingCreateAPIView',
    'BookingDetailAPIView',
    'BookingPaymentAPIView',
    'BookingCheckInAPIView',
    'BookingCheckOutAPIView',
    'BookingCancelAPIView',
    'BookingInvoiceAPIView',
    'BookingInvoicePDFView',
    'BookingContractPDFView',
    'dashboard_data_ajax',
]
