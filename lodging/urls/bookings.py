"""Booking URL patterns: creation, lifecycle actions, invoices and contracts."""

from django.urls import path
from lodging.views import (
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

urlpatterns = [
    path('api/bookings/',
         BookingCreateAPIView.as_view(), name='booking_create'),
    path('api/bookings/<int:booking_id>/',
         BookingDetailAPIView.as_view(), name='booking_detail'),

    # Lifecycle actions
    path('api/bookings/<int:booking_id>/payments/',
         BookingPaymentAPIView.as_view(), name='booking_payments'),
    path('api/bookings/<int:booking_id>/check-in/',
         BookingCheckInAPIView.as_view(), name='booking_check_in'),
    path('api/bookings/<int:booking_id>/check-out/',
         BookingCheckOutAPIView.as_view(), name='booking_check_out'),
    path('api/bookings/<int:booking_id>/cancel/',
         BookingCancelAPIView.as_view(), name='booking_cancel'),
    path('api/bookings/<int:booking_id>/invoice/',
         BookingInvoiceAPIView.as_view(), name='booking_invoice'),

    # Printable documents
    path('bookings/<int:booking_id>/invoice.pdf',
         BookingInvoicePDFView.as_view(), name='booking_invoice_pdf'),
    path('bookings/<int:booking_id>/contract.pdf',
         BookingContractPDFView.as_view(), name='booking_contract_pdf'),
]
