"""
Booking views: creation, balance, payments, status changes and invoices.
"""

import logging

from django.http import Http404, HttpResponse
from django.utils import timezone
from django.views import View

from lodging.models import Booking, Unit, UnitType
from lodging.services import (
    BookingError,
    BookingService,
    ContractPDFBuilder,
    InvoicePDFBuilder,
    PricingError,
    UnitUnavailable,
    InvalidTransition,
    OutstandingBalance,
    find_available_units,
)
from lodging.services.pricing_service import calculate_yearly
from .mixins import BadRequest, BookingMixin, JsonApiMixin, parse_date, parse_decimal, parse_int

logger = logging.getLogger(__name__)

# Errors about the booking's current state rather than the request itself
CONFLICT_ERRORS = (UnitUnavailable, InvalidTransition, OutstandingBalance)


class BookingAPIView(JsonApiMixin, View):
    """
    Base view translating domain errors into JSON responses.

        BadRequest / PricingError / BookingError -> 400
        UnitUnavailable / InvalidTransition / OutstandingBalance -> 409
        Http404 -> 404
    """

    def dispatch(self, request, *args, **kwargs):
        self.service = BookingService()
        try:
            return super().dispatch(request, *args, **kwargs)
        except Http404:
            return self.error_response('Booking not found', status=404)
        except CONFLICT_ERRORS as e:
            return self.error_response(str(e), status=409)
        except (BadRequest, PricingError, BookingError) as e:
            return self.error_response(str(e), status=400)
        except Exception as e:
            logger.exception("Booking API error")
            return self.error_response(str(e), status=500)

    def booking_response(self, booking, message=None, status=200):
        return self.success_response(
            {'booking': self.service.booking_summary(booking)},
            message=message,
            status=status,
        )


class BookingCreateAPIView(BookingAPIView):
    """
    Create a booking.

    URL: /api/bookings/
    Body (form or JSON):
        unit: Unit id, or unit_type to take the first free unit of that type
        guest_name, guest_phone
        start_date, end_date (daily) | booking_type=yearly & duration_months
        additional_services, discount_amount, notes
    """
    http_method_names = ['post']

    def post(self, request, *args, **kwargs):
        payload = self.get_payload(request)

        guest_name = (payload.get('guest_name') or '').strip()
        if not guest_name:
            raise BadRequest("Missing guest_name")

        booking_type = payload.get('booking_type') or Booking.TYPE_DAILY
        start_date = parse_date(payload.get('start_date'), 'start_date')
        if booking_type == Booking.TYPE_YEARLY:
            end_date = None
            duration_months = parse_int(payload.get('duration_months'), 'duration_months')
        else:
            end_date = parse_date(payload.get('end_date'), 'end_date')
            duration_months = None

        unit = self._get_unit(payload, start_date, end_date, duration_months)

        booking = self.service.create_booking(
            unit=unit,
            guest_name=guest_name,
            guest_phone=payload.get('guest_phone') or '',
            start_date=start_date,
            end_date=end_date,
            booking_type=booking_type,
            duration_months=duration_months,
            additional_services=parse_decimal(payload.get('additional_services'), 'additional_services'),
            discount_amount=parse_decimal(payload.get('discount_amount'), 'discount_amount'),
            notes=payload.get('notes') or '',
        )
        return self.booking_response(booking, message='Booking created', status=201)

    def _get_unit(self, payload, start_date, end_date, duration_months=None):
        unit_id = parse_int(payload.get('unit'), 'unit', required=False)
        if unit_id is not None:
            try:
                return Unit.objects.select_related('unit_type').get(pk=unit_id)
            except Unit.DoesNotExist:
                raise BadRequest(f"Unknown unit: {unit_id}")

        unit_type_id = parse_int(payload.get('unit_type'), 'unit or unit_type')
        try:
            unit_type = UnitType.objects.get(pk=unit_type_id)
        except UnitType.DoesNotExist:
            raise BadRequest(f"Unknown unit type: {unit_type_id}")

        if end_date is None:
            # Yearly stay
            end_date = calculate_yearly(unit_type, start_date, duration_months).end_date
        units = find_available_units(unit_type, start_date, end_date)
        if not units:
            raise UnitUnavailable(f"No {unit_type.name} unit is free for these dates")
        return units[0]


class BookingDetailAPIView(BookingMixin, BookingAPIView):
    """Booking with its paid and remaining amounts."""
    http_method_names = ['get']

    def get(self, request, *args, **kwargs):
        return self.booking_response(self.get_booking())


class BookingPaymentAPIView(BookingMixin, BookingAPIView):
    """
    Record a payment (or a refund with kind=refund).

    Body: amount, method, reference, description, payment_date
    """
    http_method_names = ['post']

    def post(self, request, *args, **kwargs):
        booking = self.get_booking()
        payload = self.get_payload(request)

        options = {
            'amount': parse_decimal(payload.get('amount'), 'amount', default=None),
            'method': payload.get('method') or 'cash',
            'reference': payload.get('reference') or '',
            'payment_date': parse_date(payload.get('payment_date'), 'payment_date', required=False),
        }
        if options['amount'] is None:
            raise BadRequest("Missing amount")
        if payload.get('description'):
            options['description'] = payload['description']

        if payload.get('kind') == 'refund':
            payment = self.service.record_refund(booking, **options)
        else:
            payment = self.service.record_payment(booking, **options)

        booking.refresh_from_db()
        response = {
            'payment': {
                'id': payment.id,
                'kind': payment.kind,
                'amount': str(payment.amount),
                'payment_date': payment.payment_date.isoformat(),
            },
            'booking': self.service.booking_summary(booking),
        }
        return self.success_response(response, message='Payment recorded', status=201)


class BookingCheckInAPIView(BookingMixin, BookingAPIView):
    http_method_names = ['post']

    def post(self, request, *args, **kwargs):
        booking = self.service.check_in(self.get_booking())
        return self.booking_response(booking, message='Guest checked in')


class BookingCheckOutAPIView(BookingMixin, BookingAPIView):
    """Check out; pass force=1 to check out with money still owed."""
    http_method_names = ['post']

    def post(self, request, *args, **kwargs):
        payload = self.get_payload(request)
        force = str(payload.get('force', '')).lower() in ('1', 'true', 'yes')
        booking = self.service.check_out(self.get_booking(), force=force)
        return self.booking_response(booking, message='Guest checked out')


class BookingCancelAPIView(BookingMixin, BookingAPIView):
    http_method_names = ['post']

    def post(self, request, *args, **kwargs):
        booking = self.service.cancel(self.get_booking())
        return self.booking_response(booking, message='Booking cancelled')


class BookingInvoiceAPIView(BookingMixin, BookingAPIView):
    """Issue (or return) the posted tax invoice."""
    http_method_names = ['post']

    def post(self, request, *args, **kwargs):
        booking = self.get_booking()
        invoice = self.service.issue_invoice(booking)
        return self.success_response({
            'invoice': {
                'number': invoice.number,
                'status': invoice.status,
                'invoice_date': invoice.invoice_date.isoformat() if invoice.invoice_date else None,
                'subtotal': str(invoice.subtotal),
                'tax_amount': str(invoice.tax_amount),
                'total_amount': str(invoice.total_amount),
            },
        })


class BookingInvoicePDFView(BookingMixin, View):
    """
    Download the invoice as PDF.

    URL: /bookings/{booking_id}/invoice.pdf
    """

    def get(self, request, *args, **kwargs):
        booking = self.get_booking()
        invoice = BookingService().get_invoice(booking)

        pdf_buffer = InvoicePDFBuilder(booking, invoice).build()

        response = HttpResponse(pdf_buffer.getvalue(), content_type='application/pdf')
        reference = invoice.number if invoice else f"booking_{booking.pk}"
        filename = f"invoice_{reference}_{timezone.now().strftime('%Y%m%d')}.pdf"
        response['Content-Disposition'] = f'attachment; filename="{filename}"'

        return response


class BookingContractPDFView(BookingMixin, View):
    """
    Download the rental contract as PDF.

    URL: /bookings/{booking_id}/contract.pdf
    """

    def get(self, request, *args, **kwargs):
        builder = ContractPDFBuilder(self.get_booking())
        pdf_buffer = builder.build()

        response = HttpResponse(pdf_buffer.getvalue(), content_type='application/pdf')
        filename = f"contract_{builder.contract_number}.pdf"
        response['Content-Disposition'] = f'attachment; filename="{filename}"'

        return response
