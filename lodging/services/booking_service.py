"""
Booking lifecycle: pricing a stay into a booking, payments, invoices and
status transitions.

    pending_deposit --payment--> confirmed --check_in--> checked_in --check_out--> checked_out
           |                         |                       |
           +-----------cancel--------+-----------------------+--> cancelled
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from .availability_service import overlapping_bookings
from .pricing_service import MODE_NIGHTLY, MODE_YEARLY, load_pricing_context

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')
DEFAULT_VAT_PERCENT = Decimal('15.00')


class BookingError(Exception):
    """Base class for booking lifecycle failures."""


class UnitUnavailable(BookingError):
    """Raised when the unit is already held for an overlapping stay."""


class InvalidTransition(BookingError):
    """Raised when a status change is not allowed from the current status."""


class OutstandingBalance(BookingError):
    """Raised when checking out a guest who still owes money."""


class InvalidPayment(BookingError):
    """Raised for non-positive amounts or payments on cancelled bookings."""


@dataclass(frozen=True)
class BookingTotals:
    subtotal: Decimal
    tax_amount: Decimal
    total_price: Decimal


def to_money(value):
    """Quantize to cents, half-up."""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def parse_amount(value, default=Decimal('0.00')):
    """Parse a user supplied amount; raises InvalidPayment on garbage."""
    if value is None or value == '':
        return default
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise InvalidPayment(f"Invalid amount: {value}")


class BookingService:
    """
    Booking orchestration on top of the pricing engine.

    Usage:
        service = BookingService()
        booking = service.create_booking(
            unit=unit,
            guest_name='Sara Ahmed',
            start_date=date(2025, 3, 1),
            end_date=date(2025, 3, 4),
        )
        service.record_payment(booking, Decimal('500.00'), method='card')
        service.check_in(booking)
    """

    def __init__(self, vat_percent=None):
        if vat_percent is None:
            vat_percent = getattr(settings, 'LODGING_VAT_PERCENT', DEFAULT_VAT_PERCENT)
        self.vat_percent = Decimal(str(vat_percent))

    # =========================================================================
    # PRICING
    # =========================================================================

    def quote(self, unit_type, start_date, end_date=None, mode=MODE_NIGHTLY, duration_months=None):
        """Price a stay for a unit type with its current rules."""
        context = load_pricing_context(unit_type)
        return context.compute(start_date, end_date, mode=mode, duration_months=duration_months)

    def calculate_totals(self, room_amount, additional_services=Decimal('0.00'),
                         discount_amount=Decimal('0.00')):
        """
        Subtotal, VAT and total for a booking.

        subtotal = room + services - discount (never below zero)
        tax      = subtotal × VAT%
        total    = subtotal + tax
        """
        subtotal = Decimal(room_amount) + Decimal(additional_services) - Decimal(discount_amount)
        if subtotal < Decimal('0.00'):
            subtotal = Decimal('0.00')
        subtotal = to_money(subtotal)

        tax_amount = to_money(subtotal * self.vat_percent / Decimal('100.00'))

        return BookingTotals(
            subtotal=subtotal,
            tax_amount=tax_amount,
            total_price=subtotal + tax_amount,
        )

    # =========================================================================
    # CREATION
    # =========================================================================

    def create_booking(self, unit, guest_name, start_date, end_date=None,
                       booking_type='daily', duration_months=None,
                       additional_services=Decimal('0.00'), discount_amount=Decimal('0.00'),
                       guest_phone='', status=None, notes=''):
        """
        Freeze the quoted price into a new booking.

        Raises:
            InvalidDateRange / MissingRateConfiguration from the pricing engine
            UnitUnavailable if another holding booking overlaps the stay
        """
        from lodging.models import Booking

        booking = Booking(
            unit=unit,
            guest_name=guest_name,
            guest_phone=guest_phone,
            check_in=start_date,
            check_out=end_date,
            booking_type=booking_type,
            duration_months=duration_months,
            additional_services=parse_amount(additional_services),
            discount_amount=parse_amount(discount_amount),
            notes=notes,
        )
        if status is not None:
            booking.status = status

        self.price_booking(booking)
        return self.save_new_booking(booking)

    def price_booking(self, booking):
        """
        Fill the stay dates and frozen amounts of an unsaved booking.

        Yearly bookings get their check-out from the contract length.
        """
        from lodging.models import Booking

        if booking.status not in (Booking.STATUS_PENDING_DEPOSIT, Booking.STATUS_CONFIRMED):
            raise InvalidTransition(f"New bookings cannot start as '{booking.status}'")

        if booking.booking_type == Booking.TYPE_YEARLY:
            mode = MODE_YEARLY
        elif booking.booking_type == Booking.TYPE_DAILY:
            mode = MODE_NIGHTLY
        else:
            raise BookingError(f"Unknown booking type: {booking.booking_type}")

        additional_services = parse_amount(booking.additional_services)
        discount_amount = parse_amount(booking.discount_amount)
        if additional_services < 0 or discount_amount < 0:
            raise BookingError("Services and discount cannot be negative")

        calculation = self.quote(
            booking.unit.unit_type, booking.check_in, booking.check_out,
            mode=mode, duration_months=booking.duration_months,
        )
        room_amount = to_money(calculation.total_price)
        totals = self.calculate_totals(room_amount, additional_services, discount_amount)

        booking.check_in = calculation.start_date
        booking.check_out = calculation.end_date
        if mode != MODE_YEARLY:
            booking.duration_months = None
        booking.room_amount = room_amount
        booking.additional_services = to_money(additional_services)
        booking.discount_amount = to_money(discount_amount)
        booking.subtotal = totals.subtotal
        booking.tax_amount = totals.tax_amount
        booking.total_price = totals.total_price
        return booking

    def check_unit_free(self, booking):
        """Raise UnitUnavailable if a holding booking overlaps this one's stay."""
        conflict = (
            overlapping_bookings(
                [booking.unit_id], booking.check_in, booking.check_out,
                exclude_booking=booking if booking.pk else None,
            ).first()
        )
        if conflict is not None:
            raise UnitUnavailable(
                f"Unit {booking.unit.unit_number} is already booked "
                f"from {conflict.check_in} to {conflict.check_out}"
            )

    def save_new_booking(self, booking):
        """Save a priced booking once no other booking holds its unit."""
        from lodging.models import Unit

        with transaction.atomic():
            # Serialise bookings per unit
            Unit.objects.select_for_update().get(pk=booking.unit_id)
            self.check_unit_free(booking)
            booking.save()

        logger.info(
            "Created booking %s for unit %s (%s → %s), total %s",
            booking.pk, booking.unit.unit_number, booking.check_in, booking.check_out,
            booking.total_price,
        )
        return booking

    # =========================================================================
    # PAYMENTS
    # =========================================================================

    def get_invoice(self, booking):
        from lodging.models import Invoice
        return Invoice.objects.filter(booking=booking).first()

    def paid_amount(self, booking):
        return booking.paid_amount

    def remaining_amount(self, booking):
        return booking.remaining_amount

    def payment_kind(self, booking):
        """Advance payment until the invoice is posted, payment afterwards."""
        from lodging.models import Payment

        invoice = self.get_invoice(booking)
        return Payment.KIND_PAYMENT if invoice and invoice.is_posted else Payment.KIND_ADVANCE

    def confirm_deposit(self, booking):
        from lodging.models import Booking

        if booking.status == Booking.STATUS_PENDING_DEPOSIT:
            self._set_status(booking, Booking.STATUS_CONFIRMED)

    def record_payment(self, booking, amount, method='cash', reference='',
                       description='', payment_date=None):
        """
        Record money received for a booking.

        Before an invoice is posted the money is an advance payment (deposit);
        afterwards it settles the invoice. A positive payment confirms a
        booking that was waiting for its deposit.
        """
        from lodging.models import Booking, Payment

        amount = parse_amount(amount)
        if amount <= 0:
            raise InvalidPayment("Payment amount must be positive")
        if booking.status == Booking.STATUS_CANCELLED:
            raise InvalidPayment("Cannot take payments on a cancelled booking")

        kind = self.payment_kind(booking)

        if not description:
            description = 'Deposit / advance payment' if kind == Payment.KIND_ADVANCE else 'Balance payment'
        if reference:
            description = f"{description} (Ref: {reference})"

        with transaction.atomic():
            payment = Payment.objects.create(
                booking=booking,
                kind=kind,
                amount=to_money(amount),
                method=method,
                reference=reference,
                payment_date=payment_date or timezone.localdate(),
                description=description,
            )

            self.confirm_deposit(booking)

        logger.info("Recorded %s of %s on booking %s", kind, payment.amount, booking.pk)
        return payment

    def record_refund(self, booking, amount, method='cash', reference='',
                      description='Refund', payment_date=None):
        from lodging.models import Payment

        amount = parse_amount(amount)
        if amount <= 0:
            raise InvalidPayment("Refund amount must be positive")
        if amount > booking.paid_amount:
            raise InvalidPayment("Refund exceeds the amount paid")

        payment = Payment.objects.create(
            booking=booking,
            kind=Payment.KIND_REFUND,
            amount=to_money(amount),
            method=method,
            reference=reference,
            payment_date=payment_date or timezone.localdate(),
            description=description,
        )
        logger.info("Refunded %s on booking %s", payment.amount, booking.pk)
        return payment

    # =========================================================================
    # INVOICES
    # =========================================================================

    def next_invoice_number(self, year):
        from lodging.models import Invoice

        prefix = f"INV-{year}-"
        last = (
            Invoice.objects.filter(number__startswith=prefix)
            .order_by('-number')
            .values_list('number', flat=True)
            .first()
        )
        sequence = int(last[len(prefix):]) + 1 if last else 1
        return f"{prefix}{sequence:05d}"

    def issue_invoice(self, booking, invoice_date=None):
        """
        Post the tax invoice for a booking.

        Creates the invoice if missing, posts a draft, and returns an
        already-posted invoice unchanged.
        """
        from lodging.models import Booking, Invoice

        if booking.status == Booking.STATUS_CANCELLED:
            raise InvalidTransition("Cannot invoice a cancelled booking")

        invoice_date = invoice_date or timezone.localdate()

        with transaction.atomic():
            invoice = self.get_invoice(booking)
            if invoice is None:
                invoice = Invoice.objects.create(
                    booking=booking,
                    number=self.next_invoice_number(invoice_date.year),
                    status=Invoice.STATUS_POSTED,
                    invoice_date=invoice_date,
                    subtotal=booking.subtotal,
                    tax_amount=booking.tax_amount,
                    total_amount=booking.total_price,
                )
                logger.info("Issued invoice %s for booking %s", invoice.number, booking.pk)
            elif invoice.status == Invoice.STATUS_DRAFT:
                invoice.status = Invoice.STATUS_POSTED
                invoice.invoice_date = invoice_date
                invoice.subtotal = booking.subtotal
                invoice.tax_amount = booking.tax_amount
                invoice.total_amount = booking.total_price
                invoice.save(update_fields=[
                    'status', 'invoice_date', 'subtotal', 'tax_amount', 'total_amount', 'updated_at',
                ])
                logger.info("Posted draft invoice %s for booking %s", invoice.number, booking.pk)

        return invoice

    # =========================================================================
    # STATUS TRANSITIONS
    # =========================================================================

    def _set_status(self, booking, status):
        booking.status = status
        booking.save(update_fields=['status', 'updated_at'])
        logger.info("Booking %s is now %s", booking.pk, status)

    def _require_status(self, booking, allowed, action):
        if booking.status not in allowed:
            raise InvalidTransition(
                f"Cannot {action} a booking that is {booking.get_status_display().lower()}"
            )

    def check_in(self, booking):
        """Confirmed → checked in. Posts the invoice if not yet issued."""
        from lodging.models import Booking

        self._require_status(booking, (Booking.STATUS_CONFIRMED,), 'check in')
        with transaction.atomic():
            self.issue_invoice(booking)
            self._set_status(booking, Booking.STATUS_CHECKED_IN)
        return booking

    def check_out(self, booking, force=False):
        """Checked in → checked out. Refuses while money is owed unless forced."""
        from lodging.models import Booking

        self._require_status(booking, (Booking.STATUS_CHECKED_IN,), 'check out')

        remaining = booking.remaining_amount
        if remaining > 0 and not force:
            raise OutstandingBalance(f"Guest still owes {remaining}")

        self._set_status(booking, Booking.STATUS_CHECKED_OUT)
        return booking

    def cancel(self, booking):
        from lodging.models import Booking

        self._require_status(
            booking,
            (Booking.STATUS_PENDING_DEPOSIT, Booking.STATUS_CONFIRMED, Booking.STATUS_CHECKED_IN),
            'cancel',
        )
        self._set_status(booking, Booking.STATUS_CANCELLED)
        return booking

    def booking_summary(self, booking):
        """JSON-ready view of a booking with its balance."""
        invoice = self.get_invoice(booking)
        return {
            'id': booking.pk,
            'unit': booking.unit.unit_number,
            'unit_type': booking.unit.unit_type.name,
            'guest_name': booking.guest_name,
            'guest_phone': booking.guest_phone,
            'check_in': booking.check_in.isoformat(),
            'check_out': booking.check_out.isoformat(),
            'nights': booking.nights,
            'booking_type': booking.booking_type,
            'duration_months': booking.duration_months,
            'status': booking.status,
            'room_amount': str(booking.room_amount),
            'additional_services': str(booking.additional_services),
            'discount_amount': str(booking.discount_amount),
            'subtotal': str(booking.subtotal),
            'tax_amount': str(booking.tax_amount),
            'total_price': str(booking.total_price),
            'paid_amount': str(booking.paid_amount),
            'remaining_amount': str(booking.remaining_amount),
            'invoice': invoice.number if invoice else None,
        }
