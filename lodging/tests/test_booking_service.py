from datetime import date
from decimal import Decimal

from django.test import TestCase, override_settings

from lodging.models import Booking, Invoice, Payment, PricingRule, Unit, UnitType
from lodging.services import (
    BookingError,
    BookingService,
    InvalidDateRange,
    InvalidPayment,
    InvalidTransition,
    MissingRateConfiguration,
    OutstandingBalance,
    UnitUnavailable,
)


class BookingServiceTestCase(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.unit_type = UnitType.objects.create(
            name='Studio',
            daily_price=Decimal('100.00'),
            annual_price=Decimal('12000.00'),
        )
        cls.unit = Unit.objects.create(unit_type=cls.unit_type, unit_number='101')
        PricingRule.objects.create(
            name='Festival',
            unit_type=cls.unit_type,
            value=Decimal('150.00'),
            start_date=date(2025, 3, 2),
            end_date=date(2025, 3, 2),
        )

    def setUp(self):
        self.service = BookingService(vat_percent=Decimal('15'))

    def create(self, **kwargs):
        options = {
            'unit': self.unit,
            'guest_name': 'Sara Ahmed',
            'start_date': date(2025, 3, 1),
            'end_date': date(2025, 3, 4),
        }
        options.update(kwargs)
        return self.service.create_booking(**options)


class CreateBookingTests(BookingServiceTestCase):

    def test_amounts_frozen_from_quote(self):
        booking = self.create()

        booking.refresh_from_db()
        self.assertEqual(booking.room_amount, Decimal('350.00'))
        self.assertEqual(booking.subtotal, Decimal('350.00'))
        self.assertEqual(booking.tax_amount, Decimal('52.50'))
        self.assertEqual(booking.total_price, Decimal('402.50'))
        self.assertEqual(booking.status, Booking.STATUS_PENDING_DEPOSIT)
        self.assertEqual(booking.nights, 3)

    def test_services_and_discount(self):
        booking = self.create(additional_services='50', discount_amount='100')

        self.assertEqual(booking.subtotal, Decimal('300.00'))
        self.assertEqual(booking.tax_amount, Decimal('45.00'))
        self.assertEqual(booking.total_price, Decimal('345.00'))

    def test_negative_discount_rejected(self):
        with self.assertRaises(BookingError):
            self.create(discount_amount='-10')

    def test_yearly_booking(self):
        booking = self.create(
            start_date=date(2025, 1, 1), end_date=None,
            booking_type=Booking.TYPE_YEARLY, duration_months=6,
        )

        self.assertEqual(booking.check_out, date(2025, 7, 1))
        self.assertEqual(booking.room_amount, Decimal('6000.00'))
        self.assertEqual(booking.duration_months, 6)

    def test_yearly_without_annual_price(self):
        unit_type = UnitType.objects.create(name='Room', daily_price=Decimal('80.00'))
        unit = Unit.objects.create(unit_type=unit_type, unit_number='301')

        with self.assertRaises(MissingRateConfiguration):
            self.create(unit=unit, end_date=None, booking_type=Booking.TYPE_YEARLY, duration_months=6)

    def test_invalid_range_rejected(self):
        with self.assertRaises(InvalidDateRange):
            self.create(end_date=date(2025, 3, 1))
        self.assertFalse(Booking.objects.exists())

    def test_overlap_rejected(self):
        self.create()

        with self.assertRaises(UnitUnavailable):
            self.create(start_date=date(2025, 3, 3), end_date=date(2025, 3, 6))
        self.assertEqual(Booking.objects.count(), 1)

    def test_back_to_back_allowed(self):
        self.create()

        second = self.create(start_date=date(2025, 3, 4), end_date=date(2025, 3, 6))

        self.assertEqual(second.check_in, date(2025, 3, 4))

    def test_cancelled_booking_frees_dates(self):
        first = self.create()
        self.service.cancel(first)

        second = self.create()

        self.assertEqual(Booking.objects.filter(status=Booking.STATUS_PENDING_DEPOSIT).get(), second)

    def test_cannot_start_checked_in(self):
        with self.assertRaises(InvalidTransition):
            self.create(status=Booking.STATUS_CHECKED_IN)

    @override_settings(LODGING_VAT_PERCENT=Decimal('5'))
    def test_vat_from_settings(self):
        booking = BookingService().create_booking(
            unit=self.unit, guest_name='Guest',
            start_date=date(2025, 4, 1), end_date=date(2025, 4, 2),
        )

        self.assertEqual(booking.tax_amount, Decimal('5.00'))


class PaymentTests(BookingServiceTestCase):

    def test_deposit_confirms_booking(self):
        booking = self.create()

        payment = self.service.record_payment(booking, '100.00', method='card', reference='A1')

        booking.refresh_from_db()
        self.assertEqual(booking.status, Booking.STATUS_CONFIRMED)
        self.assertEqual(payment.kind, Payment.KIND_ADVANCE)
        self.assertIn('Ref: A1', payment.description)
        self.assertEqual(booking.paid_amount, Decimal('100.00'))
        self.assertEqual(booking.remaining_amount, Decimal('302.50'))

    def test_payment_after_invoice_settles_it(self):
        booking = self.create(status=Booking.STATUS_CONFIRMED)
        self.service.issue_invoice(booking)

        payment = self.service.record_payment(booking, Decimal('402.50'))

        self.assertEqual(payment.kind, Payment.KIND_PAYMENT)
        self.assertEqual(self.service.remaining_amount(booking), Decimal('0.00'))

    def test_refund_reduces_paid_amount(self):
        booking = self.create()
        self.service.record_payment(booking, '200')

        self.service.record_refund(booking, '50')

        self.assertEqual(self.service.paid_amount(booking), Decimal('150.00'))

    def test_refund_cannot_exceed_paid(self):
        booking = self.create()
        self.service.record_payment(booking, '20')

        with self.assertRaises(InvalidPayment):
            self.service.record_refund(booking, '50')

    def test_non_positive_amount_rejected(self):
        booking = self.create()
        for amount in ('0', '-5', 'abc'):
            with self.subTest(amount=amount):
                with self.assertRaises(InvalidPayment):
                    self.service.record_payment(booking, amount)

    def test_cancelled_booking_rejects_payment(self):
        booking = self.create()
        self.service.cancel(booking)

        with self.assertRaises(InvalidPayment):
            self.service.record_payment(booking, '10')


class InvoiceTests(BookingServiceTestCase):

    def test_invoice_numbers_are_sequential_per_year(self):
        first = self.create(status=Booking.STATUS_CONFIRMED)
        second = self.create(start_date=date(2025, 5, 1), end_date=date(2025, 5, 2))

        a = self.service.issue_invoice(first, invoice_date=date(2025, 3, 1))
        b = self.service.issue_invoice(second, invoice_date=date(2025, 5, 1))

        self.assertEqual(a.number, 'INV-2025-00001')
        self.assertEqual(b.number, 'INV-2025-00002')
        self.assertEqual(a.total_amount, first.total_price)

    def test_issue_is_idempotent(self):
        booking = self.create()

        first = self.service.issue_invoice(booking)
        again = self.service.issue_invoice(booking)

        self.assertEqual(first.pk, again.pk)
        self.assertEqual(Invoice.objects.count(), 1)

    def test_draft_invoice_is_posted(self):
        booking = self.create()
        draft = Invoice.objects.create(booking=booking, number='INV-2025-00009', status=Invoice.STATUS_DRAFT)

        invoice = self.service.issue_invoice(booking)

        self.assertEqual(invoice.pk, draft.pk)
        self.assertTrue(invoice.is_posted)
        self.assertEqual(invoice.total_amount, booking.total_price)

    def test_cancelled_booking_cannot_be_invoiced(self):
        booking = self.create()
        self.service.cancel(booking)

        with self.assertRaises(InvalidTransition):
            self.service.issue_invoice(booking)


class StatusTransitionTests(BookingServiceTestCase):

    def test_full_stay(self):
        booking = self.create()
        self.service.record_payment(booking, '100')

        self.service.check_in(booking)
        self.unit.refresh_from_db()
        self.assertEqual(booking.status, Booking.STATUS_CHECKED_IN)
        self.assertEqual(self.unit.status, Unit.STATUS_OCCUPIED)
        self.assertTrue(Invoice.objects.get(booking=booking).is_posted)

        self.service.record_payment(booking, booking.remaining_amount)
        self.service.check_out(booking)
        self.unit.refresh_from_db()
        self.assertEqual(booking.status, Booking.STATUS_CHECKED_OUT)
        self.assertEqual(self.unit.status, Unit.STATUS_CLEANING)

    def test_check_in_requires_confirmation(self):
        booking = self.create()

        with self.assertRaises(InvalidTransition):
            self.service.check_in(booking)

    def test_check_out_with_balance(self):
        booking = self.create(status=Booking.STATUS_CONFIRMED)
        self.service.check_in(booking)

        with self.assertRaises(OutstandingBalance):
            self.service.check_out(booking)

        self.service.check_out(booking, force=True)
        self.assertEqual(booking.status, Booking.STATUS_CHECKED_OUT)

    def test_cancel_checked_in_frees_unit(self):
        booking = self.create(status=Booking.STATUS_CONFIRMED)
        self.service.check_in(booking)

        self.service.cancel(booking)

        self.unit.refresh_from_db()
        self.assertEqual(self.unit.status, Unit.STATUS_AVAILABLE)

    def test_cannot_cancel_checked_out(self):
        booking = self.create(status=Booking.STATUS_CONFIRMED)
        self.service.check_in(booking)
        self.service.check_out(booking, force=True)

        with self.assertRaises(InvalidTransition):
            self.service.cancel(booking)

    def test_summary_reports_balance(self):
        booking = self.create()
        self.service.record_payment(booking, '2.50')

        summary = self.service.booking_summary(booking)

        self.assertEqual(summary['total_price'], '402.50')
        self.assertEqual(summary['paid_amount'], '2.50')
        self.assertEqual(summary['remaining_amount'], '400.00')
        self.assertIsNone(summary['invoice'])
