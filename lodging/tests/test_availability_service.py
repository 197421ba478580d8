from datetime import date
from decimal import Decimal

from django.test import SimpleTestCase, TestCase

from lodging.models import Booking, Unit, UnitType
from lodging.services.availability_service import (
    bookings_overlap,
    filter_available_units,
    find_available_units,
)
from lodging.services.pricing_service import InvalidDateRange


def unit(pk, status=Unit.STATUS_AVAILABLE):
    return Unit(id=pk, unit_number=str(100 + pk), status=status)


def booking(unit_id, check_in, check_out, status=Booking.STATUS_CONFIRMED):
    return Booking(unit_id=unit_id, check_in=check_in, check_out=check_out, status=status)


class OverlapBoundaryTests(SimpleTestCase):
    """Existing stay 2024-01-10 .. 2024-01-15 on unit 1."""

    def setUp(self):
        self.units = [unit(1), unit(2)]
        self.existing = [booking(1, date(2024, 1, 10), date(2024, 1, 15))]

    def available_ids(self, start, end, existing=None):
        existing = self.existing if existing is None else existing
        return [u.id for u in filter_available_units(self.units, existing, start, end)]

    def test_request_inside_existing_stay_is_blocked(self):
        self.assertEqual(self.available_ids(date(2024, 1, 12), date(2024, 1, 13)), [2])

    def test_request_overlapping_arrival_is_blocked(self):
        self.assertEqual(self.available_ids(date(2024, 1, 5), date(2024, 1, 11)), [2])

    def test_arrival_on_departure_day_is_free(self):
        self.assertEqual(self.available_ids(date(2024, 1, 15), date(2024, 1, 20)), [1, 2])

    def test_departure_on_arrival_day_is_free(self):
        self.assertEqual(self.available_ids(date(2024, 1, 5), date(2024, 1, 10)), [1, 2])

    def test_cancelled_booking_never_blocks(self):
        existing = [booking(1, date(2024, 1, 10), date(2024, 1, 15), Booking.STATUS_CANCELLED)]

        self.assertEqual(self.available_ids(date(2024, 1, 10), date(2024, 1, 15), existing), [1, 2])

    def test_checked_out_booking_never_blocks(self):
        existing = [booking(1, date(2024, 1, 10), date(2024, 1, 15), Booking.STATUS_CHECKED_OUT)]

        self.assertEqual(self.available_ids(date(2024, 1, 10), date(2024, 1, 15), existing), [1, 2])

    def test_pending_deposit_holds_unit(self):
        existing = [booking(1, date(2024, 1, 10), date(2024, 1, 15), Booking.STATUS_PENDING_DEPOSIT)]

        self.assertEqual(self.available_ids(date(2024, 1, 10), date(2024, 1, 15), existing), [2])

    def test_units_not_ready_are_excluded(self):
        self.units = [unit(1, Unit.STATUS_CLEANING), unit(2, Unit.STATUS_MAINTENANCE), unit(3)]

        self.assertEqual(self.available_ids(date(2024, 2, 1), date(2024, 2, 2), []), [3])

    def test_nothing_free_is_empty_list(self):
        existing = [
            booking(1, date(2024, 1, 1), date(2024, 2, 1)),
            booking(2, date(2024, 1, 1), date(2024, 2, 1), Booking.STATUS_CHECKED_IN),
        ]

        self.assertEqual(self.available_ids(date(2024, 1, 10), date(2024, 1, 11), existing), [])

    def test_invalid_range_rejected(self):
        with self.assertRaises(InvalidDateRange):
            filter_available_units(self.units, [], date(2024, 1, 10), date(2024, 1, 10))

    def test_bookings_overlap_is_half_open(self):
        self.assertTrue(bookings_overlap(date(2024, 1, 10), date(2024, 1, 15), date(2024, 1, 14), date(2024, 1, 16)))
        self.assertFalse(bookings_overlap(date(2024, 1, 10), date(2024, 1, 15), date(2024, 1, 15), date(2024, 1, 16)))


class FindAvailableUnitsTests(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.studio = UnitType.objects.create(name='Studio', daily_price=Decimal('100.00'))
        cls.suite = UnitType.objects.create(name='Suite', daily_price=Decimal('300.00'))
        cls.u101 = Unit.objects.create(unit_type=cls.studio, unit_number='101')
        cls.u102 = Unit.objects.create(unit_type=cls.studio, unit_number='102')
        cls.u103 = Unit.objects.create(
            unit_type=cls.studio, unit_number='103', status=Unit.STATUS_MAINTENANCE
        )
        cls.u201 = Unit.objects.create(unit_type=cls.suite, unit_number='201')
        cls.held = Booking.objects.create(
            unit=cls.u101, guest_name='Guest', check_in=date(2024, 1, 10),
            check_out=date(2024, 1, 15), status=Booking.STATUS_CONFIRMED,
        )
        Booking.objects.create(
            unit=cls.u102, guest_name='Gone', check_in=date(2024, 1, 10),
            check_out=date(2024, 1, 15), status=Booking.STATUS_CANCELLED,
        )

    def test_returns_free_units_of_type(self):
        units = find_available_units(self.studio, date(2024, 1, 12), date(2024, 1, 13))

        self.assertEqual(units, [self.u102])

    def test_back_to_back_stay_is_free(self):
        units = find_available_units(self.studio, date(2024, 1, 15), date(2024, 1, 20))

        self.assertEqual(units, [self.u101, self.u102])

    def test_excluded_booking_does_not_block(self):
        units = find_available_units(
            self.studio, date(2024, 1, 12), date(2024, 1, 13), exclude_booking=self.held
        )

        self.assertEqual(units, [self.u101, self.u102])

    def test_other_unit_types_are_ignored(self):
        units = find_available_units(self.suite, date(2024, 1, 12), date(2024, 1, 13))

        self.assertEqual(units, [self.u201])
