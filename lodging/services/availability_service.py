"""
Unit availability for a requested stay.

Two stays overlap when they share at least one night. With half-open
ranges [check_in, check_out) that is:

    existing.check_in < requested.end AND existing.check_out > requested.start

so a departure on the same day as the next arrival is not a conflict.
This is a pre-check only; BookingService re-checks under a row lock.
"""

import logging

from .pricing_service import InvalidDateRange

logger = logging.getLogger(__name__)

STATUS_AVAILABLE = 'available'

# Booking statuses that keep a unit reserved (cancelled / checked_out never block)
HOLDING_STATUSES = ('confirmed', 'checked_in', 'pending_deposit')


def bookings_overlap(check_in, check_out, start_date, end_date):
    """Half-open interval overlap test."""
    return check_in < end_date and check_out > start_date


def _validate_range(start_date, end_date):
    if start_date is None or end_date is None or end_date <= start_date:
        raise InvalidDateRange("Check-out date must be after check-in date")


def conflicting_unit_ids(existing_bookings, start_date, end_date):
    """Ids of units held by a booking that overlaps the requested range."""
    return {
        booking.unit_id
        for booking in existing_bookings
        if booking.status in HOLDING_STATUSES
        and bookings_overlap(booking.check_in, booking.check_out, start_date, end_date)
    }


def filter_available_units(units, existing_bookings, start_date, end_date):
    """
    Units free for [start_date, end_date).

    Args:
        units: iterable of units (id, status)
        existing_bookings: iterable of bookings (unit_id, check_in, check_out, status)
        start_date: requested check-in
        end_date: requested check-out (exclusive)

    Returns:
        list of units, in input order. Empty when nothing is free.
    """
    _validate_range(start_date, end_date)

    booked = conflicting_unit_ids(existing_bookings, start_date, end_date)
    return [
        unit for unit in units
        if unit.status == STATUS_AVAILABLE and unit.id not in booked
    ]


def overlapping_bookings(unit_ids, start_date, end_date, exclude_booking=None):
    """QuerySet of holding bookings on the given units that overlap the range."""
    from lodging.models import Booking

    bookings = Booking.objects.filter(
        unit_id__in=unit_ids,
        status__in=HOLDING_STATUSES,
        check_in__lt=end_date,
        check_out__gt=start_date,
    )
    if exclude_booking is not None:
        bookings = bookings.exclude(pk=exclude_booking.pk)
    return bookings


def find_available_units(unit_type, start_date, end_date, exclude_booking=None):
    """
    Database-backed availability for a unit type.

    Returns:
        list of Unit objects ordered by unit number
    """
    from lodging.models import Unit

    _validate_range(start_date, end_date)

    units = list(
        Unit.objects.filter(unit_type=unit_type, status=STATUS_AVAILABLE).order_by('unit_number')
    )
    if not units:
        return []

    existing = overlapping_bookings(
        [unit.id for unit in units], start_date, end_date, exclude_booking=exclude_booking
    ).only('unit_id', 'check_in', 'check_out', 'status')

    available = filter_available_units(units, existing, start_date, end_date)
    logger.debug(
        "Availability for %s %s..%s: %d of %d units free",
        unit_type, start_date, end_date, len(available), len(units),
    )
    return available
