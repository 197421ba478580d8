"""
Dashboard services: room status board and front-desk KPIs.
"""

from decimal import Decimal, ROUND_HALF_UP
from datetime import timedelta
from collections import defaultdict

from django.db.models import Sum
from django.utils import timezone


def room_status_summary(units):
    """
    Count units by physical status.

    Args:
        units: iterable of objects with a status attribute

    Returns:
        dict: total, available, occupied, not_ready (cleaning + maintenance),
              occupancy_rate (whole percent, half-up)
    """
    counts = defaultdict(int)
    total = 0
    for unit in units:
        counts[unit.status] += 1
        total += 1

    occupied = counts['occupied']
    if total:
        occupancy_rate = int(
            (Decimal(occupied) * 100 / Decimal(total)).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
        )
    else:
        occupancy_rate = 0

    return {
        'total': total,
        'available': counts['available'],
        'occupied': occupied,
        'not_ready': counts['cleaning'] + counts['maintenance'],
        'occupancy_rate': occupancy_rate,
    }


class DashboardService:
    """
    Front-desk dashboard data.

    Usage:
        service = DashboardService()
        data = service.get_dashboard_data()
    """

    CHART_DAYS = 7
    RECENT_BOOKINGS = 5

    def __init__(self, today=None):
        self.today = today or timezone.localdate()

    def get_units(self):
        """All units with the guest currently checked in, if any."""
        from lodging.models import Booking, Unit

        guests = dict(
            Booking.objects.filter(status=Booking.STATUS_CHECKED_IN)
            .values_list('unit_id', 'guest_name')
        )
        return [
            {
                'id': unit.id,
                'unit_number': unit.unit_number,
                'unit_type': unit.unit_type.name,
                'status': unit.status,
                'guest_name': guests.get(unit.id),
            }
            for unit in Unit.objects.select_related('unit_type').order_by('unit_number')
        ]

    def get_recent_bookings(self):
        from lodging.models import Booking

        bookings = Booking.objects.select_related('unit').order_by('-created_at')[:self.RECENT_BOOKINGS]
        return [
            {
                'id': booking.id,
                'guest_name': booking.guest_name,
                'unit_number': booking.unit.unit_number,
                'check_in': booking.check_in.isoformat(),
                'status': booking.status,
                'total_price': str(booking.total_price),
            }
            for booking in bookings
        ]

    def _cash_by_day(self, start_date, end_date):
        """Net cash per payment date in [start_date, end_date]."""
        from lodging.models import Payment

        rows = (
            Payment.objects.filter(payment_date__gte=start_date, payment_date__lte=end_date)
            .values('payment_date', 'kind')
            .annotate(total=Sum('amount'))
        )
        by_day = defaultdict(lambda: Decimal('0.00'))
        for row in rows:
            if row['kind'] == Payment.KIND_REFUND:
                by_day[row['payment_date']] -= row['total']
            else:
                by_day[row['payment_date']] += row['total']
        return by_day

    def get_month_revenue(self):
        """Cash received since the first of the month."""
        start = self.today.replace(day=1)
        return sum(self._cash_by_day(start, self.today).values(), Decimal('0.00'))

    def get_cash_chart(self):
        """Net cash for each of the last seven days, oldest first."""
        start = self.today - timedelta(days=self.CHART_DAYS - 1)
        by_day = self._cash_by_day(start, self.today)
        return [
            {
                'date': day.isoformat(),
                'amount': str(by_day.get(day, Decimal('0.00'))),
            }
            for day in (start + timedelta(days=offset) for offset in range(self.CHART_DAYS))
        ]

    def get_front_desk_counts(self):
        from lodging.models import Booking

        confirmed = Booking.objects.filter(status=Booking.STATUS_CONFIRMED)
        checked_in = Booking.objects.filter(status=Booking.STATUS_CHECKED_IN)
        return {
            'active_bookings': checked_in.count(),
            'pending_arrivals': confirmed.filter(check_in=self.today).count(),
            'late_arrivals': confirmed.filter(check_in__lt=self.today).count(),
            'overdue_departures': checked_in.filter(check_out__lt=self.today).count(),
        }

    def get_dashboard_data(self):
        from lodging.models import Unit

        summary = room_status_summary(Unit.objects.only('status'))
        return {
            'date': self.today.isoformat(),
            'units': self.get_units(),
            'room_status': summary,
            'recent_bookings': self.get_recent_bookings(),
            'month_revenue': str(self.get_month_revenue()),
            'cash_chart': self.get_cash_chart(),
            **self.get_front_desk_counts(),
        }
