"""
Management command to price a stay from the command line.

Usage:
    python manage.py quote_stay 3 2025-03-01 2025-03-05
    python manage.py quote_stay 3 2025-03-01 --yearly --months 6
"""

from datetime import datetime

from django.core.management.base import BaseCommand, CommandError


def _parse_date(value):
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise CommandError(f'Invalid date: {value} (expected YYYY-MM-DD)')


class Command(BaseCommand):
    help = 'Show the nightly breakdown and total price of a stay'

    def add_arguments(self, parser):
        parser.add_argument('unit_type_id', type=int, help='UnitType id')
        parser.add_argument('start_date', type=str, help='Check-in date (YYYY-MM-DD)')
        parser.add_argument(
            'end_date',
            type=str,
            nargs='?',
            help='Check-out date (YYYY-MM-DD), not needed with --yearly'
        )
        parser.add_argument(
            '--yearly',
            action='store_true',
            help='Price a yearly contract from the annual rate'
        )
        parser.add_argument(
            '--months',
            type=int,
            default=12,
            help='Contract length in months for --yearly (default 12)'
        )

    def handle(self, *args, **options):
        from lodging.models import UnitType
        from lodging.services import (
            MODE_NIGHTLY, MODE_YEARLY, PricingError, display_amount, load_pricing_context,
        )

        try:
            unit_type = UnitType.objects.get(pk=options['unit_type_id'])
        except UnitType.DoesNotExist:
            raise CommandError(f"Unit type {options['unit_type_id']} not found")

        start_date = _parse_date(options['start_date'])
        if options['yearly']:
            mode, end_date, months = MODE_YEARLY, None, options['months']
        else:
            if not options['end_date']:
                raise CommandError('end_date is required unless --yearly is given')
            mode, end_date, months = MODE_NIGHTLY, _parse_date(options['end_date']), None

        try:
            result = load_pricing_context(unit_type).compute(
                start_date, end_date, mode=mode, duration_months=months
            )
        except PricingError as e:
            raise CommandError(str(e))

        self.stdout.write(f"{unit_type.name}: {result.start_date} → {result.end_date}")
        self.stdout.write('')

        if mode == MODE_YEARLY:
            self.stdout.write(f"  Annual rate:   {result.annual_price}")
            self.stdout.write(f"  Monthly rate:  {result.monthly_rate:.2f}")
            self.stdout.write(f"  Months:        {result.months}")
        else:
            for night in result.breakdown:
                marker = f"  [{night.rule_name}]" if night.is_season else ''
                self.stdout.write(f"  {night.date:%a %Y-%m-%d}  {night.price:>10}{marker}")
            self.stdout.write(f"  Nights:        {result.nights}")

        self.stdout.write('')
        self.stdout.write(self.style.SUCCESS(
            f"Total: {result.total_price} (display {display_amount(result.total_price)})"
        ))
