import tempfile
from datetime import date
from decimal import Decimal
from io import StringIO
from pathlib import Path

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from lodging.models import PricingRule, UnitType


class QuoteStayCommandTests(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.unit_type = UnitType.objects.create(
            name='Studio', daily_price=Decimal('100.00'), annual_price=Decimal('12000.00')
        )
        PricingRule.objects.create(
            name='Festival', unit_type=cls.unit_type, value=Decimal('150.00'),
            start_date=date(2025, 3, 2), end_date=date(2025, 3, 2),
        )

    def run_command(self, *args):
        out = StringIO()
        call_command('quote_stay', *args, stdout=out)
        return out.getvalue()

    def test_nightly_breakdown(self):
        output = self.run_command(str(self.unit_type.pk), '2025-03-01', '2025-03-04')

        self.assertIn('[Festival]', output)
        self.assertIn('Nights:        3', output)
        self.assertIn('Total: 350.00', output)

    def test_yearly(self):
        output = self.run_command(str(self.unit_type.pk), '2025-01-01', '--yearly', '--months', '6')

        self.assertIn('Monthly rate:  1000.00', output)
        self.assertIn('Total: 6000', output)

    def test_invalid_range(self):
        with self.assertRaises(CommandError):
            self.run_command(str(self.unit_type.pk), '2025-03-04', '2025-03-01')

    def test_end_date_required(self):
        with self.assertRaises(CommandError):
            self.run_command(str(self.unit_type.pk), '2025-03-04')

    def test_unknown_unit_type(self):
        with self.assertRaises(CommandError):
            self.run_command('9999', '2025-03-01', '2025-03-02')


class ImportPricingRulesCommandTests(TestCase):

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.path = Path(tmp.name) / 'rules.csv'
        self.path.write_text(
            "Name,Value,Start Date,End Date\n"
            "Summer,300,2025-06-01,2025-08-31\n"
            "Broken,abc,2025-06-01,2025-08-31\n",
            encoding='utf-8',
        )

    def test_import(self):
        out = StringIO()

        call_command('import_pricing_rules', str(self.path), stdout=out)

        self.assertEqual(PricingRule.objects.count(), 1)
        self.assertIn('Created:       1', out.getvalue())
        self.assertIn('Row 3:', out.getvalue())

    def test_validate_only(self):
        out = StringIO()

        call_command('import_pricing_rules', str(self.path), '--validate-only', stdout=out)

        self.assertFalse(PricingRule.objects.exists())
        self.assertIn('Valid:         1', out.getvalue())

    def write_broken_rows(self, count):
        rows = ''.join(f"Broken {n},abc,2025-06-01,2025-08-31\n" for n in range(count))
        self.path.write_text("Name,Value,Start Date,End Date\nSummer,300,2025-06-01,2025-08-31\n" + rows,
                             encoding='utf-8')

    def test_many_errors_are_summarised(self):
        self.write_broken_rows(25)
        out = StringIO()

        call_command('import_pricing_rules', str(self.path), stdout=out)

        self.assertIn('25 errors (use --verbose to see details)', out.getvalue())
        self.assertNotIn('Row 3:', out.getvalue())

    def test_verbose_lists_every_error(self):
        self.write_broken_rows(25)
        out = StringIO()

        call_command('import_pricing_rules', str(self.path), '--verbose', stdout=out)

        self.assertIn('Errors (25):', out.getvalue())
        self.assertIn('Row 27:', out.getvalue())

    def test_missing_file(self):
        with self.assertRaises(CommandError):
            call_command('import_pricing_rules', str(self.path.with_name('missing.csv')))

    def test_unsupported_format(self):
        other = self.path.with_suffix('.txt')
        other.write_text('x', encoding='utf-8')

        with self.assertRaises(CommandError):
            call_command('import_pricing_rules', str(other))
