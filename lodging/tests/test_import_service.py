import tempfile
from datetime import date
from decimal import Decimal
from pathlib import Path

import pandas as pd
from django.test import TestCase

from lodging.models import PricingRule, UnitType
from lodging.services import PricingRuleImportService


class PricingRuleImportTests(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.studio = UnitType.objects.create(name='Studio', daily_price=Decimal('100.00'))

    def setUp(self):
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.tmp_dir = Path(tmp.name)

    def write_csv(self, text, name='rules.csv'):
        path = self.tmp_dir / name
        path.write_text(text, encoding='utf-8')
        return path

    def test_imports_valid_rows(self):
        path = self.write_csv(
            "Rule Name,Unit Type,Rule Type,Value,Start Date,End Date,Priority,Days,Active\n"
            "Ramadan,Studio,fixed,650,2025-03-01,2025-03-30,80,,yes\n"
            "Weekend,,multiplier,1.20,2025-01-01,2025-12-31,40,\"Thu,Fri\",\n"
        )

        result = PricingRuleImportService().import_file(path)

        self.assertTrue(result['success'])
        self.assertEqual(result['rows_total'], 2)
        self.assertEqual(result['rows_created'], 2)
        self.assertEqual(result['rows_skipped'], 0)

        ramadan = PricingRule.objects.get(name='Ramadan')
        self.assertEqual(ramadan.unit_type, self.studio)
        self.assertEqual(ramadan.value, Decimal('650.00'))
        self.assertEqual(ramadan.end_date, date(2025, 3, 30))
        self.assertEqual(ramadan.priority, 80)

        weekend = PricingRule.objects.get(name='Weekend')
        self.assertIsNone(weekend.unit_type)
        self.assertEqual(weekend.rule_type, PricingRule.RULE_MULTIPLIER)
        self.assertEqual(weekend.days_of_week, [3, 4])
        self.assertTrue(weekend.active)

    def test_invalid_rows_are_skipped(self):
        path = self.write_csv(
            "Name,Unit Type,Value,Start,End,Priority\n"
            "Good,studio,200,2025-05-01,2025-05-10,\n"
            "Unknown type,Penthouse,200,2025-05-01,2025-05-10,\n"
            "Backwards,,200,2025-05-10,2025-05-01,\n"
            "Bad date,,200,someday,2025-05-01,\n"
            "Too important,,200,2025-05-01,2025-05-10,150\n"
        )

        result = PricingRuleImportService().import_file(path)

        self.assertEqual(result['rows_created'], 1)
        self.assertEqual(result['rows_skipped'], 4)
        self.assertEqual([error['row'] for error in result['errors']], [3, 4, 5, 6])
        self.assertIn('Penthouse', result['errors'][0]['message'])
        self.assertEqual(list(PricingRule.objects.values_list('name', flat=True)), ['Good'])

    def test_percent_rule_type_is_rejected(self):
        path = self.write_csv(
            "Name,Rule Type,Value,Start Date,End Date\n"
            "Promo,percent,20,2025-05-01,2025-05-10\n"
        )

        result = PricingRuleImportService().import_file(path)

        self.assertEqual(result['rows_created'], 0)
        self.assertIn('Unknown rule type: percent', result['errors'][0]['message'])
        self.assertFalse(PricingRule.objects.exists())

    def test_validate_only_creates_nothing(self):
        path = self.write_csv(
            "Name,Value,Start Date,End Date\n"
            "Summer,300,2025-06-01,2025-08-31\n"
        )

        result = PricingRuleImportService().import_file(path, validate_only=True)

        self.assertTrue(result['success'])
        self.assertEqual(result['rows_valid'], 1)
        self.assertEqual(result['rows_created'], 0)
        self.assertFalse(PricingRule.objects.exists())

    def test_missing_columns(self):
        path = self.write_csv("Name,Value\nSummer,300\n")

        result = PricingRuleImportService().import_file(path)

        self.assertFalse(result['success'])
        self.assertIn('end_date', result['errors'][0]['message'])

    def test_missing_file(self):
        result = PricingRuleImportService().import_file(self.tmp_dir / 'nope.csv')

        self.assertFalse(result['success'])

    def test_excel_file(self):
        path = self.tmp_dir / 'rules.xlsx'
        pd.DataFrame([{
            'Season': 'Eid',
            'Room Type': 'Studio',
            'Adjustment': 'amount',
            'Amount': '75',
            'From': '2025-06-05',
            'To': '2025-06-09',
        }]).to_excel(path, index=False)

        result = PricingRuleImportService().import_file(path)

        self.assertEqual(result['rows_created'], 1)
        rule = PricingRule.objects.get()
        self.assertEqual(rule.rule_type, PricingRule.RULE_AMOUNT)
        self.assertEqual(rule.value, Decimal('75.00'))
