from datetime import date
from decimal import Decimal

from django.test import TestCase, override_settings

from lodging.models import Unit, UnitType
from lodging.services import BookingService, ContractPDFBuilder


@override_settings(LODGING_CURRENCY='SAR', LODGING_HOTEL_NAME='Palm Residences')
class ContractPDFBuilderTests(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.unit_type = UnitType.objects.create(
            name='Studio',
            daily_price=Decimal('100.00'),
            annual_price=Decimal('12000.00'),
        )
        cls.unit = Unit.objects.create(unit_type=cls.unit_type, unit_number='101')

    def setUp(self):
        self.service = BookingService(vat_percent=Decimal('15'))

    def test_yearly_contract_terms(self):
        booking = self.service.create_booking(
            unit=self.unit, guest_name='Sara Ahmed', start_date=date(2025, 1, 1),
            booking_type='yearly', duration_months=6,
        )

        clauses = dict(ContractPDFBuilder(booking).get_clauses())

        self.assertIn('unit 101 (Studio)', clauses['Subject'][0])
        self.assertIn('6 months, starting 01/01/2025 and ending 01/07/2025', clauses['Term'][0])
        self.assertIn('6,900.00 SAR', clauses['Rent'][0])
        self.assertIn('1,150.00 SAR per month', clauses['Rent'][0])

    def test_daily_contract_counts_nights(self):
        booking = self.service.create_booking(
            unit=self.unit, guest_name='Sara Ahmed',
            start_date=date(2025, 3, 1), end_date=date(2025, 3, 4),
        )

        builder = ContractPDFBuilder(booking)
        clauses = dict(builder.get_clauses())

        self.assertIn('3 nights', clauses['Term'][0])
        self.assertNotIn('per month', clauses['Rent'][0])
        self.assertEqual(builder.contract_number, f"CTR-{booking.pk:06d}")

    def test_build_returns_pdf(self):
        booking = self.service.create_booking(
            unit=self.unit, guest_name='Sara Ahmed', guest_phone='0500000000',
            start_date=date(2025, 3, 1), end_date=date(2025, 3, 4),
        )

        buffer = ContractPDFBuilder(booking).build()

        self.assertTrue(buffer.getvalue().startswith(b'%PDF'))
