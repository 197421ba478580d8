"""
Printable rental contract for a booking, rendered with reportlab.

Sections:
1. Parties (hotel as landlord, guest as tenant)
2. Subject (unit and unit type, residential use)
3. Term (contract months or nights, start and end dates)
4. Rent (total including VAT, monthly rate for yearly contracts)
5. Tenant obligations and vacating terms
6. Signature blocks
"""

from io import BytesIO

from django.conf import settings
from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from .invoice_service import HEADER_COLOR

TENANT_OBLIGATIONS = [
    "The tenant shall keep the unit in good order and use it for residence only.",
    "The tenant may not sublet the unit or assign this contract without the "
    "landlord's written consent.",
    "The tenant shall follow the building rules on quiet hours and cleanliness.",
    "The tenant is liable for any damage to the unit or its contents during the stay.",
]

CHECKOUT_TIME = '12:00'


class ContractPDFBuilder:
    """
    Build an A4 rental contract PDF.

    Usage:
        buffer = ContractPDFBuilder(booking).build()
        response = HttpResponse(buffer.getvalue(), content_type='application/pdf')
    """

    def __init__(self, booking):
        self.booking = booking
        self.currency = getattr(settings, 'LODGING_CURRENCY', 'SAR')
        self.hotel_name = getattr(settings, 'LODGING_HOTEL_NAME', 'Hotel')
        self.hotel_address = getattr(settings, 'LODGING_HOTEL_ADDRESS', '')
        self.registration_number = getattr(settings, 'LODGING_CR_NUMBER', '')

    @property
    def contract_number(self):
        return f"CTR-{self.booking.pk:06d}"

    def money(self, value):
        return f"{value:,.2f} {self.currency}"

    def get_clauses(self):
        """Numbered contract clauses as (title, paragraphs) pairs."""
        booking = self.booking
        unit = booking.unit
        start = booking.check_in.strftime('%d/%m/%Y')
        end = booking.check_out.strftime('%d/%m/%Y')

        if booking.booking_type == booking.TYPE_YEARLY and booking.duration_months:
            term = f"{booking.duration_months} months"
            rent = (
                f"The total rent is {self.money(booking.total_price)} including VAT "
                f"and services, equal to {self.money(booking.total_price / booking.duration_months)} "
                f"per month."
            )
        else:
            term = f"{booking.nights} nights"
            rent = f"The total rent is {self.money(booking.total_price)} including VAT and services."

        return [
            ('Subject', [
                f"The landlord lets unit {unit.unit_number} ({unit.unit_type.name}) "
                f"to the tenant for residential use only."
            ]),
            ('Term', [
                f"This contract runs for {term}, starting {start} and ending {end}."
            ]),
            ('Rent', [rent]),
            ('Tenant obligations', [f"• {line}" for line in TENANT_OBLIGATIONS]),
            ('Vacating', [
                f"The tenant shall vacate the unit and return its keys by {CHECKOUT_TIME} "
                f"on {end}. A late departure is charged as one extra day."
            ]),
        ]

    def build(self):
        """Render the contract and return a rewound BytesIO."""
        buffer = BytesIO()

        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=20*mm,
            leftMargin=20*mm,
            topMargin=20*mm,
            bottomMargin=20*mm
        )

        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            'ContractTitle',
            parent=styles['Heading1'],
            fontSize=18,
            alignment=1,
            spaceAfter=4,
            textColor=HEADER_COLOR
        )
        subtitle_style = ParagraphStyle(
            'ContractSubtitle',
            parent=styles['Normal'],
            fontSize=10,
            alignment=1,
            textColor=colors.grey,
            spaceAfter=12
        )
        heading_style = ParagraphStyle(
            'ClauseHeading',
            parent=styles['Heading3'],
            fontSize=11,
            spaceBefore=8,
            spaceAfter=4,
            textColor=HEADER_COLOR
        )
        body_style = ParagraphStyle(
            'ClauseBody',
            parent=styles['Normal'],
            fontSize=10,
            leading=14,
            leftIndent=6*mm
        )

        story = [
            Paragraph("Residential Rental Contract", title_style),
            Paragraph(
                f"Contract {self.contract_number} | "
                f"Issued {timezone.localdate().strftime('%B %d, %Y')}",
                subtitle_style
            ),
            self._build_parties_table(),
            Spacer(1, 6*mm),
        ]

        for number, (title, paragraphs) in enumerate(self.get_clauses(), start=1):
            story.append(Paragraph(f"{number}. {title}", heading_style))
            for text in paragraphs:
                story.append(Paragraph(text, body_style))

        story.append(Spacer(1, 15*mm))
        story.append(self._build_signature_table())

        doc.build(story)
        buffer.seek(0)

        return buffer

    def _build_parties_table(self):
        booking = self.booking

        landlord = [self.hotel_name]
        if self.registration_number:
            landlord.append(f"CR No. {self.registration_number}")
        if self.hotel_address:
            landlord.append(self.hotel_address)

        tenant = [booking.guest_name]
        if booking.guest_phone:
            tenant.append(f"Phone {booking.guest_phone}")

        data = [
            ['First Party (Landlord)', 'Second Party (Tenant)'],
            ['\n'.join(landlord), '\n'.join(tenant)],
        ]

        table = Table(data, colWidths=[85*mm, 85*mm])
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), HEADER_COLOR),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('TOPPADDING', (0, 0), (-1, -1), 5),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 5),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ]))
        return table

    def _build_signature_table(self):
        data = [
            ['First Party (Landlord)', 'Second Party (Tenant)'],
            [self.hotel_name, self.booking.guest_name],
            ['', ''],
            ['Signature and stamp', 'Signature'],
        ]

        table = Table(data, colWidths=[85*mm, 85*mm], rowHeights=[None, None, 20*mm, None])
        table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
            ('LINEBELOW', (0, 2), (-1, 2), 1, colors.grey),
            ('TEXTCOLOR', (0, 3), (-1, 3), colors.grey),
        ]))
        return table
