"""
Printable tax invoice for a booking, rendered with reportlab.
"""

from io import BytesIO

from django.conf import settings
from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

HEADER_COLOR = colors.HexColor('#1e3a5f')


class InvoicePDFBuilder:
    """
    Build an A4 invoice PDF.

    Figures come from the posted invoice when there is one, otherwise
    from the booking itself.

    Usage:
        buffer = InvoicePDFBuilder(booking, invoice).build()
        response = HttpResponse(buffer.getvalue(), content_type='application/pdf')
    """

    def __init__(self, booking, invoice=None):
        self.booking = booking
        self.invoice = invoice
        self.currency = getattr(settings, 'LODGING_CURRENCY', 'SAR')
        self.hotel_name = getattr(settings, 'LODGING_HOTEL_NAME', 'Hotel')
        self.tax_number = getattr(settings, 'LODGING_TAX_NUMBER', '')

    def money(self, value):
        return f"{value:,.2f} {self.currency}"

    def get_figures(self):
        booking = self.booking
        if self.invoice is not None:
            subtotal = self.invoice.subtotal
            tax_amount = self.invoice.tax_amount
            total = self.invoice.total_amount
        else:
            subtotal = booking.subtotal
            tax_amount = booking.tax_amount
            total = booking.total_price

        paid = booking.paid_amount
        return {
            'room_amount': booking.room_amount,
            'additional_services': booking.additional_services,
            'discount_amount': booking.discount_amount,
            'subtotal': subtotal,
            'tax_amount': tax_amount,
            'total': total,
            'paid': paid,
            'remaining': total - paid,
        }

    def build(self):
        """Render the invoice and return a rewound BytesIO."""
        buffer = BytesIO()

        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=15*mm,
            leftMargin=15*mm,
            topMargin=15*mm,
            bottomMargin=15*mm
        )

        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            'InvoiceTitle',
            parent=styles['Heading1'],
            fontSize=18,
            spaceAfter=6,
            textColor=HEADER_COLOR
        )
        subtitle_style = ParagraphStyle(
            'InvoiceSubtitle',
            parent=styles['Normal'],
            fontSize=10,
            textColor=colors.grey,
            spaceAfter=12
        )

        story = []

        story.append(Paragraph(self.hotel_name, title_style))
        if self.tax_number:
            story.append(Paragraph(f"VAT No. {self.tax_number}", subtitle_style))

        if self.invoice is not None:
            invoice_line = f"Tax Invoice {self.invoice.number}"
            invoice_date = self.invoice.invoice_date or timezone.localdate()
        else:
            invoice_line = "Pro-forma Invoice"
            invoice_date = timezone.localdate()
        story.append(Paragraph(
            f"{invoice_line} | {invoice_date.strftime('%B %d, %Y')}",
            subtitle_style
        ))
        story.append(Spacer(1, 4*mm))

        story.append(self._build_stay_table())
        story.append(Spacer(1, 8*mm))
        story.append(self._build_amounts_table())

        doc.build(story)
        buffer.seek(0)

        return buffer

    def _build_stay_table(self):
        booking = self.booking
        data = [
            ['Guest', booking.guest_name],
            ['Unit', f"{booking.unit.unit_number} ({booking.unit.unit_type.name})"],
            ['Check-in', booking.check_in.strftime('%b %d, %Y')],
            ['Check-out', booking.check_out.strftime('%b %d, %Y')],
        ]
        if booking.booking_type == booking.TYPE_YEARLY:
            data.append(['Contract', f"{booking.duration_months} months"])
        else:
            data.append(['Nights', str(booking.nights)])

        table = Table(data, colWidths=[45*mm, 120*mm])
        table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('FONTNAME', (1, 0), (1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
            ('LINEBELOW', (0, 0), (-1, -1), 0.25, colors.lightgrey),
        ]))
        return table

    def _build_amounts_table(self):
        figures = self.get_figures()

        data = [
            ['Description', 'Amount'],
            ['Accommodation', self.money(figures['room_amount'])],
        ]
        if figures['additional_services']:
            data.append(['Additional services', self.money(figures['additional_services'])])
        if figures['discount_amount']:
            data.append(['Discount', f"-{self.money(figures['discount_amount'])}"])

        data.extend([
            ['Subtotal', self.money(figures['subtotal'])],
            ['VAT', self.money(figures['tax_amount'])],
            ['Total', self.money(figures['total'])],
            ['Paid', self.money(figures['paid'])],
            ['Balance due', self.money(figures['remaining'])],
        ])

        table = Table(data, colWidths=[110*mm, 55*mm])
        total_row = len(data) - 3
        table.setStyle(TableStyle([
            # Header
            ('BACKGROUND', (0, 0), (-1, 0), HEADER_COLOR),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),

            # Body
            ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
            ('TOPPADDING', (0, 0), (-1, -1), 4),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 4),

            # Total
            ('FONTNAME', (0, total_row), (-1, total_row), 'Helvetica-Bold'),
            ('LINEABOVE', (0, total_row), (-1, total_row), 1, HEADER_COLOR),

            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ]))
        return table
