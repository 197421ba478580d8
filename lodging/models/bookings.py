"""
Booking models: Booking, Payment, Invoice.
"""

from django.db import models
from django.db.models import Sum
from decimal import Decimal
from django.core.validators import MinValueValidator


class Booking(models.Model):
    """
    A stay in one unit over a half-open date range [check_in, check_out).

    Amounts are frozen from the price calculation at creation time:
        room_amount  = engine total for the stay
        subtotal     = room_amount + additional_services - discount_amount
        total_price  = subtotal + tax_amount
    """
    TYPE_DAILY = 'daily'
    TYPE_YEARLY = 'yearly'

    BOOKING_TYPE_CHOICES = [
        (TYPE_DAILY, 'Daily'),
        (TYPE_YEARLY, 'Yearly Contract'),
    ]

    STATUS_PENDING_DEPOSIT = 'pending_deposit'
    STATUS_CONFIRMED = 'confirmed'
    STATUS_CHECKED_IN = 'checked_in'
    STATUS_CHECKED_OUT = 'checked_out'
    STATUS_CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (STATUS_PENDING_DEPOSIT, 'Pending Deposit'),
        (STATUS_CONFIRMED, 'Confirmed'),
        (STATUS_CHECKED_IN, 'Checked In'),
        (STATUS_CHECKED_OUT, 'Checked Out'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]

    # Statuses that keep the unit reserved for the stay dates
    HOLDING_STATUSES = (STATUS_CONFIRMED, STATUS_CHECKED_IN, STATUS_PENDING_DEPOSIT)

    unit = models.ForeignKey(
        'Unit',
        on_delete=models.PROTECT,
        related_name='bookings'
    )

    guest_name = models.CharField(max_length=200)
    guest_phone = models.CharField(max_length=30, blank=True)

    check_in = models.DateField()
    check_out = models.DateField()

    booking_type = models.CharField(
        max_length=10,
        choices=BOOKING_TYPE_CHOICES,
        default=TYPE_DAILY
    )
    duration_months = models.PositiveIntegerField(
        null=True,
        blank=True,
        help_text="Contract length for yearly bookings"
    )

    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_PENDING_DEPOSIT,
        db_index=True
    )

    room_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    additional_services = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    discount_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_price = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Booking"
        verbose_name_plural = "Bookings"
        indexes = [
            models.Index(fields=['unit', 'check_in', 'check_out'], name='booking_unit_dates_idx'),
        ]

    def __str__(self):
        return f"{self.guest_name} - {self.unit.unit_number} ({self.check_in} → {self.check_out})"

    @property
    def nights(self):
        return (self.check_out - self.check_in).days

    @property
    def holds_unit(self):
        return self.status in self.HOLDING_STATUSES

    @property
    def paid_amount(self):
        """Cash received for this booking, net of refunds."""
        totals = {
            row['kind']: row['total']
            for row in self.payments.values('kind').annotate(total=Sum('amount'))
        }
        received = (
            totals.get(Payment.KIND_PAYMENT, Decimal('0.00'))
            + totals.get(Payment.KIND_ADVANCE, Decimal('0.00'))
        )
        return received - totals.get(Payment.KIND_REFUND, Decimal('0.00'))

    @property
    def remaining_amount(self):
        return self.total_price - self.paid_amount


class Payment(models.Model):
    """Money received for (or refunded from) a booking."""
    KIND_ADVANCE = 'advance_payment'
    KIND_PAYMENT = 'payment'
    KIND_REFUND = 'refund'

    KIND_CHOICES = [
        (KIND_ADVANCE, 'Advance Payment / Deposit'),
        (KIND_PAYMENT, 'Payment'),
        (KIND_REFUND, 'Refund'),
    ]

    METHOD_CHOICES = [
        ('cash', 'Cash'),
        ('card', 'Card'),
        ('bank_transfer', 'Bank Transfer'),
    ]

    booking = models.ForeignKey(
        Booking,
        on_delete=models.CASCADE,
        related_name='payments'
    )
    kind = models.CharField(max_length=20, choices=KIND_CHOICES)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    method = models.CharField(max_length=20, choices=METHOD_CHOICES, default='cash')
    reference = models.CharField(max_length=100, blank=True)
    payment_date = models.DateField()
    description = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-payment_date', '-created_at']
        verbose_name = "Payment"
        verbose_name_plural = "Payments"

    def __str__(self):
        return f"{self.get_kind_display()} {self.amount} ({self.payment_date})"


class Invoice(models.Model):
    """Tax invoice issued for a booking."""
    STATUS_DRAFT = 'draft'
    STATUS_POSTED = 'posted'

    STATUS_CHOICES = [
        (STATUS_DRAFT, 'Draft'),
        (STATUS_POSTED, 'Posted'),
    ]

    booking = models.OneToOneField(
        Booking,
        on_delete=models.PROTECT,
        related_name='invoice'
    )
    number = models.CharField(max_length=20, unique=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_DRAFT)
    invoice_date = models.DateField(null=True, blank=True)

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    tax_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Invoice"
        verbose_name_plural = "Invoices"

    def __str__(self):
        return f"{self.number} ({self.get_status_display()})"

    @property
    def is_posted(self):
        return self.status == self.STATUS_POSTED
