"""
Inventory models: UnitType and Unit.
"""

from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal


class UnitType(models.Model):
    """
    Category of rentable units sharing a price model and features.

    Pricing:
        - daily_price drives nightly bookings (pricing rules adjust it per date)
        - annual_price drives yearly contracts (annual_price / 12 per month)

    Example:
        "Two Bedroom Apartment": 450.00 per night, 96000.00 per year
    """
    name = models.CharField(max_length=100, help_text="e.g., Studio, Two Bedroom Apartment")

    daily_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Base nightly rate"
    )

    annual_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Base rate for yearly contracts (leave empty if not offered)"
    )

    max_adults = models.PositiveIntegerField(default=2)
    max_children = models.PositiveIntegerField(default=0)

    area = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="Floor area in square metres"
    )

    features = models.JSONField(
        default=list,
        blank=True,
        help_text="Ordered list of features (e.g., [\"Kitchen\", \"Balcony\"])"
    )

    sort_order = models.PositiveIntegerField(default=0, help_text="Display order")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['sort_order', 'name']
        verbose_name = "Unit Type"
        verbose_name_plural = "Unit Types"

    def __str__(self):
        return self.name

    @property
    def feature_count(self):
        return len(self.features or [])

    @property
    def offers_yearly(self):
        """Whether a yearly contract can be priced for this type."""
        return bool(self.annual_price and self.annual_price > 0)


class Unit(models.Model):
    """
    A single rentable room or apartment.

    Status reflects the physical state of the unit right now; future
    reservations are tracked on Booking, not here.
    """
    STATUS_AVAILABLE = 'available'
    STATUS_OCCUPIED = 'occupied'
    STATUS_CLEANING = 'cleaning'
    STATUS_MAINTENANCE = 'maintenance'

    STATUS_CHOICES = [
        (STATUS_AVAILABLE, 'Available'),
        (STATUS_OCCUPIED, 'Occupied'),
        (STATUS_CLEANING, 'Cleaning'),
        (STATUS_MAINTENANCE, 'Maintenance'),
    ]

    unit_type = models.ForeignKey(
        UnitType,
        on_delete=models.PROTECT,
        related_name='units',
        help_text="Category this unit belongs to"
    )
    unit_number = models.CharField(max_length=20, unique=True)
    floor = models.IntegerField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=STATUS_CHOICES,
        default=STATUS_AVAILABLE
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['unit_number']
        verbose_name = "Unit"
        verbose_name_plural = "Units"

    def __str__(self):
        return f"{self.unit_number} ({self.unit_type.name})"

    @property
    def is_ready(self):
        return self.status == self.STATUS_AVAILABLE
