"""
Pricing models: PricingRule.
"""

from django.db import models
from decimal import Decimal
from django.core.validators import MinValueValidator, MaxValueValidator


WEEKDAY_NAMES = ['Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun']


class PricingRule(models.Model):
    """
    Date-scoped override of a unit type's nightly rate.

    A rule covers every date from start_date to end_date (both inclusive),
    optionally restricted to some weekdays. When several rules cover the
    same night, the pricing engine picks one: highest priority, then the
    narrowest window, then the first rule it was given.

    Examples:
        - "Ramadan Season": fixed 650.00, Mar 01 - Mar 30, priority 80
        - "Weekend Uplift": multiplier 1.20, all year, Thu/Fri, priority 40
        - "National Day": amount +100.00, Sep 23 - Sep 23, priority 90
    """
    RULE_FIXED = 'fixed'
    RULE_MULTIPLIER = 'multiplier'
    RULE_AMOUNT = 'amount'

    RULE_TYPE_CHOICES = [
        (RULE_FIXED, 'Fixed Nightly Price'),
        (RULE_MULTIPLIER, 'Multiplier (×)'),
        (RULE_AMOUNT, 'Fixed Adjustment (+/-)'),
    ]

    name = models.CharField(
        max_length=100,
        help_text="Descriptive name (e.g., 'Summer Season', 'Weekend Uplift')"
    )

    unit_type = models.ForeignKey(
        'UnitType',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='pricing_rules',
        help_text="Leave empty to apply to every unit type"
    )

    rule_type = models.CharField(
        max_length=20,
        choices=RULE_TYPE_CHOICES,
        default=RULE_FIXED,
        help_text="How the value changes the nightly rate"
    )

    value = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        help_text="For fixed: the nightly price. For multiplier: e.g. 1.20. "
                  "For adjustment: amount added (negative to reduce)."
    )

    start_date = models.DateField(help_text="First night covered (inclusive)")
    end_date = models.DateField(help_text="Last night covered (inclusive)")

    days_of_week = models.JSONField(
        default=list,
        blank=True,
        help_text="Weekdays covered, 0=Mon .. 6=Sun. Empty means every day."
    )

    priority = models.PositiveIntegerField(
        default=50,
        validators=[MinValueValidator(1), MaxValueValidator(100)],
        help_text="Priority 1-100. Higher priority wins when rules overlap."
    )

    active = models.BooleanField(
        default=True,
        help_text="Inactive rules are ignored by price calculations"
    )

    notes = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-priority', 'start_date', 'name']
        verbose_name = "Pricing Rule"
        verbose_name_plural = "Pricing Rules"

    def __str__(self):
        status = "" if self.active else " [INACTIVE]"
        return f"{self.name} ({self.get_value_display()}){status}"

    def get_value_display(self):
        """Display formatted effect."""
        if self.rule_type == self.RULE_MULTIPLIER:
            return f"×{self.value}"
        if self.rule_type == self.RULE_AMOUNT:
            sign = '+' if self.value >= 0 else ''
            return f"{sign}{self.value}"
        return f"{self.value}"

    def get_days_display(self):
        if not self.days_of_week:
            return "Every day"
        return ", ".join(WEEKDAY_NAMES[day] for day in sorted(self.days_of_week))

    def clean(self):
        """Validate window, weekdays and value."""
        from django.core.exceptions import ValidationError

        errors = {}
        if self.end_date and self.start_date and self.end_date < self.start_date:
            errors['end_date'] = 'End date cannot be before start date.'

        days = self.days_of_week or []
        if not isinstance(days, list) or any(
            not isinstance(day, int) or isinstance(day, bool) or not 0 <= day <= 6
            for day in days
        ):
            errors['days_of_week'] = 'Use a list of weekday numbers from 0 (Mon) to 6 (Sun).'

        if self.value is not None and self.value < 0 and self.rule_type != self.RULE_AMOUNT:
            errors['value'] = 'Only adjustment rules may use a negative value.'

        if errors:
            raise ValidationError(errors)

    @property
    def window_days(self):
        """Number of dates in the inclusive window."""
        return (self.end_date - self.start_date).days + 1

    def applies_to_unit_type(self, unit_type):
        """Rules without a unit type apply to every type."""
        if self.unit_type_id is None:
            return True
        return unit_type is not None and self.unit_type_id == unit_type.pk

    def covers_date(self, check_date):
        """Check if the window and weekday filter include a date."""
        if not self.start_date <= check_date <= self.end_date:
            return False
        if self.days_of_week:
            return check_date.weekday() in self.days_of_week
        return True

    def calculate_nightly_price(self, base_price):
        """
        Apply this rule to a base nightly rate.

        Args:
            base_price: Decimal - the unit type's daily price

        Returns:
            Decimal - the adjusted nightly price, never below zero
        """
        if self.rule_type == self.RULE_FIXED:
            adjusted = self.value
        elif self.rule_type == self.RULE_MULTIPLIER:
            adjusted = base_price * self.value
        else:
            adjusted = base_price + self.value

        if adjusted < Decimal('0.00'):
            adjusted = Decimal('0.00')

        return adjusted
