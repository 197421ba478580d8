"""
Lodging admin configuration.

Supports:
- Unit types with their units inline
- Pricing rules with priority badges
- Bookings with payments inline and lifecycle actions
- Invoices with a PDF download link
"""

from django import forms
from django.contrib import admin, messages
from django.core.exceptions import ValidationError
from django.urls import reverse
from django.utils.html import format_html

from .models import UnitType, Unit, PricingRule, Booking, Payment, Invoice


# =============================================================================
# INVENTORY ADMIN
# =============================================================================

class UnitInline(admin.TabularInline):
    """Inline for units within a unit type."""
    model = Unit
    extra = 0
    fields = ['unit_number', 'floor', 'status']
    ordering = ['unit_number']
    show_change_link = True


@admin.register(UnitType)
class UnitTypeAdmin(admin.ModelAdmin):
    list_display = [
        'name', 'daily_price', 'annual_price', 'max_adults', 'max_children',
        'unit_count_display', 'sort_order'
    ]
    list_editable = ['daily_price', 'annual_price', 'sort_order']
    search_fields = ['name']
    ordering = ['sort_order', 'name']

    fieldsets = (
        (None, {
            'fields': ('name', 'sort_order')
        }),
        ('Rates', {
            'fields': ('daily_price', 'annual_price'),
            'description': 'Daily price is the default nightly rate. '
                           'Annual price enables yearly contracts.'
        }),
        ('Capacity', {
            'fields': ('max_adults', 'max_children', 'area', 'features'),
        }),
    )

    inlines = [UnitInline]

    def unit_count_display(self, obj):
        count = obj.units.count()
        url = reverse('admin:lodging_unit_changelist') + f'?unit_type__id__exact={obj.id}'
        return format_html('<a href="{}">{} units</a>', url, count)
    unit_count_display.short_description = 'Units'


@admin.register(Unit)
class UnitAdmin(admin.ModelAdmin):
    list_display = ['unit_number', 'unit_type', 'floor', 'status_display']
    list_filter = ['status', 'unit_type']
    search_fields = ['unit_number']
    ordering = ['unit_number']
    actions = ['mark_available']

    STATUS_COLORS = {
        Unit.STATUS_AVAILABLE: '#22c55e',
        Unit.STATUS_OCCUPIED: '#3b82f6',
        Unit.STATUS_CLEANING: '#f59e0b',
        Unit.STATUS_MAINTENANCE: '#ef4444',
    }

    def status_display(self, obj):
        return format_html(
            '<span style="color: {}; font-weight: 600;">{}</span>',
            self.STATUS_COLORS.get(obj.status, '#6b7280'), obj.get_status_display()
        )
    status_display.short_description = 'Status'
    status_display.admin_order_field = 'status'

    @admin.action(description='Mark selected units as available')
    def mark_available(self, request, queryset):
        updated = queryset.exclude(status=Unit.STATUS_OCCUPIED).update(status=Unit.STATUS_AVAILABLE)
        self.message_user(request, f"{updated} units marked available.", messages.SUCCESS)


# =============================================================================
# PRICING RULE ADMIN
# =============================================================================

@admin.register(PricingRule)
class PricingRuleAdmin(admin.ModelAdmin):
    """Admin for date-scoped pricing rules."""

    list_display = [
        'name',
        'unit_type_display',
        'value_display',
        'start_date',
        'end_date',
        'days_display',
        'priority_display',
        'active',
    ]
    list_filter = ['active', 'rule_type', 'unit_type']
    list_editable = ['active']
    search_fields = ['name', 'notes']
    ordering = ['-priority', 'start_date']
    date_hierarchy = 'start_date'
    actions = ['activate_rules', 'deactivate_rules']

    fieldsets = (
        (None, {
            'fields': ('name', 'unit_type', 'active')
        }),
        ('Window', {
            'fields': ('start_date', 'end_date', 'days_of_week'),
            'description': 'Dates are inclusive. Weekdays use 0=Mon .. 6=Sun; leave empty for every day.'
        }),
        ('Adjustment', {
            'fields': ('rule_type', 'value', 'priority'),
            'description': 'Higher priority wins when rules overlap; '
                           'equal priorities go to the shorter window.'
        }),
        ('Notes', {
            'fields': ('notes',),
            'classes': ('collapse',),
        }),
    )

    def unit_type_display(self, obj):
        return obj.unit_type.name if obj.unit_type_id else 'All unit types'
    unit_type_display.short_description = 'Unit Type'

    def value_display(self, obj):
        return obj.get_value_display()
    value_display.short_description = 'Effect'
    value_display.admin_order_field = 'value'

    def days_display(self, obj):
        return obj.get_days_display()
    days_display.short_description = 'Days'

    def priority_display(self, obj):
        """Display priority with visual indicator."""
        if obj.priority >= 80:
            color, label = '#dc2626', 'HIGH'
        elif obj.priority >= 50:
            color, label = '#f59e0b', 'MED'
        else:
            color, label = '#6b7280', 'LOW'

        return format_html(
            '<span style="background: {}; color: white; padding: 2px 8px; '
            'border-radius: 4px; font-size: 11px; font-weight: 600;">{}</span> '
            '<span style="color: #6b7280;">{}</span>',
            color, label, obj.priority
        )
    priority_display.short_description = 'Priority'
    priority_display.admin_order_field = 'priority'

    @admin.action(description='Activate selected rules')
    def activate_rules(self, request, queryset):
        updated = queryset.update(active=True)
        self.message_user(request, f"{updated} rules activated.", messages.SUCCESS)

    @admin.action(description='Deactivate selected rules')
    def deactivate_rules(self, request, queryset):
        updated = queryset.update(active=False)
        self.message_user(request, f"{updated} rules deactivated.", messages.SUCCESS)


# =============================================================================
# BOOKING ADMIN
# =============================================================================

class BookingAdminForm(forms.ModelForm):
    """
    Booking form that prices new bookings with the engine.

    Check-out may be left blank for yearly contracts; it is derived from
    the contract length.
    """

    class Meta:
        model = Booking
        fields = '__all__'

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        if 'check_out' in self.fields:
            self.fields['check_out'].required = False

    def clean(self):
        from .services import BookingError, BookingService, PricingError

        cleaned_data = super().clean()
        if self.instance.pk or self.errors:
            return cleaned_data

        booking = Booking(**{
            name: value for name, value in cleaned_data.items()
            if name in self.fields
        })
        service = BookingService()
        try:
            service.price_booking(booking)
            service.check_unit_free(booking)
        except (PricingError, BookingError) as e:
            raise ValidationError(str(e))

        cleaned_data['check_in'] = booking.check_in
        cleaned_data['check_out'] = booking.check_out
        cleaned_data['duration_months'] = booking.duration_months
        return cleaned_data


class PaymentInline(admin.TabularInline):
    model = Payment
    extra = 0
    fields = ['payment_date', 'kind', 'amount', 'method', 'reference', 'description']
    readonly_fields = ['kind']
    ordering = ['payment_date']


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    form = BookingAdminForm
    list_display = [
        'id', 'guest_name', 'unit', 'check_in', 'check_out', 'booking_type',
        'status', 'total_price', 'remaining_display', 'invoice_link', 'contract_link'
    ]
    list_filter = ['status', 'booking_type', 'unit__unit_type']
    search_fields = ['guest_name', 'guest_phone', 'unit__unit_number']
    date_hierarchy = 'check_in'
    ordering = ['-check_in']
    list_select_related = ['unit']
    readonly_fields = [
        'room_amount', 'subtotal', 'tax_amount', 'total_price',
        'created_at', 'updated_at',
    ]
    actions = ['check_in_bookings', 'cancel_bookings']

    fieldsets = (
        (None, {
            'fields': ('unit', 'guest_name', 'guest_phone', 'status')
        }),
        ('Stay', {
            'fields': ('booking_type', 'check_in', 'check_out', 'duration_months'),
        }),
        ('Amounts', {
            'fields': (
                'room_amount',
                ('additional_services', 'discount_amount'),
                ('subtotal', 'tax_amount', 'total_price'),
            ),
            'description': 'Amounts are frozen when the booking is created.'
        }),
        ('Notes', {
            'fields': ('notes', 'created_at', 'updated_at'),
            'classes': ('collapse',),
        }),
    )

    inlines = [PaymentInline]

    # Set once the booking exists; changed through the lifecycle actions
    STAY_FIELDS = [
        'unit', 'status', 'booking_type', 'check_in', 'check_out', 'duration_months',
        'additional_services', 'discount_amount',
    ]

    def get_readonly_fields(self, request, obj=None):
        readonly = list(super().get_readonly_fields(request, obj))
        if obj is not None:
            readonly += self.STAY_FIELDS
        return readonly

    def save_model(self, request, obj, form, change):
        if change:
            super().save_model(request, obj, form, change)
            return

        from .services import BookingService

        service = BookingService()
        service.price_booking(obj)
        service.save_new_booking(obj)

    def save_formset(self, request, form, formset, change):
        if formset.model is not Payment:
            super().save_formset(request, form, formset, change)
            return

        from .services import BookingService

        service = BookingService()
        booking = form.instance
        payments = formset.save(commit=False)
        for payment in formset.deleted_objects:
            payment.delete()
        for payment in payments:
            if not payment.kind:
                payment.kind = service.payment_kind(booking)
            payment.save()
            if payment.kind != Payment.KIND_REFUND:
                service.confirm_deposit(booking)
        formset.save_m2m()

    def remaining_display(self, obj):
        remaining = obj.remaining_amount
        color = '#ef4444' if remaining > 0 else '#22c55e'
        return format_html('<span style="color: {};">{}</span>', color, remaining)
    remaining_display.short_description = 'Balance'

    def invoice_link(self, obj):
        url = reverse('lodging:booking_invoice_pdf', args=[obj.pk])
        return format_html('<a href="{}">PDF</a>', url)
    invoice_link.short_description = 'Invoice'

    def contract_link(self, obj):
        url = reverse('lodging:booking_contract_pdf', args=[obj.pk])
        return format_html('<a href="{}">PDF</a>', url)
    contract_link.short_description = 'Contract'

    def _run_action(self, request, queryset, action, label):
        from .services import BookingError, BookingService

        service = BookingService()
        done = 0
        for booking in queryset:
            try:
                getattr(service, action)(booking)
                done += 1
            except BookingError as e:
                self.message_user(request, f"Booking {booking.pk}: {e}", messages.WARNING)
        if done:
            self.message_user(request, f"{done} bookings {label}.", messages.SUCCESS)

    @admin.action(description='Check in selected bookings')
    def check_in_bookings(self, request, queryset):
        self._run_action(request, queryset, 'check_in', 'checked in')

    @admin.action(description='Cancel selected bookings')
    def cancel_bookings(self, request, queryset):
        self._run_action(request, queryset, 'cancel', 'cancelled')


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['booking', 'payment_date', 'kind', 'amount', 'method', 'reference']
    list_filter = ['kind', 'method', 'payment_date']
    search_fields = ['booking__guest_name', 'reference']
    date_hierarchy = 'payment_date'
    ordering = ['-payment_date']


@admin.register(Invoice)
class InvoiceAdmin(admin.ModelAdmin):
    list_display = ['number', 'booking', 'status', 'invoice_date', 'total_amount', 'pdf_link']
    list_filter = ['status', 'invoice_date']
    search_fields = ['number', 'booking__guest_name']
    ordering = ['-invoice_date', '-number']
    readonly_fields = ['number', 'subtotal', 'tax_amount', 'total_amount']

    def pdf_link(self, obj):
        url = reverse('lodging:booking_invoice_pdf', args=[obj.booking_id])
        return format_html('<a href="{}">Download</a>', url)
    pdf_link.short_description = 'PDF'
