"""
Signal handlers keeping a unit's physical status in step with its bookings.
"""

import logging

from django.db.models.signals import post_init, post_save
from django.dispatch import receiver
from .models import Booking, Unit

logger = logging.getLogger(__name__)


@receiver(post_init, sender=Booking)
def remember_loaded_status(sender, instance, **kwargs):
    """Keep the status the booking had when loaded, to detect transitions."""
    # status may be deferred on partial loads
    instance._loaded_status = instance.__dict__.get('status')


@receiver(post_save, sender=Booking)
def sync_unit_status(sender, instance, created, **kwargs):
    """
    When a booking changes status, update its unit:
        checked_in  -> unit occupied
        checked_out -> unit needs cleaning
        cancelled   -> occupied unit freed
    """
    previous = getattr(instance, '_loaded_status', None)
    instance._loaded_status = instance.status

    if created or previous == instance.status:
        return

    unit = instance.unit
    new_status = None

    if instance.status == Booking.STATUS_CHECKED_IN:
        new_status = Unit.STATUS_OCCUPIED
    elif instance.status == Booking.STATUS_CHECKED_OUT:
        new_status = Unit.STATUS_CLEANING
    elif instance.status == Booking.STATUS_CANCELLED and previous == Booking.STATUS_CHECKED_IN:
        if unit.status == Unit.STATUS_OCCUPIED:
            new_status = Unit.STATUS_AVAILABLE

    if new_status and unit.status != new_status:
        Unit.objects.filter(pk=unit.pk).update(status=new_status)
        unit.status = new_status
        logger.info("Unit %s is now %s (booking %s %s)", unit.unit_number, new_status, instance.pk, instance.status)
