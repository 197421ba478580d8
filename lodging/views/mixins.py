"""
View mixins and request parsing helpers for the JSON endpoints.
"""

import json
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation

from django.http import JsonResponse
from django.shortcuts import get_object_or_404

logger = logging.getLogger(__name__)


class BadRequest(Exception):
    """Raised while reading request parameters; answered with status 400."""


def parse_date(value, field='date', required=True):
    """Parse date from string (YYYY-MM-DD)."""
    if not value:
        if required:
            raise BadRequest(f"Missing {field}")
        return None
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        raise BadRequest(f"Invalid {field}: expected YYYY-MM-DD")


def parse_decimal(value, field='amount', default=Decimal('0.00')):
    """Parse decimal from string; blank gives the default."""
    if value is None or value == '':
        return default
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise BadRequest(f"Invalid {field}: {value}")


def parse_int(value, field, required=True):
    if value is None or value == '':
        if required:
            raise BadRequest(f"Missing {field}")
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        raise BadRequest(f"Invalid {field}: {value}")


class JsonApiMixin:
    """
    Helpers shared by the JSON API views.

    Every response carries a 'success' flag; errors also carry a 'message'.
    """

    def json_response(self, data, status=200):
        """Return JSON response."""
        return JsonResponse(data, status=status)

    def error_response(self, message, status=400):
        """Return error JSON response."""
        return JsonResponse({'success': False, 'message': message}, status=status)

    def success_response(self, data=None, message=None, status=200):
        """Return success JSON response."""
        response = {'success': True}
        if message:
            response['message'] = message
        if data:
            response.update(data)
        return JsonResponse(response, status=status)

    def get_payload(self, request):
        """POST data from a JSON body or a regular form."""
        if request.content_type == 'application/json':
            try:
                payload = json.loads(request.body or b'{}')
            except ValueError:
                raise BadRequest("Request body is not valid JSON")
            if not isinstance(payload, dict):
                raise BadRequest("Request body must be a JSON object")
            return payload
        return request.POST


class BookingMixin(JsonApiMixin):
    """Load the booking named by the <booking_id> URL kwarg."""

    def get_booking(self):
        from lodging.models import Booking

        return get_object_or_404(
            Booking.objects.select_related('unit', 'unit__unit_type'),
            pk=self.kwargs.get('booking_id'),
        )
