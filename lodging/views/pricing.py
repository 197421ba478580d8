"""
Pricing views: stay quotes and unit availability.
"""

import logging

from django.http import JsonResponse
from django.views.decorators.http import require_GET

from lodging.models import UnitType
from lodging.services import (
    MODE_NIGHTLY,
    MODE_YEARLY,
    PricingError,
    average_nightly_rate,
    display_amount,
    find_available_units,
    load_pricing_context,
)
from .mixins import BadRequest, parse_date, parse_int

logger = logging.getLogger(__name__)


def _get_unit_type(request):
    unit_type_id = parse_int(request.GET.get('unit_type'), 'unit_type')
    try:
        return UnitType.objects.get(pk=unit_type_id)
    except UnitType.DoesNotExist:
        return None


@require_GET
def quote_ajax(request):
    """
    AJAX endpoint returning the price of a stay.

    Params:
        unit_type: UnitType id
        start_date: YYYY-MM-DD
        end_date: YYYY-MM-DD (nightly mode)
        mode: 'nightly' (default) or 'yearly'
        duration_months: contract length (yearly mode)
    """
    try:
        unit_type = _get_unit_type(request)
        if unit_type is None:
            return JsonResponse({'success': False, 'message': 'Unit type not found'}, status=404)

        mode = request.GET.get('mode') or MODE_NIGHTLY
        if mode not in (MODE_NIGHTLY, MODE_YEARLY):
            raise BadRequest(f"Unknown mode: {mode}")

        start_date = parse_date(request.GET.get('start_date'), 'start_date')
        if mode == MODE_YEARLY:
            end_date = None
            duration_months = parse_int(request.GET.get('duration_months'), 'duration_months')
        else:
            end_date = parse_date(request.GET.get('end_date'), 'end_date')
            duration_months = None

        context = load_pricing_context(unit_type)
        result = context.compute(start_date, end_date, mode=mode, duration_months=duration_months)

        calculation = result.as_dict()
        calculation['display_total'] = str(display_amount(result.total_price))
        if mode == MODE_NIGHTLY:
            calculation['average_nightly_rate'] = str(display_amount(average_nightly_rate(result)))
            calculation['season_nights'] = result.season_nights

        return JsonResponse({
            'success': True,
            'unit_type': {'id': unit_type.id, 'name': unit_type.name},
            'calculation': calculation,
        })
    except (BadRequest, PricingError) as e:
        return JsonResponse({'success': False, 'message': str(e)}, status=400)
    except Exception as e:
        logger.exception("Quote AJAX error")
        return JsonResponse({'success': False, 'message': str(e)}, status=500)


@require_GET
def availability_ajax(request):
    """
    AJAX endpoint listing units of a type free for a date range.

    Params: unit_type, start_date, end_date
    """
    try:
        unit_type = _get_unit_type(request)
        if unit_type is None:
            return JsonResponse({'success': False, 'message': 'Unit type not found'}, status=404)

        start_date = parse_date(request.GET.get('start_date'), 'start_date')
        end_date = parse_date(request.GET.get('end_date'), 'end_date')

        units = find_available_units(unit_type, start_date, end_date)

        return JsonResponse({
            'success': True,
            'units': [
                {
                    'id': unit.id,
                    'unit_number': unit.unit_number,
                    'floor': unit.floor,
                    'unit_type': unit_type.name,
                }
                for unit in units
            ],
            'count': len(units),
        })
    except (BadRequest, PricingError) as e:
        return JsonResponse({'success': False, 'message': str(e)}, status=400)
    except Exception as e:
        logger.exception("Availability AJAX error")
        return JsonResponse({'success': False, 'message': str(e)}, status=500)
