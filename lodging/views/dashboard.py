"""
Dashboard view: room status board and front-desk KPIs as JSON.
"""

import logging

from django.http import JsonResponse
from django.views.decorators.http import require_GET

from lodging.services import DashboardService
from .mixins import BadRequest, parse_date

logger = logging.getLogger(__name__)


@require_GET
def dashboard_data_ajax(request):
    """
    AJAX endpoint for the front-desk dashboard.

    Params:
        date: YYYY-MM-DD (optional, defaults to today)
    """
    try:
        today = parse_date(request.GET.get('date'), 'date', required=False)
        data = DashboardService(today=today).get_dashboard_data()
        return JsonResponse({'success': True, 'data': data})
    except BadRequest as e:
        return JsonResponse({'success': False, 'message': str(e)}, status=400)
    except Exception as e:
        logger.exception("Dashboard AJAX error")
        return JsonResponse({'success': False, 'message': str(e)}, status=500)
