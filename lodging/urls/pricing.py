"""Pricing URL patterns: quotes, availability, dashboard."""

from django.urls import path
from lodging.views import (
    quote_ajax,
    availability_ajax,
    dashboard_data_ajax,
)

urlpatterns = [
    path('api/quote/', quote_ajax, name='quote'),
    path('api/availability/', availability_ajax, name='availability'),
    path('api/dashboard/', dashboard_data_ajax, name='dashboard_data'),
]
