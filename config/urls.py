"""
URL configuration for Stay Pricing project.
"""

from django.contrib import admin
from django.urls import path, include

admin.site.site_header = "Stay Pricing Admin"
admin.site.site_title = "Front Desk"
admin.site.index_title = "Units, rates and bookings"

urlpatterns = [
    path('admin/', admin.site.urls),
    path('', include('lodging.urls')),
]
