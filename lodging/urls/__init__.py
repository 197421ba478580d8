"""
URL configuration package.

Combines the pricing and booking URL patterns into a single
urlpatterns list under the 'lodging' namespace.
"""

from .pricing import urlpatterns as pricing_urls
from .bookings import urlpatterns as booking_urls

app_name = 'lodging'

urlpatterns = pricing_urls + booking_urls
