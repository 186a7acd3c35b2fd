"""URL Configuration for API v1."""

from django.urls import path, include

urlpatterns = [
    path('auth/', include('api.v1.auth.urls')),
    path('reservations/', include('api.v1.reservations.urls')),
    path('bookings/', include('api.v1.bookings.urls')),
    path('partners/', include('api.v1.partners.urls')),
    path('embed/', include('api.v1.embed.urls')),
    path('webhooks/', include('api.v1.webhooks.urls')),
    path('admin/', include('api.v1.admin.urls')),  # 🚀 ENTERPRISE: payouts, cron-secret guarded
    path('cron/', include('api.v1.cron.urls')),
]
