"""URL Configuration for the Traverum booking backend."""

from django.contrib import admin
from django.urls import path, include
from django.http import HttpResponse
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

urlpatterns = [
    path('healthz/', lambda request: HttpResponse('ok', content_type='text/plain')),

    path('admin/', admin.site.urls),

    path('api/v1/', include('api.v1.urls')),

    path('api/schema/', SpectacularAPIView.as_view(), name='schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='schema'), name='swagger-ui'),
]
