from django.urls import path

from .views import EmbedView

urlpatterns = [
    path('<slug:hotel_slug>/', EmbedView.as_view(), name='embed'),
]
