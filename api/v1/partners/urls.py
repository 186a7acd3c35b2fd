from django.urls import path

from .views import PendingRequestListView

urlpatterns = [
    path('<uuid:partner_id>/requests/', PendingRequestListView.as_view(), name='partner-requests'),
]
