from django.urls import path

from .views import HotelPayoutDetailView, HotelPayoutListCreateView

urlpatterns = [
    path('hotel-payouts/', HotelPayoutListCreateView.as_view(), name='hotel-payout-list'),
    path('hotel-payouts/<uuid:payout_id>/', HotelPayoutDetailView.as_view(), name='hotel-payout-detail'),
]
