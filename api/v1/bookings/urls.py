from django.urls import path

from .views import CancelBookingView, CompleteBookingView, NoExperienceBookingView

urlpatterns = [
    path('<uuid:reservation_id>/complete/', CompleteBookingView.as_view(), name='booking-complete'),
    path('<uuid:reservation_id>/no-experience/', NoExperienceBookingView.as_view(), name='booking-no-experience'),
    path('<uuid:reservation_id>/cancel/', CancelBookingView.as_view(), name='booking-cancel'),
]
