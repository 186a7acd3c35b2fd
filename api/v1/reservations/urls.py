from django.urls import path

from .views import (
    AcceptProposedTimeView,
    AcceptReservationView,
    DeclineProposedTimesView,
    DeclineReservationView,
    ProposeTimesView,
    ReservationCreateView,
)

urlpatterns = [
    path('', ReservationCreateView.as_view(), name='reservation-create'),
    path('<uuid:reservation_id>/accept/', AcceptReservationView.as_view(), name='reservation-accept'),
    path('<uuid:reservation_id>/decline/', DeclineReservationView.as_view(), name='reservation-decline'),
    path('<uuid:reservation_id>/propose/', ProposeTimesView.as_view(), name='reservation-propose'),
    path(
        '<uuid:reservation_id>/accept-proposed/',
        AcceptProposedTimeView.as_view(),
        name='reservation-accept-proposed',
    ),
    path(
        '<uuid:reservation_id>/decline-proposed/',
        DeclineProposedTimesView.as_view(),
        name='reservation-decline-proposed',
    ),
]
