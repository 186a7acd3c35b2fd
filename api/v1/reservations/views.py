"""
Reservation endpoints: creation from the booking widget, the supplier's
accept/decline/propose links and the guest's answer to proposed times.
"""

import logging

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from core.throttling import ReservationRateThrottle
from core.tokens import TokenAction
from apps.reservations import services
from api.v1.token_actions import TokenActionView
from .serializers import (
    DeclineSerializer,
    ProposedSlotSerializer,
    ProposeTimesSerializer,
    ReservationCreateSerializer,
    ReservationSerializer,
)

logger = logging.getLogger(__name__)


class ReservationCreateView(APIView):
    """
    POST /api/v1/reservations/

    Session bookings answer with the payment URL for an immediate redirect;
    requests answer with the pending reservation.
    """

    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [ReservationRateThrottle]

    def post(self, request):
        serializer = ReservationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        reservation = services.create_reservation(**serializer.validated_data)

        data = ReservationSerializer(reservation).data
        return Response(data, status=status.HTTP_201_CREATED)


class AcceptReservationView(TokenActionView):
    """GET|POST /api/v1/reservations/<id>/accept/?token="""

    token_action = TokenAction.ACCEPT
    success_title = 'Booking accepted'
    failure_title = 'Could not accept booking'

    def perform(self, request, reservation_id):
        return services.accept_reservation(reservation_id)

    def success_message(self, reservation):
        return f"{reservation.guest_name} has been sent a payment link for {reservation.experience.title}."


class DeclineReservationView(TokenActionView):
    """GET|POST /api/v1/reservations/<id>/decline/?token="""

    token_action = TokenAction.DECLINE
    success_title = 'Booking declined'
    failure_title = 'Could not decline booking'

    def perform(self, request, reservation_id):
        reason = ''
        if request.method != 'GET':
            serializer = DeclineSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            reason = serializer.validated_data['reason']
        return services.decline_reservation(reservation_id, reason=reason)

    def success_message(self, reservation):
        return f"The guest has been notified that you cannot host {reservation.experience.title}."


class ProposeTimesView(TokenActionView):
    """
    POST /api/v1/reservations/<id>/propose/?token=

    The supplier's decline link also authorizes offering other times.
    """

    token_action = TokenAction.DECLINE
    http_method_names = ['post', 'options']

    def perform(self, request, reservation_id):
        serializer = ProposeTimesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return services.propose_times(reservation_id, serializer.validated_data['times'])


class AcceptProposedTimeView(TokenActionView):
    """GET|POST /api/v1/reservations/<id>/accept-proposed/?token=&slot="""

    token_action = TokenAction.ACCEPT_PROPOSED
    success_title = 'Time accepted'
    failure_title = 'Could not accept the time'

    def perform(self, request, reservation_id):
        data = request.query_params if request.method == 'GET' else request.data
        serializer = ProposedSlotSerializer(data={'slot': data.get('slot', 0)})
        serializer.is_valid(raise_exception=True)
        return services.accept_proposed_time(reservation_id, serializer.validated_data['slot'])

    def success_message(self, reservation):
        return (
            f"You selected {reservation.requested_date:%d %B %Y} at {reservation.requested_time:%H:%M}. "
            f"A payment link has been sent to your email."
        )


class DeclineProposedTimesView(TokenActionView):
    """GET|POST /api/v1/reservations/<id>/decline-proposed/?token="""

    token_action = TokenAction.DECLINE_PROPOSED
    success_title = 'Times declined'
    failure_title = 'Could not decline the times'

    def perform(self, request, reservation_id):
        return services.decline_proposed_times(reservation_id)

    def success_message(self, reservation):
        return 'Thank you for letting us know. Feel free to request a different date or time.'
