"""
Base view for links that act on a reservation with a signed token.

GET renders a small HTML result page (the link was clicked in an email);
POST/PATCH return JSON and let errors go through the API exception handler.
"""

import logging

from django.shortcuts import render
from rest_framework.exceptions import APIException
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from core.exceptions import error_message
from core.tokens import verify_token
from api.v1.reservations.serializers import ReservationSerializer

logger = logging.getLogger(__name__)

RESULT_TEMPLATE = 'reservations/action_result.html'


class TokenActionView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    http_method_names = ['get', 'post', 'options']
    token_action = None
    success_title = 'Done'
    failure_title = 'Something went wrong'

    def perform(self, request, reservation_id):
        raise NotImplementedError("Subclasses must implement perform")

    def success_message(self, reservation):
        return ''

    def get_token(self, request):
        token = request.query_params.get('token')
        if not token and request.method != 'GET' and hasattr(request.data, 'get'):
            token = request.data.get('token')
        return token

    def run(self, request, reservation_id):
        # The id signed into the token is authoritative; the URL id must match it.
        payload = verify_token(self.get_token(request), action=self.token_action, subject_id=reservation_id)
        return self.perform(request, payload.subject_id)

    def get(self, request, reservation_id):
        try:
            reservation = self.run(request, reservation_id)
        except APIException as e:
            logger.info(f"⚠️ [TOKEN_ACTION] {self.token_action} on {reservation_id} failed: {e.detail}")
            return render(
                request,
                RESULT_TEMPLATE,
                {'success': False, 'title': self.failure_title, 'message': error_message(e.detail)},
                status=e.status_code,
            )
        return render(
            request,
            RESULT_TEMPLATE,
            {'success': True, 'title': self.success_title, 'message': self.success_message(reservation)},
        )

    def post(self, request, reservation_id):
        reservation = self.run(request, reservation_id)
        return Response(ReservationSerializer(reservation).data)
