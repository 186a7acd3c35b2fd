"""Partner dashboard endpoints."""

from django.shortcuts import get_object_or_404
from rest_framework import generics
from rest_framework.permissions import IsAuthenticated

from core.permissions import IsPartnerMember
from apps.partners.models import Partner
from apps.reservations.models import Reservation
from .serializers import PendingRequestSerializer


class PendingRequestListView(generics.ListAPIView):
    """
    GET /api/v1/partners/<partner_id>/requests/

    Unanswered requests for the supplier's experiences, most urgent first.
    """

    serializer_class = PendingRequestSerializer
    permission_classes = [IsAuthenticated, IsPartnerMember]
    pagination_class = None

    def get_queryset(self):
        partner = get_object_or_404(Partner, id=self.kwargs['partner_id'])
        return Reservation.objects.pending_queue(partner)
