"""
Platform admin endpoints for hotel payouts, guarded by the cron secret.
"""

import logging

import django_filters
from django.db.models import Count
from django.shortcuts import get_object_or_404
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from core.authentication import CronSecretAuthentication
from core.permissions import HasCronSecret
from apps.partners.models import Partner
from apps.payouts import services
from apps.payouts.models import HotelPayout
from .serializers import HotelPayoutCreateSerializer, HotelPayoutSerializer, HotelPayoutUpdateSerializer

logger = logging.getLogger(__name__)


class HotelPayoutFilter(django_filters.FilterSet):
    partner_id = django_filters.UUIDFilter(field_name='partner_id')

    class Meta:
        model = HotelPayout
        fields = ['partner_id', 'status']


class HotelPayoutListCreateView(generics.GenericAPIView):
    """
    GET  /api/v1/admin/hotel-payouts/?partner_id=
    POST /api/v1/admin/hotel-payouts/
    """

    authentication_classes = [CronSecretAuthentication]
    permission_classes = [HasCronSecret]
    filter_backends = [DjangoFilterBackend]
    filterset_class = HotelPayoutFilter
    queryset = HotelPayout.objects.annotate(booking_count=Count('reservations')).order_by('-created_at')

    def get(self, request):
        payouts = self.filter_queryset(self.get_queryset())
        return Response({'payouts': HotelPayoutSerializer(payouts, many=True).data})

    def post(self, request):
        serializer = HotelPayoutCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        partner = get_object_or_404(Partner, id=data['partner_id'])
        payout, booking_count = services.create_payout_for_period(
            partner, data['period_start'], data['period_end'], currency=data['currency']
        )
        return Response({
            'payout': HotelPayoutSerializer(payout).data,
            'booking_count': booking_count,
            'amount_cents': payout.amount_cents,
        }, status=status.HTTP_201_CREATED)


class HotelPayoutDetailView(APIView):
    """PATCH /api/v1/admin/hotel-payouts/<id>/"""

    authentication_classes = [CronSecretAuthentication]
    permission_classes = [HasCronSecret]

    def patch(self, request, payout_id):
        serializer = HotelPayoutUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        payout = services.mark_paid(
            payout_id,
            payment_ref=data['payment_ref'],
            payment_method=data['payment_method'],
            notes=data['notes'],
        )
        return Response({'payout': HotelPayoutSerializer(payout).data})
