from django.conf import settings
from rest_framework import serializers

from apps.payouts.models import HotelPayout


class HotelPayoutSerializer(serializers.ModelSerializer):
    partner_id = serializers.UUIDField(read_only=True)
    booking_count = serializers.IntegerField(read_only=True, required=False)

    class Meta:
        model = HotelPayout
        fields = [
            'id', 'partner_id', 'period_start', 'period_end', 'amount_cents',
            'currency', 'status', 'payment_ref', 'payment_method', 'notes',
            'paid_at', 'created_by', 'created_at', 'booking_count',
        ]
        read_only_fields = fields


class HotelPayoutCreateSerializer(serializers.Serializer):
    partner_id = serializers.UUIDField()
    period_start = serializers.DateField()
    period_end = serializers.DateField()
    currency = serializers.CharField(max_length=3, default=settings.DEFAULT_CURRENCY)

    def validate(self, attrs):
        if attrs['period_end'] < attrs['period_start']:
            raise serializers.ValidationError({'period_end': ['Must not be before period_start.']})
        return attrs


class HotelPayoutUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=['paid'], error_messages={
        'invalid_choice': 'Only status "paid" is supported.',
    })
    payment_ref = serializers.CharField(required=False, allow_blank=True, default='', max_length=255)
    payment_method = serializers.CharField(required=False, allow_blank=True, default='', max_length=100)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
