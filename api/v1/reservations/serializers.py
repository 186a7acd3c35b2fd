"""Serializers for the reservation endpoints."""

from rest_framework import serializers

from apps.reservations.models import Reservation


class ReservationCreateSerializer(serializers.Serializer):
    """Booking widget payload. Guest text is sanitized by the service."""

    hotel_slug = serializers.SlugField()
    experience_id = serializers.UUIDField()
    session_id = serializers.UUIDField(required=False, allow_null=True)
    participants = serializers.IntegerField(min_value=1)
    total_cents = serializers.IntegerField(min_value=0)
    guest_name = serializers.CharField(max_length=1000)
    guest_email = serializers.CharField(max_length=1000)
    guest_phone = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')
    requested_date = serializers.DateField(required=False, allow_null=True)
    requested_time = serializers.TimeField(required=False, allow_null=True)

    def validate(self, attrs):
        if not attrs.get('session_id') and not attrs.get('requested_date'):
            raise serializers.ValidationError({
                'requested_date': ['A date is required when no session is selected.']
            })
        return attrs


class ReservationSerializer(serializers.ModelSerializer):
    experience_title = serializers.CharField(source='experience.title', read_only=True)
    payment_url = serializers.CharField(source='stripe_payment_link_url', read_only=True)
    experience_date = serializers.DateField(read_only=True)
    experience_time = serializers.TimeField(read_only=True)

    class Meta:
        model = Reservation
        fields = [
            'id', 'status', 'is_request', 'experience_title', 'participants',
            'total_cents', 'currency', 'experience_date', 'experience_time',
            'proposed_times', 'response_deadline', 'payment_deadline', 'payment_url', 'created_at',
        ]
        read_only_fields = fields


class DeclineSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default='', max_length=1000)


class ProposedTimeSerializer(serializers.Serializer):
    date = serializers.DateField()
    time = serializers.TimeField()


class ProposeTimesSerializer(serializers.Serializer):
    times = ProposedTimeSerializer(many=True)


class ProposedSlotSerializer(serializers.Serializer):
    slot = serializers.IntegerField(min_value=0, default=0)
