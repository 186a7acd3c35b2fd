from rest_framework import serializers

from apps.reservations.models import Reservation


class PendingRequestSerializer(serializers.ModelSerializer):
    experience_id = serializers.UUIDField(source='experience.id', read_only=True)
    experience_title = serializers.CharField(source='experience.title', read_only=True)
    hotel_name = serializers.CharField(source='hotel.name', read_only=True)

    class Meta:
        model = Reservation
        fields = [
            'id', 'experience_id', 'experience_title', 'hotel_name',
            'guest_name', 'guest_email', 'guest_phone', 'participants',
            'total_cents', 'currency', 'requested_date', 'requested_time',
            'response_deadline', 'created_at',
        ]
        read_only_fields = fields
