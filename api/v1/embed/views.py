"""
Public data for the embeddable hotel widget: theme, widget texts and
experience cards.
"""

import logging

from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from core.throttling import EmbedRateThrottle
from apps.experiences.models import Distribution
from apps.experiences.pricing import display_price
from apps.partners.models import HotelConfig

logger = logging.getLogger(__name__)

# postMessage type the embedded frame sends with {type, height}
RESIZE_MESSAGE_TYPE = 'traverum-resize'
DEFAULT_MAX_EXPERIENCES = 6
MAX_EXPERIENCES_LIMIT = 50


def parse_max(value):
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return DEFAULT_MAX_EXPERIENCES
    return min(max(parsed, 1), MAX_EXPERIENCES_LIMIT)


class EmbedView(APIView):
    """GET /api/v1/embed/<hotel_slug>/?max=6"""

    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [EmbedRateThrottle]

    def get(self, request, hotel_slug):
        hotel = get_object_or_404(HotelConfig.objects.select_related('partner'), slug=hotel_slug, is_active=True)
        max_experiences = parse_max(request.query_params.get('max'))

        distributions = (
            Distribution.objects
            .filter(is_active=True, experience__status='active')
            .filter(Q(hotel_config=hotel) | Q(hotel_config__isnull=True, hotel=hotel.partner))
            .select_related('experience')
            .order_by('sort_order', 'experience__title')
        )
        experiences = [d.experience for d in distributions]

        cards = []
        for experience in experiences[:max_experiences]:
            price = display_price(experience)
            cards.append({
                'id': str(experience.id),
                'title': experience.title,
                'slug': experience.slug,
                'cover_image': experience.image_url or None,
                'duration_minutes': experience.duration_minutes,
                'price_cents': price['amount_cents'],
                'price_suffix': price['suffix'],
                'currency': experience.currency,
            })

        theme = hotel.theme()
        response = Response({
            'widget': {
                'title': theme['title'],
                'hotel_name': hotel.display_name,
                'hotel_slug': hotel.slug,
                'total_experiences': len(experiences),
                'resize_message_type': RESIZE_MESSAGE_TYPE,
            },
            'theme': theme,
            'experiences': cards,
        })
        response['Cache-Control'] = 'public, s-maxage=60, stale-while-revalidate=300'
        return response
