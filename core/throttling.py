"""
Per-client request throttles for the public booking endpoints.

Clients are identified by the first ``X-Forwarded-For`` address; requests
without the header share the ``anonymous`` bucket. Request history lives
in the Django cache (Redis in production, local memory in tests).
"""

import logging

from rest_framework.throttling import SimpleRateThrottle

logger = logging.getLogger(__name__)

ANONYMOUS_CLIENT = 'anonymous'


def get_client_ip(request) -> str:
    """First address of ``X-Forwarded-For``; header-less clients share one bucket."""
    forwarded_for = request.META.get('HTTP_X_FORWARDED_FOR', '')
    first = forwarded_for.split(',')[0].strip()
    return first or ANONYMOUS_CLIENT


class ClientIPRateThrottle(SimpleRateThrottle):
    """
    Sliding-window throttle keyed by client IP.

    Only admitted requests are recorded, so a client that keeps retrying
    gets in again as soon as an admitted request leaves the window.
    """

    def get_cache_key(self, request, view):
        return self.cache_format % {'scope': self.scope, 'ident': get_client_ip(request)}

    def throttle_failure(self):
        logger.warning(
            f"🚫 [RATE_LIMIT] {self.scope}: {self.key} made {len(self.history)} requests "
            f"in {self.duration}s"
        )
        return False


class ReservationRateThrottle(ClientIPRateThrottle):
    """Reservation creation from the widget: 10 per minute per client."""
    scope = 'reservations'


class EmbedRateThrottle(ClientIPRateThrottle):
    """Public widget payload: 30 per minute per client."""
    scope = 'embed'
