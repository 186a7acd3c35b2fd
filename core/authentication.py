"""Shared-secret authentication for cron and admin endpoints."""

import hmac
import logging

from django.conf import settings
from django.contrib.auth.models import AnonymousUser
from rest_framework import authentication, exceptions

logger = logging.getLogger(__name__)

CRON_AUTH = 'cron-secret'


class CronSecretAuthentication(authentication.BaseAuthentication):
    """
    ``Authorization: Bearer <CRON_SECRET>``.

    A matching header authenticates the request as the scheduler; a wrong
    one fails with 401. Requests without the header are left to the
    permission classes.
    """

    keyword = 'Bearer'

    def authenticate(self, request):
        cron_secret = getattr(settings, 'CRON_SECRET', '')
        header = authentication.get_authorization_header(request).decode('utf-8', errors='replace')
        if not cron_secret or not header:
            return None

        expected = f"{self.keyword} {cron_secret}"
        if not hmac.compare_digest(header.encode('utf-8'), expected.encode('utf-8')):
            logger.warning(f"🔒 [CRON_AUTH] Rejected {request.method} {request.path}")
            raise exceptions.AuthenticationFailed('Unauthorized')
        return (AnonymousUser(), CRON_AUTH)

    def authenticate_header(self, request):
        return self.keyword
