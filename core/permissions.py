"""Custom DRF permissions for the Traverum platform."""

from django.conf import settings
from rest_framework import permissions

from core.authentication import CRON_AUTH


class HasCronSecret(permissions.BasePermission):
    """
    Allow requests authenticated by ``CronSecretAuthentication``.

    When no ``CRON_SECRET`` is configured the endpoint is open (local
    development).
    """

    message = 'Unauthorized'

    def has_permission(self, request, view):
        if not getattr(settings, 'CRON_SECRET', ''):
            return True
        return request.auth == CRON_AUTH


class IsPartnerMember(permissions.BasePermission):
    """Permission to check that the user belongs to the partner in the URL."""

    def has_permission(self, request, view):
        from apps.partners.models import PartnerMember

        if not request.user.is_authenticated:
            return False

        partner_id = view.kwargs.get('partner_id')
        if partner_id is None:
            return False
        return PartnerMember.objects.filter(user=request.user, partner_id=partner_id).exists()
