"""Periodic payouts of the distributor (hotel) share."""

from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel
from apps.partners.models import Partner


class HotelPayout(BaseModel):
    """
    Hotel commission owed for completed bookings in a period.

    Paid manually (bank transfer); ``pending -> paid`` happens once and
    ``paid_at`` is never overwritten.
    """

    STATUS_CHOICES = (
        ('pending', _('Pending')),
        ('paid', _('Paid')),
    )

    partner = models.ForeignKey(Partner, on_delete=models.PROTECT, related_name='hotel_payouts')
    period_start = models.DateField(_("period start"))
    period_end = models.DateField(_("period end"))
    amount_cents = models.PositiveIntegerField(_("amount (cents)"))
    currency = models.CharField(_("currency"), max_length=3, default='EUR')
    status = models.CharField(_("status"), max_length=20, choices=STATUS_CHOICES, default='pending', db_index=True)

    payment_ref = models.CharField(_("payment reference"), max_length=255, blank=True)
    payment_method = models.CharField(_("payment method"), max_length=100, blank=True)
    notes = models.TextField(_("notes"), blank=True)
    paid_at = models.DateTimeField(_("paid at"), null=True, blank=True)
    created_by = models.CharField(_("created by"), max_length=100, default='admin')

    class Meta:
        verbose_name = _("hotel payout")
        verbose_name_plural = _("hotel payouts")
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.partner} {self.period_start}..{self.period_end} ({self.status})"
