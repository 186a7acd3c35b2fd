"""Models for partners: experience suppliers and distributing hotels."""

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class Partner(BaseModel):
    """A business on the platform: a supplier, a hotel, or both."""

    TYPE_CHOICES = (
        ('supplier', _('Supplier')),
        ('hotel', _('Hotel')),
    )

    name = models.CharField(_("name"), max_length=255)
    email = models.EmailField(_("email"), blank=True)
    partner_type = models.CharField(_("partner type"), max_length=20, choices=TYPE_CHOICES, default='supplier')

    # Stripe Connect
    stripe_account_id = models.CharField(
        _("Stripe account ID"),
        max_length=255,
        blank=True,
        null=True,
        help_text=_("Connected account receiving supplier transfers (set after onboarding)")
    )
    stripe_onboarding_complete = models.BooleanField(_("Stripe onboarding complete"), default=False)

    class Meta:
        verbose_name = _("partner")
        verbose_name_plural = _("partners")
        ordering = ['name']

    def __str__(self):
        return self.name


class PartnerMember(BaseModel):
    """Dashboard access of a user to a partner."""

    partner = models.ForeignKey(Partner, on_delete=models.CASCADE, related_name='members')
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='partner_memberships')
    is_admin = models.BooleanField(_("admin"), default=False)

    class Meta:
        unique_together = ['partner', 'user']

    def __str__(self):
        return f"{self.user} @ {self.partner}"


class HotelConfig(BaseModel):
    """Booking widget configuration of a hotel property."""

    partner = models.ForeignKey(Partner, on_delete=models.CASCADE, related_name='hotel_configs')
    slug = models.SlugField(_("slug"), unique=True)
    display_name = models.CharField(_("display name"), max_length=255)
    is_active = models.BooleanField(_("active"), default=True)
    default_currency = models.CharField(_("currency"), max_length=3, default='EUR')

    # Widget theme
    accent_color = models.CharField(_("accent color"), max_length=20, default='#0f766e')
    text_color = models.CharField(_("text color"), max_length=20, default='#111827')
    background_color = models.CharField(_("background color"), max_length=20, default='#ffffff')
    font_family = models.CharField(_("font family"), max_length=100, default='system-ui')
    title = models.CharField(_("widget title"), max_length=255, blank=True)

    class Meta:
        verbose_name = _("hotel configuration")
        verbose_name_plural = _("hotel configurations")

    def __str__(self):
        return self.display_name

    def theme(self):
        return {
            'accent_color': self.accent_color,
            'text_color': self.text_color,
            'background_color': self.background_color,
            'font_family': self.font_family,
            'title': self.title or self.display_name,
        }
