"""Models for the experiences app."""

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel
from apps.partners.models import Partner, HotelConfig


class Experience(BaseModel):
    """An experience sold through hotel booking widgets. Prices are in cents."""

    STATUS_CHOICES = [
        ('draft', _('Draft')),
        ('active', _('Active')),
        ('archived', _('Archived')),
    ]

    PRICING_TYPE_CHOICES = (
        ('per_person', _('Per Person')),
        ('base_plus_extra', _('Base Price Plus Extra Person')),
        ('flat_rate', _('Flat Rate')),
    )

    title = models.CharField(_("title"), max_length=255)
    slug = models.SlugField(_("slug"), max_length=255)
    description = models.TextField(_("description"), blank=True)
    image_url = models.URLField(_("image URL"), max_length=500, blank=True)
    meeting_point = models.CharField(_("meeting point"), max_length=255, blank=True)
    duration_minutes = models.PositiveIntegerField(_("duration (minutes)"), default=60)

    status = models.CharField(_("status"), max_length=20, choices=STATUS_CHOICES, default='draft')

    # Supplier running the experience
    partner = models.ForeignKey(
        Partner,
        on_delete=models.CASCADE,
        related_name='experiences',
        verbose_name=_("supplier")
    )

    pricing_type = models.CharField(
        _("pricing type"),
        max_length=20,
        choices=PRICING_TYPE_CHOICES,
        default='per_person'
    )
    price_cents = models.PositiveIntegerField(_("price (cents)"), default=0)
    base_price_cents = models.PositiveIntegerField(
        _("base price (cents)"),
        default=0,
        help_text=_("Price covering the included participants (base_plus_extra / flat_rate)")
    )
    extra_person_cents = models.PositiveIntegerField(
        _("extra person price (cents)"),
        default=0,
        help_text=_("Per-person price (per_person) or price per additional participant (base_plus_extra)")
    )
    included_participants = models.PositiveIntegerField(_("included participants"), default=1)
    min_participants = models.PositiveIntegerField(_("minimum participants"), default=1, validators=[MinValueValidator(1)])
    max_participants = models.PositiveIntegerField(_("maximum participants"), default=10, validators=[MinValueValidator(1)])
    currency = models.CharField(_("currency"), max_length=3, default='EUR', help_text=_("Currency code (ISO 4217)"))

    class Meta:
        verbose_name = _("experience")
        verbose_name_plural = _("experiences")
        unique_together = ['partner', 'slug']
        ordering = ['title']

    def __str__(self):
        return self.title


class ExperienceSession(BaseModel):
    """A scheduled departure of an experience with limited spots."""

    STATUS_CHOICES = (
        ('available', _('Available')),
        ('full', _('Full')),
        ('booked', _('Booked')),
        ('cancelled', _('Cancelled')),
    )

    experience = models.ForeignKey(Experience, on_delete=models.CASCADE, related_name='sessions')
    session_date = models.DateField(_("date"))
    start_time = models.TimeField(_("start time"))
    spots_total = models.PositiveIntegerField(_("total spots"))
    spots_available = models.PositiveIntegerField(_("available spots"))
    price_override_cents = models.PositiveIntegerField(_("price override (cents)"), null=True, blank=True)
    status = models.CharField(_("status"), max_length=20, choices=STATUS_CHOICES, default='available')

    class Meta:
        verbose_name = _("experience session")
        verbose_name_plural = _("experience sessions")
        ordering = ['session_date', 'start_time']

    def __str__(self):
        return f"{self.experience.title} {self.session_date} {self.start_time:%H:%M}"


class Distribution(BaseModel):
    """
    A hotel selling an experience, with the commission split in percent.
    """

    hotel = models.ForeignKey(Partner, on_delete=models.CASCADE, related_name='distributions')
    hotel_config = models.ForeignKey(
        HotelConfig,
        on_delete=models.CASCADE,
        related_name='distributions',
        null=True,
        blank=True
    )
    experience = models.ForeignKey(Experience, on_delete=models.CASCADE, related_name='distributions')
    is_active = models.BooleanField(_("active"), default=True)
    sort_order = models.PositiveIntegerField(_("sort order"), default=0)

    commission_supplier = models.PositiveSmallIntegerField(_("supplier commission (%)"), default=80)
    commission_hotel = models.PositiveSmallIntegerField(_("hotel commission (%)"), default=15)
    commission_platform = models.PositiveSmallIntegerField(_("platform commission (%)"), default=5)

    class Meta:
        verbose_name = _("distribution")
        verbose_name_plural = _("distributions")
        unique_together = ['hotel', 'experience']
        ordering = ['sort_order']
        constraints = [
            models.CheckConstraint(
                check=models.Q(
                    commission_supplier=100 - models.F('commission_hotel') - models.F('commission_platform')
                ),
                name='distribution_commissions_sum_100',
            ),
        ]

    def __str__(self):
        return f"{self.experience} via {self.hotel}"

    def clean(self):
        total = self.commission_supplier + self.commission_hotel + self.commission_platform
        if total != 100:
            raise ValidationError(_("Commission percentages must add up to 100 (got %(total)s).") % {'total': total})
