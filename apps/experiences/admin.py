"""Admin configuration for experiences app."""

from django.contrib import admin
from .models import Experience, ExperienceSession, Distribution


class ExperienceSessionInline(admin.TabularInline):
    model = ExperienceSession
    extra = 0
    fields = ('session_date', 'start_time', 'spots_total', 'spots_available', 'price_override_cents', 'status')


@admin.register(Experience)
class ExperienceAdmin(admin.ModelAdmin):
    """Admin interface for Experience model."""
    list_display = ('title', 'partner', 'pricing_type', 'status', 'created_at')
    list_filter = ('status', 'pricing_type')
    search_fields = ('title', 'description', 'partner__name')
    readonly_fields = ('id', 'created_at', 'updated_at')
    inlines = [ExperienceSessionInline]
    fieldsets = (
        ('Basic Information', {
            'fields': ('title', 'slug', 'description', 'image_url', 'status', 'partner')
        }),
        ('Pricing', {
            'fields': ('pricing_type', 'price_cents', 'base_price_cents', 'extra_person_cents',
                       'included_participants', 'currency')
        }),
        ('Details', {
            'fields': ('meeting_point', 'duration_minutes', 'min_participants', 'max_participants')
        }),
        ('Timestamps', {
            'fields': ('id', 'created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )


@admin.register(Distribution)
class DistributionAdmin(admin.ModelAdmin):
    list_display = ('experience', 'hotel', 'commission_supplier', 'commission_hotel', 'commission_platform', 'is_active')
    list_filter = ('is_active',)
