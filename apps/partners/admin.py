from django.contrib import admin

from .models import Partner, PartnerMember, HotelConfig


@admin.register(Partner)
class PartnerAdmin(admin.ModelAdmin):
    list_display = ('name', 'partner_type', 'email', 'stripe_onboarding_complete')
    list_filter = ('partner_type', 'stripe_onboarding_complete')
    search_fields = ('name', 'email', 'stripe_account_id')


@admin.register(HotelConfig)
class HotelConfigAdmin(admin.ModelAdmin):
    list_display = ('display_name', 'slug', 'partner', 'is_active')
    search_fields = ('display_name', 'slug')


admin.site.register(PartnerMember)
