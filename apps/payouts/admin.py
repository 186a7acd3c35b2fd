from django.contrib import admin

from .models import HotelPayout


@admin.register(HotelPayout)
class HotelPayoutAdmin(admin.ModelAdmin):
    list_display = ('partner', 'period_start', 'period_end', 'amount_cents', 'currency', 'status', 'paid_at')
    list_filter = ('status', 'currency')
    readonly_fields = ('paid_at', 'created_at', 'updated_at')
