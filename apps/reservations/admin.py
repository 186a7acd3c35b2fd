from django.contrib import admin

from .models import Reservation


@admin.register(Reservation)
class ReservationAdmin(admin.ModelAdmin):
    list_display = ('guest_name', 'experience', 'hotel', 'participants', 'total_cents', 'status', 'created_at')
    list_filter = ('status', 'is_request', 'currency')
    search_fields = ('guest_name', 'guest_email', 'stripe_payment_intent_id', 'stripe_transfer_id')
    raw_id_fields = ('experience', 'hotel', 'hotel_config', 'session', 'hotel_payout')
    readonly_fields = (
        'supplier_amount_cents', 'hotel_amount_cents', 'platform_amount_cents',
        'settlement_error', 'settlement_attempts', 'created_at', 'updated_at',
    )
