from django.contrib import admin

from .models import PaymentTransaction, PaymentWebhook


@admin.register(PaymentTransaction)
class PaymentTransactionAdmin(admin.ModelAdmin):
    list_display = ('transaction_type', 'reservation', 'external_id', 'is_successful', 'duration_ms', 'created_at')
    list_filter = ('transaction_type', 'is_successful')
    search_fields = ('external_id', 'reservation__id', 'error_message')
    raw_id_fields = ('reservation',)
    readonly_fields = ('request_data', 'response_data', 'created_at')


@admin.register(PaymentWebhook)
class PaymentWebhookAdmin(admin.ModelAdmin):
    list_display = ('event_id', 'event_type', 'status', 'reservation', 'processed_at', 'created_at')
    list_filter = ('status', 'event_type')
    search_fields = ('event_id',)
    raw_id_fields = ('reservation',)
    readonly_fields = ('payload', 'created_at')
