"""
Payment audit models.

Every call to Stripe is recorded as a ``PaymentTransaction`` and every
webhook delivery as a ``PaymentWebhook``, for audit and debugging.
"""

from django.db import models

from core.models import BaseModel


class PaymentTransaction(BaseModel):
    """Individual Stripe call made for a reservation."""

    TRANSACTION_TYPES = [
        ('payment_link', 'Create Payment Link'),
        ('deactivate_link', 'Deactivate Payment Link'),
        ('refund', 'Refund'),
        ('transfer', 'Transfer'),
        ('status_check', 'Status Check'),
    ]

    reservation = models.ForeignKey(
        'reservations.Reservation',
        on_delete=models.CASCADE,
        related_name='payment_transactions',
        null=True,
        blank=True
    )
    transaction_type = models.CharField(max_length=20, choices=TRANSACTION_TYPES)
    external_id = models.CharField(max_length=255, blank=True, help_text="Stripe object ID")

    # Request/Response data for debugging
    request_data = models.JSONField(default=dict)
    response_data = models.JSONField(default=dict)

    is_successful = models.BooleanField(default=False)
    error_message = models.TextField(blank=True)
    duration_ms = models.IntegerField(null=True, help_text="Request duration in milliseconds")

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['reservation', 'created_at'], name='payment_txn_reservation_idx'),
            models.Index(fields=['transaction_type', 'created_at'], name='payment_txn_type_idx'),
        ]

    def __str__(self):
        status = "✅" if self.is_successful else "❌"
        return f"{status} {self.transaction_type} - {self.reservation_id}"


class PaymentWebhook(BaseModel):
    """Stripe webhook event; ``event_id`` is unique so redeliveries are detected."""

    WEBHOOK_STATUS = [
        ('received', 'Received'),
        ('processed', 'Processed'),
        ('failed', 'Failed'),
        ('ignored', 'Ignored'),
    ]

    event_id = models.CharField(max_length=255, unique=True)
    event_type = models.CharField(max_length=100)
    reservation = models.ForeignKey(
        'reservations.Reservation',
        on_delete=models.SET_NULL,
        related_name='payment_webhooks',
        null=True,
        blank=True
    )
    payload = models.JSONField(default=dict)

    status = models.CharField(max_length=20, choices=WEBHOOK_STATUS, default='received')
    processed_at = models.DateTimeField(null=True, blank=True)
    error_message = models.TextField(blank=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'created_at'], name='payment_webhook_status_idx'),
        ]

    def __str__(self):
        return f"{self.event_type} {self.event_id} ({self.status})"
