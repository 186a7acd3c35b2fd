"""Utility functions for the Traverum platform."""

import re

from django.core.validators import validate_email

_TAG_RE = re.compile(r'<[^>]*>')


def strip_html(value):
    """Remove HTML tags from a string."""
    return _TAG_RE.sub('', value).strip()


def sanitize_guest_text(value, max_length=200):
    """Sanitize free guest text (name, phone) before storing it."""
    return strip_html(value or '')[:max_length]


def sanitize_guest_email(value):
    """Normalize a guest email; raises ``ValidationError`` when malformed."""
    email = (value or '').strip().lower()[:320]
    validate_email(email)
    return email


def format_cents(amount_cents, currency='EUR'):
    """Human readable amount for emails, e.g. ``€136.00``."""
    symbols = {'EUR': '€', 'USD': '$', 'GBP': '£'}
    symbol = symbols.get((currency or '').upper())
    amount = f"{amount_cents / 100:.2f}"
    return f"{symbol}{amount}" if symbol else f"{amount} {currency}"
