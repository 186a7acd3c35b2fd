"""
Booking error taxonomy and the project-wide DRF exception handler.

Every failure of the booking lifecycle is raised as one of the
``APIException`` subclasses below; the handler logs it and renders a
consistent ``{"error": <code>, "message": <detail>}`` body.
"""

import logging
from typing import Any, Dict, Optional

from rest_framework import status
from rest_framework.exceptions import APIException, Throttled, ValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class BookingError(APIException):
    """Base class for booking lifecycle failures."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Booking operation failed.'
    default_code = 'booking_error'


class InvalidToken(BookingError):
    """
    Malformed, expired or tampered action token.

    The cause is deliberately not exposed to the client.
    """

    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Invalid or expired token.'
    default_code = 'invalid_token'


class InvalidTransition(BookingError):
    """The requested status change is not legal from the current status."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = 'This booking has already been processed.'
    default_code = 'invalid_transition'


class CancellationWindowClosed(InvalidTransition):
    default_detail = 'Cancellation is no longer available for this booking.'
    default_code = 'cancellation_window_closed'


class NoConnectedAccount(BookingError):
    """The supplier has not finished Stripe Connect onboarding."""

    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The supplier has no connected payment account.'
    default_code = 'no_connected_account'


class TransferFailed(BookingError):
    """The payment provider rejected the payout transfer."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'The payout transfer could not be completed.'
    default_code = 'transfer_failed'


class PaymentProviderError(BookingError):
    """Any other payment provider failure (payment links, refunds)."""

    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'The payment provider request failed.'
    default_code = 'payment_provider_error'


def error_message(detail: Any) -> str:
    if isinstance(detail, list) and detail:
        return str(detail[0])
    return str(detail)


def booking_exception_handler(exc: Exception, context: Optional[Dict[str, Any]] = None) -> Optional[Response]:
    """
    Render API errors as ``{"error", "message"}`` and log them server-side.

    Validation errors additionally carry ``field_errors``; unknown
    exceptions fall through to Django (500).
    """
    response = exception_handler(exc, context)
    if response is None:
        return None

    view = context.get('view') if context else None
    log_context = {
        'view': view.__class__.__name__ if view else None,
        'error_type': exc.__class__.__name__,
    }

    if isinstance(exc, ValidationError):
        logger.warning(f"🔴 [API_ERROR] Validation error: {exc.detail}", extra=log_context)
        field_errors = exc.detail if isinstance(exc.detail, dict) else {}
        response.data = {
            'error': 'validation_error',
            'message': 'Invalid request data.' if field_errors else error_message(exc.detail),
            'field_errors': field_errors,
        }
        return response

    if isinstance(exc, Throttled):
        logger.warning(f"🚫 [API_ERROR] Throttled: {exc.detail}", extra=log_context)
        response.data = {'error': 'rate_limited', 'message': 'Too many requests.'}
        return response

    if response.status_code >= 500:
        logger.error(f"❌ [API_ERROR] {exc.__class__.__name__}: {exc}", extra=log_context)
    else:
        logger.warning(f"🔴 [API_ERROR] {exc.__class__.__name__}: {exc}", extra=log_context)

    codes = exc.get_codes() if isinstance(exc, APIException) else None
    response.data = {
        'error': codes if isinstance(codes, str) else 'error',
        'message': error_message(getattr(exc, 'detail', exc)),
    }
    return response
