"""
Settlement of paid reservations.

``settle`` pays the supplier share to the supplier's Stripe connected
account; the hotel share is paid out later in periodic ``HotelPayout``
batches and the platform keeps the remainder.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from core.exceptions import NoConnectedAccount
from .services import StripePaymentService
from .split import RevenueSplit, split_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransferResult:
    transfer_id: str
    destination: str
    split: RevenueSplit


def settle(reservation, service: Optional[StripePaymentService] = None) -> TransferResult:
    """
    Transfer the supplier share of ``reservation``.

    Raises ``NoConnectedAccount`` before calling Stripe when the supplier
    has not finished onboarding, ``TransferFailed`` when Stripe rejects
    the transfer. The caller owns the status change.
    """
    supplier = reservation.experience.partner
    if not supplier.stripe_account_id:
        logger.warning(f"⚠️ [SETTLEMENT] Supplier {supplier.id} of reservation {reservation.id} has no connected account")
        raise NoConnectedAccount()

    if reservation.supplier_amount_cents is not None:
        split = RevenueSplit(
            total_cents=reservation.total_cents,
            supplier_cents=reservation.supplier_amount_cents,
            hotel_cents=reservation.hotel_amount_cents or 0,
            platform_cents=reservation.platform_amount_cents or 0,
        )
    else:
        split = split_for(reservation)

    service = service or StripePaymentService()
    transfer_id = service.create_transfer(reservation, split.supplier_cents, supplier.stripe_account_id)
    logger.info(
        f"💰 [SETTLEMENT] Reservation {reservation.id}: supplier {split.supplier_cents}, "
        f"hotel {split.hotel_cents}, platform {split.platform_cents} ({transfer_id})"
    )
    return TransferResult(transfer_id=transfer_id, destination=supplier.stripe_account_id, split=split)


def refund(reservation, service: Optional[StripePaymentService] = None) -> Optional[str]:
    """Full refund of the original charge; ``None`` when nothing was charged."""
    if not (reservation.stripe_payment_intent_id or reservation.stripe_charge_id):
        return None
    service = service or StripePaymentService()
    return service.refund(reservation)
