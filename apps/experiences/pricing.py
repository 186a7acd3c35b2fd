"""
Experience price calculation.

Pricing types:
- ``per_person``: ``extra_person_cents`` (or ``price_cents``) per participant
- ``base_plus_extra``: ``base_price_cents`` for the included participants,
  ``extra_person_cents`` for each additional one
- ``flat_rate``: ``base_price_cents`` (or ``price_cents``) regardless of participants

A session price override replaces the whole calculation. The minimum
participant count is always enforced.
"""

from dataclasses import dataclass
from typing import Optional

# Client totals may differ from ours by this much (rounding in the widget)
PRICE_TOLERANCE_CENTS = 1


@dataclass(frozen=True)
class PriceCalculation:
    base_price: int
    extra_person_fee: int
    total_price: int
    included_participants: int
    extra_participants: int
    price_per_person: Optional[int]
    effective_participants: int


def calculate_price(experience, participants: int, session=None) -> PriceCalculation:
    """Total price in cents for ``participants`` guests."""
    override = getattr(session, 'price_override_cents', None) if session is not None else None
    if override:
        return PriceCalculation(
            base_price=override,
            extra_person_fee=0,
            total_price=override,
            included_participants=participants,
            extra_participants=0,
            price_per_person=None,
            effective_participants=participants,
        )

    effective = max(participants, experience.min_participants or 1)

    if experience.pricing_type == 'per_person':
        per_person = experience.extra_person_cents or experience.price_cents
        return PriceCalculation(
            base_price=per_person * effective,
            extra_person_fee=0,
            total_price=per_person * effective,
            included_participants=effective,
            extra_participants=0,
            price_per_person=per_person,
            effective_participants=effective,
        )

    if experience.pricing_type == 'base_plus_extra':
        base = experience.base_price_cents or 0
        extra_people = max(0, effective - experience.included_participants)
        extra_fee = extra_people * (experience.extra_person_cents or 0)
        return PriceCalculation(
            base_price=base,
            extra_person_fee=extra_fee,
            total_price=base + extra_fee,
            included_participants=experience.included_participants,
            extra_participants=extra_people,
            price_per_person=None,
            effective_participants=effective,
        )

    # flat_rate
    flat = experience.base_price_cents or experience.price_cents or 0
    return PriceCalculation(
        base_price=flat,
        extra_person_fee=0,
        total_price=flat,
        included_participants=effective,
        extra_participants=0,
        price_per_person=None,
        effective_participants=effective,
    )


def price_matches(client_total: int, calculation: PriceCalculation) -> bool:
    return abs(client_total - calculation.total_price) <= PRICE_TOLERANCE_CENTS


def display_price(experience):
    """Amount and suffix shown on experience cards."""
    if experience.pricing_type == 'per_person':
        return {'amount_cents': experience.extra_person_cents or experience.price_cents, 'suffix': '/ person'}
    if experience.pricing_type == 'base_plus_extra':
        return {
            'amount_cents': experience.base_price_cents or experience.price_cents,
            'suffix': f"for {experience.included_participants}",
        }
    return {'amount_cents': experience.base_price_cents or experience.price_cents, 'suffix': 'total'}
