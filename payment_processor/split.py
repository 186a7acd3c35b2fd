"""
Revenue split between supplier, distributor (hotel) and platform.

All arithmetic is on integer minor units. The supplier and hotel shares
are rounded half-up; the platform receives the remainder, so the three
shares always add up to the booking total.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CommissionRates:
    """Percentages of the total; must add up to 100."""

    supplier: int
    hotel: int
    platform: int

    def __post_init__(self):
        if min(self.supplier, self.hotel, self.platform) < 0:
            raise ValueError("Commission rates cannot be negative")
        if self.supplier + self.hotel + self.platform != 100:
            raise ValueError(
                f"Commission rates must add up to 100, got "
                f"{self.supplier}/{self.hotel}/{self.platform}"
            )


DEFAULT_RATES = CommissionRates(supplier=80, hotel=15, platform=5)


@dataclass(frozen=True)
class RevenueSplit:
    total_cents: int
    supplier_cents: int
    hotel_cents: int
    platform_cents: int

    def as_fields(self):
        """Reservation field values for this split."""
        return {
            'supplier_amount_cents': self.supplier_cents,
            'hotel_amount_cents': self.hotel_cents,
            'platform_amount_cents': self.platform_cents,
        }


def _percent_half_up(total_cents: int, percent: int) -> int:
    return (total_cents * percent * 2 + 100) // 200


def compute_split(total_cents: int, rates: CommissionRates = DEFAULT_RATES) -> RevenueSplit:
    if total_cents < 0:
        raise ValueError("Total cannot be negative")

    supplier = _percent_half_up(total_cents, rates.supplier)
    hotel = min(_percent_half_up(total_cents, rates.hotel), total_cents - supplier)
    platform = total_cents - supplier - hotel
    return RevenueSplit(total_cents, supplier, hotel, platform)


def rates_for(reservation) -> CommissionRates:
    """Commission rates of the hotel/experience distribution, else the defaults."""
    from apps.experiences.models import Distribution

    distribution = (
        Distribution.objects
        .filter(hotel_id=reservation.hotel_id, experience_id=reservation.experience_id)
        .only('commission_supplier', 'commission_hotel', 'commission_platform')
        .first()
    )
    if distribution is None:
        return DEFAULT_RATES
    return CommissionRates(
        supplier=distribution.commission_supplier,
        hotel=distribution.commission_hotel,
        platform=distribution.commission_platform,
    )


def split_for(reservation) -> RevenueSplit:
    return compute_split(reservation.total_cents, rates_for(reservation))
