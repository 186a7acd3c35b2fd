"""Tests for the three-way revenue split."""

from django.test import SimpleTestCase, TestCase

from core.tests.factories import BookingFixtureMixin, make_reservation
from payment_processor.split import CommissionRates, DEFAULT_RATES, compute_split, rates_for


class ComputeSplitTestCase(SimpleTestCase):

    def test_default_split(self):
        split = compute_split(13600)

        self.assertEqual((split.supplier_cents, split.hotel_cents, split.platform_cents), (10880, 2040, 680))

    def test_shares_always_sum_to_total(self):
        rates = [DEFAULT_RATES, CommissionRates(70, 20, 10), CommissionRates(33, 33, 34), CommissionRates(100, 0, 0)]
        for rate in rates:
            for total in range(0, 2001):
                split = compute_split(total, rate)
                self.assertEqual(split.supplier_cents + split.hotel_cents + split.platform_cents, total)
                self.assertGreaterEqual(split.platform_cents, 0)

    def test_rounds_half_up(self):
        # 80% of 1 cent is 0.8 -> 1; 15% of 10 cents is 1.5 -> 2
        self.assertEqual(compute_split(1).supplier_cents, 1)
        self.assertEqual(compute_split(10).hotel_cents, 2)

    def test_hotel_share_is_clamped_to_remainder(self):
        split = compute_split(1, CommissionRates(50, 50, 0))

        self.assertEqual((split.supplier_cents, split.hotel_cents, split.platform_cents), (1, 0, 0))

    def test_rates_must_sum_to_100(self):
        with self.assertRaises(ValueError):
            CommissionRates(80, 15, 10)

    def test_negative_total_rejected(self):
        with self.assertRaises(ValueError):
            compute_split(-1)


class RatesForReservationTestCase(BookingFixtureMixin, TestCase):

    def setUp(self):
        self.create_booking_fixture()

    def test_distribution_rates_override_defaults(self):
        self.distribution.commission_supplier = 70
        self.distribution.commission_hotel = 20
        self.distribution.commission_platform = 10
        self.distribution.save()
        reservation = make_reservation(self.experience, self.hotel)

        self.assertEqual(rates_for(reservation), CommissionRates(70, 20, 10))

    def test_defaults_without_distribution(self):
        self.distribution.delete()
        reservation = make_reservation(self.experience, self.hotel)

        self.assertEqual(rates_for(reservation), DEFAULT_RATES)
