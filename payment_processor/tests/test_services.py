"""Tests for the Stripe service and settlement, with the Stripe SDK mocked."""

from unittest import mock

import stripe
from django.test import TestCase

from core.exceptions import NoConnectedAccount, PaymentProviderError, TransferFailed
from core.tests.factories import BookingFixtureMixin, make_reservation
from apps.reservations.models import ReservationStatus
from payment_processor.models import PaymentTransaction
from payment_processor.services import StripePaymentService
from payment_processor.settlement import refund, settle


class StripePaymentServiceTestCase(BookingFixtureMixin, TestCase):

    def setUp(self):
        self.create_booking_fixture()
        self.reservation = make_reservation(
            self.experience, self.hotel, status=ReservationStatus.PENDING_PAYMENT,
            stripe_payment_intent_id='pi_123', stripe_charge_id='ch_123',
        )
        self.service = StripePaymentService(api_key='sk_test_dummy')

    @mock.patch('payment_processor.services.stripe.PaymentLink.create')
    @mock.patch('payment_processor.services.stripe.Price.create')
    def test_create_payment_link(self, price_create, link_create):
        price_create.return_value = mock.Mock(id='price_1')
        link_create.return_value = mock.Mock(id='plink_1', url='https://buy.stripe.com/test_1')

        link = self.service.create_payment_link(self.reservation)

        self.assertEqual(link, {'id': 'plink_1', 'url': 'https://buy.stripe.com/test_1'})
        self.assertEqual(price_create.call_args.kwargs['unit_amount'], 13600)
        self.assertEqual(price_create.call_args.kwargs['currency'], 'eur')
        metadata = link_create.call_args.kwargs['payment_intent_data']['metadata']
        self.assertEqual(metadata, {'reservation_id': str(self.reservation.id)})
        self.assertTrue(PaymentTransaction.objects.filter(
            reservation=self.reservation, transaction_type='payment_link', is_successful=True
        ).exists())

    @mock.patch('payment_processor.services.stripe.Price.create')
    def test_payment_link_failure_is_mapped(self, price_create):
        price_create.side_effect = stripe.StripeError('API down')

        with self.assertRaises(PaymentProviderError):
            self.service.create_payment_link(self.reservation)

        log = PaymentTransaction.objects.get(reservation=self.reservation)
        self.assertFalse(log.is_successful)
        self.assertIn('API down', log.error_message)

    @mock.patch('payment_processor.services.stripe.Transfer.create')
    def test_transfer_uses_reservation_idempotency_key(self, transfer_create):
        transfer_create.return_value = mock.Mock(id='tr_1')

        transfer_id = self.service.create_transfer(self.reservation, 10880, 'acct_supplier')

        self.assertEqual(transfer_id, 'tr_1')
        kwargs = transfer_create.call_args.kwargs
        self.assertEqual(kwargs['idempotency_key'], f"settle-{self.reservation.id}")
        self.assertEqual(kwargs['amount'], 10880)
        self.assertEqual(kwargs['destination'], 'acct_supplier')
        self.assertEqual(kwargs['source_transaction'], 'ch_123')

    @mock.patch('payment_processor.services.stripe.Transfer.create')
    def test_transfer_failure_raises_transfer_failed(self, transfer_create):
        transfer_create.side_effect = stripe.StripeError('Insufficient funds')

        with self.assertRaises(TransferFailed):
            self.service.create_transfer(self.reservation, 10880, 'acct_supplier')

    @mock.patch('payment_processor.services.stripe.Refund.create')
    def test_refund_by_payment_intent(self, refund_create):
        refund_create.return_value = mock.Mock(id='re_1', status='succeeded')

        self.assertEqual(refund(self.reservation, service=self.service), 're_1')
        self.assertEqual(refund_create.call_args.kwargs['payment_intent'], 'pi_123')
        self.assertEqual(refund_create.call_args.kwargs['idempotency_key'], f"refund-{self.reservation.id}")

    def test_refund_without_charge_is_a_no_op(self):
        reservation = make_reservation(self.experience, self.hotel, status=ReservationStatus.CONFIRMED)

        self.assertIsNone(refund(reservation, service=self.service))


class SettleTestCase(BookingFixtureMixin, TestCase):

    def setUp(self):
        self.create_booking_fixture()
        self.service = mock.Mock(spec=StripePaymentService)
        self.service.create_transfer.return_value = 'tr_1'

    def test_settle_transfers_supplier_share(self):
        reservation = make_reservation(self.experience, self.hotel, status=ReservationStatus.PENDING_PAYMENT)

        result = settle(reservation, service=self.service)

        self.assertEqual(result.transfer_id, 'tr_1')
        self.assertEqual(result.split.supplier_cents, 10880)
        self.service.create_transfer.assert_called_once_with(reservation, 10880, 'acct_supplier')

    def test_settle_uses_stored_split(self):
        reservation = make_reservation(
            self.experience, self.hotel, status=ReservationStatus.PENDING_PAYMENT,
            supplier_amount_cents=9520, hotel_amount_cents=2720, platform_amount_cents=1360,
        )

        result = settle(reservation, service=self.service)

        self.assertEqual(result.split.supplier_cents, 9520)
        self.service.create_transfer.assert_called_once_with(reservation, 9520, 'acct_supplier')

    def test_settle_without_connected_account(self):
        self.supplier.stripe_account_id = None
        self.supplier.save()
        reservation = make_reservation(self.experience, self.hotel, status=ReservationStatus.PENDING_PAYMENT)

        with self.assertRaises(NoConnectedAccount):
            settle(reservation, service=self.service)
        self.service.create_transfer.assert_not_called()
