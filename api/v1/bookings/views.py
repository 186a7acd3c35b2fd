"""
Booking endpoints reached from emails after payment: the supplier confirms
the experience took place (triggering the payout) or reports that it did
not, and the guest cancels.
"""

from core.tokens import TokenAction
from apps.reservations import services
from api.v1.token_actions import TokenActionView


class BookingTokenActionView(TokenActionView):
    http_method_names = ['get', 'patch', 'options']

    def patch(self, request, reservation_id):
        return self.post(request, reservation_id)


class CompleteBookingView(BookingTokenActionView):
    """GET|PATCH /api/v1/bookings/<id>/complete/?token="""

    token_action = TokenAction.COMPLETE
    success_title = 'Experience completed'
    failure_title = 'Could not complete booking'

    def perform(self, request, reservation_id):
        return services.complete_reservation(reservation_id)

    def success_message(self, reservation):
        return 'Thank you! Your payout has been sent to your Stripe account.'


class CancelBookingView(BookingTokenActionView):
    """GET|PATCH /api/v1/bookings/<id>/cancel/?token="""

    token_action = TokenAction.CANCEL
    success_title = 'Booking cancelled'
    failure_title = 'Could not cancel booking'

    def perform(self, request, reservation_id):
        return services.cancel_reservation(reservation_id)

    def success_message(self, reservation):
        if reservation.stripe_refund_id:
            return 'Your booking has been cancelled and a full refund is on its way.'
        return 'Your booking has been cancelled.'


class NoExperienceBookingView(BookingTokenActionView):
    """GET|PATCH /api/v1/bookings/<id>/no-experience/?token="""

    token_action = TokenAction.NO_EXPERIENCE
    success_title = 'Experience not completed'
    failure_title = 'Could not update booking'

    def perform(self, request, reservation_id):
        return services.report_no_experience(reservation_id)

    def success_message(self, reservation):
        return 'The experience has been marked as not completed and the guest has been refunded.'
