"""Model builders shared by the test suites."""

from datetime import time, timedelta

from django.utils import timezone

from apps.experiences.models import Distribution, Experience, ExperienceSession
from apps.partners.models import HotelConfig, Partner
from apps.reservations.models import Reservation, ReservationStatus


def make_supplier(name='Lakeside Kayaks', onboarded=True, **kwargs):
    defaults = {
        'email': 'hello@kayaks.test',
        'partner_type': 'supplier',
        'stripe_account_id': 'acct_supplier' if onboarded else None,
        'stripe_onboarding_complete': onboarded,
    }
    defaults.update(kwargs)
    return Partner.objects.create(name=name, **defaults)


def make_hotel(name='Hotel Aurora', slug='hotel-aurora'):
    partner = Partner.objects.create(name=name, email='desk@aurora.test', partner_type='hotel')
    config = HotelConfig.objects.create(partner=partner, slug=slug, display_name=name)
    return partner, config


def make_experience(supplier, **kwargs):
    defaults = {
        'title': 'Sunset Kayak Tour',
        'slug': 'sunset-kayak-tour',
        'status': 'active',
        'pricing_type': 'per_person',
        'extra_person_cents': 3400,
        'min_participants': 1,
        'max_participants': 8,
        'currency': 'EUR',
    }
    defaults.update(kwargs)
    return Experience.objects.create(partner=supplier, **defaults)


def distribute(hotel, hotel_config, experience, **kwargs):
    return Distribution.objects.create(hotel=hotel, hotel_config=hotel_config, experience=experience, **kwargs)


def make_session(experience, days_ahead=30, spots=8, **kwargs):
    defaults = {
        'session_date': timezone.localdate() + timedelta(days=days_ahead),
        'start_time': time(18, 0),
        'spots_total': spots,
        'spots_available': spots,
    }
    defaults.update(kwargs)
    return ExperienceSession.objects.create(experience=experience, **defaults)


def make_reservation(experience, hotel, status=ReservationStatus.PENDING, participants=4,
                     total_cents=13600, days_ahead=30, **kwargs):
    defaults = {
        'guest_name': 'Maija Virtanen',
        'guest_email': 'maija@example.com',
        'participants': participants,
        'total_cents': total_cents,
        'currency': 'EUR',
        'is_request': True,
        'requested_date': timezone.localdate() + timedelta(days=days_ahead),
        'requested_time': time(10, 0),
        'status': status,
        'response_deadline': timezone.now() + timedelta(hours=48),
    }
    defaults.update(kwargs)
    return Reservation.objects.create(experience=experience, hotel=hotel, **defaults)


class BookingFixtureMixin:
    """Supplier, hotel and a distributed per-person experience (34.00 EUR)."""

    def create_booking_fixture(self):
        self.supplier = make_supplier()
        self.hotel, self.hotel_config = make_hotel()
        self.experience = make_experience(self.supplier)
        self.distribution = distribute(self.hotel, self.hotel_config, self.experience)
