from datetime import timedelta
from decimal import Decimal

from django.core import mail
from django.test import TestCase
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from bookings.models import Booking
from bookings.services import BookingService
from bookings.tasks import auto_complete_bookings, expire_unpaid_bookings
from notifications.models import SupportMessage
from utils.exceptions import BookingConflict, InvalidBookingTransition, ParkingUnavailable
from .helpers import make_spot, make_user, make_vehicle, noon_tomorrow


class BookingServiceTests(TestCase):

    def setUp(self):
        self.user = make_user()
        self.spot = make_spot()  # 2.00/min, 10 spaces, 5 per class
        self.start = noon_tomorrow()

    def book(self, vehicle_type='four_wheeler', start=None, minutes=60):
        start = start or self.start
        return BookingService.create_booking(
            user=self.user,
            spot=self.spot,
            vehicle_type=vehicle_type,
            start_time=start,
            end_time=start + timedelta(minutes=minutes),
        )

    def test_prices_with_demand_and_start_hour(self):
        booking = self.book()
        booking.refresh_from_db()
        self.assertEqual(booking.status, 'pending_payment')
        self.assertEqual(booking.duration_minutes, 60)
        self.assertEqual(booking.base_price, Decimal('2.00'))
        self.assertEqual(booking.demand_factor, Decimal('1.00'))
        self.assertEqual(booking.time_factor, Decimal('1.50'))
        self.assertEqual(booking.estimated_price, Decimal('180.00'))

    def test_busy_spot_costs_more(self):
        self.spot.two_wheeler_spaces = 0
        self.spot.four_wheeler_spaces = 1
        self.spot.save()
        booking = self.book(start=self.start.replace(hour=23))
        booking.refresh_from_db()
        self.assertEqual(booking.demand_factor, Decimal('1.50'))
        self.assertEqual(booking.time_factor, Decimal('0.80'))
        self.assertEqual(booking.estimated_price, Decimal('144.00'))

    def test_overlapping_booking_conflicts(self):
        self.book()
        with self.assertRaises(BookingConflict):
            self.book(start=self.start + timedelta(minutes=30))

    def test_back_to_back_bookings_do_not_conflict(self):
        self.book()
        self.book(start=self.start + timedelta(minutes=60))
        self.assertEqual(Booking.objects.count(), 2)

    def test_other_vehicle_class_does_not_conflict(self):
        self.book()
        self.book(vehicle_type='two_wheeler')
        self.assertEqual(Booking.objects.count(), 2)

    def test_cancelled_booking_frees_the_window(self):
        BookingService.cancel(self.book())
        self.book()
        self.assertEqual(Booking.objects.filter(status='pending_payment').count(), 1)

    def test_no_space_for_vehicle_class(self):
        self.spot.two_wheeler_spaces = 0
        self.spot.save()
        with self.assertRaises(ParkingUnavailable):
            self.book(vehicle_type='two_wheeler')

    def test_confirm_takes_a_space(self):
        booking = BookingService.confirm(self.book())
        self.spot.refresh_from_db()
        self.assertEqual(booking.status, 'confirmed')
        self.assertTrue(booking.space_held)
        self.assertEqual(self.spot.four_wheeler_spaces, 4)
        self.assertEqual(self.spot.two_wheeler_spaces, 5)
        self.assertEqual(self.spot.available_spaces, 9)

    def test_confirm_sends_notifications(self):
        booking = self.book()
        with self.captureOnCommitCallbacks(execute=True):
            BookingService.confirm(booking)
        self.assertEqual(len(mail.outbox), 1)
        self.assertIn(self.spot.name, mail.outbox[0].subject)
        self.assertTrue(SupportMessage.objects.filter(owner=self.user, is_from_user=False).exists())

    def test_confirm_fails_when_spot_filled_up(self):
        booking = self.book()
        self.spot.four_wheeler_spaces = 0
        self.spot.save()
        with self.assertRaises(ParkingUnavailable):
            BookingService.confirm(booking)

    def test_complete_charges_actual_minutes_and_frees_space(self):
        booking = BookingService.start(BookingService.confirm(self.book()))
        started = booking.started_at
        booking = BookingService.complete(booking, completed_at=started + timedelta(minutes=30))
        self.spot.refresh_from_db()
        self.assertEqual(booking.status, 'completed')
        self.assertEqual(booking.actual_price, Decimal('90.00'))
        self.assertFalse(booking.space_held)
        self.assertEqual(self.spot.four_wheeler_spaces, 5)

    def test_cancel_confirmed_frees_space(self):
        booking = BookingService.confirm(self.book())
        BookingService.cancel(booking)
        self.spot.refresh_from_db()
        self.assertEqual(booking.status, 'cancelled')
        self.assertEqual(self.spot.four_wheeler_spaces, 5)

    def test_cancel_pending_leaves_spaces_alone(self):
        BookingService.cancel(self.book())
        self.spot.refresh_from_db()
        self.assertEqual(self.spot.four_wheeler_spaces, 5)

    def test_invalid_transitions(self):
        booking = self.book()
        with self.assertRaises(InvalidBookingTransition):
            BookingService.start(booking)
        with self.assertRaises(InvalidBookingTransition):
            BookingService.complete(booking)
        BookingService.cancel(booking)
        with self.assertRaises(InvalidBookingTransition):
            BookingService.cancel(booking)
        with self.assertRaises(InvalidBookingTransition):
            BookingService.confirm(booking)


class BookingAPITests(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.user = make_user(phone_number='+919876543210')
        self.client.force_authenticate(self.user)
        self.spot = make_spot()
        self.url = '/api/v1/bookings/'
        self.start = noon_tomorrow()

    def payload(self, **extra):
        data = {
            'spot': self.spot.id,
            'vehicle_type': 'four_wheeler',
            'vehicle_number': 'DL01AB1234',
            'start_time': self.start.isoformat(),
            'duration_minutes': 60,
        }
        data.update(extra)
        return data

    def test_create_booking(self):
        response = self.client.post(self.url, self.payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        booking = Booking.objects.get(id=response.data['id'])
        self.assertEqual(booking.user, self.user)
        self.assertEqual(booking.end_time, self.start + timedelta(minutes=60))
        self.assertEqual(booking.estimated_price, Decimal('180.00'))
        self.assertEqual(booking.contact_email, 'arjun@example.com')
        self.assertEqual(booking.contact_phone, '+919876543210')
        self.assertEqual(response.data['status'], 'pending_payment')

    def test_create_with_end_time(self):
        end = self.start + timedelta(minutes=45)
        data = self.payload(end_time=end.isoformat())
        del data['duration_minutes']
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertEqual(Booking.objects.get().duration_minutes, 45)

    def test_end_must_follow_start(self):
        data = self.payload(end_time=self.start.isoformat())
        del data['duration_minutes']
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_overlap_returns_conflict(self):
        self.client.post(self.url, self.payload(), format='json')
        response = self.client.post(self.url, self.payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_full_vehicle_class_returns_conflict(self):
        self.spot.two_wheeler_spaces = 0
        self.spot.save()
        response = self.client.post(self.url, self.payload(vehicle_type='two_wheeler'), format='json')
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data['detail'].code, 'parking_unavailable')

    def test_vehicle_sets_class_and_number(self):
        bike = make_vehicle(self.user, number='DL05XY9999', vehicle_type='bike')
        data = self.payload(vehicle_id=bike.id)
        del data['vehicle_type']
        del data['vehicle_number']
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        booking = Booking.objects.get()
        self.assertEqual(booking.vehicle, bike)
        self.assertEqual(booking.vehicle_type, 'two_wheeler')
        self.assertEqual(booking.vehicle_number, 'DL05XY9999')

    def test_someone_elses_vehicle(self):
        other_car = make_vehicle(make_user('meera'))
        response = self.client.post(self.url, self.payload(vehicle_id=other_car.id), format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_requires_vehicle_type(self):
        data = self.payload()
        del data['vehicle_type']
        response = self.client.post(self.url, data, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_requires_authentication(self):
        self.client.force_authenticate(None)
        response = self.client.post(self.url, self.payload(), format='json')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_lists_only_own_bookings(self):
        self.client.post(self.url, self.payload(), format='json')
        other = make_user('meera')
        BookingService.create_booking(other, self.spot, 'two_wheeler', self.start,
                                      self.start + timedelta(hours=1))
        response = self.client.get(self.url)
        self.assertEqual(response.data['count'], 1)
        response = self.client.get(f'{self.url}my_bookings/')
        self.assertEqual(len(response.data), 1)

    def test_cannot_see_other_users_booking(self):
        other = make_user('meera')
        booking = BookingService.create_booking(other, self.spot, 'two_wheeler', self.start,
                                                self.start + timedelta(hours=1))
        response = self.client.get(f'{self.url}{booking.id}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_lifecycle_endpoints(self):
        booking_id = self.client.post(self.url, self.payload(), format='json').data['id']
        response = self.client.post(f'{self.url}{booking_id}/start/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

        BookingService.confirm(Booking.objects.get(id=booking_id))
        response = self.client.post(f'{self.url}{booking_id}/start/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'active')

        response = self.client.post(f'{self.url}{booking_id}/complete/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'completed')
        self.assertIsNotNone(response.data['actual_price'])

        response = self.client.post(f'{self.url}{booking_id}/cancel_booking/')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cancel_booking(self):
        booking_id = self.client.post(self.url, self.payload(), format='json').data['id']
        BookingService.confirm(Booking.objects.get(id=booking_id))
        response = self.client.post(f'{self.url}{booking_id}/cancel_booking/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'cancelled')
        self.spot.refresh_from_db()
        self.assertEqual(self.spot.four_wheeler_spaces, 5)


class BookingTaskTests(TestCase):

    def setUp(self):
        self.user = make_user()
        self.spot = make_spot()

    def test_auto_complete_ended_bookings(self):
        start = timezone.now() - timedelta(hours=2)
        booking = BookingService.create_booking(self.user, self.spot, 'four_wheeler',
                                                start, start + timedelta(hours=1))
        BookingService.confirm(booking)

        self.assertEqual(auto_complete_bookings(), 1)
        booking.refresh_from_db()
        self.spot.refresh_from_db()
        self.assertEqual(booking.status, 'completed')
        self.assertEqual(booking.actual_price, booking.estimated_price)
        self.assertEqual(self.spot.four_wheeler_spaces, 5)

    def test_running_bookings_are_left_alone(self):
        start = timezone.now() - timedelta(minutes=10)
        booking = BookingService.create_booking(self.user, self.spot, 'four_wheeler',
                                                start, start + timedelta(hours=1))
        BookingService.confirm(booking)
        self.assertEqual(auto_complete_bookings(), 0)

    def test_expire_unpaid_bookings(self):
        start = noon_tomorrow()
        stale = BookingService.create_booking(self.user, self.spot, 'four_wheeler',
                                              start, start + timedelta(hours=1))
        fresh = BookingService.create_booking(self.user, self.spot, 'two_wheeler',
                                              start, start + timedelta(hours=1))
        Booking.objects.filter(id=stale.id).update(created_at=timezone.now() - timedelta(minutes=30))

        self.assertEqual(expire_unpaid_bookings(), 1)
        stale.refresh_from_db()
        fresh.refresh_from_db()
        self.assertEqual(stale.status, 'cancelled')
        self.assertEqual(fresh.status, 'pending_payment')
