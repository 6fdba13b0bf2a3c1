import hashlib
import hmac
import json
from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

import razorpay
import requests
from django.core.cache import cache
from django.test import SimpleTestCase, TestCase, override_settings
from rest_framework import status
from rest_framework.test import APIClient

from bookings.services import BookingService
from payments.currency import convert_usd_to_inr, get_usd_inr_rate, to_inr
from payments.models import Payment
from payments.services import RazorpayService, PaymentService
from payments.tasks import reconcile_razorpay_payments
from utils.exceptions import PaymentFailed
from .helpers import make_spot, make_user, noon_tomorrow


def sign(secret, message):
    if isinstance(message, str):
        message = message.encode()
    return hmac.new(secret.encode(), message, hashlib.sha256).hexdigest()


class PaymentTestCase(TestCase):

    def setUp(self):
        self.client = APIClient()
        self.user = make_user()
        self.client.force_authenticate(self.user)
        self.spot = make_spot()
        start = noon_tomorrow()
        # 2.00/min at noon with the spot empty: 180.00 for an hour
        self.booking = BookingService.create_booking(self.user, self.spot, 'four_wheeler',
                                                     start, start + timedelta(hours=1))

    def make_payment(self, order_id='order_123', **extra):
        defaults = {'amount': Decimal('180.00'), 'payment_method': 'upi', 'razorpay_order_id': order_id}
        defaults.update(extra)
        return Payment.objects.create(booking=self.booking, **defaults)


class InitiatePaymentTests(PaymentTestCase):
    url = '/api/v1/payments/initiate/'

    @patch('payments.services.razorpay.Client')
    def test_creates_order_in_paise(self, mock_client):
        mock_client.return_value.order.create.return_value = {'id': 'order_123'}
        response = self.client.post(self.url, {'booking_id': self.booking.id, 'payment_method': 'upi'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['razorpay_order_id'], 'order_123')
        self.assertEqual(response.data['amount'], Decimal('180.00'))
        self.assertEqual(response.data['key_id'], 'rzp_test_key')

        mock_client.assert_called_once_with(auth=('rzp_test_key', 'rzp_test_secret'))
        order = mock_client.return_value.order.create.call_args[1]['data']
        self.assertEqual(order['amount'], 18000)
        self.assertEqual(order['currency'], 'INR')
        self.assertEqual(order['receipt'], str(self.booking.id))
        self.assertEqual(order['payment_capture'], 1)

        payment = Payment.objects.get(booking=self.booking)
        self.assertEqual(payment.status, 'initiated')
        self.assertEqual(payment.razorpay_order_id, 'order_123')

    @patch('payments.services.razorpay.Client')
    def test_gateway_rejects_order(self, mock_client):
        mock_client.return_value.order.create.side_effect = razorpay.errors.BadRequestError(
            'The amount must be at least INR 1.00')
        response = self.client.post(self.url, {'booking_id': self.booking.id, 'payment_method': 'upi'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_402_PAYMENT_REQUIRED)

    @patch('payments.services.razorpay.Client')
    def test_gateway_unreachable(self, mock_client):
        mock_client.return_value.order.create.side_effect = requests.ConnectionError('gateway down')
        response = self.client.post(self.url, {'booking_id': self.booking.id, 'payment_method': 'upi'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_402_PAYMENT_REQUIRED)

    def test_booking_must_be_awaiting_payment(self):
        BookingService.cancel(self.booking)
        response = self.client.post(self.url, {'booking_id': self.booking.id, 'payment_method': 'upi'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_other_users_booking(self):
        self.client.force_authenticate(make_user('meera'))
        response = self.client.post(self.url, {'booking_id': self.booking.id, 'payment_method': 'upi'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_unknown_payment_method(self):
        response = self.client.post(self.url, {'booking_id': self.booking.id, 'payment_method': 'cash'},
                                    format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class VerifyPaymentTests(PaymentTestCase):
    url = '/api/v1/payments/verify/'

    def setUp(self):
        super().setUp()
        self.payment = self.make_payment()

    def test_valid_signature_confirms_booking(self):
        response = self.client.post(self.url, {
            'razorpay_order_id': 'order_123',
            'razorpay_payment_id': 'pay_456',
            'razorpay_signature': sign('rzp_test_secret', 'order_123|pay_456'),
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'confirmed')

        self.payment.refresh_from_db()
        self.spot.refresh_from_db()
        self.assertEqual(self.payment.status, 'completed')
        self.assertEqual(self.payment.razorpay_payment_id, 'pay_456')
        self.assertIsNotNone(self.payment.paid_at)
        self.assertEqual(self.spot.four_wheeler_spaces, 4)

    def test_invalid_signature(self):
        response = self.client.post(self.url, {
            'razorpay_order_id': 'order_123',
            'razorpay_payment_id': 'pay_456',
            'razorpay_signature': 'forged',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.payment.refresh_from_db()
        self.booking.refresh_from_db()
        self.assertEqual(self.payment.status, 'failed')
        self.assertEqual(self.booking.status, 'pending_payment')

    def test_unknown_order(self):
        response = self.client.post(self.url, {
            'razorpay_order_id': 'order_999',
            'razorpay_payment_id': 'pay_456',
            'razorpay_signature': 'x',
        }, format='json')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class PaymentStatusTests(PaymentTestCase):

    def test_status(self):
        self.make_payment()
        response = self.client.get('/api/v1/payments/status/', {'booking_id': self.booking.id})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['status'], 'initiated')
        self.assertEqual(response.data['booking_status'], 'pending_payment')
        self.assertEqual(response.data['spot'], self.spot.name)

    def test_no_payment(self):
        response = self.client.get('/api/v1/payments/status/', {'booking_id': self.booking.id})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        response = self.client.get('/api/v1/payments/status/', {'booking_id': 'abc'})
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class PaymentServiceTests(PaymentTestCase):

    def test_mark_completed_twice(self):
        payment = self.make_payment()
        PaymentService.mark_completed(payment, 'pay_1')
        PaymentService.mark_completed(payment, 'pay_2')
        payment.refresh_from_db()
        self.spot.refresh_from_db()
        self.assertEqual(payment.razorpay_payment_id, 'pay_1')
        self.assertEqual(self.spot.four_wheeler_spaces, 4)

    def test_failure_after_completion_is_ignored(self):
        payment = self.make_payment()
        PaymentService.mark_completed(payment, 'pay_1')
        PaymentService.mark_failed(payment, 'late failure')
        payment.refresh_from_db()
        self.assertEqual(payment.status, 'completed')

    @patch('payments.services.razorpay.Client')
    def test_order_amount_rounds_half_up_to_paise(self, mock_client):
        mock_client.return_value.order.create.return_value = {'id': 'order_abc'}
        order = RazorpayService().create_order(self.booking, Decimal('12.345'))
        self.assertEqual(order['id'], 'order_abc')
        self.assertEqual(mock_client.return_value.order.create.call_args[1]['data']['amount'], 1235)

    @patch('payments.services.razorpay.Client')
    def test_create_order_raises_payment_failed(self, mock_client):
        mock_client.return_value.order.create.side_effect = razorpay.errors.ServerError('Server error')
        with self.assertRaises(PaymentFailed):
            RazorpayService().create_order(self.booking, Decimal('180.00'))

    @patch('payments.services.razorpay.Client')
    def test_fetch_order_payments(self, mock_client):
        mock_client.return_value.order.payments.return_value = {
            'count': 1, 'items': [{'id': 'pay_1', 'status': 'captured'}]}
        attempts = RazorpayService().fetch_order_payments('order_123')
        mock_client.return_value.order.payments.assert_called_once_with('order_123')
        self.assertEqual(attempts, [{'id': 'pay_1', 'status': 'captured'}])

    def test_checkout_signature(self):
        service = RazorpayService()
        valid = sign('rzp_test_secret', 'order_123|pay_456')
        self.assertTrue(service.verify_payment('order_123', 'pay_456', valid))
        self.assertFalse(service.verify_payment('order_123', 'pay_999', valid))

    def test_webhook_signature(self):
        service = RazorpayService()
        body = b'{"event": "payment.captured"}'
        self.assertTrue(service.verify_webhook_signature(body, sign('rzp_webhook_secret', body)))
        self.assertFalse(service.verify_webhook_signature(body, sign('other_secret', body)))
        self.assertFalse(service.verify_webhook_signature(body, None))
        self.assertFalse(service.verify_webhook_signature(b'\xff\xfe', 'abc'))


class RazorpayWebhookTests(PaymentTestCase):
    url = '/webhooks/razorpay/payment/'

    def setUp(self):
        super().setUp()
        self.payment = self.make_payment()

    def post_event(self, event, entity, signature=None):
        body = json.dumps({'event': event, 'payload': {'payment': {'entity': entity}}}).encode()
        if signature is None:
            signature = sign('rzp_webhook_secret', body)
        return self.client.post(self.url, body, content_type='application/json',
                                HTTP_X_RAZORPAY_SIGNATURE=signature)

    def test_payment_captured(self):
        response = self.post_event('payment.captured', {'id': 'pay_789', 'order_id': 'order_123'})
        self.assertEqual(response.status_code, 200)
        self.payment.refresh_from_db()
        self.booking.refresh_from_db()
        self.assertEqual(self.payment.status, 'completed')
        self.assertEqual(self.payment.gateway_response['id'], 'pay_789')
        self.assertEqual(self.booking.status, 'confirmed')

    def test_captured_after_spot_filled_keeps_payment(self):
        self.spot.four_wheeler_spaces = 0
        self.spot.save()
        response = self.post_event('payment.captured', {'id': 'pay_789', 'order_id': 'order_123'})
        self.assertEqual(response.status_code, 200)
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.status, 'pending_payment')

    def test_payment_failed(self):
        response = self.post_event('payment.failed', {
            'id': 'pay_789', 'order_id': 'order_123', 'error_description': 'Card declined'})
        self.assertEqual(response.status_code, 200)
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, 'failed')
        self.assertEqual(self.payment.gateway_response['error_description'], 'Card declined')

    def test_invalid_signature(self):
        response = self.post_event('payment.captured', {'id': 'pay_789', 'order_id': 'order_123'},
                                   signature='forged')
        self.assertEqual(response.status_code, 400)
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, 'initiated')

    def test_unknown_order_is_ignored(self):
        response = self.post_event('payment.captured', {'id': 'pay_789', 'order_id': 'order_999'})
        self.assertEqual(response.status_code, 200)

    def test_get_not_allowed(self):
        self.assertEqual(self.client.get(self.url).status_code, 405)


class ReconcileTaskTests(PaymentTestCase):

    @patch.object(RazorpayService, 'fetch_order_payments')
    def test_captured_attempt_completes_payment(self, mock_fetch):
        payment = self.make_payment()
        mock_fetch.return_value = [
            {'id': 'pay_1', 'status': 'failed'},
            {'id': 'pay_2', 'status': 'captured'},
        ]
        self.assertEqual(reconcile_razorpay_payments(), 1)
        payment.refresh_from_db()
        self.assertEqual(payment.status, 'completed')
        self.assertEqual(payment.razorpay_payment_id, 'pay_2')

    @patch.object(RazorpayService, 'fetch_order_payments')
    def test_all_attempts_failed(self, mock_fetch):
        payment = self.make_payment()
        mock_fetch.return_value = [{'id': 'pay_1', 'status': 'failed', 'error_description': 'Timeout'}]
        self.assertEqual(reconcile_razorpay_payments(), 1)
        payment.refresh_from_db()
        self.assertEqual(payment.status, 'failed')

    @patch.object(RazorpayService, 'fetch_order_payments')
    def test_no_attempts_yet(self, mock_fetch):
        payment = self.make_payment()
        mock_fetch.return_value = []
        self.assertEqual(reconcile_razorpay_payments(), 0)
        payment.refresh_from_db()
        self.assertEqual(payment.status, 'initiated')

    @patch.object(RazorpayService, 'fetch_order_payments', side_effect=requests.Timeout())
    def test_gateway_unreachable(self, mock_fetch):
        self.make_payment()
        self.assertEqual(reconcile_razorpay_payments(), 0)

    @patch.object(RazorpayService, 'fetch_order_payments',
                  side_effect=razorpay.errors.BadRequestError('The id provided does not exist'))
    def test_gateway_rejects_lookup(self, mock_fetch):
        payment = self.make_payment()
        self.assertEqual(reconcile_razorpay_payments(), 0)
        payment.refresh_from_db()
        self.assertEqual(payment.status, 'initiated')


@override_settings(EXCHANGE_RATE_API_URL='https://rates.example.com/USD', FALLBACK_USD_INR_RATE=75)
class CurrencyTests(SimpleTestCase):

    def setUp(self):
        cache.clear()

    @patch('payments.currency.requests.get')
    def test_live_rate_is_cached(self, mock_get):
        mock_get.return_value.json.return_value = {'rates': {'INR': 83.25}}
        self.assertEqual(get_usd_inr_rate(), Decimal('83.25'))
        self.assertEqual(get_usd_inr_rate(), Decimal('83.25'))
        self.assertEqual(mock_get.call_count, 1)

    @override_settings(EXCHANGE_RATE_TIMEOUT=3)
    @patch('payments.currency.requests.get')
    def test_rate_request_uses_configured_timeout(self, mock_get):
        mock_get.return_value.json.return_value = {'rates': {'INR': 83.25}}
        get_usd_inr_rate()
        mock_get.assert_called_once_with('https://rates.example.com/USD', timeout=3)

    @patch('payments.currency.requests.get', side_effect=requests.ConnectionError())
    def test_fallback_rate(self, mock_get):
        self.assertEqual(get_usd_inr_rate(), Decimal('75'))
        self.assertEqual(convert_usd_to_inr(Decimal('2.50')), Decimal('188'))

    @patch('payments.currency.requests.get')
    def test_malformed_response_uses_fallback(self, mock_get):
        mock_get.return_value.json.return_value = {'error': 'quota'}
        self.assertEqual(get_usd_inr_rate(), Decimal('75'))

    def test_inr_prices_are_not_converted(self):
        with override_settings(PRICING_CURRENCY='INR'):
            self.assertEqual(to_inr(Decimal('180.00')), Decimal('180.00'))

    @patch('payments.currency.get_usd_inr_rate', return_value=Decimal('80'))
    def test_usd_prices_are_converted(self, mock_rate):
        with override_settings(PRICING_CURRENCY='USD'):
            self.assertEqual(to_inr(Decimal('2.25')), Decimal('180'))
