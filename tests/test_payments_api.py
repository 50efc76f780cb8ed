"""
Tests for Razorpay orders, checkout verification, the webhook and cash payments
confirmed by a one-time code.
"""
import hashlib
import hmac
import json
from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
import requests
from django.utils import timezone

from apps.bookings.models import Booking
from apps.payments.models import Payment
from apps.payments.utils import to_paise, verify_payment_signature
from tests.factories import client_for, make_booking, make_customer

pytestmark = pytest.mark.django_db

KEY_ID = 'rzp_test_key'
KEY_SECRET = 'rzp_test_secret'
WEBHOOK_SECRET = 'whsec_test'


def sign(message, secret):
    return hmac.new(secret.encode(), message.encode() if isinstance(message, str) else message,
                    hashlib.sha256).hexdigest()


@pytest.fixture
def razorpay_keys(settings):
    settings.RAZORPAY_KEY_ID = KEY_ID
    settings.RAZORPAY_KEY_SECRET = KEY_SECRET
    settings.RAZORPAY_WEBHOOK_SECRET = WEBHOOK_SECRET
    return settings


@pytest.fixture
def due_booking(customer, worker_service):
    return make_booking(customer, worker_service, status='PAYMENT_PENDING', days_ahead=0)


def order_response(order_id='order_Nx1', amount=50000):
    response = MagicMock()
    response.json.return_value = {'id': order_id, 'amount': amount, 'currency': 'INR', 'status': 'created'}
    response.raise_for_status.return_value = None
    return response


class TestHelpers:
    def test_to_paise(self):
        assert to_paise('499.99') == 49999
        assert to_paise(500) == 50000

    def test_checkout_signature(self, razorpay_keys):
        signature = sign('order_Nx1|pay_Q1', KEY_SECRET)
        assert verify_payment_signature('order_Nx1', 'pay_Q1', signature) is True
        assert verify_payment_signature('order_Nx1', 'pay_Q2', signature) is False
        assert verify_payment_signature('order_Nx1', 'pay_Q1', '') is False


class TestRazorpayOrder:
    """POST /api/payments/razorpay/create-order/"""

    def test_creates_order_in_paise(self, razorpay_keys, customer_client, due_booking):
        with patch('apps.payments.utils.requests.post', return_value=order_response()) as mock_post:
            response = customer_client.post('/api/payments/razorpay/create-order/',
                                            {'booking_id': due_booking.id}, format='json')

        assert response.status_code == 200
        data = response.json()['data']
        assert data['order_id'] == 'order_Nx1'
        assert data['key'] == KEY_ID
        sent = mock_post.call_args.kwargs
        assert sent['json']['amount'] == 50000
        assert sent['json']['receipt'] == f'booking_{due_booking.id}'
        assert sent['auth'] == (KEY_ID, KEY_SECRET)
        payment = Payment.objects.get(booking=due_booking)
        assert payment.payment_type == 'RAZORPAY'
        assert payment.status == 'PENDING'
        assert payment.order_id == 'order_Nx1'

    def test_amount_must_match_booking(self, razorpay_keys, customer_client, due_booking):
        with patch('apps.payments.utils.requests.post') as mock_post:
            response = customer_client.post('/api/payments/razorpay/create-order/',
                                            {'booking_id': due_booking.id, 'amount': 10}, format='json')

        assert response.status_code == 400
        assert response.json()['message'] == 'Amount does not match booking price'
        mock_post.assert_not_called()

    def test_booking_must_await_payment(self, razorpay_keys, customer_client, customer, worker_service):
        booking = make_booking(customer, worker_service, status='ACCEPTED')

        response = customer_client.post('/api/payments/razorpay/create-order/',
                                        {'booking_id': booking.id}, format='json')

        assert response.status_code == 400

    def test_gateway_unreachable(self, razorpay_keys, customer_client, due_booking):
        with patch('apps.payments.utils.requests.post', side_effect=requests.exceptions.ConnectionError('down')):
            response = customer_client.post('/api/payments/razorpay/create-order/',
                                            {'booking_id': due_booking.id}, format='json')

        assert response.status_code == 502
        assert response.json()['success'] is False
        assert not Payment.objects.exists()

    def test_not_configured(self, settings, customer_client, due_booking):
        settings.RAZORPAY_KEY_ID = ''
        settings.RAZORPAY_KEY_SECRET = ''

        response = customer_client.post('/api/payments/razorpay/create-order/',
                                        {'booking_id': due_booking.id}, format='json')

        assert response.status_code == 502
        assert response.json()['message'] == 'Online payments are not configured'

    def test_other_customers_booking(self, razorpay_keys, due_booking):
        stranger = client_for(make_customer('dev'))

        response = stranger.post('/api/payments/razorpay/create-order/', {'booking_id': due_booking.id},
                                 format='json')

        assert response.status_code == 404


class TestRazorpayVerify:
    """POST /api/payments/razorpay/verify/"""

    @pytest.fixture
    def pending_order(self, due_booking):
        return Payment.objects.create(booking=due_booking, amount=due_booking.price,
                                      payment_type='RAZORPAY', order_id='order_Nx1')

    def test_valid_signature_completes_booking(self, razorpay_keys, customer_client, pending_order, mailoutbox):
        response = customer_client.post('/api/payments/razorpay/verify/', {
            'booking_id': pending_order.booking_id,
            'razorpay_order_id': 'order_Nx1',
            'razorpay_payment_id': 'pay_Q1',
            'razorpay_signature': sign('order_Nx1|pay_Q1', KEY_SECRET),
        }, format='json')

        assert response.status_code == 200
        assert response.json()['data']['payment_status'] == 'SUCCESS'
        pending_order.refresh_from_db()
        assert pending_order.status == 'COMPLETED'
        assert pending_order.transaction_id == 'pay_Q1'
        assert Booking.objects.get(pk=pending_order.booking_id).status == 'COMPLETED'
        assert mailoutbox[-1].to == ['ravi@example.com']

    def test_bad_signature(self, razorpay_keys, customer_client, pending_order):
        response = customer_client.post('/api/payments/razorpay/verify/', {
            'booking_id': pending_order.booking_id,
            'razorpay_order_id': 'order_Nx1',
            'razorpay_payment_id': 'pay_Q1',
            'razorpay_signature': 'deadbeef',
        }, format='json')

        assert response.status_code == 400
        assert response.json()['message'] == 'Invalid payment signature'
        assert Booking.objects.get(pk=pending_order.booking_id).status == 'PAYMENT_PENDING'

    def test_missing_fields(self, razorpay_keys, customer_client, pending_order):
        response = customer_client.post('/api/payments/razorpay/verify/',
                                        {'booking_id': pending_order.booking_id}, format='json')

        assert response.json()['message'] == 'Missing payment verification details'


class TestRazorpayWebhook:
    """POST /api/payments/webhook/"""

    @pytest.fixture
    def pending_order(self, due_booking):
        return Payment.objects.create(booking=due_booking, amount=due_booking.price,
                                      payment_type='RAZORPAY', order_id='order_Nx1')

    def post_event(self, api_client, event, signature=None):
        body = json.dumps({
            'event': event,
            'payload': {'payment': {'entity': {'id': 'pay_W1', 'order_id': 'order_Nx1'}}},
        })
        return api_client.post('/api/payments/webhook/', data=body, content_type='application/json',
                               HTTP_X_RAZORPAY_SIGNATURE=signature or sign(body, WEBHOOK_SECRET))

    def test_captured_completes_booking(self, razorpay_keys, api_client, pending_order):
        response = self.post_event(api_client, 'payment.captured')

        assert response.status_code == 200
        pending_order.refresh_from_db()
        assert pending_order.status == 'COMPLETED'
        assert pending_order.transaction_id == 'pay_W1'
        assert Booking.objects.get(pk=pending_order.booking_id).status == 'COMPLETED'

    def test_failed_marks_payment(self, razorpay_keys, api_client, pending_order):
        self.post_event(api_client, 'payment.failed')

        pending_order.refresh_from_db()
        assert pending_order.status == 'FAILED'
        assert Booking.objects.get(pk=pending_order.booking_id).status == 'PAYMENT_PENDING'

    def test_signed_non_object_body_rejected(self, razorpay_keys, api_client, pending_order):
        body = json.dumps([])

        response = api_client.post('/api/payments/webhook/', data=body, content_type='application/json',
                                   HTTP_X_RAZORPAY_SIGNATURE=sign(body, WEBHOOK_SECRET))

        assert response.status_code == 400
        assert response.json()['message'] == 'Invalid webhook payload'
        pending_order.refresh_from_db()
        assert pending_order.status == 'PENDING'

    def test_bad_signature_rejected(self, razorpay_keys, api_client, pending_order):
        response = self.post_event(api_client, 'payment.captured', signature='0' * 64)

        assert response.status_code == 400
        pending_order.refresh_from_db()
        assert pending_order.status == 'PENDING'


class TestCashPayment:
    """cash/initiate/ then cash/verify/"""

    def initiate(self, client, booking):
        return client.post('/api/payments/cash/initiate/', {'booking_id': booking.id}, format='json')

    def verify(self, client, booking, otp):
        return client.post('/api/payments/cash/verify/', {'booking_id': booking.id, 'otp': otp}, format='json')

    def test_code_goes_to_worker_and_closes_booking(self, customer_client, due_booking, mailoutbox):
        response = self.initiate(customer_client, due_booking)

        assert response.status_code == 200
        data = response.json()['data']
        assert data['otp_sent'] is True
        assert data['worker_name'] == 'Ravi Kumar'
        payment = Payment.objects.get(booking=due_booking)
        assert payment.payment_type == 'CASH'
        assert mailoutbox[-1].to == ['ravi@example.com']
        assert payment.cash_otp in mailoutbox[-1].body

        response = self.verify(customer_client, due_booking, payment.cash_otp)

        assert response.status_code == 200
        payment.refresh_from_db()
        assert payment.status == 'COMPLETED'
        assert payment.cash_otp == ''
        assert payment.transaction_id.startswith(f'CASH_{due_booking.id}_')
        due_booking.refresh_from_db()
        assert due_booking.status == 'COMPLETED'

    def test_wrong_code(self, customer_client, due_booking):
        self.initiate(customer_client, due_booking)
        payment = Payment.objects.get(booking=due_booking)
        wrong = '000000' if payment.cash_otp != '000000' else '111111'

        response = self.verify(customer_client, due_booking, wrong)

        assert response.status_code == 400
        assert response.json()['message'] == 'Invalid OTP'
        due_booking.refresh_from_db()
        assert due_booking.status == 'PAYMENT_PENDING'

    def test_expired_code(self, customer_client, due_booking):
        self.initiate(customer_client, due_booking)
        payment = Payment.objects.get(booking=due_booking)
        Payment.objects.filter(pk=payment.pk).update(cash_otp_expires=timezone.now() - timedelta(minutes=1))

        response = self.verify(customer_client, due_booking, payment.cash_otp)

        assert response.json()['message'] == 'OTP has expired'

    def test_verify_without_initiate(self, customer_client, due_booking):
        response = self.verify(customer_client, due_booking, '123456')

        assert response.status_code == 400
        assert response.json()['message'] == 'No active OTP found for this booking'


class TestPaymentStatus:
    def test_visible_to_worker(self, worker_client, due_booking):
        Payment.objects.create(booking=due_booking, amount=due_booking.price, payment_type='CASH')

        response = worker_client.get(f'/api/payments/status/{due_booking.id}/')

        data = response.json()['data']
        assert data['booking_status'] == 'PAYMENT_PENDING'
        assert data['payment']['status'] == 'PENDING'

    def test_no_payment_yet(self, customer_client, due_booking):
        response = customer_client.get(f'/api/payments/status/{due_booking.id}/')

        assert response.json()['data']['payment'] is None
