import json
import logging
from decimal import Decimal, InvalidOperation

from rest_framework.views import APIView
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from django.conf import settings
from django.db import transaction
from django.utils import timezone

from core.constants import (
    BOOKING_COMPLETED, BOOKING_PAYMENT_PENDING, PAYMENT_COMPLETED, PAYMENT_PENDING,
    PAYMENT_TYPE_CASH, PAYMENT_TYPE_RAZORPAY,
)
from core.exceptions import PaymentGatewayError
from core.responses import success_response, error_response
from core.utils import IsCustomer
from apps.bookings.models import Booking
from apps.bookings.serializers import BookingPaymentSerializer
from apps.bookings.utils import send_notification
from .models import Payment
from .utils import create_razorpay_order, verify_payment_signature, verify_webhook_signature

logger = logging.getLogger(__name__)


def _customer_booking(request, booking_id):
    return Booking.objects.select_related('worker__user').get(pk=booking_id, customer=request.user)


def _complete_booking(booking, payment, transaction_id):
    with transaction.atomic():
        payment.mark_completed(transaction_id)
        booking.status = BOOKING_COMPLETED
        booking.save(update_fields=['status', 'updated_at'])
    logger.info(f"Payment {payment.id} completed for booking {booking.id} via {payment.payment_type}")
    send_notification(
        booking.worker.user,
        "Payment Received",
        (
            f"Dear {booking.worker.user.first_name or booking.worker.user.username},\n\n"
            f"Payment of {payment.amount} for booking #{booking.id} has been received "
            f"({payment.payment_type.lower()}).\n"
            f"Thank you for your work.\n\n"
            f"Best regards,\nWorkJunction Team"
        ),
        f"Payment of {payment.amount} for booking #{booking.id} received."
    )


class RazorpayCreateOrderView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @swagger_auto_schema(
        operation_description="Create a Razorpay order for a booking that is waiting for payment.",
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['booking_id'],
            properties={
                'booking_id': openapi.Schema(type=openapi.TYPE_INTEGER),
                'amount': openapi.Schema(type=openapi.TYPE_NUMBER, description='Defaults to the booking price'),
                'currency': openapi.Schema(type=openapi.TYPE_STRING, default='INR'),
            },
        ),
        responses={200: 'Order created', 400: 'Bad Request', 404: 'Not Found', 502: 'Gateway error'}
    )
    def post(self, request):
        booking_id = request.data.get('booking_id')
        if not booking_id:
            return error_response("Booking ID is required")
        try:
            booking = _customer_booking(request, booking_id)
        except (Booking.DoesNotExist, ValueError):
            return error_response("Booking not found", status.HTTP_404_NOT_FOUND)
        if booking.status != BOOKING_PAYMENT_PENDING:
            return error_response("Booking is not ready for payment")

        amount = booking.price
        if request.data.get('amount') not in (None, ''):
            try:
                requested = Decimal(str(request.data['amount']))
            except InvalidOperation:
                return error_response("Invalid amount")
            if requested != amount:
                return error_response("Amount does not match booking price")
        currency = request.data.get('currency') or settings.PAYMENT_CURRENCY

        try:
            order = create_razorpay_order(booking, amount, currency)
        except PaymentGatewayError as e:
            return error_response(str(e), status.HTTP_502_BAD_GATEWAY)

        Payment.objects.update_or_create(
            booking=booking,
            defaults={
                'amount': amount,
                'status': PAYMENT_PENDING,
                'payment_type': PAYMENT_TYPE_RAZORPAY,
                'order_id': order['id'],
                'transaction_id': '',
                'transaction_date': None,
            },
        )
        return success_response({
            'booking_id': booking.id,
            'order_id': order['id'],
            'amount': order.get('amount'),
            'currency': order.get('currency', currency),
            'key': settings.RAZORPAY_KEY_ID,
        }, "Order created successfully")


class RazorpayVerifyView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @swagger_auto_schema(
        operation_description="Verify the checkout signature and close the booking.",
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['booking_id', 'razorpay_order_id', 'razorpay_payment_id', 'razorpay_signature'],
            properties={
                'booking_id': openapi.Schema(type=openapi.TYPE_INTEGER),
                'razorpay_order_id': openapi.Schema(type=openapi.TYPE_STRING),
                'razorpay_payment_id': openapi.Schema(type=openapi.TYPE_STRING),
                'razorpay_signature': openapi.Schema(type=openapi.TYPE_STRING),
            },
        ),
        responses={200: 'Payment verified', 400: 'Bad Request', 404: 'Not Found'}
    )
    def post(self, request):
        order_id = request.data.get('razorpay_order_id')
        payment_id = request.data.get('razorpay_payment_id')
        signature = request.data.get('razorpay_signature')
        booking_id = request.data.get('booking_id')
        if not all([order_id, payment_id, signature, booking_id]):
            return error_response("Missing payment verification details")

        try:
            booking = _customer_booking(request, booking_id)
            payment = Payment.objects.get(booking=booking, order_id=order_id)
        except (Booking.DoesNotExist, Payment.DoesNotExist, ValueError):
            return error_response("Payment order not found", status.HTTP_404_NOT_FOUND)

        if not verify_payment_signature(order_id, payment_id, signature):
            logger.warning(f"Invalid Razorpay signature for booking {booking.id}, order {order_id}")
            return error_response("Invalid payment signature")

        if payment.status != PAYMENT_COMPLETED:
            _complete_booking(booking, payment, payment_id)
        return success_response({
            'booking_id': booking.id,
            'payment_id': payment_id,
            'payment_status': 'SUCCESS',
        }, "Payment verified successfully")


class CashPaymentInitiateView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @swagger_auto_schema(
        operation_description="Choose cash payment. A one-time code is sent to the worker, to be given to the customer on receipt of cash.",
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['booking_id'],
            properties={'booking_id': openapi.Schema(type=openapi.TYPE_INTEGER)},
        ),
        responses={200: 'OTP sent to worker', 400: 'Bad Request', 404: 'Not Found'}
    )
    def post(self, request):
        booking_id = request.data.get('booking_id')
        if not booking_id:
            return error_response("Booking ID is required")
        try:
            booking = _customer_booking(request, booking_id)
        except (Booking.DoesNotExist, ValueError):
            return error_response("Booking not found", status.HTTP_404_NOT_FOUND)
        if booking.status != BOOKING_PAYMENT_PENDING:
            return error_response("Booking is not ready for payment")

        payment, created = Payment.objects.update_or_create(
            booking=booking,
            defaults={
                'amount': booking.price,
                'status': PAYMENT_PENDING,
                'payment_type': PAYMENT_TYPE_CASH,
                'order_id': '',
            },
        )
        otp = payment.issue_cash_otp()
        worker_user = booking.worker.user
        logger.info(f"Cash payment OTP issued for booking {booking.id}")

        send_notification(
            worker_user,
            "Cash Payment OTP",
            (
                f"Dear {worker_user.first_name or worker_user.username},\n\n"
                f"The customer will pay {booking.price} in cash for booking #{booking.id}.\n"
                f"Once you have received the cash, share this code with the customer: {otp}\n"
                f"The code expires in {settings.CASH_OTP_TTL_MINUTES} minutes.\n\n"
                f"Best regards,\nWorkJunction Team"
            ),
            f"Cash payment code for booking #{booking.id}: {otp}"
        )
        return success_response({
            'otp_sent': True,
            'worker_name': worker_user.full_name,
            'worker_phone': worker_user.phone_number,
            'amount': booking.price,
        }, "OTP sent to worker")


class CashPaymentVerifyView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @swagger_auto_schema(
        operation_description="Confirm a cash payment with the code received from the worker.",
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['booking_id', 'otp'],
            properties={
                'booking_id': openapi.Schema(type=openapi.TYPE_INTEGER),
                'otp': openapi.Schema(type=openapi.TYPE_STRING),
            },
        ),
        responses={200: 'Payment completed', 400: 'Bad Request', 404: 'Not Found'}
    )
    def post(self, request):
        booking_id = request.data.get('booking_id')
        otp = str(request.data.get('otp') or '').strip()
        if not booking_id or not otp:
            return error_response("Booking ID and OTP are required")
        try:
            booking = _customer_booking(request, booking_id)
        except (Booking.DoesNotExist, ValueError):
            return error_response("Booking not found", status.HTTP_404_NOT_FOUND)

        payment = getattr(booking, 'payment', None)
        if payment is None or payment.payment_type != PAYMENT_TYPE_CASH or not payment.cash_otp:
            return error_response("No active OTP found for this booking")
        if payment.cash_otp_expired():
            return error_response("OTP has expired")
        if not payment.check_cash_otp(otp):
            return error_response("Invalid OTP")

        _complete_booking(booking, payment, f"CASH_{booking.id}_{int(timezone.now().timestamp())}")
        return success_response({
            'booking_id': booking.id,
            'payment': BookingPaymentSerializer(payment).data,
        }, "Cash payment verified successfully")


class PaymentStatusView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Payment and booking status for a booking the caller is part of.",
        responses={200: 'Payment status', 404: 'Not Found'}
    )
    def get(self, request, booking_id):
        try:
            booking = Booking.objects.select_related('worker').get(pk=booking_id)
        except Booking.DoesNotExist:
            return error_response("Booking not found", status.HTTP_404_NOT_FOUND)
        if not booking.is_party(request.user):
            return error_response("Booking not found", status.HTTP_404_NOT_FOUND)

        payment = getattr(booking, 'payment', None)
        return success_response({
            'booking_id': booking.id,
            'payment': BookingPaymentSerializer(payment).data if payment else None,
            'booking_status': booking.status,
            'price': booking.price,
        })


class RazorpayWebhookView(APIView):
    authentication_classes = []
    permission_classes = []

    @swagger_auto_schema(auto_schema=None)
    def post(self, request):
        body = request.body
        signature = request.headers.get('X-Razorpay-Signature')
        if not verify_webhook_signature(body, signature):
            logger.error('Invalid Razorpay webhook signature')
            return error_response("Invalid webhook signature")
        try:
            event = json.loads(body)
        except ValueError:
            event = None
        if not isinstance(event, dict):
            return error_response("Invalid webhook payload")

        event_type = event.get('event')
        entity = event.get('payload', {}).get('payment', {}).get('entity', {})
        order_id = entity.get('order_id')
        payment = Payment.objects.select_related('booking__worker__user').filter(order_id=order_id).first() \
            if order_id else None
        if payment is None:
            logger.warning(f"Webhook {event_type} for unknown order {order_id}")
            return success_response(message="Webhook ignored")

        if event_type == 'payment.captured':
            if payment.status != PAYMENT_COMPLETED:
                _complete_booking(payment.booking, payment, entity.get('id', ''))
        elif event_type == 'payment.failed':
            if payment.status != PAYMENT_COMPLETED:
                payment.mark_failed()
                logger.info(f"Payment {payment.id} failed for booking {payment.booking_id}")
        else:
            logger.info(f"Unhandled Razorpay webhook event {event_type}")
        return success_response(message="Webhook processed")
