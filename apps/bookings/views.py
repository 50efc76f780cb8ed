from rest_framework.views import APIView
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from django.db import transaction
from django.utils import timezone
from django.utils.dateparse import parse_date
import logging

from core import lifecycle
from core.constants import (
    BOOKING_ACCEPTED, BOOKING_CANCELLED, BOOKING_COMPLETED, BOOKING_DECLINED,
    BOOKING_PAYMENT_PENDING, PAYMENT_COMPLETED, PAYMENT_PENDING, VERIFICATION_APPROVED,
)
from core.responses import success_response, error_response, validation_error_response
from core.utils import IsCustomer, IsWorker, paginate
from apps.users.models import Worker
from apps.skills.models import WorkerService
from .availability import find_conflicting_booking, weekly_slots, slot_interval
from .models import Booking, Review
from .serializers import (
    BookingSerializer, BookingCreateSerializer, BookingStatusSerializer,
    BookingPriceSerializer, ReviewCreateSerializer,
)
from .utils import send_notification

logger = logging.getLogger(__name__)

BOOKING_QUERYSET = Booking.objects.select_related(
    'customer', 'worker__user', 'worker_service__service', 'worker_service__skill',
)

BOOKING_LIST_PARAMS = [
    openapi.Parameter('status', openapi.IN_QUERY, type=openapi.TYPE_STRING, required=False),
    openapi.Parameter('page', openapi.IN_QUERY, type=openapi.TYPE_INTEGER, required=False),
    openapi.Parameter('limit', openapi.IN_QUERY, type=openapi.TYPE_INTEGER, required=False),
]


def _booking_list_response(request, queryset):
    status_filter = request.query_params.get('status')
    if status_filter:
        queryset = queryset.filter(status=status_filter.upper())
    bookings, pagination = paginate(queryset.order_by('-booking_date', '-created_at'), request)
    return success_response(BookingSerializer(bookings, many=True).data, pagination=pagination)


class BookingCreateView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @swagger_auto_schema(
        operation_description="Request a booking with a verified worker. The price is taken from the worker's service.",
        request_body=BookingCreateSerializer,
        responses={201: BookingSerializer, 400: 'Bad Request', 404: 'Worker or service not found'}
    )
    def post(self, request):
        serializer = BookingCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        data = serializer.validated_data

        try:
            worker = Worker.objects.select_related('user').get(
                pk=data['worker_id'], verification__status=VERIFICATION_APPROVED
            )
        except Worker.DoesNotExist:
            return error_response("Worker not found or not verified", status.HTTP_404_NOT_FOUND)
        if worker.is_suspended:
            return error_response("Worker is currently suspended")

        try:
            worker_service = WorkerService.objects.select_related('service').get(
                pk=data['worker_service_id'], worker=worker, is_active=True
            )
        except WorkerService.DoesNotExist:
            return error_response("Service not found for this worker", status.HTTP_404_NOT_FOUND)

        customer = request.user
        with transaction.atomic():
            # Lock the worker row so two requests for the same slot serialise here
            Worker.objects.select_for_update().get(pk=worker.pk)
            if find_conflicting_booking(worker, data['booking_date'], data['booking_time']):
                return error_response("Worker is not available at the selected time")
            booking = Booking.objects.create(
                customer=customer,
                worker=worker,
                worker_service=worker_service,
                booking_date=data['booking_date'],
                booking_time=data['booking_time'],
                price=worker_service.price,
                customer_name=data.get('customer_name') or customer.full_name,
                customer_phone=data.get('customer_phone') or customer.phone_number or '',
                customer_address=data.get('customer_address') or customer.address,
                customer_pincode=data.get('customer_pincode') or customer.pincode,
                notes=data.get('notes', ''),
            )
        logger.info(f"Booking {booking.id} requested by customer {customer.id} for worker {worker.id}")

        send_notification(
            worker.user,
            f"New Booking Request: {worker_service.service.name}",
            (
                f"Dear {worker.user.first_name or worker.user.username},\n\n"
                f"{booking.customer_name} has requested '{worker_service.service.name}' "
                f"on {booking.booking_date} at {booking.booking_time}.\n"
                f"Please accept or decline the request in your dashboard.\n\n"
                f"Best regards,\nWorkJunction Team"
            ),
            f"New booking request for {worker_service.service.name} on {booking.booking_date} {booking.booking_time}."
        )
        return success_response(BookingSerializer(booking).data, "Booking created successfully", status.HTTP_201_CREATED)


class CustomerBookingListView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @swagger_auto_schema(
        operation_description="Bookings made by the current customer, newest booking date first.",
        manual_parameters=BOOKING_LIST_PARAMS,
        responses={200: BookingSerializer(many=True)}
    )
    def get(self, request):
        return _booking_list_response(request, BOOKING_QUERYSET.filter(customer=request.user))


class WorkerBookingListView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(
        operation_description="Bookings assigned to the current worker, newest booking date first.",
        manual_parameters=BOOKING_LIST_PARAMS,
        responses={200: BookingSerializer(many=True)}
    )
    def get(self, request):
        return _booking_list_response(request, BOOKING_QUERYSET.filter(worker=request.user.worker))


class BookingDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Booking details; visible to its customer and worker only.",
        responses={200: BookingSerializer, 404: 'Not Found'}
    )
    def get(self, request, pk):
        try:
            booking = BOOKING_QUERYSET.get(pk=pk)
        except Booking.DoesNotExist:
            return error_response("Booking not found", status.HTTP_404_NOT_FOUND)
        if not booking.is_party(request.user):
            return error_response("Booking not found", status.HTTP_404_NOT_FOUND)
        return success_response(BookingSerializer(booking).data)


class BookingStatusView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description=(
            "Move a booking through its lifecycle. Workers accept, decline or complete; "
            "customers cancel. A reason is stored for declines and cancellations."
        ),
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['status'],
            properties={
                'status': openapi.Schema(type=openapi.TYPE_STRING, enum=list(lifecycle.STATUS_TRANSITIONS)),
                'reason': openapi.Schema(type=openapi.TYPE_STRING),
            },
        ),
        responses={200: BookingSerializer, 400: 'Bad Request', 403: 'Forbidden', 404: 'Not Found'}
    )
    def patch(self, request, pk):
        serializer = BookingStatusSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        new_status = serializer.validated_data['status'].upper()
        reason = serializer.validated_data['reason']
        if new_status not in lifecycle.STATUS_TRANSITIONS:
            return error_response("Invalid status")

        user = request.user
        with transaction.atomic():
            try:
                booking = Booking.objects.select_for_update().get(pk=pk)
            except Booking.DoesNotExist:
                return error_response("Booking not found", status.HTTP_404_NOT_FOUND)
            if not booking.is_party(user):
                return error_response("Booking not found", status.HTTP_404_NOT_FOUND)

            actor = lifecycle.TRANSITION_ACTORS[new_status]
            if actor == 'customer' and booking.customer_id != user.id:
                return error_response("Only the customer can cancel a booking", status.HTTP_403_FORBIDDEN)
            if actor == 'worker' and not (hasattr(user, 'worker') and booking.worker_id == user.worker.id):
                return error_response(
                    f"Only the worker can mark a booking as {new_status.lower()}", status.HTTP_403_FORBIDDEN
                )
            if not booking.can_transition_to(new_status):
                return error_response(f"Cannot change booking from {booking.status} to {new_status}")

            booking.status = new_status
            if new_status == BOOKING_DECLINED:
                booking.decline_reason = reason
            elif new_status == BOOKING_CANCELLED:
                booking.cancellation_reason = reason
            booking.save()
        logger.info(f"Booking {booking.id} moved to {new_status} by user {user.id}")

        self._notify(booking, new_status, reason)
        return success_response(BookingSerializer(booking).data, f"Booking {new_status.lower()} successfully")

    def _notify(self, booking, new_status, reason):
        service_name = booking.worker_service.service.name if booking.worker_service_id else 'your service'
        if new_status == BOOKING_ACCEPTED:
            send_notification(
                booking.customer,
                "Booking Accepted",
                (
                    f"Dear {booking.customer_name or booking.customer.username},\n\n"
                    f"{booking.worker.user.full_name} accepted your booking for '{service_name}' "
                    f"on {booking.booking_date} at {booking.booking_time}.\n\n"
                    f"Best regards,\nWorkJunction Team"
                ),
                f"Your booking for {service_name} on {booking.booking_date} was accepted."
            )
        elif new_status == BOOKING_DECLINED:
            send_notification(
                booking.customer,
                "Booking Declined",
                f"Your booking for '{service_name}' on {booking.booking_date} was declined. {reason}".strip(),
                f"Your booking for {service_name} was declined."
            )
        elif new_status == BOOKING_CANCELLED:
            send_notification(
                booking.worker.user,
                "Booking Cancelled",
                f"The booking for '{service_name}' on {booking.booking_date} at {booking.booking_time} was cancelled. {reason}".strip(),
                f"Booking for {service_name} on {booking.booking_date} was cancelled."
            )


class BookingReviewView(APIView):
    permission_classes = [IsAuthenticated, IsCustomer]

    @swagger_auto_schema(
        operation_description="Rate a completed booking (1-5). One review per booking.",
        request_body=ReviewCreateSerializer,
        responses={201: BookingSerializer, 400: 'Bad Request', 404: 'Not Found'}
    )
    def post(self, request, pk):
        serializer = ReviewCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        try:
            booking = BOOKING_QUERYSET.get(pk=pk, customer=request.user, status=BOOKING_COMPLETED)
        except Booking.DoesNotExist:
            return error_response("Completed booking not found", status.HTTP_404_NOT_FOUND)
        if Review.objects.filter(booking=booking).exists():
            return error_response("Review already submitted for this booking")

        Review.objects.create(booking=booking, **serializer.validated_data)
        logger.info(f"Review added to booking {booking.id}")
        booking = BOOKING_QUERYSET.get(pk=booking.pk)
        return success_response(BookingSerializer(booking).data, "Review submitted successfully", status.HTTP_201_CREATED)


class InitiateServiceView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(
        operation_description="Send a one-time code to the customer to confirm the service is starting.",
        responses={200: 'OTP sent', 400: 'Bad Request', 404: 'Not Found'}
    )
    def post(self, request, pk):
        with transaction.atomic():
            try:
                booking = Booking.objects.select_for_update().get(
                    pk=pk, worker=request.user.worker, status=BOOKING_ACCEPTED
                )
            except Booking.DoesNotExist:
                return error_response("Booking not found or not in accepted status", status.HTTP_404_NOT_FOUND)
            if booking.service_started_at:
                return error_response("Service already started")
            if booking.service_initiated and booking.otp_is_live():
                return error_response("Service already initiated")
            otp = booking.issue_service_otp()
        logger.info(f"Service OTP issued for booking {booking.id}")

        send_notification(
            booking.customer,
            "Service Start OTP",
            (
                f"Dear {booking.customer_name or booking.customer.username},\n\n"
                f"{booking.worker.user.full_name} is ready to start your service.\n"
                f"Share this code with them to begin: {otp}\n"
                f"The code expires in 10 minutes.\n\n"
                f"Best regards,\nWorkJunction Team"
            ),
            f"Your WorkJunction service start code is {otp}."
        )
        return success_response({
            'booking_id': booking.id,
            'customer_name': booking.customer_name,
            'customer_phone': booking.customer_phone,
            'otp_expires': booking.service_otp_expires,
        }, "Service initiated. OTP sent to customer.")


class VerifyServiceOtpView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(
        operation_description="Check the customer's code and mark the service as started.",
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['otp'],
            properties={'otp': openapi.Schema(type=openapi.TYPE_STRING)},
        ),
        responses={200: BookingSerializer, 400: 'Bad Request', 404: 'Not Found'}
    )
    def post(self, request, pk):
        otp = str(request.data.get('otp') or '').strip()
        if not otp:
            return error_response("OTP is required")

        with transaction.atomic():
            try:
                booking = Booking.objects.select_for_update().get(
                    pk=pk, worker=request.user.worker, status=BOOKING_ACCEPTED, service_initiated=True
                )
            except Booking.DoesNotExist:
                return error_response("Booking not found or service not initiated", status.HTTP_404_NOT_FOUND)
            if booking.service_started_at:
                return error_response("Service already started")
            if not booking.otp_is_live():
                return error_response("OTP has expired. Please initiate service again.")
            if not booking.check_service_otp(otp):
                return error_response("Invalid OTP")
            booking.start_service()
        logger.info(f"Service started for booking {booking.id}")
        return success_response(BookingSerializer(booking).data, "OTP verified. Service started.")


class CompleteServiceView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(
        operation_description="Finish a started service; the booking then waits for payment.",
        responses={200: BookingSerializer, 400: 'Bad Request', 404: 'Not Found'}
    )
    def post(self, request, pk):
        with transaction.atomic():
            try:
                booking = Booking.objects.select_for_update().get(
                    pk=pk, worker=request.user.worker, status=BOOKING_ACCEPTED
                )
            except Booking.DoesNotExist:
                return error_response("Booking not found or not in accepted status", status.HTTP_404_NOT_FOUND)
            if not booking.service_started_at:
                return error_response("Service must be started before completion")
            booking.complete_service()
        logger.info(f"Service completed for booking {booking.id}, awaiting payment")

        send_notification(
            booking.customer,
            "Service Completed",
            (
                f"Dear {booking.customer_name or booking.customer.username},\n\n"
                f"Your service has been completed. Amount due: {booking.price}.\n"
                f"Please complete the payment in the app.\n\n"
                f"Best regards,\nWorkJunction Team"
            ),
            f"Service completed. Please pay {booking.price} to close the booking."
        )
        return success_response(BookingSerializer(booking).data, "Service completed. Awaiting payment.")


class BookingPriceView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(
        operation_description="Change the price of an accepted or payment-pending booking.",
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            required=['new_price'],
            properties={
                'new_price': openapi.Schema(type=openapi.TYPE_NUMBER),
                'reason': openapi.Schema(type=openapi.TYPE_STRING),
            },
        ),
        responses={200: BookingSerializer, 400: 'Bad Request', 404: 'Not Found'}
    )
    def patch(self, request, pk):
        serializer = BookingPriceSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        new_price = serializer.validated_data['new_price']
        reason = serializer.validated_data['reason']

        with transaction.atomic():
            try:
                booking = Booking.objects.select_for_update().get(pk=pk, worker=request.user.worker)
            except Booking.DoesNotExist:
                return error_response("Booking not found", status.HTTP_404_NOT_FOUND)
            if not booking.can_change_price():
                return error_response("Price can only be updated for accepted or payment pending bookings")

            old_price = booking.price
            booking.price = new_price
            payment = getattr(booking, 'payment', None)
            if payment is not None:
                payment.amount = new_price
                if payment.status == PAYMENT_COMPLETED:
                    payment.status = PAYMENT_PENDING
                    booking.status = BOOKING_PAYMENT_PENDING
                payment.save()
            booking.save()
        logger.info(f"Booking {booking.id} price changed from {old_price} to {new_price}")

        send_notification(
            booking.customer,
            "Booking Price Updated",
            f"The price of your booking on {booking.booking_date} changed from {old_price} to {new_price}. {reason}".strip(),
            f"Booking price updated to {new_price}."
        )
        return success_response(BookingSerializer(booking).data, "Price updated successfully")


class WorkerAvailabilityView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Whether a worker is free at an exact date and time.",
        manual_parameters=[
            openapi.Parameter('date', openapi.IN_QUERY, type=openapi.TYPE_STRING, format='date', required=True),
            openapi.Parameter('time', openapi.IN_QUERY, type=openapi.TYPE_STRING, required=True),
        ],
        responses={200: 'Availability', 400: 'Bad Request', 404: 'Not Found'}
    )
    def get(self, request, worker_id):
        date_value = request.query_params.get('date')
        time_value = request.query_params.get('time')
        if not date_value or not time_value:
            return error_response("Date and time are required")
        booking_date = parse_date(date_value)
        if booking_date is None:
            return error_response("Invalid date, expected YYYY-MM-DD")
        try:
            worker = Worker.objects.get(pk=worker_id)
        except Worker.DoesNotExist:
            return error_response("Worker not found", status.HTTP_404_NOT_FOUND)

        conflict = find_conflicting_booking(worker, booking_date, time_value)
        return success_response({
            'available': conflict is None,
            'existing_booking': {
                'id': conflict.id,
                'status': conflict.status,
                'booking_date': conflict.booking_date,
                'booking_time': conflict.booking_time,
            } if conflict else None,
        })


class AvailableSlotsView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(
        operation_description="Free slots of the given length for today and the next six days.",
        manual_parameters=[
            openapi.Parameter('duration', openapi.IN_QUERY, type=openapi.TYPE_INTEGER, required=True,
                              description='Slot length in minutes'),
        ],
        responses={200: 'Weekly slots', 400: 'Bad Request', 404: 'Not Found'}
    )
    def get(self, request, worker_id):
        try:
            duration = int(request.query_params.get('duration', ''))
        except ValueError:
            duration = 0
        if duration <= 0:
            return error_response("Valid duration is required")
        try:
            worker = Worker.objects.get(pk=worker_id)
        except Worker.DoesNotExist:
            return error_response("Worker not found", status.HTTP_404_NOT_FOUND)
        if worker.is_suspended:
            return error_response("Worker is currently suspended")

        days, total_bookings = weekly_slots(worker, duration, now=timezone.now())
        return success_response({
            'duration': duration,
            'slot_interval': slot_interval(duration),
            'available_slots': days,
            'worker_availability': worker.timetable,
            'total_bookings_in_week': total_bookings,
        })
