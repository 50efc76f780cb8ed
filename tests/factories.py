"""Builders for the objects most tests need."""
from datetime import timedelta
from decimal import Decimal

from django.utils import timezone
from rest_framework.test import APIClient

from apps.users.models import User, Customer, Worker
from apps.skills.models import WorkerService
from apps.bookings.models import Booking
from core.constants import VERIFICATION_APPROVED, WEEKDAYS

PASSWORD = 'S3cure-Pass!23'
FULL_WEEK = {day: [{'start': '09:00', 'end': '18:00'}] for day in WEEKDAYS}


def make_customer(username='asha', **fields):
    fields.setdefault('first_name', username.title())
    fields.setdefault('city', 'Bengaluru')
    user = User.objects.create_user(username=username, password=PASSWORD, **fields)
    Customer.objects.create(user=user)
    return user


def make_worker(username='ravi', approved=True, timetable=None, **fields):
    fields.setdefault('first_name', username.title())
    fields.setdefault('city', 'Bengaluru')
    user = User.objects.create_user(username=username, password=PASSWORD, **fields)
    worker = Worker.objects.create(user=user, timetable=FULL_WEEK if timetable is None else timetable)
    if approved:
        worker.verification.status = VERIFICATION_APPROVED
        worker.verification.save()
    return worker


def make_worker_service(worker, service, price='500.00', duration=60, **fields):
    return WorkerService.objects.create(
        worker=worker,
        skill=service.skill,
        service=service,
        price=Decimal(price),
        estimated_duration=duration,
        **fields
    )


def make_booking(customer, worker_service, status='PENDING', days_ahead=1, booking_time='10:00', **fields):
    return Booking.objects.create(
        customer=customer,
        worker=worker_service.worker,
        worker_service=worker_service,
        status=status,
        booking_date=timezone.localdate() + timedelta(days=days_ahead),
        booking_time=booking_time,
        price=worker_service.price,
        **fields
    )


def client_for(user):
    client = APIClient()
    client.force_authenticate(user=user)
    return client
