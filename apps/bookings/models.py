from datetime import timedelta
from django.conf import settings
from django.core.validators import MinValueValidator, MaxValueValidator
from django.db import models
from django.utils import timezone

from core import lifecycle
from core.constants import BOOKING_STATUS_CHOICES, BOOKING_PENDING, BOOKING_ACCEPTED, BOOKING_PAYMENT_PENDING
from apps.users.models import Worker
from apps.skills.models import WorkerService
from .utils import generate_otp, otp_matches


class Booking(models.Model):
    customer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='customer_bookings')
    worker = models.ForeignKey(Worker, on_delete=models.CASCADE, related_name='bookings')
    worker_service = models.ForeignKey(WorkerService, on_delete=models.SET_NULL, null=True, related_name='bookings')
    status = models.CharField(max_length=20, choices=BOOKING_STATUS_CHOICES, default=BOOKING_PENDING)
    booking_date = models.DateField()
    booking_time = models.CharField(max_length=5)  # HH:MM
    price = models.DecimalField(max_digits=10, decimal_places=2)

    customer_name = models.CharField(max_length=150, blank=True, default='')
    customer_phone = models.CharField(max_length=15, blank=True, default='')
    customer_address = models.CharField(max_length=255, blank=True, default='')
    customer_pincode = models.CharField(max_length=10, blank=True, default='')
    notes = models.TextField(blank=True, default='')

    cancellation_reason = models.TextField(blank=True, default='')
    decline_reason = models.TextField(blank=True, default='')

    service_initiated = models.BooleanField(default=False)
    service_initiated_at = models.DateTimeField(null=True, blank=True)
    service_otp = models.CharField(max_length=6, blank=True, default='')
    service_otp_expires = models.DateTimeField(null=True, blank=True)
    service_started_at = models.DateTimeField(null=True, blank=True)
    service_completed_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['-booking_date', '-created_at']
        indexes = [
            models.Index(fields=['worker', 'booking_date', 'booking_time']),
            models.Index(fields=['customer', 'status']),
        ]

    def __str__(self):
        return f"Booking {self.id}: {self.customer.username} -> {self.worker.user.username} ({self.status})"

    @property
    def available_actions(self):
        return lifecycle.booking_actions(
            self.status, self.service_initiated, self.service_started_at, self.service_completed_at
        )

    @property
    def service_stage(self):
        return lifecycle.service_stage(
            self.status, self.service_initiated, self.service_started_at, self.service_completed_at
        )

    @property
    def service_duration(self):
        """Minutes this booking occupies on the worker's calendar, if known."""
        if self.worker_service_id and self.worker_service.estimated_duration:
            return self.worker_service.estimated_duration
        return None

    def can_transition_to(self, target):
        return lifecycle.can_transition(self.status, target)

    def is_party(self, user):
        return self.customer_id == user.id or (hasattr(user, 'worker') and self.worker_id == user.worker.id)

    def otp_is_live(self, now=None):
        now = now or timezone.now()
        return bool(self.service_otp) and self.service_otp_expires is not None and self.service_otp_expires > now

    def issue_service_otp(self):
        """Start the in-person handshake. Returns the code to send to the customer."""
        now = timezone.now()
        self.service_otp = generate_otp()
        self.service_otp_expires = now + timedelta(minutes=settings.SERVICE_OTP_TTL_MINUTES)
        self.service_initiated = True
        self.service_initiated_at = now
        self.save(update_fields=[
            'service_otp', 'service_otp_expires', 'service_initiated', 'service_initiated_at', 'updated_at'
        ])
        return self.service_otp

    def check_service_otp(self, otp):
        return otp_matches(self.service_otp, otp)

    def start_service(self):
        self.service_started_at = timezone.now()
        self.service_otp = ''
        self.service_otp_expires = None
        self.save(update_fields=['service_started_at', 'service_otp', 'service_otp_expires', 'updated_at'])

    def complete_service(self):
        self.status = BOOKING_PAYMENT_PENDING
        self.service_completed_at = timezone.now()
        self.save(update_fields=['status', 'service_completed_at', 'updated_at'])

    def can_change_price(self):
        return self.status in (BOOKING_ACCEPTED, BOOKING_PAYMENT_PENDING)


class Review(models.Model):
    booking = models.OneToOneField(Booking, on_delete=models.CASCADE, related_name='review')
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.TextField(blank=True, default='')
    reviewed_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Review for booking {self.booking_id} ({self.rating}/5)"
