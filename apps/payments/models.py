from datetime import timedelta
from django.conf import settings
from django.db import models
from django.utils import timezone

from core.constants import (
    PAYMENT_STATUS_CHOICES, PAYMENT_TYPE_CHOICES, PAYMENT_PENDING, PAYMENT_COMPLETED, PAYMENT_FAILED,
)
from apps.bookings.models import Booking
from apps.bookings.utils import generate_otp, otp_matches


class Payment(models.Model):
    booking = models.OneToOneField(Booking, on_delete=models.CASCADE, related_name='payment')
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default=PAYMENT_PENDING)
    payment_type = models.CharField(max_length=20, choices=PAYMENT_TYPE_CHOICES)
    order_id = models.CharField(max_length=100, blank=True, default='', db_index=True)
    transaction_id = models.CharField(max_length=100, blank=True, default='')
    transaction_date = models.DateTimeField(null=True, blank=True)
    cash_otp = models.CharField(max_length=6, blank=True, default='')
    cash_otp_expires = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Payment for booking {self.booking_id}: {self.amount} ({self.status})"

    def issue_cash_otp(self):
        self.cash_otp = generate_otp()
        self.cash_otp_expires = timezone.now() + timedelta(minutes=settings.CASH_OTP_TTL_MINUTES)
        self.save(update_fields=['cash_otp', 'cash_otp_expires', 'updated_at'])
        return self.cash_otp

    def cash_otp_expired(self):
        return self.cash_otp_expires is None or self.cash_otp_expires <= timezone.now()

    def check_cash_otp(self, otp):
        return otp_matches(self.cash_otp, otp)

    def mark_completed(self, transaction_id=''):
        self.status = PAYMENT_COMPLETED
        if transaction_id:
            self.transaction_id = transaction_id
        self.transaction_date = timezone.now()
        self.cash_otp = ''
        self.cash_otp_expires = None
        self.save()

    def mark_failed(self):
        self.status = PAYMENT_FAILED
        self.save(update_fields=['status', 'updated_at'])
