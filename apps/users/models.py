from django.db import models
from django.contrib.auth.models import AbstractUser
from django.utils import timezone

from core.constants import AVAILABILITY_STATUS_CHOICES, VERIFICATION_APPROVED, WEEKDAYS


class User(AbstractUser):
    email = models.EmailField(blank=True, null=True, unique=True)
    phone_number = models.CharField(max_length=15, blank=True, null=True, unique=True)
    is_verified = models.BooleanField(default=False)
    preferred_language = models.CharField(max_length=10, default='en')
    house_no = models.CharField(max_length=50, blank=True, default='')
    street = models.CharField(max_length=150, blank=True, default='')
    area = models.CharField(max_length=100, blank=True, default='')
    city = models.CharField(max_length=100, blank=True, default='')
    state = models.CharField(max_length=100, blank=True, default='')
    pincode = models.CharField(max_length=10, blank=True, default='')

    def save(self, *args, **kwargs):
        # blank contact details are stored as NULL so the unique constraints allow many
        self.email = self.email or None
        self.phone_number = self.phone_number or None
        super().save(*args, **kwargs)

    @property
    def is_customer(self):
        return hasattr(self, 'customer')

    @property
    def is_worker(self):
        return hasattr(self, 'worker')

    @property
    def is_service_agent(self):
        return hasattr(self, 'service_agent')

    @property
    def role(self):
        if self.is_superuser:
            return 'ADMIN'
        if self.is_worker:
            return 'WORKER'
        if self.is_service_agent:
            return 'SERVICE_AGENT'
        if self.is_customer:
            return 'CUSTOMER'
        return None

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip() or self.username

    @property
    def address(self):
        parts = [self.house_no, self.street, self.area, self.city, self.state, self.pincode]
        return ', '.join(part for part in parts if part)

    @staticmethod
    def get_by_identifier(identifier):
        return User.objects.filter(
            models.Q(username=identifier) | models.Q(email=identifier) | models.Q(phone_number=identifier)
        ).first()


class Customer(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='customer')
    profile_pic = models.ImageField(upload_to='profile_pics/', blank=True, null=True)

    def __str__(self):
        return f"Customer: {self.user.username}"


class Worker(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='worker')
    profile_pic = models.ImageField(upload_to='profile_pics/', blank=True, null=True)
    bio = models.TextField(blank=True, default='')
    availability_status = models.CharField(max_length=20, choices=AVAILABILITY_STATUS_CHOICES, default='available')
    # {"Monday": [{"start": "09:00", "end": "17:00"}], ...}
    timetable = models.JSONField(default=dict, blank=True)
    is_suspended = models.BooleanField(default=False)
    join_date = models.DateTimeField(default=timezone.now)
    last_activity = models.DateTimeField(null=True, blank=True)

    @property
    def is_verified(self):
        verification = getattr(self, 'verification', None)
        return verification is not None and verification.status == VERIFICATION_APPROVED

    def periods_for(self, day_name):
        return (self.timetable or {}).get(day_name, [])

    def get_rating_stats(self):
        """Average rating, count and a 5..1 star distribution from reviewed, completed bookings."""
        from apps.bookings.models import Review
        from core.constants import BOOKING_COMPLETED

        ratings = list(
            Review.objects.filter(
                booking__worker=self, booking__status=BOOKING_COMPLETED
            ).values_list('rating', flat=True)
        )
        stats = {
            'average_rating': 0.0,
            'total_ratings': len(ratings),
            'rating_distribution': {str(star): 0 for star in range(5, 0, -1)},
        }
        if ratings:
            stats['average_rating'] = round(sum(ratings) / len(ratings), 1)
            for rating in ratings:
                stats['rating_distribution'][str(rating)] += 1
        return stats

    def __str__(self):
        return f"Worker: {self.user.username}"


class NonAvailability(models.Model):
    worker = models.ForeignKey(Worker, on_delete=models.CASCADE, related_name='non_availability')
    start_datetime = models.DateTimeField()
    end_datetime = models.DateTimeField()
    reason = models.CharField(max_length=255, blank=True, default='')

    class Meta:
        ordering = ['start_datetime']

    def overlaps(self, start, end):
        return start < self.end_datetime and end > self.start_datetime

    def __str__(self):
        return f"{self.worker.user.username} off {self.start_datetime:%Y-%m-%d %H:%M} - {self.end_datetime:%Y-%m-%d %H:%M}"


class ServiceAgent(models.Model):
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='service_agent')
    city = models.CharField(max_length=100, blank=True, default='')
    area = models.CharField(max_length=100, blank=True, default='')

    def __str__(self):
        return f"Service agent: {self.user.username}"


def validate_timetable(timetable):
    """Return a list of problems with a weekly timetable, empty when valid."""
    problems = []
    if not isinstance(timetable, dict):
        return ['Timetable must be an object keyed by day name']
    for day, periods in timetable.items():
        if day not in WEEKDAYS:
            problems.append(f"Unknown day '{day}'")
            continue
        if not isinstance(periods, list):
            problems.append(f"{day}: periods must be a list")
            continue
        for period in periods:
            try:
                start = _minutes(period['start'])
                end = _minutes(period['end'])
            except (KeyError, TypeError, ValueError):
                problems.append(f"{day}: each period needs start and end as HH:MM")
                continue
            if start >= end:
                problems.append(f"{day}: period {period['start']}-{period['end']} ends before it starts")
    return problems


def _minutes(value):
    hours, minutes = value.split(':')
    hours, minutes = int(hours), int(minutes)
    if not (0 <= hours < 24 and 0 <= minutes < 60) and (hours, minutes) != (24, 0):
        raise ValueError(value)
    return hours * 60 + minutes
