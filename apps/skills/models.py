from django.db import models

from core.constants import PRICING_TYPE_CHOICES
from apps.users.models import Worker


class Skill(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True, default='')

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


class Service(models.Model):
    skill = models.ForeignKey(Skill, on_delete=models.CASCADE, related_name='services')
    name = models.CharField(max_length=100)
    description = models.TextField(blank=True, default='')

    class Meta:
        ordering = ['name']
        unique_together = ('skill', 'name')

    def __str__(self):
        return f"{self.name} ({self.skill.name})"


class WorkerService(models.Model):
    worker = models.ForeignKey(Worker, on_delete=models.CASCADE, related_name='services')
    skill = models.ForeignKey(Skill, on_delete=models.PROTECT, related_name='worker_services')
    service = models.ForeignKey(Service, on_delete=models.PROTECT, related_name='worker_services')
    details = models.TextField(blank=True, default='')
    pricing_type = models.CharField(max_length=10, choices=PRICING_TYPE_CHOICES, default='FIXED')
    price = models.DecimalField(max_digits=10, decimal_places=2)
    # minutes; used to block the calendar around a booking
    estimated_duration = models.PositiveIntegerField(null=True, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ('worker', 'service')

    def __str__(self):
        return f"{self.worker.user.username} - {self.service.name} ({self.price})"


class PortfolioImage(models.Model):
    worker_service = models.ForeignKey(WorkerService, on_delete=models.CASCADE, related_name='portfolio_images')
    image = models.ImageField(upload_to='portfolio/')
    caption = models.CharField(max_length=255, blank=True, default='')
    uploaded_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return f"Image for {self.worker_service}"
