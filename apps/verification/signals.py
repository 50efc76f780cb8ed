from django.db.models.signals import post_save
from django.dispatch import receiver

from apps.users.models import Worker
from .models import WorkerVerification


@receiver(post_save, sender=Worker)
def create_worker_verification(sender, instance, created, **kwargs):
    if created:
        WorkerVerification.objects.get_or_create(worker=instance)
