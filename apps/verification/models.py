from django.conf import settings
from django.db import models
from django.utils import timezone

from core.constants import (
    VERIFICATION_STATUS_CHOICES, VERIFICATION_DOCUMENTS, VERIFICATION_UNVERIFIED,
    VERIFICATION_PENDING, VERIFICATION_APPROVED, VERIFICATION_REJECTED,
)
from apps.users.models import Worker


class WorkerVerification(models.Model):
    worker = models.OneToOneField(Worker, on_delete=models.CASCADE, related_name='verification')
    status = models.CharField(max_length=20, choices=VERIFICATION_STATUS_CHOICES, default=VERIFICATION_UNVERIFIED)
    selfie = models.ImageField(upload_to='verification/selfies/', blank=True, null=True)
    aadhar = models.FileField(upload_to='verification/aadhar/', blank=True, null=True)
    police_verification = models.FileField(upload_to='verification/police/', blank=True, null=True)
    is_selfie_verified = models.BooleanField(default=False)
    is_aadhar_verified = models.BooleanField(default=False)
    is_police_verification_verified = models.BooleanField(default=False)
    rejection_reason = models.TextField(blank=True, default='')
    submitted_at = models.DateTimeField(null=True, blank=True)
    verified_at = models.DateTimeField(null=True, blank=True)
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True, blank=True, related_name='verified_workers'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Verification for {self.worker.user.username} ({self.status})"

    def has_all_documents(self):
        return all(getattr(self, name) for name in VERIFICATION_DOCUMENTS)

    def set_document(self, name, upload):
        """Store a new file for a document, replacing any previous one."""
        old = getattr(self, name)
        if old:
            old.delete(save=False)
        setattr(self, name, upload)
        setattr(self, f'is_{name}_verified', False)

    def remove_document(self, name):
        getattr(self, name).delete(save=False)
        setattr(self, name, None)
        setattr(self, f'is_{name}_verified', False)
        if self.status != VERIFICATION_UNVERIFIED:
            self.status = VERIFICATION_UNVERIFIED
            self.submitted_at = None
        self.save()

    def refresh_status(self):
        """Submit for review once every document is present."""
        if self.status in (VERIFICATION_UNVERIFIED, VERIFICATION_REJECTED) and self.has_all_documents():
            self.submit()
        else:
            self.save()

    def submit(self):
        self.status = VERIFICATION_PENDING
        self.submitted_at = timezone.now()
        self.rejection_reason = ''
        self.save()

    def approve(self, moderator):
        self.status = VERIFICATION_APPROVED
        self.verified_at = timezone.now()
        self.verified_by = moderator
        self.rejection_reason = ''
        for name in VERIFICATION_DOCUMENTS:
            setattr(self, f'is_{name}_verified', True)
        self.save()
        VerificationLog.objects.create(verification=self, actor=moderator, action=VERIFICATION_APPROVED)

    def reject(self, moderator, reason):
        self.status = VERIFICATION_REJECTED
        self.verified_at = None
        self.verified_by = moderator
        self.rejection_reason = reason
        self.save()
        VerificationLog.objects.create(verification=self, actor=moderator, action=VERIFICATION_REJECTED, details=reason)

    def documents_payload(self, request=None):
        documents = {}
        for name in VERIFICATION_DOCUMENTS:
            upload = getattr(self, name)
            url = None
            if upload:
                url = request.build_absolute_uri(upload.url) if request else upload.url
            documents[name] = {
                'uploaded': bool(upload),
                'url': url,
                'verified': getattr(self, f'is_{name}_verified'),
            }
        return documents

    def status_payload(self, request=None):
        return {
            'verification_id': self.id,
            'overall_status': self.status,
            'documents': self.documents_payload(request),
            'rejection_reason': self.rejection_reason or None,
            'submitted_at': self.submitted_at,
            'verified_at': self.verified_at,
        }


class VerificationLog(models.Model):
    verification = models.ForeignKey(WorkerVerification, on_delete=models.CASCADE, related_name='logs')
    actor = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.SET_NULL, null=True)
    action = models.CharField(max_length=20, choices=VERIFICATION_STATUS_CHOICES)
    details = models.TextField(blank=True, default='')
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-timestamp']

    def __str__(self):
        return f"{self.action} {self.verification.worker.user.username} by {self.actor}"
