from rest_framework import serializers
from django.conf import settings
from django.core.validators import FileExtensionValidator

from core.constants import VERIFICATION_DOCUMENTS

IMAGE_EXTENSIONS = ['jpg', 'jpeg', 'png', 'webp']
DOCUMENT_EXTENSIONS = IMAGE_EXTENSIONS + ['pdf']


def validate_upload_size(upload):
    limit = settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
    if upload.size > limit:
        raise serializers.ValidationError(f"File too large. Maximum size is {settings.MAX_UPLOAD_SIZE_MB} MB.")


def selfie_field(**kwargs):
    return serializers.ImageField(
        validators=[FileExtensionValidator(IMAGE_EXTENSIONS), validate_upload_size], **kwargs
    )


def document_field(**kwargs):
    return serializers.FileField(
        validators=[FileExtensionValidator(DOCUMENT_EXTENSIONS), validate_upload_size], **kwargs
    )


class SelfieUploadSerializer(serializers.Serializer):
    selfie = selfie_field()


class AadharUploadSerializer(serializers.Serializer):
    aadhar = document_field()


class PoliceVerificationUploadSerializer(serializers.Serializer):
    police_verification = document_field()


class DocumentsUploadSerializer(serializers.Serializer):
    selfie = selfie_field(required=False)
    aadhar = document_field(required=False)
    police_verification = document_field(required=False)

    def validate(self, data):
        if not any(data.get(name) for name in VERIFICATION_DOCUMENTS):
            raise serializers.ValidationError("At least one document is required.")
        return data


class RejectSerializer(serializers.Serializer):
    rejection_reason = serializers.CharField(
        max_length=1000,
        error_messages={'required': 'Rejection reason is required.', 'blank': 'Rejection reason is required.'}
    )
