from rest_framework.views import APIView
from rest_framework import status
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from django.db.models import Count
import logging

from core.constants import (
    VERIFICATION_APPROVED, VERIFICATION_DOCUMENTS, VERIFICATION_PENDING, VERIFICATION_STATUS_CHOICES,
)
from core.responses import success_response, error_response, validation_error_response
from core.utils import IsModerator, IsWorker, paginate
from apps.bookings.utils import send_notification
from .models import WorkerVerification
from .serializers import (
    SelfieUploadSerializer, AadharUploadSerializer, PoliceVerificationUploadSerializer,
    DocumentsUploadSerializer, RejectSerializer,
)

logger = logging.getLogger(__name__)

DOCUMENT_LABELS = {
    'selfie': 'Selfie',
    'aadhar': 'Aadhaar card',
    'police_verification': 'Police verification',
}


def _worker_verification(request):
    verification, created = WorkerVerification.objects.get_or_create(worker=request.user.worker)
    return verification


def _moderated(request):
    """Verifications the current moderator may review; agents only see their own city."""
    queryset = WorkerVerification.objects.select_related('worker__user')
    user = request.user
    if user.is_superuser:
        return queryset
    agent = user.service_agent
    if agent.city:
        queryset = queryset.filter(worker__user__city__iexact=agent.city)
    return queryset


def _worker_summary(verification, request):
    user = verification.worker.user
    summary = {
        'worker_id': verification.worker_id,
        'worker_name': user.full_name,
        'phone': user.phone_number,
        'email': user.email,
        'city': user.city,
        'area': user.area,
    }
    summary.update(verification.status_payload(request))
    return summary


class DocumentUploadView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]
    parser_classes = [MultiPartParser, FormParser]
    document = None
    serializer_class = None

    def upload(self, request):
        serializer = self.serializer_class(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        verification = _worker_verification(request)
        if verification.status == VERIFICATION_APPROVED:
            return error_response("Verified workers cannot change their documents")

        verification.set_document(self.document, serializer.validated_data[self.document])
        verification.refresh_status()
        logger.info(f"Worker {verification.worker_id} uploaded {self.document}")
        return success_response(
            verification.status_payload(request), f"{DOCUMENT_LABELS[self.document]} uploaded successfully"
        )


class SelfieUploadView(DocumentUploadView):
    document = 'selfie'
    serializer_class = SelfieUploadSerializer

    @swagger_auto_schema(
        operation_description="Upload or replace the worker's selfie (image).",
        manual_parameters=[openapi.Parameter('selfie', openapi.IN_FORM, type=openapi.TYPE_FILE, required=True)],
        consumes=['multipart/form-data'],
        responses={200: 'Uploaded', 400: 'Bad Request'}
    )
    def post(self, request):
        return self.upload(request)


class AadharUploadView(DocumentUploadView):
    document = 'aadhar'
    serializer_class = AadharUploadSerializer

    @swagger_auto_schema(
        operation_description="Upload or replace the Aadhaar card (image or PDF).",
        manual_parameters=[openapi.Parameter('aadhar', openapi.IN_FORM, type=openapi.TYPE_FILE, required=True)],
        consumes=['multipart/form-data'],
        responses={200: 'Uploaded', 400: 'Bad Request'}
    )
    def post(self, request):
        return self.upload(request)


class PoliceVerificationUploadView(DocumentUploadView):
    document = 'police_verification'
    serializer_class = PoliceVerificationUploadSerializer

    @swagger_auto_schema(
        operation_description="Upload or replace the police verification certificate (image or PDF).",
        manual_parameters=[
            openapi.Parameter('police_verification', openapi.IN_FORM, type=openapi.TYPE_FILE, required=True)
        ],
        consumes=['multipart/form-data'],
        responses={200: 'Uploaded', 400: 'Bad Request'}
    )
    def post(self, request):
        return self.upload(request)


class UploadAllDocumentsView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]
    parser_classes = [MultiPartParser, FormParser]

    @swagger_auto_schema(
        operation_description="Upload any of the documents at once and submit them for review.",
        manual_parameters=[
            openapi.Parameter(name, openapi.IN_FORM, type=openapi.TYPE_FILE, required=False)
            for name in VERIFICATION_DOCUMENTS
        ],
        consumes=['multipart/form-data'],
        responses={200: 'Submitted', 400: 'Bad Request'}
    )
    def post(self, request):
        serializer = DocumentsUploadSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        verification = _worker_verification(request)
        if verification.status == VERIFICATION_APPROVED:
            return error_response("Verified workers cannot change their documents")

        uploaded = []
        for name in VERIFICATION_DOCUMENTS:
            upload = serializer.validated_data.get(name)
            if upload:
                verification.set_document(name, upload)
                uploaded.append(name)
        verification.submit()
        logger.info(f"Worker {verification.worker_id} submitted documents for review: {', '.join(uploaded)}")
        return success_response(verification.status_payload(request), "Documents submitted for verification")


class VerificationStatusView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(
        operation_description="Verification status and uploaded documents of the current worker.",
        responses={200: 'Verification status'}
    )
    def get(self, request):
        return success_response(_worker_verification(request).status_payload(request))


class DocumentDeleteView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(
        operation_description="Delete one document (selfie, aadhar or police_verification).",
        responses={200: 'Deleted', 400: 'Bad Request', 404: 'Not Found'}
    )
    def delete(self, request, document_type):
        if document_type not in VERIFICATION_DOCUMENTS:
            return error_response("Invalid document type")
        verification = _worker_verification(request)
        if verification.status == VERIFICATION_APPROVED:
            return error_response("Verified workers cannot change their documents")
        if not getattr(verification, document_type):
            return error_response("Document not found", status.HTTP_404_NOT_FOUND)

        verification.remove_document(document_type)
        logger.info(f"Worker {verification.worker_id} deleted {document_type}")
        return success_response(
            verification.status_payload(request), f"{DOCUMENT_LABELS[document_type]} deleted successfully"
        )


class PendingVerificationListView(APIView):
    permission_classes = [IsAuthenticated, IsModerator]

    @swagger_auto_schema(
        operation_description="Workers waiting for document review, oldest submission first.",
        manual_parameters=[
            openapi.Parameter('page', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('limit', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
        ],
        responses={200: 'Pending verifications'}
    )
    def get(self, request):
        queryset = _moderated(request).filter(status=VERIFICATION_PENDING).order_by('submitted_at', 'id')
        verifications, pagination = paginate(queryset, request)
        return success_response(
            [_worker_summary(verification, request) for verification in verifications], pagination=pagination
        )


class VerificationStatsView(APIView):
    permission_classes = [IsAuthenticated, IsModerator]

    @swagger_auto_schema(operation_description="Number of workers in each verification status.", responses={200: 'Counts'})
    def get(self, request):
        counts = {choice.lower(): 0 for choice, label in VERIFICATION_STATUS_CHOICES}
        for row in _moderated(request).order_by().values('status').annotate(total=Count('id')):
            counts[row['status'].lower()] = row['total']
        counts['total'] = sum(counts.values())
        return success_response(counts)


class VerificationDetailView(APIView):
    permission_classes = [IsAuthenticated, IsModerator]

    @swagger_auto_schema(operation_description="Verification details of one worker.", responses={200: 'Details', 404: 'Not Found'})
    def get(self, request, worker_id):
        try:
            verification = _moderated(request).get(worker_id=worker_id)
        except WorkerVerification.DoesNotExist:
            return error_response("Worker verification not found", status.HTTP_404_NOT_FOUND)
        return success_response(_worker_summary(verification, request))


class VerificationApproveView(APIView):
    permission_classes = [IsAuthenticated, IsModerator]

    @swagger_auto_schema(operation_description="Approve a pending verification.", responses={200: 'Approved', 400: 'Bad Request', 404: 'Not Found'})
    def put(self, request, worker_id):
        try:
            verification = _moderated(request).get(worker_id=worker_id)
        except WorkerVerification.DoesNotExist:
            return error_response("Worker verification not found", status.HTTP_404_NOT_FOUND)
        if verification.status != VERIFICATION_PENDING:
            return error_response("Only pending verifications can be approved")
        if not verification.has_all_documents():
            return error_response("All documents must be uploaded before approval")

        verification.approve(request.user)
        logger.info(f"Worker {worker_id} verification approved by user {request.user.id}")
        worker_user = verification.worker.user
        send_notification(
            worker_user,
            "Verification Approved",
            (
                f"Dear {worker_user.first_name or worker_user.username},\n\n"
                f"Your documents have been verified. Customers can now find and book you.\n\n"
                f"Best regards,\nWorkJunction Team"
            ),
            "Your WorkJunction verification has been approved."
        )
        return success_response(_worker_summary(verification, request), "Worker verification approved")


class VerificationRejectView(APIView):
    permission_classes = [IsAuthenticated, IsModerator]

    @swagger_auto_schema(
        operation_description="Reject a pending verification with a reason.",
        request_body=RejectSerializer,
        responses={200: 'Rejected', 400: 'Bad Request', 404: 'Not Found'}
    )
    def put(self, request, worker_id):
        serializer = RejectSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        try:
            verification = _moderated(request).get(worker_id=worker_id)
        except WorkerVerification.DoesNotExist:
            return error_response("Worker verification not found", status.HTTP_404_NOT_FOUND)
        if verification.status != VERIFICATION_PENDING:
            return error_response("Only pending verifications can be rejected")

        reason = serializer.validated_data['rejection_reason']
        verification.reject(request.user, reason)
        logger.info(f"Worker {worker_id} verification rejected by user {request.user.id}")
        worker_user = verification.worker.user
        send_notification(
            worker_user,
            "Verification Rejected",
            (
                f"Dear {worker_user.first_name or worker_user.username},\n\n"
                f"Your documents could not be verified: {reason}\n"
                f"Please upload corrected documents to resubmit.\n\n"
                f"Best regards,\nWorkJunction Team"
            ),
            "Your WorkJunction verification was rejected. Please check your email."
        )
        return success_response(_worker_summary(verification, request), "Worker verification rejected")
