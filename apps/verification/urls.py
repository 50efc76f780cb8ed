from django.urls import path
from .views import (
    SelfieUploadView, AadharUploadView, PoliceVerificationUploadView, UploadAllDocumentsView,
    VerificationStatusView, DocumentDeleteView, PendingVerificationListView, VerificationStatsView,
    VerificationDetailView, VerificationApproveView, VerificationRejectView,
)

urlpatterns = [
    # Worker
    path('upload-selfie/', SelfieUploadView.as_view(), name='verification_upload_selfie'),
    path('upload-aadhar/', AadharUploadView.as_view(), name='verification_upload_aadhar'),
    path('upload-police-verification/', PoliceVerificationUploadView.as_view(), name='verification_upload_police'),
    path('upload-all/', UploadAllDocumentsView.as_view(), name='verification_upload_all'),
    path('status/', VerificationStatusView.as_view(), name='verification_status'),

    # Service agent / admin
    path('pending/', PendingVerificationListView.as_view(), name='verification_pending'),
    path('stats/', VerificationStatsView.as_view(), name='verification_stats'),
    path('<int:worker_id>/', VerificationDetailView.as_view(), name='verification_detail'),
    path('<int:worker_id>/approve/', VerificationApproveView.as_view(), name='verification_approve'),
    path('<int:worker_id>/reject/', VerificationRejectView.as_view(), name='verification_reject'),

    path('<str:document_type>/', DocumentDeleteView.as_view(), name='verification_document_delete'),
]
