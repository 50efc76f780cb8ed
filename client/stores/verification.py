import logging

from client.http import ApiError
from client.services.verification import VerificationService
from .base import Store

logger = logging.getLogger(__name__)


class VerificationStore(Store):
    """
    Worker document state. Actions report success as a boolean and keep
    the error message on the store instead of raising.
    """

    def __init__(self, api):
        super().__init__()
        self.service = VerificationService(api)
        self.status = None

    @property
    def overall_status(self):
        return self.status['overall_status'] if self.status else None

    @property
    def is_verified(self):
        return self.overall_status == 'APPROVED'

    def _attempt(self, call, fallback_message):
        try:
            return self._run(call, fallback_message)
        except ApiError as e:
            logger.warning(f"Verification request failed: {e.message}")
            return None
        except OSError as e:
            self.error = f"Could not read file: {e.filename or e}"
            logger.warning(f"Verification upload failed: {e}")
            return None

    def fetch_status(self):
        response = self._attempt(self.service.get_verification_status, 'Failed to fetch verification status')
        if response is None:
            return False
        self.status = response.get('data')
        return True

    def upload_document(self, document_type, file_path):
        uploaders = {
            'selfie': self.service.upload_selfie,
            'aadhar': self.service.upload_aadhar,
            'police_verification': self.service.upload_police_verification,
        }
        if document_type not in uploaders:
            self.error = 'Invalid document type'
            return False
        response = self._attempt(lambda: uploaders[document_type](file_path), 'Failed to upload document')
        if response is None:
            return False
        self.status = response.get('data')
        return True

    def upload_all_documents(self, selfie=None, aadhar=None, police_verification=None):
        response = self._attempt(
            lambda: self.service.upload_all_documents(selfie, aadhar, police_verification),
            'Failed to upload documents',
        )
        if response is None:
            return False
        return self.fetch_status()

    def delete_document(self, document_type):
        response = self._attempt(lambda: self.service.delete_document(document_type), 'Failed to delete document')
        if response is None:
            return False
        return self.fetch_status()
