import mimetypes
import os
from contextlib import ExitStack

BASE_PATH = '/api/worker/verification'


def _file_part(stack, path):
    content_type = mimetypes.guess_type(path)[0] or 'application/octet-stream'
    return (os.path.basename(path), stack.enter_context(open(path, 'rb')), content_type)


class VerificationService:
    """Document uploads take file paths and send them as multipart form data."""

    def __init__(self, api):
        self.api = api

    def _upload(self, path, files):
        # every handle opened so far is closed even when a later path cannot be read
        with ExitStack() as stack:
            parts = {name: _file_part(stack, file_path) for name, file_path in files.items() if file_path}
            return self.api.post(f'{BASE_PATH}/{path}/', files=parts)

    def upload_selfie(self, file_path):
        return self._upload('upload-selfie', {'selfie': file_path})

    def upload_aadhar(self, file_path):
        return self._upload('upload-aadhar', {'aadhar': file_path})

    def upload_police_verification(self, file_path):
        return self._upload('upload-police-verification', {'police_verification': file_path})

    def upload_all_documents(self, selfie=None, aadhar=None, police_verification=None):
        return self._upload('upload-all', {
            'selfie': selfie,
            'aadhar': aadhar,
            'police_verification': police_verification,
        })

    def get_verification_status(self):
        return self.api.get(f'{BASE_PATH}/status/')

    def delete_document(self, document_type):
        return self.api.delete(f'{BASE_PATH}/{document_type}/')

    def get_pending_verifications(self, page=1, limit=10):
        return self.api.get(f'{BASE_PATH}/pending/', params={'page': page, 'limit': limit})

    def get_verification_stats(self):
        return self.api.get(f'{BASE_PATH}/stats/')

    def get_worker_verification(self, worker_id):
        return self.api.get(f'{BASE_PATH}/{worker_id}/')

    def approve_worker(self, worker_id):
        return self.api.put(f'{BASE_PATH}/{worker_id}/approve/')

    def reject_worker(self, worker_id, rejection_reason):
        return self.api.put(f'{BASE_PATH}/{worker_id}/reject/', json={'rejection_reason': rejection_reason})
