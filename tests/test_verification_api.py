"""
Tests for worker document uploads and moderator review.
"""
from io import BytesIO

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.utils import timezone
from PIL import Image

from apps.users.models import User
from apps.verification.models import VerificationLog, WorkerVerification
from tests.factories import PASSWORD, client_for, make_worker

pytestmark = pytest.mark.django_db


def png(name='selfie.png'):
    buffer = BytesIO()
    Image.new('RGB', (8, 8), color=(200, 120, 40)).save(buffer, format='PNG')
    return SimpleUploadedFile(name, buffer.getvalue(), content_type='image/png')


def pdf(name='aadhar.pdf'):
    return SimpleUploadedFile(name, b'%PDF-1.4\n%%EOF\n', content_type='application/pdf')


def submitted(worker, status='PENDING'):
    """Put a worker's verification in review with all documents on record."""
    verification = worker.verification
    verification.selfie = 'verification/selfies/selfie.png'
    verification.aadhar = 'verification/aadhar/aadhar.pdf'
    verification.police_verification = 'verification/police/police.pdf'
    verification.status = status
    verification.submitted_at = timezone.now()
    verification.save()
    return verification


@pytest.fixture
def new_worker(db):
    return make_worker('arjun', approved=False, email='arjun@example.com')


@pytest.fixture
def new_worker_client(new_worker):
    return client_for(new_worker.user)


@pytest.fixture
def admin(db):
    return User.objects.create_superuser(username='root', password=PASSWORD, email='root@example.com')


class TestWorkerUploads:
    """Worker side: /api/worker/verification/..."""

    def test_new_worker_starts_unverified(self, new_worker_client):
        response = new_worker_client.get('/api/worker/verification/status/')

        data = response.json()['data']
        assert data['overall_status'] == 'UNVERIFIED'
        assert all(not doc['uploaded'] for doc in data['documents'].values())

    def test_selfie_upload(self, media_root, new_worker_client):
        response = new_worker_client.post('/api/worker/verification/upload-selfie/', {'selfie': png()})

        assert response.status_code == 200
        data = response.json()['data']
        assert data['documents']['selfie']['uploaded'] is True
        assert data['documents']['selfie']['verified'] is False
        assert data['overall_status'] == 'UNVERIFIED'

    def test_last_document_submits_for_review(self, media_root, new_worker_client):
        new_worker_client.post('/api/worker/verification/upload-selfie/', {'selfie': png()})
        new_worker_client.post('/api/worker/verification/upload-aadhar/', {'aadhar': pdf()})
        response = new_worker_client.post('/api/worker/verification/upload-police-verification/',
                                          {'police_verification': pdf('police.pdf')})

        data = response.json()['data']
        assert data['overall_status'] == 'PENDING'
        assert data['submitted_at'] is not None

    def test_wrong_file_type(self, media_root, new_worker_client):
        upload = SimpleUploadedFile('aadhar.txt', b'not a document', content_type='text/plain')

        response = new_worker_client.post('/api/worker/verification/upload-aadhar/', {'aadhar': upload})

        assert response.status_code == 400
        assert response.json()['success'] is False

    def test_oversized_file(self, settings, media_root, new_worker_client):
        settings.MAX_UPLOAD_SIZE_MB = 0

        response = new_worker_client.post('/api/worker/verification/upload-aadhar/', {'aadhar': pdf()})

        assert response.status_code == 400

    def test_upload_all_submits_whatever_was_sent(self, media_root, new_worker_client):
        response = new_worker_client.post('/api/worker/verification/upload-all/', {
            'selfie': png(), 'aadhar': pdf(),
        })

        data = response.json()['data']
        assert data['overall_status'] == 'PENDING'
        assert data['documents']['police_verification']['uploaded'] is False

    def test_upload_all_needs_a_document(self, new_worker_client):
        response = new_worker_client.post('/api/worker/verification/upload-all/', {})

        assert response.status_code == 400

    def test_delete_document_returns_to_unverified(self, media_root, new_worker_client, new_worker):
        new_worker_client.post('/api/worker/verification/upload-all/', {'selfie': png(), 'aadhar': pdf()})

        response = new_worker_client.delete('/api/worker/verification/aadhar/')

        assert response.status_code == 200
        verification = WorkerVerification.objects.get(worker=new_worker)
        assert verification.status == 'UNVERIFIED'
        assert not verification.aadhar

    def test_delete_invalid_type(self, new_worker_client):
        response = new_worker_client.delete('/api/worker/verification/passport/')

        assert response.status_code == 400
        assert response.json()['message'] == 'Invalid document type'

    def test_delete_missing_document(self, new_worker_client):
        response = new_worker_client.delete('/api/worker/verification/selfie/')

        assert response.status_code == 404
        assert response.json()['message'] == 'Document not found'

    def test_approved_worker_documents_are_locked(self, media_root, worker_client):
        response = worker_client.post('/api/worker/verification/upload-selfie/', {'selfie': png()})

        assert response.status_code == 400

    def test_customers_have_no_verification(self, customer_client):
        response = customer_client.get('/api/worker/verification/status/')

        assert response.status_code == 403


class TestModeratorReview:
    """Moderator side: pending, stats, detail, approve, reject."""

    def test_agent_sees_pending_workers_in_own_city(self, agent, new_worker):
        submitted(new_worker)
        submitted(make_worker('tara', approved=False, city='Mysuru'))

        response = client_for(agent).get('/api/worker/verification/pending/')

        data = response.json()['data']
        assert [item['worker_id'] for item in data] == [new_worker.id]
        assert data[0]['overall_status'] == 'PENDING'

    def test_admin_sees_every_city(self, admin, new_worker):
        submitted(new_worker)
        submitted(make_worker('tara', approved=False, city='Mysuru'))

        response = client_for(admin).get('/api/worker/verification/pending/')

        assert response.json()['pagination']['total'] == 2

    def test_approve(self, agent, new_worker, mailoutbox):
        submitted(new_worker)

        response = client_for(agent).put(f'/api/worker/verification/{new_worker.id}/approve/')

        assert response.status_code == 200
        verification = WorkerVerification.objects.get(worker=new_worker)
        assert verification.status == 'APPROVED'
        assert verification.verified_by == agent
        assert verification.is_aadhar_verified is True
        assert VerificationLog.objects.filter(verification=verification, action='APPROVED').exists()
        assert mailoutbox[-1].to == ['arjun@example.com']

    def test_approve_requires_pending(self, agent, new_worker):
        response = client_for(agent).put(f'/api/worker/verification/{new_worker.id}/approve/')

        assert response.status_code == 400
        assert WorkerVerification.objects.get(worker=new_worker).status == 'UNVERIFIED'

    def test_approve_requires_every_document(self, agent, new_worker):
        verification = submitted(new_worker)
        verification.police_verification = None
        verification.save()

        response = client_for(agent).put(f'/api/worker/verification/{new_worker.id}/approve/')

        assert response.status_code == 400
        assert response.json()['message'] == 'All documents must be uploaded before approval'

    def test_reject_needs_reason(self, agent, new_worker):
        submitted(new_worker)

        response = client_for(agent).put(f'/api/worker/verification/{new_worker.id}/reject/', {}, format='json')

        assert response.status_code == 400
        assert WorkerVerification.objects.get(worker=new_worker).status == 'PENDING'

    def test_reject(self, agent, new_worker):
        submitted(new_worker)

        response = client_for(agent).put(f'/api/worker/verification/{new_worker.id}/reject/',
                                         {'rejection_reason': 'Aadhaar photo is blurred'}, format='json')

        data = response.json()['data']
        assert data['overall_status'] == 'REJECTED'
        assert data['rejection_reason'] == 'Aadhaar photo is blurred'

    def test_rejected_worker_resubmits_by_uploading(self, media_root, agent, new_worker, new_worker_client):
        submitted(new_worker)
        client_for(agent).put(f'/api/worker/verification/{new_worker.id}/reject/',
                              {'rejection_reason': 'Blurred'}, format='json')

        response = new_worker_client.post('/api/worker/verification/upload-aadhar/', {'aadhar': pdf()})

        data = response.json()['data']
        assert data['overall_status'] == 'PENDING'
        assert data['rejection_reason'] is None

    def test_stats(self, admin, new_worker, worker):
        submitted(new_worker)
        make_worker('tara', approved=False)

        data = client_for(admin).get('/api/worker/verification/stats/').json()['data']

        assert data == {'unverified': 1, 'pending': 1, 'approved': 1, 'rejected': 0, 'total': 3}

    def test_detail(self, agent, new_worker):
        submitted(new_worker)

        data = client_for(agent).get(f'/api/worker/verification/{new_worker.id}/').json()['data']

        assert data['worker_name'] == 'Arjun'
        assert data['documents']['aadhar']['uploaded'] is True

    def test_workers_cannot_moderate(self, worker_client, new_worker):
        submitted(new_worker)

        response = worker_client.put(f'/api/worker/verification/{new_worker.id}/approve/')

        assert response.status_code == 403
        assert response.json()['success'] is False
