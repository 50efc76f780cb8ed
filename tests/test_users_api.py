"""
Tests for registration, login and the worker's weekly schedule.
"""
import pytest

from apps.users.models import NonAvailability, User, validate_timetable
from tests.factories import PASSWORD

pytestmark = pytest.mark.django_db


class TestAuth:
    def test_register_worker_gets_token_and_unverified_profile(self, api_client):
        response = api_client.post('/api/auth/register/', {
            'username': 'nikhil',
            'password': PASSWORD,
            'role': 'WORKER',
            'email': 'nikhil@example.com',
            'phone_number': '+919811111111',
            'city': 'Pune',
        }, format='json')

        assert response.status_code == 201
        data = response.json()['data']
        assert data['token']
        assert data['user']['role'] == 'WORKER'
        user = User.objects.get(username='nikhil')
        assert user.worker.verification.status == 'UNVERIFIED'

    def test_register_rejects_duplicate_email(self, api_client, customer):
        response = api_client.post('/api/auth/register/', {
            'username': 'asha2', 'password': PASSWORD, 'role': 'CUSTOMER', 'email': 'asha@example.com',
        }, format='json')

        assert response.status_code == 400
        assert response.json()['message'] == 'email: Email already in use.'

    def test_register_rejects_weak_password(self, api_client):
        response = api_client.post('/api/auth/register/', {
            'username': 'weak', 'password': '12345678', 'role': 'CUSTOMER',
        }, format='json')

        assert response.status_code == 400
        assert 'password' in response.json()['errors']

    @pytest.mark.parametrize('identifier', ['asha', 'asha@example.com', '+919800000001'])
    def test_login_with_any_identifier(self, api_client, customer, identifier):
        response = api_client.post('/api/auth/login/', {'identifier': identifier, 'password': PASSWORD},
                                   format='json')

        assert response.status_code == 200
        assert response.json()['data']['user']['role'] == 'CUSTOMER'

    def test_login_wrong_password(self, api_client, customer):
        response = api_client.post('/api/auth/login/', {'identifier': 'asha', 'password': 'nope'}, format='json')

        assert response.status_code == 400
        assert response.json() == {
            'success': False,
            'message': 'Invalid credentials.',
            'errors': {'non_field_errors': ['Invalid credentials.']},
        }

    def test_many_users_without_contact_details(self, db):
        first = User.objects.create_user(username='kiran', password=PASSWORD)
        second = User.objects.create_user(username='deepa', password=PASSWORD, email='', phone_number='')

        first.refresh_from_db()
        second.refresh_from_db()
        assert first.email is None and second.email is None
        assert second.phone_number is None

    def test_me(self, customer_client):
        data = customer_client.get('/api/auth/me/').json()['data']

        assert data['username'] == 'asha'
        assert data['pincode'] == '560038'


class TestWorkerSchedule:
    def test_update_timetable(self, worker_client, worker):
        timetable = {'Monday': [{'start': '08:00', 'end': '12:00'}, {'start': '14:00', 'end': '18:00'}]}

        response = worker_client.put('/api/worker/schedule/', {'timetable': timetable}, format='json')

        assert response.status_code == 200
        worker.refresh_from_db()
        assert worker.timetable == timetable

    def test_invalid_timetable(self, worker_client):
        response = worker_client.put('/api/worker/schedule/', {
            'timetable': {'Funday': [], 'Tuesday': [{'start': '18:00', 'end': '09:00'}]},
        }, format='json')

        assert response.status_code == 400

    def test_non_availability_lifecycle(self, worker_client, worker):
        response = worker_client.post('/api/worker/schedule/non-availability/', {
            'start_datetime': '2030-06-03T09:00:00+05:30',
            'end_datetime': '2030-06-03T13:00:00+05:30',
            'reason': 'Family function',
        }, format='json')
        assert response.status_code == 201
        period_id = response.json()['data']['id']

        schedule = worker_client.get('/api/worker/schedule/').json()['data']
        assert [period['id'] for period in schedule['non_availability']] == [period_id]

        response = worker_client.delete(f'/api/worker/schedule/non-availability/{period_id}/')
        assert response.status_code == 200
        assert not NonAvailability.objects.filter(worker=worker).exists()

    def test_non_availability_must_end_after_start(self, worker_client):
        response = worker_client.post('/api/worker/schedule/non-availability/', {
            'start_datetime': '2030-06-03T13:00:00+05:30',
            'end_datetime': '2030-06-03T09:00:00+05:30',
        }, format='json')

        assert response.status_code == 400
        assert response.json()['message'] == 'End time must be after start time.'


def test_validate_timetable_reports_each_problem():
    problems = validate_timetable({
        'Funday': [],
        'Monday': 'all day',
        'Tuesday': [{'start': '9'}],
        'Wednesday': [{'start': '10:00', 'end': '10:00'}],
        'Thursday': [{'start': '09:00', 'end': '17:00'}],
    })

    assert len(problems) == 4
    assert validate_timetable({'Friday': [{'start': '18:00', 'end': '24:00'}]}) == []
    assert len(validate_timetable({'Friday': [{'start': '18:00', 'end': '24:30'}]})) == 1
    assert validate_timetable('Monday') == ['Timetable must be an object keyed by day name']
