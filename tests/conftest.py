import pytest
from rest_framework.test import APIClient

from apps.users.models import User, ServiceAgent
from apps.skills.models import Skill, Service
from tests.factories import PASSWORD, make_customer, make_worker, make_worker_service, client_for


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def customer(db):
    return make_customer(
        'asha', last_name='Rao', email='asha@example.com', phone_number='+919800000001',
        area='Indiranagar', pincode='560038',
    )


@pytest.fixture
def worker(db):
    return make_worker('ravi', last_name='Kumar', email='ravi@example.com', phone_number='+919800000002',
                       area='Koramangala')


@pytest.fixture
def plumbing(db):
    return Skill.objects.create(name='Plumbing')


@pytest.fixture
def pipe_repair(plumbing):
    return Service.objects.create(skill=plumbing, name='Pipe Repair')


@pytest.fixture
def worker_service(worker, pipe_repair):
    return make_worker_service(worker, pipe_repair)


@pytest.fixture
def agent(db):
    user = User.objects.create_user(username='meena', password=PASSWORD, email='meena@example.com')
    ServiceAgent.objects.create(user=user, city='Bengaluru')
    return user


@pytest.fixture
def customer_client(customer):
    return client_for(customer)


@pytest.fixture
def worker_client(worker):
    return client_for(worker.user)


@pytest.fixture
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = str(tmp_path)
    return tmp_path
