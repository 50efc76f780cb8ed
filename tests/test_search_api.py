"""
Tests for worker search, the filter catalogue and public worker profiles.
"""
from decimal import Decimal

import pytest

from apps.bookings.models import Review
from apps.customers.search import SearchFilters, parse_bounded
from apps.skills.models import Skill, Service
from tests.factories import make_booking, make_customer, make_worker, make_worker_service


class TestParseBounded:
    @pytest.mark.parametrize('value, expected', [
        (None, None),
        ('', None),
        ('  ', None),
        ('abc', None),
        ('250', 250.0),
        ('-10', 0.0),
        ('999999', 100000.0),
    ])
    def test_price_bounds(self, value, expected):
        assert parse_bounded(value, 0, 100000) == expected

    def test_unknown_sort_falls_back_to_relevance(self):
        assert SearchFilters.from_query_params({'sort_by': 'cheapest'}).sort_by == 'relevance'


@pytest.mark.django_db
class TestWorkerSearch:
    """GET /api/customers/search/"""

    @pytest.fixture
    def market(self, customer, pipe_repair, plumbing):
        electrical = Skill.objects.create(name='Electrical')
        wiring = Service.objects.create(skill=electrical, name='House Wiring')

        ravi = make_worker('ravi', last_name='Kumar', city='Bengaluru', area='Koramangala',
                           phone_number='+919800000002')
        farah = make_worker('farah', last_name='Sheikh', city='Bengaluru', area='Whitefield')
        pending = make_worker('gopal', approved=False, city='Bengaluru')
        suspended = make_worker('lakshmi', city='Bengaluru')
        suspended.is_suspended = True
        suspended.save()
        make_worker('tara', city='Mysuru')

        ravi_pipes = make_worker_service(ravi, pipe_repair, price='800.00')
        make_worker_service(farah, pipe_repair, price='400.00')
        make_worker_service(farah, wiring, price='1200.00')
        make_worker_service(pending, pipe_repair, price='300.00')
        make_worker_service(suspended, pipe_repair, price='350.00')

        booking = make_booking(customer, ravi_pipes, status='COMPLETED', days_ahead=0)
        Review.objects.create(booking=booking, rating=5)
        return {'ravi': ravi, 'farah': farah}

    def search(self, api_client, **params):
        response = api_client.get('/api/customers/search/', params)
        assert response.status_code == 200
        return response.json()

    def test_only_approved_active_workers_with_matching_service(self, api_client, market):
        body = self.search(api_client, skill='plumb')

        ids = {item['worker_id'] for item in body['data']}
        assert ids == {market['ravi'].id, market['farah'].id}
        assert body['pagination']['total'] == 2

    def test_skill_by_id(self, api_client, market, plumbing):
        body = self.search(api_client, skill=str(plumbing.id))

        assert len(body['data']) == 2

    def test_relevance_puts_rated_worker_first(self, api_client, market):
        body = self.search(api_client, skill='Plumbing')

        first = body['data'][0]
        assert first['worker_id'] == market['ravi'].id
        assert first['avg_rating'] == 5.0
        assert first['total_ratings'] == 1
        assert first['total_jobs_done'] == 1

    def test_sort_by_price(self, api_client, market):
        body = self.search(api_client, skill='Plumbing', sort_by='price')

        assert [item['worker_id'] for item in body['data']] == [market['farah'].id, market['ravi'].id]
        assert Decimal(str(body['data'][0]['price'])) == Decimal('400')

    def test_min_rating_excludes_unrated(self, api_client, market):
        body = self.search(api_client, skill='Plumbing', min_rating='4')

        assert [item['worker_id'] for item in body['data']] == [market['ravi'].id]

    def test_price_range(self, api_client, market):
        body = self.search(api_client, skill='Plumbing', min_price='500', max_price='999999')

        assert [item['worker_id'] for item in body['data']] == [market['ravi'].id]
        assert Decimal(str(body['data'][0]['min_price'])) == Decimal('800')
        assert Decimal(str(body['data'][0]['max_price'])) == Decimal('800')

    def test_price_span_covers_every_matching_service(self, api_client, market):
        body = self.search(api_client, location='whitefield')

        result = body['data'][0]
        assert Decimal(str(result['min_price'])) == Decimal('400')
        assert Decimal(str(result['max_price'])) == Decimal('1200')

    def test_garbage_price_is_ignored(self, api_client, market):
        body = self.search(api_client, skill='Plumbing', min_price='cheap')

        assert len(body['data']) == 2

    def test_location_matches_area(self, api_client, market):
        body = self.search(api_client, location='whitefield')

        assert [item['worker_id'] for item in body['data']] == [market['farah'].id]

    def test_worker_name_and_phone(self, api_client, market):
        assert [w['worker_id'] for w in self.search(api_client, worker_name='Ravi Kumar')['data']] == \
            [market['ravi'].id]
        assert [w['worker_id'] for w in self.search(api_client, worker_phone='98000000')['data']] == \
            [market['ravi'].id]

    def test_results_carry_matching_services_only(self, api_client, market):
        body = self.search(api_client, service='Wiring')

        assert len(body['data']) == 1
        result = body['data'][0]
        assert result['service_name'] == 'House Wiring'
        assert [service['service_name'] for service in result['services']] == ['House Wiring']

    def test_pagination(self, api_client, market):
        body = self.search(api_client, skill='Plumbing', limit=1, page=2)

        assert len(body['data']) == 1
        assert body['pagination'] == {'page': 2, 'limit': 1, 'total': 2, 'pages': 2}


@pytest.mark.django_db
class TestSearchFilters:
    def test_catalogue_and_ranges(self, api_client, worker_service):
        response = api_client.get('/api/customers/filters/')

        data = response.json()['data']
        assert data['skills'][0]['name'] == 'Plumbing'
        assert data['price_range'] == {'min_price': 500.0, 'max_price': 500.0}
        assert data['rating_range'] == {'min_rating': 0, 'max_rating': 5}

    def test_default_price_range_without_services(self, api_client, db):
        data = api_client.get('/api/customers/filters/').json()['data']

        assert data['price_range'] == {'min_price': 0, 'max_price': 10000}


@pytest.mark.django_db
class TestWorkerProfile:
    def test_profile_with_rating_stats(self, api_client, customer, worker_service):
        for rating, day in ((5, 0), (4, 1), (5, 2)):
            booking = make_booking(customer, worker_service, status='COMPLETED', days_ahead=day)
            Review.objects.create(booking=booking, rating=rating, comment='Good work')
        make_booking(customer, worker_service, status='PENDING', days_ahead=3)

        response = api_client.get(f'/api/customers/worker/{worker_service.worker.id}/')

        data = response.json()['data']
        assert response.status_code == 200
        assert data['name'] == 'Ravi Kumar'
        assert data['total_completed_jobs'] == 3
        assert data['rating_stats'] == {
            'average_rating': 4.7,
            'total_ratings': 3,
            'rating_distribution': {'5': 2, '4': 1, '3': 0, '2': 0, '1': 0},
        }
        assert len(data['recent_reviews']) == 3
        assert data['services'][0]['id'] == worker_service.id

    def test_unverified_worker_hidden(self, api_client, db):
        worker = make_worker('gopal', approved=False)

        response = api_client.get(f'/api/customers/worker/{worker.id}/')

        assert response.status_code == 404
        assert response.json() == {'success': False, 'message': 'Worker not found'}

    def test_unrated_worker(self, api_client, worker):
        data = api_client.get(f'/api/customers/worker/{worker.id}/').json()['data']

        assert data['rating_stats']['average_rating'] == 0.0
        assert data['rating_stats']['total_ratings'] == 0


def test_search_needs_no_login(api_client, db):
    make_customer('walkin')
    response = api_client.get('/api/customers/search/')

    assert response.status_code == 200
    assert response.json()['data'] == []
