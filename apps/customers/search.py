"""
Worker search for customers.

Query parameters are parsed leniently: blank or unparseable numbers mean
"no filter" and numeric bounds are clamped into their allowed range.
"""
import logging

from django.db.models import (
    Avg, Count, DecimalField, Exists, FloatField, IntegerField, Max, Min, OuterRef, Prefetch, Q, Subquery, Value,
)
from django.db.models.functions import Coalesce

from core.constants import (
    BOOKING_COMPLETED, VERIFICATION_APPROVED, SEARCH_SORT_CHOICES, PRICE_FILTER_RANGE, RATING_FILTER_RANGE,
)
from apps.users.models import Worker
from apps.skills.models import WorkerService
from apps.bookings.models import Booking, Review

logger = logging.getLogger(__name__)

SORT_ORDERS = {
    'rating': ('-avg_rating', '-total_ratings'),
    'price': ('min_price', '-avg_rating'),
    'distance': ('-join_date',),
    'relevance': ('-avg_rating', '-total_ratings', '-join_date'),
}


def parse_bounded(value, low, high):
    if value is None or str(value).strip() == '':
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return min(max(number, low), high)


class SearchFilters:
    def __init__(self, skill='', service='', min_price=None, max_price=None, min_rating=None,
                 max_rating=None, location='', worker_name='', worker_phone='', sort_by='relevance'):
        self.skill = skill
        self.service = service
        self.min_price = min_price
        self.max_price = max_price
        self.min_rating = min_rating
        self.max_rating = max_rating
        self.location = location
        self.worker_name = worker_name
        self.worker_phone = worker_phone
        self.sort_by = sort_by if sort_by in SEARCH_SORT_CHOICES else 'relevance'

    @classmethod
    def from_query_params(cls, params):
        def text(key):
            return (params.get(key) or '').strip()

        return cls(
            skill=text('skill'),
            service=text('service'),
            min_price=parse_bounded(params.get('min_price'), *PRICE_FILTER_RANGE),
            max_price=parse_bounded(params.get('max_price'), *PRICE_FILTER_RANGE),
            min_rating=parse_bounded(params.get('min_rating'), *RATING_FILTER_RANGE),
            max_rating=parse_bounded(params.get('max_rating'), *RATING_FILTER_RANGE),
            location=text('location'),
            worker_name=text('worker_name'),
            worker_phone=text('worker_phone'),
            sort_by=text('sort_by') or 'relevance',
        )


def _by_id_or_name(prefix, value):
    if value.isdigit():
        return Q(**{f'{prefix}_id': int(value)})
    return Q(**{f'{prefix}__name__icontains': value})


def matching_services(filters):
    services = WorkerService.objects.filter(is_active=True)
    if filters.skill:
        services = services.filter(_by_id_or_name('skill', filters.skill))
    if filters.service:
        services = services.filter(_by_id_or_name('service', filters.service))
    if filters.min_price is not None:
        services = services.filter(price__gte=filters.min_price)
    if filters.max_price is not None:
        services = services.filter(price__lte=filters.max_price)
    return services


def search_workers(filters):
    """Approved, unsuspended workers with at least one matching active service, annotated and sorted."""
    services = matching_services(filters)

    reviews = Review.objects.filter(
        booking__worker=OuterRef('pk'), booking__status=BOOKING_COMPLETED
    ).values('booking__worker')
    completed = Booking.objects.filter(
        worker=OuterRef('pk'), status=BOOKING_COMPLETED
    ).order_by().values('worker')
    prices = services.filter(worker=OuterRef('pk')).values('worker')

    workers = Worker.objects.filter(
        Exists(services.filter(worker=OuterRef('pk'))),
        verification__status=VERIFICATION_APPROVED,
        is_suspended=False,
    ).annotate(
        avg_rating=Coalesce(
            Subquery(reviews.annotate(value=Avg('rating')).values('value')[:1], output_field=FloatField()),
            Value(0.0),
        ),
        total_ratings=Coalesce(
            Subquery(reviews.annotate(value=Count('id')).values('value')[:1], output_field=IntegerField()),
            Value(0),
        ),
        total_jobs_done=Coalesce(
            Subquery(completed.annotate(value=Count('id')).values('value')[:1], output_field=IntegerField()),
            Value(0),
        ),
        min_price=Subquery(
            prices.annotate(value=Min('price')).values('value')[:1],
            output_field=DecimalField(max_digits=10, decimal_places=2),
        ),
        max_price=Subquery(
            prices.annotate(value=Max('price')).values('value')[:1],
            output_field=DecimalField(max_digits=10, decimal_places=2),
        ),
    ).select_related('user')

    if filters.location:
        workers = workers.filter(
            Q(user__city__icontains=filters.location)
            | Q(user__area__icontains=filters.location)
            | Q(user__street__icontains=filters.location)
        )
    if filters.worker_name:
        for term in filters.worker_name.split():
            workers = workers.filter(
                Q(user__first_name__icontains=term)
                | Q(user__last_name__icontains=term)
                | Q(user__username__icontains=term)
            )
    if filters.worker_phone:
        workers = workers.filter(user__phone_number__icontains=filters.worker_phone)

    if filters.min_rating is not None:
        workers = workers.filter(avg_rating__gte=filters.min_rating)
        if filters.min_rating > 0:
            workers = workers.filter(total_ratings__gt=0)
    if filters.max_rating is not None:
        workers = workers.filter(avg_rating__lte=filters.max_rating)

    workers = workers.prefetch_related(
        Prefetch(
            'services',
            queryset=services.select_related('skill', 'service').order_by('price'),
            to_attr='matching_services',
        )
    )
    return workers.order_by(*SORT_ORDERS[filters.sort_by], 'id')


def worker_result(worker, request=None):
    services = getattr(worker, 'matching_services', [])
    best = services[0] if services else None
    profile_pic = None
    if worker.profile_pic:
        profile_pic = request.build_absolute_uri(worker.profile_pic.url) if request else worker.profile_pic.url
    return {
        'worker_id': worker.id,
        'worker_name': worker.user.full_name,
        'worker_phone': worker.user.phone_number,
        'profile_pic': profile_pic,
        'city': worker.user.city,
        'area': worker.user.area,
        'worker_service_id': best.id if best else None,
        'service_name': best.service.name if best else None,
        'skill_name': best.skill.name if best else None,
        'price': best.price if best else None,
        'pricing_type': best.pricing_type if best else None,
        'estimated_duration': best.estimated_duration if best else None,
        'min_price': worker.min_price,
        'max_price': worker.max_price,
        'is_verified': True,
        'availability_status': worker.availability_status,
        'avg_rating': round(worker.avg_rating, 1),
        'total_ratings': worker.total_ratings,
        'total_jobs_done': worker.total_jobs_done,
        'services': [
            {
                'worker_service_id': service.id,
                'service_name': service.service.name,
                'skill_name': service.skill.name,
                'price': service.price,
                'pricing_type': service.pricing_type,
            }
            for service in services
        ],
    }
