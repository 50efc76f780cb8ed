from rest_framework.views import APIView
from rest_framework import status
from rest_framework.permissions import AllowAny
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from django.db.models import Min, Max

from core.constants import BOOKING_COMPLETED, DEFAULT_PRICE_RANGE, RATING_FILTER_RANGE, VERIFICATION_APPROVED
from core.responses import success_response, error_response
from core.utils import paginate
from apps.users.models import Worker
from apps.skills.models import Skill, WorkerService
from apps.skills.serializers import SkillSerializer, WorkerServiceSerializer
from apps.bookings.models import Review
from .search import SearchFilters, search_workers, worker_result


class WorkerSearchView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_description="Search verified workers by skill, service, price, rating, location or name.",
        manual_parameters=[
            openapi.Parameter('skill', openapi.IN_QUERY, type=openapi.TYPE_STRING, description='Skill id or name'),
            openapi.Parameter('service', openapi.IN_QUERY, type=openapi.TYPE_STRING, description='Service id or name'),
            openapi.Parameter('min_price', openapi.IN_QUERY, type=openapi.TYPE_NUMBER),
            openapi.Parameter('max_price', openapi.IN_QUERY, type=openapi.TYPE_NUMBER),
            openapi.Parameter('min_rating', openapi.IN_QUERY, type=openapi.TYPE_NUMBER),
            openapi.Parameter('max_rating', openapi.IN_QUERY, type=openapi.TYPE_NUMBER),
            openapi.Parameter('location', openapi.IN_QUERY, type=openapi.TYPE_STRING, description='City, area or street'),
            openapi.Parameter('worker_name', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('worker_phone', openapi.IN_QUERY, type=openapi.TYPE_STRING),
            openapi.Parameter('sort_by', openapi.IN_QUERY, type=openapi.TYPE_STRING,
                              enum=['relevance', 'rating', 'price', 'distance']),
            openapi.Parameter('page', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
            openapi.Parameter('limit', openapi.IN_QUERY, type=openapi.TYPE_INTEGER),
        ],
        responses={200: 'Matching workers with pagination'}
    )
    def get(self, request):
        filters = SearchFilters.from_query_params(request.query_params)
        workers, pagination = paginate(search_workers(filters), request)
        return success_response([worker_result(worker, request) for worker in workers], pagination=pagination)


class SearchFiltersView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_description="Skills with their services, and the price and rating ranges available for search.",
        responses={200: 'Available filters'}
    )
    def get(self, request):
        skills = Skill.objects.prefetch_related('services')
        prices = WorkerService.objects.filter(is_active=True).aggregate(min_price=Min('price'), max_price=Max('price'))
        min_price = prices['min_price'] if prices['min_price'] is not None else DEFAULT_PRICE_RANGE[0]
        max_price = prices['max_price'] if prices['max_price'] is not None else DEFAULT_PRICE_RANGE[1]
        return success_response({
            'skills': SkillSerializer(skills, many=True).data,
            'price_range': {'min_price': min_price, 'max_price': max_price},
            'rating_range': {'min_rating': RATING_FILTER_RANGE[0], 'max_rating': RATING_FILTER_RANGE[1]},
        })


class WorkerProfileView(APIView):
    permission_classes = [AllowAny]

    @swagger_auto_schema(
        operation_description="Public profile of a verified worker with services, portfolio and ratings.",
        responses={200: 'Worker profile', 404: 'Not Found'}
    )
    def get(self, request, worker_id):
        try:
            worker = Worker.objects.select_related('user').get(
                pk=worker_id, verification__status=VERIFICATION_APPROVED
            )
        except Worker.DoesNotExist:
            return error_response("Worker not found", status.HTTP_404_NOT_FOUND)

        services = worker.services.filter(is_active=True).select_related('skill', 'service') \
            .prefetch_related('portfolio_images')
        recent_reviews = Review.objects.filter(
            booking__worker=worker, booking__status=BOOKING_COMPLETED
        ).select_related('booking__customer').order_by('-reviewed_at')[:5]
        user = worker.user

        return success_response({
            'worker_id': worker.id,
            'name': user.full_name,
            'phone': user.phone_number,
            'email': user.email,
            'bio': worker.bio,
            'profile_pic': request.build_absolute_uri(worker.profile_pic.url) if worker.profile_pic else None,
            'address': {'area': user.area, 'city': user.city, 'state': user.state, 'pincode': user.pincode},
            'availability_status': worker.availability_status,
            'timetable': worker.timetable,
            'is_verified': True,
            'join_date': worker.join_date,
            'services': WorkerServiceSerializer(services, many=True, context={'request': request}).data,
            'rating_stats': worker.get_rating_stats(),
            'recent_reviews': [
                {
                    'rating': review.rating,
                    'comment': review.comment,
                    'reviewed_at': review.reviewed_at,
                    'customer_name': review.booking.customer.first_name or review.booking.customer.username,
                }
                for review in recent_reviews
            ],
            'total_completed_jobs': worker.bookings.filter(status=BOOKING_COMPLETED).count(),
        })
