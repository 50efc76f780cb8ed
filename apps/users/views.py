from rest_framework.views import APIView
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.permissions import IsAuthenticated
from drf_yasg.utils import swagger_auto_schema
from drf_yasg import openapi
from django.utils import timezone
import logging

from core.responses import success_response, error_response, validation_error_response
from core.utils import IsWorker
from .models import NonAvailability
from .serializers import (
    LoginSerializer, RegisterSerializer, UserSerializer,
    WorkerScheduleSerializer, NonAvailabilitySerializer,
)

logger = logging.getLogger(__name__)


def _auth_payload(user):
    token, created = Token.objects.get_or_create(user=user)
    return {"token": token.key, "user": UserSerializer(user).data}


class AuthRegisterView(APIView):
    permission_classes = []

    @swagger_auto_schema(
        operation_description="Register a customer or worker account and return an auth token.",
        request_body=RegisterSerializer,
        responses={201: 'Registered', 400: 'Bad Request'}
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        user = serializer.save()
        return success_response(_auth_payload(user), "Registration successful", status.HTTP_201_CREATED)


class AuthLoginView(APIView):
    permission_classes = []

    @swagger_auto_schema(
        request_body=LoginSerializer,
        responses={
            200: openapi.Response(
                description='Login successful',
                schema=openapi.Schema(
                    type=openapi.TYPE_OBJECT,
                    properties={
                        'success': openapi.Schema(type=openapi.TYPE_BOOLEAN),
                        'data': openapi.Schema(
                            type=openapi.TYPE_OBJECT,
                            properties={
                                'token': openapi.Schema(type=openapi.TYPE_STRING),
                                'user': openapi.Schema(type=openapi.TYPE_OBJECT),
                            }
                        ),
                    }
                )
            ),
            400: 'Invalid credentials'
        }
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        user = serializer.validated_data['user']
        if hasattr(user, 'worker'):
            user.worker.last_activity = timezone.now()
            user.worker.save(update_fields=['last_activity'])
        return success_response(_auth_payload(user), "Login successful")


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @swagger_auto_schema(operation_description="Current user profile", responses={200: UserSerializer})
    def get(self, request):
        return success_response(UserSerializer(request.user).data)


class WorkerScheduleView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(
        operation_description="Weekly timetable, availability status and non-availability periods of the current worker.",
        responses={200: WorkerScheduleSerializer}
    )
    def get(self, request):
        return success_response(WorkerScheduleSerializer(request.user.worker).data)

    @swagger_auto_schema(
        operation_description="Replace the weekly timetable and/or availability status.",
        request_body=openapi.Schema(
            type=openapi.TYPE_OBJECT,
            properties={
                'timetable': openapi.Schema(
                    type=openapi.TYPE_OBJECT,
                    description='{"Monday": [{"start": "09:00", "end": "17:00"}]}'
                ),
                'availability_status': openapi.Schema(type=openapi.TYPE_STRING, enum=['available', 'busy', 'off-duty']),
            },
        ),
        responses={200: WorkerScheduleSerializer, 400: 'Bad Request'}
    )
    def put(self, request):
        serializer = WorkerScheduleSerializer(request.user.worker, data=request.data, partial=True)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        serializer.save()
        logger.info(f"Worker {request.user.worker.id} updated schedule")
        return success_response(serializer.data, "Schedule updated successfully")


class NonAvailabilityCreateView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(request_body=NonAvailabilitySerializer, responses={201: NonAvailabilitySerializer})
    def post(self, request):
        serializer = NonAvailabilitySerializer(data=request.data)
        if not serializer.is_valid():
            return validation_error_response(serializer)
        serializer.save(worker=request.user.worker)
        return success_response(serializer.data, "Non-availability added", status.HTTP_201_CREATED)


class NonAvailabilityDeleteView(APIView):
    permission_classes = [IsAuthenticated, IsWorker]

    @swagger_auto_schema(responses={200: 'Deleted', 404: 'Not Found'})
    def delete(self, request, pk):
        try:
            period = NonAvailability.objects.get(pk=pk, worker=request.user.worker)
        except NonAvailability.DoesNotExist:
            return error_response("Non-availability period not found", status.HTTP_404_NOT_FOUND)
        period.delete()
        return success_response(message="Non-availability removed")
