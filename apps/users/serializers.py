from rest_framework import serializers
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
import logging

from core.constants import AVAILABILITY_STATUS_CHOICES
from .models import Customer, Worker, NonAvailability, validate_timetable

User = get_user_model()
logger = logging.getLogger(__name__)


class UserSerializer(serializers.ModelSerializer):
    role = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'username', 'first_name', 'last_name', 'email', 'phone_number', 'role',
            'house_no', 'street', 'area', 'city', 'state', 'pincode', 'preferred_language',
        ]
        read_only_fields = ['id', 'role']


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(
        max_length=128,
        write_only=True,
        min_length=8,
        error_messages={'min_length': 'Password must be at least 8 characters long.'}
    )
    role = serializers.ChoiceField(choices=['CUSTOMER', 'WORKER'])
    first_name = serializers.CharField(max_length=30, required=False, allow_blank=True)
    last_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_null=True)
    phone_number = serializers.CharField(max_length=15, required=False, allow_null=True)
    street = serializers.CharField(max_length=150, required=False, allow_blank=True)
    area = serializers.CharField(max_length=100, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    state = serializers.CharField(max_length=100, required=False, allow_blank=True)
    pincode = serializers.CharField(max_length=10, required=False, allow_blank=True)

    def validate_username(self, value):
        if User.objects.filter(username__iexact=value).exists():
            raise serializers.ValidationError("Username already in use.")
        return value

    def validate_email(self, value):
        if value and User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already in use.")
        return value

    def validate_phone_number(self, value):
        if not value:
            return value
        if not value.lstrip('+').isdigit():
            raise serializers.ValidationError("Invalid phone number format.")
        if User.objects.filter(phone_number=value).exists():
            raise serializers.ValidationError("Phone number already in use.")
        return value

    def validate(self, data):
        try:
            validate_password(data['password'])
        except DjangoValidationError as e:
            raise serializers.ValidationError({"password": list(e.messages)})
        return data

    @transaction.atomic
    def save(self):
        data = dict(self.validated_data)
        password = data.pop('password')
        role = data.pop('role')
        user = User(**data)
        user.set_password(password)
        user.save()
        if role == 'WORKER':
            Worker.objects.create(user=user)
        else:
            Customer.objects.create(user=user)
        logger.info(f"User {user.id} registered as {role}")
        return user


class LoginSerializer(serializers.Serializer):
    identifier = serializers.CharField(max_length=255, trim_whitespace=True)
    password = serializers.CharField(max_length=128, write_only=True)

    def validate(self, data):
        user = User.get_by_identifier(data['identifier'])
        if not user or not user.check_password(data['password']):
            raise serializers.ValidationError("Invalid credentials.")
        if not user.is_active:
            raise serializers.ValidationError("Account is disabled.")
        data['user'] = user
        return data


class NonAvailabilitySerializer(serializers.ModelSerializer):
    class Meta:
        model = NonAvailability
        fields = ['id', 'start_datetime', 'end_datetime', 'reason']

    def validate(self, data):
        if data['start_datetime'] >= data['end_datetime']:
            raise serializers.ValidationError("End time must be after start time.")
        return data


class WorkerScheduleSerializer(serializers.ModelSerializer):
    availability_status = serializers.ChoiceField(choices=AVAILABILITY_STATUS_CHOICES, required=False)
    non_availability = NonAvailabilitySerializer(many=True, read_only=True)

    class Meta:
        model = Worker
        fields = ['timetable', 'availability_status', 'non_availability']

    def validate_timetable(self, value):
        problems = validate_timetable(value)
        if problems:
            raise serializers.ValidationError(problems)
        return value
