from rest_framework import serializers
from django.utils import timezone

from .models import Booking, Review


class ReviewSerializer(serializers.ModelSerializer):
    class Meta:
        model = Review
        fields = ['rating', 'comment', 'reviewed_at']
        read_only_fields = ['reviewed_at']


class BookingPaymentSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    status = serializers.CharField()
    payment_type = serializers.CharField()
    order_id = serializers.CharField()
    transaction_id = serializers.CharField()
    transaction_date = serializers.DateTimeField(allow_null=True)


class BookingSerializer(serializers.ModelSerializer):
    customer_id = serializers.IntegerField(source='customer.id', read_only=True)
    customer_full_name = serializers.CharField(source='customer.full_name', read_only=True)
    worker_id = serializers.IntegerField(source='worker.id', read_only=True)
    worker_name = serializers.CharField(source='worker.user.full_name', read_only=True)
    worker_phone = serializers.CharField(source='worker.user.phone_number', read_only=True)
    service_name = serializers.SerializerMethodField()
    skill_name = serializers.SerializerMethodField()
    payment = serializers.SerializerMethodField()
    review = serializers.SerializerMethodField()
    available_actions = serializers.ListField(child=serializers.CharField(), read_only=True)
    service_stage = serializers.CharField(read_only=True, allow_null=True)

    class Meta:
        model = Booking
        fields = [
            'id', 'customer_id', 'customer_full_name', 'worker_id', 'worker_name', 'worker_phone',
            'worker_service', 'service_name', 'skill_name', 'status', 'booking_date', 'booking_time', 'price',
            'customer_name', 'customer_phone', 'customer_address', 'customer_pincode', 'notes',
            'cancellation_reason', 'decline_reason',
            'service_initiated', 'service_initiated_at', 'service_started_at', 'service_completed_at',
            'payment', 'review', 'available_actions', 'service_stage', 'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_service_name(self, obj):
        return obj.worker_service.service.name if obj.worker_service_id else None

    def get_skill_name(self, obj):
        return obj.worker_service.skill.name if obj.worker_service_id else None

    def get_payment(self, obj):
        payment = getattr(obj, 'payment', None)
        return BookingPaymentSerializer(payment).data if payment else None

    def get_review(self, obj):
        review = getattr(obj, 'review', None)
        return ReviewSerializer(review).data if review else None


class BookingCreateSerializer(serializers.Serializer):
    worker_id = serializers.IntegerField()
    worker_service_id = serializers.IntegerField()
    booking_date = serializers.DateField()
    booking_time = serializers.RegexField(r'^([01]\d|2[0-3]):[0-5]\d$', error_messages={'invalid': 'Time must be HH:MM.'})
    customer_name = serializers.CharField(max_length=150, required=False, allow_blank=True)
    customer_phone = serializers.CharField(max_length=15, required=False, allow_blank=True)
    customer_address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    customer_pincode = serializers.CharField(max_length=10, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate_booking_date(self, value):
        if value < timezone.localdate():
            raise serializers.ValidationError("Booking date cannot be in the past.")
        return value


class BookingStatusSerializer(serializers.Serializer):
    status = serializers.CharField(max_length=20)
    reason = serializers.CharField(required=False, allow_blank=True, default='')


class BookingPriceSerializer(serializers.Serializer):
    new_price = serializers.DecimalField(max_digits=10, decimal_places=2)
    reason = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_new_price(self, value):
        if value <= 0:
            raise serializers.ValidationError("Valid price is required.")
        return value


class ReviewCreateSerializer(serializers.Serializer):
    rating = serializers.IntegerField(
        min_value=1,
        max_value=5,
        error_messages={
            'min_value': 'Rating must be between 1 and 5.',
            'max_value': 'Rating must be between 1 and 5.',
        }
    )
    comment = serializers.CharField(required=False, allow_blank=True, default='')
