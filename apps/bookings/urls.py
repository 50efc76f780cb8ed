from django.urls import path
from .views import (
    BookingCreateView, CustomerBookingListView, WorkerBookingListView, BookingDetailView,
    BookingStatusView, BookingReviewView, InitiateServiceView, VerifyServiceOtpView,
    CompleteServiceView, BookingPriceView, WorkerAvailabilityView, AvailableSlotsView,
)

urlpatterns = [
    path('', BookingCreateView.as_view(), name='booking_create'),
    path('customer/', CustomerBookingListView.as_view(), name='booking_customer_list'),
    path('worker/', WorkerBookingListView.as_view(), name='booking_worker_list'),

    # Worker calendar
    path('worker/<int:worker_id>/availability/', WorkerAvailabilityView.as_view(), name='booking_worker_availability'),
    path('available-slot/<int:worker_id>/', AvailableSlotsView.as_view(), name='booking_available_slots'),

    # Single booking
    path('<int:pk>/', BookingDetailView.as_view(), name='booking_detail'),
    path('<int:pk>/status/', BookingStatusView.as_view(), name='booking_status'),
    path('<int:pk>/review/', BookingReviewView.as_view(), name='booking_review'),
    path('<int:pk>/price/', BookingPriceView.as_view(), name='booking_price'),

    # Service handshake
    path('<int:pk>/initiate-service/', InitiateServiceView.as_view(), name='booking_initiate_service'),
    path('<int:pk>/verify-service-otp/', VerifyServiceOtpView.as_view(), name='booking_verify_service_otp'),
    path('<int:pk>/complete-service/', CompleteServiceView.as_view(), name='booking_complete_service'),
]
