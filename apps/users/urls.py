from django.urls import path
from .views import (
    AuthRegisterView, AuthLoginView, MeView,
    WorkerScheduleView, NonAvailabilityCreateView, NonAvailabilityDeleteView,
)

urlpatterns = [
    # Authentication
    path('auth/register/', AuthRegisterView.as_view(), name='auth_register'),
    path('auth/login/', AuthLoginView.as_view(), name='auth_login'),
    path('auth/me/', MeView.as_view(), name='auth_me'),

    # Worker schedule
    path('worker/schedule/', WorkerScheduleView.as_view(), name='worker_schedule'),
    path('worker/schedule/non-availability/', NonAvailabilityCreateView.as_view(), name='worker_non_availability'),
    path('worker/schedule/non-availability/<int:pk>/', NonAvailabilityDeleteView.as_view(), name='worker_non_availability_delete'),
]
