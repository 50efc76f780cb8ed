from django.urls import path
from .views import WorkerSearchView, SearchFiltersView, WorkerProfileView

urlpatterns = [
    path('search/', WorkerSearchView.as_view(), name='customer_search'),
    path('filters/', SearchFiltersView.as_view(), name='customer_search_filters'),
    path('worker/<int:worker_id>/', WorkerProfileView.as_view(), name='customer_worker_profile'),
]
