from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from drf_yasg.views import get_schema_view
from drf_yasg import openapi

schema_view = get_schema_view(
    openapi.Info(
        title="WorkJunction API",
        default_version='v1',
        description="API for the WorkJunction local services marketplace",
    ),
    public=True,
)

urlpatterns = [
    path('api/docs/', schema_view.with_ui('swagger', cache_timeout=0), name='schema-swagger-ui'),
    path('admin/', admin.site.urls),
    path('api/', include('apps.users.urls')),
    path('api/bookings/', include('apps.bookings.urls')),
    path('api/customers/', include('apps.customers.urls')),
    path('api/payments/', include('apps.payments.urls')),
    path('api/worker/verification/', include('apps.verification.urls')),
] + static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
