"""
EXIM Desk Main URL Configuration
"""

from django.contrib import admin
from django.urls import path, include
from drf_spectacular.views import SpectacularAPIView
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from core.health import health_check, readiness_check


# ===========================================
# ADMIN SITE CUSTOMIZATION
# ===========================================
admin.site.site_header = "EXIM Desk Back Office"
admin.site.site_title = "EXIM Desk Admin"
admin.site.index_title = "Jobs & Containers"


@api_view(['GET'])
@permission_classes([AllowAny])
def api_root(request):
    """API Root endpoint with available routes."""
    return Response({
        'name': 'EXIM Desk API',
        'version': '1.0.0',
        'endpoints': {
            'jobs': '/api/jobs/',
            'years': '/api/get-years/',
            'job': '/api/get-job/<year>/<job_no>/',
            'importer_job_counts': '/api/get-importer-jobs/<importer_url>/<year>/',
            'containers': {
                'summary': '/api/container-summary/',
                'details': '/api/container-details/',
            },
            'analytics': {
                'import_clearance': '/api/import-clearance/<year>/<month>/',
                'date_validity': '/api/date-validity/<year>/',
                'event_timeline': '/api/event-timeline/<year>/',
                'status_distribution': '/api/status-distribution/<year>/',
                'per_kg_cost': '/api/analytics/per-kg-cost/',
                'best_suppliers': '/api/analytics/best-suppliers/',
            },
            'schema': '/api/schema/',
        }
    })


urlpatterns = [
    # Admin
    path('admin/', admin.site.urls),

    # Monitoring
    path('health/', health_check, name='health'),
    path('health/ready/', readiness_check, name='health-ready'),

    # API Root & schema
    path('api/', api_root, name='api-root'),
    path('api/schema/', SpectacularAPIView.as_view(), name='api-schema'),

    # App URLs
    path('api/', include('jobs.urls')),
    path('api/', include('analytics.urls')),
]
