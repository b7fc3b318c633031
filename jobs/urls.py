"""
Jobs App URLs
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    JobViewSet,
    get_years, get_job, get_importer_job_counts,
    container_summary, container_details,
)

router = DefaultRouter()
router.register(r'jobs', JobViewSet, basename='job')

urlpatterns = [
    # Lookups used by the importer dashboard
    path('get-years/', get_years, name='get-years'),
    path('get-job/<str:year>/<str:job_no>/', get_job, name='get-job'),
    path('get-importer-jobs/<str:importer_url>/<str:year>/', get_importer_job_counts, name='importer-job-counts'),

    # Container inventory
    path('container-summary/', container_summary, name='container-summary'),
    path('container-details/', container_details, name='container-details'),

    # Router URLs
    path('', include(router.urls)),
]
