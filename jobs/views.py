"""
Jobs App Views - Job lookups & container inventory API
"""

import logging

from django.db.models import Count
from rest_framework import viewsets, status, permissions
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from .models import Job, ContainerSize
from .serializers import JobSerializer, JobListSerializer
from .services import (
    JobLookupService, ContainerInventoryService,
    CONTAINER_GROUP_BY_OPTIONS, CONTAINER_STATES,
)

logger = logging.getLogger(__name__)


class JobViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Read-only job listing.

    Filter: ?year=25-26&importer=...&status=Pending
    Search: ?search=MSKU (job no, importer, BE no, supplier, container no)
    """

    queryset = Job.objects.all()
    permission_classes = [permissions.AllowAny]
    filterset_fields = ['year', 'importer', 'ie_code_no', 'status', 'detailed_status', 'custom_house']
    search_fields = ['job_no', 'importer', 'be_no', 'supplier_exporter', 'containers__container_number']
    ordering_fields = ['job_no', 'year', 'importer', 'created_at']

    def get_serializer_class(self):
        if self.action == 'list':
            return JobListSerializer
        return JobSerializer

    def get_queryset(self):
        qs = super().get_queryset()
        if self.action == 'list':
            return qs.annotate(container_count=Count('containers', distinct=True))
        return qs.prefetch_related('containers')


@api_view(['GET'])
@permission_classes([AllowAny])
def get_years(request):
    """Distinct financial years, most recent first."""
    try:
        return Response(JobLookupService.get_years())
    except Exception as e:
        logger.error(f"[JOBS API] Years list error: {e}")
        return Response(
            {'message': 'An error occurred while fetching years list.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@api_view(['GET'])
@permission_classes([AllowAny])
def get_job(request, year, job_no):
    """Single job with its containers."""
    job = Job.objects.filter(year=year, job_no=job_no).prefetch_related('containers').first()
    if job is None:
        return Response({'message': 'Job not found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(JobSerializer(job).data)


@api_view(['GET'])
@permission_classes([AllowAny])
def get_importer_job_counts(request, importer_url, year):
    """[total, pending, completed, cancelled] for an importer slug."""
    try:
        return Response(JobLookupService.get_importer_job_counts(importer_url, year))
    except Exception as e:
        logger.error(f"[JOBS API] Job counts error for {importer_url!r}: {e}")
        return Response(
            {'error': 'Error fetching job counts by importer'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


def _ie_code(request):
    return request.query_params.get('ie_code_no') or request.headers.get('X-IE-Code')


def _bad_request(message):
    return Response({'success': False, 'message': message}, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
@permission_classes([AllowAny])
def container_summary(request):
    """
    Arrived / in-transit container counts for an IE code.

    Query Parameters:
        year (str): Required, e.g. 25-26
        ie_code_no (str): Required (or X-IE-Code header)
        groupBy (str): status | size | month | port (default: status)
    """
    year = request.query_params.get('year')
    ie_code = _ie_code(request)
    group_by = request.query_params.get('groupBy', 'status')

    if not year:
        return _bad_request('Year parameter is required (25-26 or 24-25)')
    if not ie_code:
        return _bad_request('IE code is required for authorization')
    if group_by not in CONTAINER_GROUP_BY_OPTIONS:
        return _bad_request(
            f"Invalid groupBy parameter. Valid options: {', '.join(CONTAINER_GROUP_BY_OPTIONS)}"
        )

    try:
        result = ContainerInventoryService.summary(year, ie_code, group_by=group_by)
        return Response({
            'success': True,
            **result,
            'year_filter': year,
            'group_by': group_by,
            'last_updated': ContainerInventoryService.generated_at(),
        })
    except Exception as e:
        logger.error(f"[JOBS API] Container summary error: {e}")
        return Response(
            {'success': False, 'message': 'Failed to generate container summary'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@api_view(['GET'])
@permission_classes([AllowAny])
def container_details(request):
    """
    Container rows for an IE code in one state.

    Query Parameters:
        year (str): Required
        ie_code_no (str): Required (or X-IE-Code header)
        status (str): Required, arrived | transit
        size (str): Optional, 20 | 40
    """
    year = request.query_params.get('year')
    ie_code = _ie_code(request)
    state = request.query_params.get('status')
    size = request.query_params.get('size')

    if not year:
        return _bad_request('Year parameter is required (25-26 or 24-25)')
    if not ie_code:
        return _bad_request('IE code is required for authorization')
    if state not in CONTAINER_STATES:
        return _bad_request('Status parameter is required (arrived or transit)')
    if size and size not in ContainerSize.values:
        return _bad_request("Size parameter must be either '20' or '40'")

    try:
        rows = ContainerInventoryService.details(year, ie_code, state, size=size)
        return Response({
            'success': True,
            'data': rows,
            'total_count': len(rows),
            'filters': {
                'year': year,
                'status': state,
                'size': size or 'all',
                'ie_code': ie_code,
            },
            'last_updated': ContainerInventoryService.generated_at(),
        })
    except Exception as e:
        logger.error(f"[JOBS API] Container details error: {e}")
        return Response(
            {'success': False, 'message': 'Failed to generate container details'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
