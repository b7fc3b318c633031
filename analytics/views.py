"""
ANALYTICS App - API Endpoints

Endpoints:
    GET /api/import-clearance/<year>/<month>/                    → Clearance report, all importers
    GET /api/import-clearance/<year>/<month>/<importer>/         → Clearance report, one importer
    GET /api/import-clearance/<year>/<month>/ie-code/<ie_code>/  → Clearance report, one IE code
    GET /api/date-validity/<year>/?importer=&date=               → Operational dashboard (cached)
    GET /api/event-timeline/<year>/?importer=&date=              → 30-day event timeline
    GET /api/status-distribution/<year>/?importer=               → Detailed status histogram
    GET /api/analytics/per-kg-cost/                              → Avg cost per HS code & supplier
    GET /api/analytics/best-suppliers/?hsCode=&supplier=         → Cheapest supplier per HS code
"""

import logging
from typing import Optional

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from jobs.utils import start_of_day
from .services import (
    ImportClearanceAnalytics,
    DateValidityAnalytics,
    EventTimelineAnalytics,
    StatusDistributionAnalytics,
    CostAnalytics,
    ALL_IMPORTERS,
)

logger = logging.getLogger(__name__)


def _importer_filter(request) -> Optional[str]:
    """Importer query parameter, None for the "All Importers" wildcard."""
    importer = (request.query_params.get('importer') or '').strip()
    if not importer or importer == ALL_IMPORTERS:
        return None
    return importer


def _bad_date_response():
    return Response(
        {'message': 'Invalid date parameter, expected YYYY-MM-DD'},
        status=status.HTTP_400_BAD_REQUEST
    )


# ============================================
# HISTORICAL: IMPORT CLEARANCE
# ============================================

@api_view(['GET'])
@permission_classes([AllowAny])
def import_clearance_all(request, year, month):
    """Monthly clearance report across all importers."""
    try:
        return Response(ImportClearanceAnalytics.build(year, month))
    except Exception as e:
        logger.error(f"[ANALYTICS API] Import clearance error: {e}")
        return Response(
            {'message': 'Failed to generate import clearance report.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@api_view(['GET'])
@permission_classes([AllowAny])
def import_clearance_by_importer(request, year, month, importer):
    """Monthly clearance report for a single importer."""
    try:
        return Response(ImportClearanceAnalytics.build(year, month, importer=importer))
    except Exception as e:
        logger.error(f"[ANALYTICS API] Import clearance error for importer {importer!r}: {e}")
        return Response(
            {'message': 'Failed to generate import clearance report for the importer.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@api_view(['GET'])
@permission_classes([AllowAny])
def import_clearance_by_ie_code(request, year, month, ie_code):
    """Monthly clearance report for a single IE code."""
    try:
        return Response(ImportClearanceAnalytics.build(year, month, ie_code=ie_code))
    except Exception as e:
        logger.error(f"[ANALYTICS API] Import clearance error for IE code {ie_code!r}: {e}")
        return Response(
            {'message': 'Failed to generate import clearance report for the IE code.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


# ============================================
# OPERATIONAL: DATE VALIDITY
# ============================================

@api_view(['GET'])
@permission_classes([AllowAny])
def date_validity(request, year, month=None):
    """
    Personalised operational dashboard.

    Query Parameters:
        importer (str): Required, exact importer name ("All Importers" is rejected)
        date (str): Reference day, YYYY-MM-DD (default: today)

    Response:
    {
        "summary": {"totalActiveJobs": 3, "totalActiveContainers": 5},
        "actionRequired": {
            "detention": {"onDetention": 1, "startsToday": 0, "startsSoon3Days": 1},
            "do_validity": {"expired": 0, "expiresToday": 1, "expiresSoon3Days": 0},
            "arrivals": {"arrivingToday": 2},
            "rail_out": {"overdue": 1, "completedToday": 0}
        },
        "details": [...]
    }
    """
    importer = (request.query_params.get('importer') or '').strip()
    if not importer or importer == ALL_IMPORTERS:
        return Response(
            {'message': 'Importer parameter is required for personalized analytics'},
            status=status.HTTP_400_BAD_REQUEST
        )

    try:
        today = start_of_day(request.query_params.get('date'))
    except ValueError:
        return _bad_date_response()

    try:
        return Response(DateValidityAnalytics.get_dashboard(year, importer, today))
    except Exception as e:
        logger.error(f"[ANALYTICS API] Date validity error for {importer!r}: {e}")
        return Response(
            {'message': 'Failed to generate personalized analytics data.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


# ============================================
# OPERATIONAL: TIMELINE & DISTRIBUTION
# ============================================

@api_view(['GET'])
@permission_classes([AllowAny])
def event_timeline(request, year):
    """Rolling 30-day timeline of OOC, arrival, rail-out and delivery events."""
    try:
        today = start_of_day(request.query_params.get('date'))
    except ValueError:
        return _bad_date_response()

    try:
        return Response(EventTimelineAnalytics.build(year, today, importer=_importer_filter(request)))
    except Exception as e:
        logger.error(f"[ANALYTICS API] Event timeline error: {e}")
        return Response(
            {'message': 'Failed to generate event timeline.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@api_view(['GET'])
@permission_classes([AllowAny])
def status_distribution(request, year):
    """Job count per detailed status, zero-filled over the fixed vocabulary."""
    try:
        return Response(StatusDistributionAnalytics.build(year, importer=_importer_filter(request)))
    except Exception as e:
        logger.error(f"[ANALYTICS API] Status distribution error: {e}")
        return Response(
            {'message': 'Failed to generate status distribution.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


# ============================================
# COST ANALYTICS
# ============================================

@api_view(['GET'])
@permission_classes([AllowAny])
def per_kg_cost(request):
    """Average per kg cost grouped by HS code and supplier."""
    try:
        return Response({'success': True, 'data': CostAnalytics.per_kg_cost()})
    except Exception as e:
        logger.error(f"[ANALYTICS API] Per kg cost error: {e}")
        return Response(
            {'success': False, 'error': 'Error generating analytics'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )


@api_view(['GET'])
@permission_classes([AllowAny])
def best_suppliers(request):
    """Lowest-cost supplier for each HS code."""
    try:
        data = CostAnalytics.best_suppliers(
            hs_code=request.query_params.get('hsCode'),
            supplier=request.query_params.get('supplier'),
        )
        return Response({'success': True, 'data': data})
    except Exception as e:
        logger.error(f"[ANALYTICS API] Best suppliers error: {e}")
        return Response(
            {'success': False, 'error': 'Error generating analytics'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR
        )
