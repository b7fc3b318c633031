"""
ANALYTICS App - Operational Date-Validity Dashboard

Per-importer view of every active container: arrival, rail-out,
DO validity and detention state for a reference day, plus the counts
that need action today.

Results are memoized per (year, importer, day) in the analytics cache.
"""

import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from jobs.models import Container, JobStatus
from ..cache import AnalyticsCache, analytics_cache
from ..statuses import (
    derive_container_status,
    ArrivalStatus, RailOutStatus, DoValidityStatus, DetentionStatus,
)

logger = logging.getLogger(__name__)


ALL_IMPORTERS = 'All Importers'


def empty_date_validity_report() -> Dict[str, Any]:
    """Zero-filled dashboard returned when the importer has no active container."""
    return {
        'summary': {'totalActiveJobs': 0, 'totalActiveContainers': 0},
        'actionRequired': {
            'detention': {'onDetention': 0, 'startsToday': 0, 'startsSoon3Days': 0},
            'do_validity': {'expired': 0, 'expiresToday': 0, 'expiresSoon3Days': 0},
            'arrivals': {'arrivingToday': 0},
            'rail_out': {'overdue': 0, 'completedToday': 0},
        },
        'details': [],
    }


def _round_days(days: Optional[float]) -> Optional[float]:
    return round(days, 1) if days is not None else None


class DateValidityAnalytics:
    """Operational dashboard service."""

    @staticmethod
    def get_queryset(year: str, importer: str):
        return (
            Container.objects.filter(job__year=year, job__importer=importer)
            .exclude(job__status=JobStatus.COMPLETED)
            .select_related('job')
            .order_by('job__job_no', 'position')
        )

    @staticmethod
    def build_detail(container: Container, status) -> Dict[str, Any]:
        return {
            'job_no': container.job.job_no,
            'importer': container.job.importer,
            'container_number': container.container_number,
            'arrival': {
                'status': status.arrival,
                'days': _round_days(status.days_until_arrival),
            },
            'rail_out': {
                'status': status.rail_out,
                'days': _round_days(status.days_until_rail_out),
            },
            'do_validity': {
                'status': status.do_validity,
                'days': _round_days(status.days_until_do_expiry),
            },
            'detention': {
                'status': status.detention,
                'days': _round_days(status.days_until_detention),
            },
        }

    @classmethod
    def build(cls, year: str, importer: str, today: datetime) -> Dict[str, Any]:
        """
        Compute the dashboard without touching the cache.

        Args:
            year: Financial year (e.g. "25-26")
            importer: Exact importer name
            today: Reference day, normalised to midnight

        Returns:
            dict with summary, actionRequired and details
        """
        report = empty_date_validity_report()
        action = report['actionRequired']
        details: List[Dict[str, Any]] = []
        job_numbers = set()

        for container in cls.get_queryset(year, importer):
            status = derive_container_status(container, today)
            job_numbers.add(container.job.job_no)
            details.append(cls.build_detail(container, status))

            if status.arrival == ArrivalStatus.ARRIVING_TODAY:
                action['arrivals']['arrivingToday'] += 1

            if status.rail_out == RailOutStatus.OVERDUE:
                action['rail_out']['overdue'] += 1
            if status.is_rail_out_today:
                action['rail_out']['completedToday'] += 1

            if status.do_validity == DoValidityStatus.EXPIRED:
                action['do_validity']['expired'] += 1
            elif status.do_validity == DoValidityStatus.EXPIRES_TODAY:
                action['do_validity']['expiresToday'] += 1
            elif status.do_validity == DoValidityStatus.EXPIRES_SOON_3_DAYS:
                action['do_validity']['expiresSoon3Days'] += 1

            if status.detention == DetentionStatus.ON_DETENTION:
                action['detention']['onDetention'] += 1
            elif status.detention == DetentionStatus.STARTS_TODAY:
                action['detention']['startsToday'] += 1
            elif status.detention == DetentionStatus.STARTS_SOON_3_DAYS:
                action['detention']['startsSoon3Days'] += 1

        report['summary'] = {
            'totalActiveJobs': len(job_numbers),
            'totalActiveContainers': len(details),
        }
        report['details'] = details
        return report

    @classmethod
    def get_dashboard(cls, year: str, importer: str, today: datetime,
                      cache: AnalyticsCache = analytics_cache) -> Dict[str, Any]:
        """
        Cached entry point used by the API.

        Expired entries are swept first; a hit returns the stored payload
        without querying the database.
        """
        cache.sweep()
        key = AnalyticsCache.make_key(year, importer, today)

        cached = cache.get(key)
        if cached is not None:
            logger.debug(f"[ANALYTICS] Cache hit {key}")
            return cached

        logger.debug(f"[ANALYTICS] Cache miss {key}")
        return cache.set(key, cls.build(year, importer, today))
