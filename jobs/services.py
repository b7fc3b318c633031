"""
JOBS App - Job & Container Lookup Services

Read-only queries behind the importer-facing job screens:
year list, job counts per importer, and the arrived / in-transit
container inventory of an IE code.
"""

import logging
from typing import Any, Dict, List, Optional

from django.db.models import Count, Q
from django.utils import timezone

from .models import Job, Container, JobStatus, ContainerSize, format_importer
from .utils import parse_date, has_value, start_of_day

logger = logging.getLogger(__name__)


CONTAINER_GROUP_BY_OPTIONS = ('status', 'size', 'month', 'port')
CONTAINER_STATES = ('arrived', 'transit')
NOT_ARRIVED = 'Not Arrived'


class JobLookupService:
    """Year list and per-importer counters."""

    @staticmethod
    def get_years() -> List[str]:
        """Distinct financial years, most recent first."""
        return list(
            Job.objects.order_by('-year').values_list('year', flat=True).distinct()
        )

    @staticmethod
    def get_importer_job_counts(importer_url: str, year: str) -> List[int]:
        """
        Job counters for an importer slug.

        Returns:
            [total, pending, completed, cancelled]
        """
        counts = Job.objects.filter(
            year=year,
            importer_url__iexact=format_importer(importer_url),
        ).aggregate(
            total=Count('id'),
            pending=Count('id', filter=Q(status=JobStatus.PENDING)),
            completed=Count('id', filter=Q(status=JobStatus.COMPLETED)),
            cancelled=Count('id', filter=Q(status=JobStatus.CANCELLED)),
        )
        return [counts['total'], counts['pending'], counts['completed'], counts['cancelled']]


class ContainerInventoryService:
    """
    Arrived vs in-transit containers for an IE code.

    Only jobs not yet billed (empty bill_no) are considered, containers
    with an empty-offload date are finished and skipped.
    """

    @staticmethod
    def get_open_containers(year: str, ie_code: str, size: Optional[str] = None):
        sizes = [size] if size else [ContainerSize.FT20, ContainerSize.FT40]
        return (
            Container.objects.filter(
                job__year=year,
                job__ie_code_no=ie_code,
                job__bill_no='',
                size__in=sizes,
            )
            .select_related('job')
            .order_by('job__job_no', 'position')
        )

    @staticmethod
    def is_arrived(container: Container) -> bool:
        return has_value(container.arrival_date)

    @staticmethod
    def is_finished(container: Container) -> bool:
        return has_value(container.empty_container_offload_date)

    @classmethod
    def _group_key(cls, container: Container, group_by: str) -> Optional[str]:
        if group_by == 'month':
            arrival = parse_date(container.arrival_date)
            return arrival.strftime('%Y-%m') if arrival else NOT_ARRIVED
        if group_by == 'port':
            return container.job.port_of_reporting or 'Unknown'
        return None

    @classmethod
    def summary(cls, year: str, ie_code: str, group_by: str = 'status') -> Dict[str, Any]:
        """
        Count open containers by size and arrival state.

        The summary block has the same shape for every group_by; month
        and port additionally get a per-group breakdown.
        """
        counters = {'20_arrived': 0, '40_arrived': 0, '20_transit': 0, '40_transit': 0}
        breakdown: Dict[str, Dict[str, int]] = {}

        for container in cls.get_open_containers(year, ie_code):
            if cls.is_finished(container):
                continue
            state = 'arrived' if cls.is_arrived(container) else 'transit'
            counters[f"{container.size}_{state}"] += 1

            key = cls._group_key(container, group_by)
            if key is not None:
                group = breakdown.setdefault(key, {'arrived': 0, 'transit': 0})
                group[state] += 1

        total_arrived = counters['20_arrived'] + counters['40_arrived']
        total_transit = counters['20_transit'] + counters['40_transit']
        summary = {
            **counters,
            'total_arrived': total_arrived,
            'total_transit': total_transit,
            'grand_total': total_arrived + total_transit,
        }

        result = {'summary': summary}
        if group_by in ('month', 'port'):
            result['breakdown'] = dict(sorted(breakdown.items()))
        return result

    @classmethod
    def details(cls, year: str, ie_code: str, state: str,
                size: Optional[str] = None) -> List[Dict[str, Any]]:
        """
        Container rows in one state ('arrived' or 'transit').

        Arrived rows are sorted by arrival date (latest first), transit
        rows by job number.
        """
        today = start_of_day()
        rows = []

        for container in cls.get_open_containers(year, ie_code, size=size):
            if cls.is_finished(container):
                continue
            if cls.is_arrived(container) != (state == 'arrived'):
                continue

            job = container.job
            arrival = parse_date(container.arrival_date)
            rows.append({
                'job_no': job.job_no,
                'importer': job.importer,
                'supplier_exporter': job.supplier_exporter,
                'discharge_date': job.discharge_date,
                'port_of_reporting': job.port_of_reporting,
                'container_number': container.container_number,
                'container_size': container.size,
                'arrival_date': container.arrival_date,
                'delivery_date': container.delivery_date,
                'empty_container_offload_date': container.empty_container_offload_date,
                'container_rail_out_date': container.container_rail_out_date,
                'detention_from': container.detention_from,
                'container_status': state,
                'days_since_arrival': (today - arrival).days if arrival else None,
                '_arrival': arrival,
            })

        if state == 'arrived':
            rows.sort(key=lambda row: row['_arrival'] or today, reverse=True)
        else:
            rows.sort(key=lambda row: row['job_no'])

        for row in rows:
            del row['_arrival']
        logger.debug(f"[CONTAINERS] {len(rows)} {state} containers for {ie_code} ({year})")
        return rows

    @staticmethod
    def generated_at() -> str:
        return timezone.now().isoformat()
