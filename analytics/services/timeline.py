"""
ANALYTICS App - Rolling Event Timeline

Day-by-day counts of Out of Charge, arrival, rail-out and delivery
events over the last N days (30 by default), ending today.
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Dict, Optional

from django.conf import settings

from jobs.models import Job, JobStatus
from jobs.utils import parse_date

logger = logging.getLogger(__name__)


# Event type → response key
EVENT_TYPES = ('ooc', 'arrival', 'railOut', 'delivery')

CONTAINER_EVENT_FIELDS = {
    'arrival': 'arrival_date',
    'railOut': 'container_rail_out_date',
    'delivery': 'delivery_date',
}


class EventTimelineAnalytics:
    """Rolling timeline service."""

    @staticmethod
    def get_queryset(year: str, importer: Optional[str] = None):
        qs = Job.objects.filter(year=year).exclude(status__iexact=JobStatus.CANCELLED)
        if importer:
            qs = qs.filter(importer=importer)
        return qs.prefetch_related('containers')

    @classmethod
    def build(cls, year: str, today: datetime, importer: Optional[str] = None,
              days: Optional[int] = None) -> Dict[str, Any]:
        """
        Build the timeline.

        Args:
            year: Financial year
            today: Last day of the window, normalised to midnight
            importer: Optional importer filter
            days: Window length (defaults to EVENT_TIMELINE_DAYS)

        Returns:
            {
                "range": {"from": "2025-05-12", "to": "2025-06-10"},
                "timeline": [{"date": ..., "ooc": 0, "arrival": 2, ...}, ...],
                "totals": {"ooc": 0, "arrival": 2, "railOut": 0, "delivery": 1}
            }
        """
        days = days or settings.EVENT_TIMELINE_DAYS
        start = today - timedelta(days=days - 1)

        timeline = {}
        for offset in range(days):
            day = (start + timedelta(days=offset)).date()
            timeline[day] = {'date': day.isoformat(), **{event: 0 for event in EVENT_TYPES}}

        def record(raw_value, event):
            parsed = parse_date(raw_value)
            if parsed is None:
                return
            row = timeline.get(parsed.date())
            if row is not None:
                row[event] += 1

        for job in cls.get_queryset(year, importer):
            record(job.out_of_charge, 'ooc')
            for container in job.containers.all():
                for event, field in CONTAINER_EVENT_FIELDS.items():
                    record(getattr(container, field), event)

        rows = list(timeline.values())
        for row in rows:
            row['total'] = sum(row[event] for event in EVENT_TYPES)

        return {
            'range': {'from': start.date().isoformat(), 'to': today.date().isoformat()},
            'timeline': rows,
            'totals': {event: sum(row[event] for row in rows) for event in EVENT_TYPES},
        }
