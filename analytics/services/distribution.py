"""
ANALYTICS App - Detailed Status Distribution

Histogram of jobs per detailed status, always reported over the fixed
status vocabulary used by the dashboard filters.
"""

from typing import Any, Dict, Optional

from django.db.models import Count

from jobs.models import Job, JobStatus


REQUIRED_STATUSES = (
    'ETA Date Pending',
    'Estimated Time of Arrival',
    'Gateway IGM Filed',
    'Discharged',
    'Rail Out',
    'BE Noted, Arrival Pending',
    'BE Noted, Clearance Pending',
    'PCV Done, Duty Payment Pending',
    'Custom Clearance Completed',
    'Billing Pending',
)


class StatusDistributionAnalytics:

    @staticmethod
    def build(year: str, importer: Optional[str] = None) -> Dict[str, Any]:
        qs = Job.objects.filter(year=year).exclude(status__iexact=JobStatus.CANCELLED)
        if importer:
            qs = qs.filter(importer=importer)

        counts = qs.values('detailed_status').annotate(count=Count('id')).order_by()

        distribution = {status: 0 for status in REQUIRED_STATUSES}
        unclassified = 0
        total = 0
        for entry in counts:
            total += entry['count']
            if entry['detailed_status'] in distribution:
                distribution[entry['detailed_status']] += entry['count']
            else:
                unclassified += entry['count']

        return {
            'year': year,
            'importer': importer or None,
            'total': total,
            'distribution': distribution,
            'unclassified': unclassified,
        }
