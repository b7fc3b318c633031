"""
ANALYTICS App - Import Clearance Report

Historical report of jobs cleared (Out of Charge) in a given month:
summary totals, TEU counts, and daily / weekly / commodity / location
breakdowns.

Pipeline:
    Job rows of the year with OOC, BE date and importer set
        → parse OOC date, keep the requested month
        → per-job container stats, TEUs, commodity category
        → group into summary + chart buckets
"""

import logging
import re
from typing import Any, Dict, Iterable, List, Optional

from jobs.models import Job, ContainerSize, TEU_BY_SIZE
from jobs.utils import parse_date

logger = logging.getLogger(__name__)


# ============================================
# CONSTANTS
# ============================================

SCRAP_PATTERN = re.compile(r'scrap|waste|recyclable', re.IGNORECASE)

COMMODITY_SCRAP = 'SCRAP'
COMMODITY_GENERAL = 'GENERAL'

NO_RATIO = 'N/A'


def empty_clearance_report() -> Dict[str, Any]:
    """Zero-filled report returned when no job matches."""
    return {
        'summary': {
            'totalJobs': 0,
            'totalContainers': 0,
            'totalTEUs': 0,
            'total20ft': 0,
            'total40ft': 0,
            'containerRatio': NO_RATIO,
        },
        'charts': {'daily': [], 'weekly': [], 'commodities': [], 'locations': []},
        'jobDetails': [],
    }


# ============================================
# PER-JOB DERIVED FIELDS
# ============================================

def container_stats(containers: Iterable) -> Dict[str, int]:
    """Count 20ft, 40ft and all containers of a job."""
    stats = {'ft20': 0, 'ft40': 0, 'total': 0}
    for container in containers:
        if container.size == ContainerSize.FT20:
            stats['ft20'] += 1
        elif container.size == ContainerSize.FT40:
            stats['ft40'] += 1
        stats['total'] += 1
    return stats


def count_teus(containers: Iterable) -> int:
    return sum(TEU_BY_SIZE.get(container.size, 0) for container in containers)


def container_size_breakdown(stats: Dict[str, int]) -> str:
    """
    Human readable size mix.

    Example: {'ft20': 2, 'ft40': 1} -> "2x20 + 1x40"
    """
    parts = []
    if stats['ft20'] > 0:
        parts.append(f"{stats['ft20']}x20")
    if stats['ft40'] > 0:
        parts.append(f"{stats['ft40']}x40")
    return ' + '.join(parts)


def commodity_category(description: Optional[str]) -> str:
    if description and SCRAP_PATTERN.search(description):
        return COMMODITY_SCRAP
    return COMMODITY_GENERAL


def week_of_year(day) -> int:
    """Sunday-based week number (0-53); days before the first Sunday are week 0."""
    return int(day.strftime('%U'))


def format_ratio(part: int, total: int) -> str:
    return f"{round(part / total, 2):g}"


# ============================================
# REPORT SERVICE
# ============================================

class ImportClearanceAnalytics:
    """
    Builds the monthly import clearance report.

    Filters are mutually exclusive in practice: the dashboard asks for
    all importers, one importer, or one IE code.
    """

    @staticmethod
    def get_queryset(year: str, importer: Optional[str] = None, ie_code: Optional[str] = None):
        qs = (
            Job.objects.filter(year=year)
            .exclude(out_of_charge='')
            .exclude(be_date='')
            .exclude(importer='')
        )
        if importer:
            qs = qs.filter(importer=importer)
        if ie_code:
            qs = qs.filter(ie_code_no=ie_code)
        return qs.prefetch_related('containers').order_by('job_no')

    @staticmethod
    def build_job_row(job: Job, ooc_date) -> Dict[str, Any]:
        """Project one cleared job into the report's row shape."""
        containers = list(job.containers.all())
        stats = container_stats(containers)
        return {
            'job_no': job.job_no,
            'be_no': job.be_no,
            'be_date': job.be_date,
            'out_of_charge': job.out_of_charge,
            'oocDay': ooc_date.day,
            'oocWeek': week_of_year(ooc_date),
            'location': job.custom_house,
            'importer': job.importer,
            'ie_code_no': job.ie_code_no,
            'commodity': job.description,
            'commodityCategory': commodity_category(job.description),
            'containerStats': stats,
            'containerSizeBreakdown': container_size_breakdown(stats),
            'totalContainers': stats['total'],
            'teus': count_teus(containers),
            'consignment_type': job.consignment_type,
            'cth_no': job.cth_no,
        }

    @classmethod
    def collect_rows(cls, year: str, month: int, importer: Optional[str] = None,
                     ie_code: Optional[str] = None) -> List[Dict[str, Any]]:
        rows = []
        for job in cls.get_queryset(year, importer=importer, ie_code=ie_code):
            ooc_date = parse_date(job.out_of_charge)
            if ooc_date is None or ooc_date.month != month:
                continue
            rows.append(cls.build_job_row(job, ooc_date))
        return rows

    @staticmethod
    def _group(rows: List[Dict[str, Any]], field: str) -> List[Dict[str, Any]]:
        buckets: Dict[Any, Dict[str, Any]] = {}
        for row in rows:
            bucket = buckets.setdefault(row[field], {'_id': row[field], 'count': 0, 'teus': 0})
            bucket['count'] += 1
            bucket['teus'] += row['teus']
        return list(buckets.values())

    @classmethod
    def summarize(cls, rows: List[Dict[str, Any]]) -> Dict[str, Any]:
        """Group job rows into the summary / charts / jobDetails payload."""
        if not rows:
            return empty_clearance_report()

        total_containers = sum(row['totalContainers'] for row in rows)
        total_20 = sum(row['containerStats']['ft20'] for row in rows)
        total_40 = sum(row['containerStats']['ft40'] for row in rows)

        if total_containers:
            ratio = (
                f"{format_ratio(total_20, total_containers)} (20ft) / "
                f"{format_ratio(total_40, total_containers)} (40ft)"
            )
        else:
            ratio = NO_RATIO

        return {
            'summary': {
                'totalJobs': len(rows),
                'totalContainers': total_containers,
                'totalTEUs': sum(row['teus'] for row in rows),
                'total20ft': total_20,
                'total40ft': total_40,
                'containerRatio': ratio,
            },
            'charts': {
                'daily': sorted(cls._group(rows, 'oocDay'), key=lambda b: b['_id']),
                'weekly': sorted(cls._group(rows, 'oocWeek'), key=lambda b: b['_id']),
                'commodities': cls._group(rows, 'commodityCategory'),
                'locations': cls._group(rows, 'location'),
            },
            'jobDetails': rows,
        }

    @classmethod
    def build(cls, year: str, month: int, importer: Optional[str] = None,
              ie_code: Optional[str] = None) -> Dict[str, Any]:
        """
        Generate the report.

        Args:
            year: Financial year (e.g. "25-26")
            month: Calendar month of the Out of Charge date (1-12)
            importer: Restrict to one importer name
            ie_code: Restrict to one IE code

        Returns:
            dict with summary, charts and jobDetails (zero-filled when empty)
        """
        rows = cls.collect_rows(year, month, importer=importer, ie_code=ie_code)
        logger.info(
            f"[ANALYTICS] Import clearance {year}/{month} "
            f"importer={importer or '-'} ie_code={ie_code or '-'}: {len(rows)} jobs"
        )
        return cls.summarize(rows)
