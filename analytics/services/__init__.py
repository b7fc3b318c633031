"""
ANALYTICS App - Services

Each service reads jobs and returns a JSON-ready dict; none of them
writes to the database.
"""

from .clearance import ImportClearanceAnalytics, empty_clearance_report
from .costs import CostAnalytics
from .date_validity import DateValidityAnalytics, empty_date_validity_report, ALL_IMPORTERS
from .distribution import StatusDistributionAnalytics, REQUIRED_STATUSES
from .timeline import EventTimelineAnalytics

__all__ = [
    'ImportClearanceAnalytics',
    'empty_clearance_report',
    'CostAnalytics',
    'DateValidityAnalytics',
    'empty_date_validity_report',
    'ALL_IMPORTERS',
    'StatusDistributionAnalytics',
    'REQUIRED_STATUSES',
    'EventTimelineAnalytics',
]
