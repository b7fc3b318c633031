"""
Tests for container status derivation.
"""

from datetime import datetime
from types import SimpleNamespace

from django.test import SimpleTestCase

from analytics.statuses import (
    derive_container_status, days_until,
    ArrivalStatus, RailOutStatus, DoValidityStatus, DetentionStatus,
)


TODAY = datetime(2025, 6, 10)


def status_of(**dates):
    return derive_container_status(SimpleNamespace(**dates), TODAY)


class TestDaysUntil(SimpleTestCase):

    def test_fractional_days(self):
        self.assertEqual(days_until(datetime(2025, 6, 12), TODAY), 2)
        self.assertEqual(days_until(datetime(2025, 6, 10, 18), TODAY), 0.75)
        self.assertEqual(days_until(datetime(2025, 6, 9), TODAY), -1)

    def test_unknown_event(self):
        self.assertIsNone(days_until(None, TODAY))


class TestArrivalStatus(SimpleTestCase):

    def test_thresholds(self):
        self.assertEqual(status_of(arrival_date='2025-06-09').arrival, ArrivalStatus.ARRIVED)
        self.assertEqual(status_of(arrival_date='2025-06-10').arrival, ArrivalStatus.ARRIVING_TODAY)
        self.assertEqual(status_of(arrival_date='2025-06-10T18:00').arrival, ArrivalStatus.ARRIVING_TODAY)
        self.assertEqual(status_of(arrival_date='2025-06-13').arrival, ArrivalStatus.ARRIVING_SOON_3_DAYS)
        self.assertEqual(status_of(arrival_date='2025-06-14').arrival, ArrivalStatus.PENDING_ARRIVAL)

    def test_missing_date_is_pending(self):
        status = status_of(arrival_date='')
        self.assertEqual(status.arrival, ArrivalStatus.PENDING_ARRIVAL)
        self.assertIsNone(status.days_until_arrival)


class TestRailOutStatus(SimpleTestCase):

    def test_past_rail_out_completed(self):
        self.assertEqual(status_of(container_rail_out_date='2025-06-01').rail_out, RailOutStatus.COMPLETED)

    def test_today_or_future_rail_out_scheduled(self):
        status = status_of(container_rail_out_date='2025-06-10')
        self.assertEqual(status.rail_out, RailOutStatus.SCHEDULED)
        self.assertTrue(status.is_rail_out_today)

    def test_arrived_without_rail_out_is_overdue(self):
        status = status_of(arrival_date='2025-06-01', container_rail_out_date='')
        self.assertEqual(status.rail_out, RailOutStatus.OVERDUE)
        self.assertFalse(status.is_rail_out_today)

    def test_not_arrived_without_rail_out_is_not_set(self):
        self.assertEqual(status_of(arrival_date='2025-06-10').rail_out, RailOutStatus.NOT_SET)
        self.assertEqual(status_of().rail_out, RailOutStatus.NOT_SET)


class TestDoValidityStatus(SimpleTestCase):

    def test_thresholds(self):
        field = 'do_validity_upto_container_level'
        self.assertEqual(status_of(**{field: '2025-06-09'}).do_validity, DoValidityStatus.EXPIRED)
        self.assertEqual(status_of(**{field: '2025-06-10'}).do_validity, DoValidityStatus.EXPIRES_TODAY)
        self.assertEqual(status_of(**{field: '2025-06-13'}).do_validity, DoValidityStatus.EXPIRES_SOON_3_DAYS)
        self.assertEqual(status_of(**{field: '2025-06-14'}).do_validity, DoValidityStatus.VALID)
        self.assertEqual(status_of(**{field: ''}).do_validity, DoValidityStatus.VALID)


class TestDetentionStatus(SimpleTestCase):

    def test_thresholds(self):
        self.assertEqual(status_of(detention_from='2025-06-01').detention, DetentionStatus.ON_DETENTION)
        self.assertEqual(status_of(detention_from='2025-06-10').detention, DetentionStatus.STARTS_TODAY)
        self.assertEqual(status_of(detention_from='2025-06-11').detention, DetentionStatus.STARTS_SOON_3_DAYS)
        self.assertEqual(status_of(detention_from='2025-07-01').detention, DetentionStatus.SAFE)
        self.assertEqual(status_of().detention, DetentionStatus.SAFE)

    def test_unparseable_date_treated_as_missing(self):
        with self.assertLogs('jobs.utils', level='WARNING'):
            status = status_of(detention_from='soon')
        self.assertEqual(status.detention, DetentionStatus.SAFE)
