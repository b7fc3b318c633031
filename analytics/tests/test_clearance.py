"""
Tests for the import clearance report.
"""

from datetime import date

from django.test import SimpleTestCase, TestCase, override_settings

from jobs.models import Job, Container
from analytics.services import ImportClearanceAnalytics, empty_clearance_report
from analytics.services.clearance import (
    format_ratio, week_of_year, commodity_category, container_size_breakdown,
)


def make_job(job_no, sizes=(), year='25-26', **fields):
    job = Job.objects.create(job_no=job_no, year=year, **fields)
    for position, size in enumerate(sizes):
        Container.objects.create(job=job, position=position, container_number=f'C{job_no}{position}', size=size)
    return job


class TestClearanceHelpers(SimpleTestCase):

    def test_format_ratio(self):
        self.assertEqual(format_ratio(2, 3), '0.67')
        self.assertEqual(format_ratio(1, 2), '0.5')
        self.assertEqual(format_ratio(2, 2), '1')
        self.assertEqual(format_ratio(0, 2), '0')

    def test_week_of_year_is_sunday_based(self):
        self.assertEqual(week_of_year(date(2025, 1, 1)), 0)
        self.assertEqual(week_of_year(date(2025, 1, 5)), 1)
        self.assertEqual(week_of_year(date(2025, 5, 2)), 17)

    def test_commodity_category(self):
        self.assertEqual(commodity_category('HMS Scrap'), 'SCRAP')
        self.assertEqual(commodity_category('Recyclable PET flakes'), 'SCRAP')
        self.assertEqual(commodity_category('Steel coils'), 'GENERAL')
        self.assertEqual(commodity_category(None), 'GENERAL')

    def test_container_size_breakdown(self):
        self.assertEqual(container_size_breakdown({'ft20': 2, 'ft40': 1, 'total': 3}), '2x20 + 1x40')
        self.assertEqual(container_size_breakdown({'ft20': 0, 'ft40': 2, 'total': 2}), '2x40')
        self.assertEqual(container_size_breakdown({'ft20': 0, 'ft40': 0, 'total': 0}), '')


class TestImportClearanceReport(TestCase):

    def setUp(self):
        common = {'be_date': '2025-04-28'}
        make_job('00001', sizes=['20', '40', '40'], out_of_charge='2025-05-02', importer='Acme',
                 ie_code_no='IE1', custom_house='ICD Sabarmati', description='HMS Scrap', **common)
        make_job('00002', sizes=['20'], out_of_charge='2025-05-02', importer='Acme',
                 ie_code_no='IE1', custom_house='ICD Khodiyar', description='Steel coils', **common)
        make_job('00003', out_of_charge='2025-05-15', importer='Beta', ie_code_no='IE2',
                 custom_house='ICD Sabarmati', description='Plastic granules', **common)
        # Excluded: other month, missing BE date, not cleared, other year
        make_job('00004', sizes=['20'], out_of_charge='2025-06-01', importer='Acme', **common)
        make_job('00005', sizes=['20'], out_of_charge='2025-05-03', importer='Acme')
        make_job('00006', sizes=['20'], importer='Acme', **common)
        make_job('00001', year='24-25', sizes=['40'], out_of_charge='2024-05-02', importer='Acme', **common)

    def test_summary(self):
        report = ImportClearanceAnalytics.build('25-26', 5)
        self.assertEqual(report['summary'], {
            'totalJobs': 3,
            'totalContainers': 4,
            'totalTEUs': 6,
            'total20ft': 2,
            'total40ft': 2,
            'containerRatio': '0.5 (20ft) / 0.5 (40ft)',
        })

    def test_daily_and_weekly_buckets_sorted(self):
        charts = ImportClearanceAnalytics.build('25-26', 5)['charts']
        self.assertEqual(charts['daily'], [
            {'_id': 2, 'count': 2, 'teus': 6},
            {'_id': 15, 'count': 1, 'teus': 0},
        ])
        self.assertEqual([b['_id'] for b in charts['weekly']], [17, 19])

    def test_commodity_and_location_buckets(self):
        charts = ImportClearanceAnalytics.build('25-26', 5)['charts']
        self.assertEqual(charts['commodities'], [
            {'_id': 'SCRAP', 'count': 1, 'teus': 5},
            {'_id': 'GENERAL', 'count': 2, 'teus': 1},
        ])
        self.assertEqual(charts['locations'], [
            {'_id': 'ICD Sabarmati', 'count': 2, 'teus': 5},
            {'_id': 'ICD Khodiyar', 'count': 1, 'teus': 1},
        ])

    def test_job_details_row(self):
        row = ImportClearanceAnalytics.build('25-26', 5)['jobDetails'][0]
        self.assertEqual(row['job_no'], '00001')
        self.assertEqual(row['oocDay'], 2)
        self.assertEqual(row['teus'], 5)
        self.assertEqual(row['containerSizeBreakdown'], '1x20 + 2x40')
        self.assertEqual(row['commodityCategory'], 'SCRAP')

    def test_importer_filter_without_containers(self):
        report = ImportClearanceAnalytics.build('25-26', 5, importer='Beta')
        self.assertEqual(report['summary']['totalJobs'], 1)
        self.assertEqual(report['summary']['totalContainers'], 0)
        self.assertEqual(report['summary']['containerRatio'], 'N/A')

    def test_ie_code_filter(self):
        report = ImportClearanceAnalytics.build('25-26', 5, ie_code='IE1')
        self.assertEqual([r['job_no'] for r in report['jobDetails']], ['00001', '00002'])

    def test_no_match_returns_zero_filled_report(self):
        self.assertEqual(ImportClearanceAnalytics.build('25-26', 12), empty_clearance_report())
        self.assertEqual(ImportClearanceAnalytics.build('30-31', 5), empty_clearance_report())

    @override_settings(TIME_ZONE='Asia/Kolkata')
    def test_utc_timestamp_counted_in_local_month(self):
        """An OOC late on the last UTC day of May falls on 1 June locally."""
        make_job('00007', sizes=['40'], out_of_charge='2025-05-31T20:00:00Z', importer='Gamma',
                 custom_house='ICD Sabarmati', be_date='2025-05-28')

        may = ImportClearanceAnalytics.build('25-26', 5, importer='Gamma')
        june = ImportClearanceAnalytics.build('25-26', 6, importer='Gamma')

        self.assertEqual(may['summary']['totalJobs'], 0)
        self.assertEqual(june['summary']['totalJobs'], 1)
        self.assertEqual(june['jobDetails'][0]['oocDay'], 1)
        self.assertEqual(june['charts']['daily'], [{'_id': 1, 'count': 1, 'teus': 2}])
