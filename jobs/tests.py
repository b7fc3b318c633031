"""
EXIM Desk Jobs Tests
====================

Tests for:
1. Job model (importer slug, per-year job numbers, container TEUs)
2. Date parsing helpers
3. Lookup endpoints (years, single job, importer counters)
4. Container inventory (summary & details)
5. Job listing API
6. import_jobs management command
"""

import json
import os
import tempfile
from datetime import datetime
from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.db import IntegrityError
from django.test import TestCase, override_settings

from jobs.models import Job, Container, JobStatus, ContainerSize, format_importer
from jobs.services import ContainerInventoryService, JobLookupService
from jobs.utils import parse_date, start_of_day, has_value


def make_job(job_no, year='25-26', containers=(), **fields):
    """Create a job and its containers in entry order."""
    job = Job.objects.create(job_no=job_no, year=year, **fields)
    for position, container in enumerate(containers):
        Container.objects.create(job=job, position=position, **container)
    return job


class TestJobModel(TestCase):
    """Tests for Job and Container."""

    def test_format_importer_slug(self):
        """Importer names become lowercase underscore slugs without punctuation."""
        self.assertEqual(format_importer('Acme Metals Pvt. Ltd.'), 'acme_metals_pvt_ltd')
        self.assertEqual(format_importer('Alpha - Beta (India)'), 'alpha_beta_india')
        self.assertEqual(format_importer(''), '')

    def test_importer_url_set_on_save(self):
        job = make_job('00001', importer='Acme Metals Pvt. Ltd.')
        self.assertEqual(job.importer_url, 'acme_metals_pvt_ltd')

    def test_job_no_unique_per_year(self):
        """The same job number may exist once per financial year."""
        make_job('00001', year='24-25')
        make_job('00001', year='25-26')
        with self.assertRaises(IntegrityError):
            make_job('00001', year='25-26')

    def test_default_status_is_pending(self):
        job = make_job('00002')
        self.assertEqual(job.status, JobStatus.PENDING)

    def test_container_teus(self):
        job = make_job('00003', containers=[
            {'container_number': 'MSKU0000001', 'size': ContainerSize.FT20},
            {'container_number': 'MSKU0000002', 'size': ContainerSize.FT40},
            {'container_number': 'MSKU0000003', 'size': ''},
        ])
        self.assertEqual([c.teus for c in job.containers.all()], [1, 2, 0])


class TestDateUtils(TestCase):
    """Tests for the stored-date parsing helpers."""

    def test_parse_iso_date(self):
        self.assertEqual(parse_date('2025-03-15'), datetime(2025, 3, 15))

    def test_parse_empty_values(self):
        """Empty and missing values are absent, never the epoch."""
        self.assertIsNone(parse_date(None))
        self.assertIsNone(parse_date(''))
        self.assertIsNone(parse_date('   '))

    def test_parse_garbage_logs_warning(self):
        with self.assertLogs('jobs.utils', level='WARNING'):
            self.assertIsNone(parse_date('pending'))

    @override_settings(TIME_ZONE='Asia/Kolkata')
    def test_parse_aware_value_converted_to_local(self):
        """UTC timestamps land on the local calendar day."""
        self.assertEqual(parse_date('2025-03-15T20:00:00Z'), datetime(2025, 3, 16, 1, 30))

    def test_partial_dates_resolve_to_first_of_month(self):
        """Missing day or month parts never come from the current date."""
        self.assertEqual(parse_date('2025-06'), datetime(2025, 6, 1))
        self.assertEqual(parse_date('June 2025'), datetime(2025, 6, 1))
        self.assertEqual(parse_date('2025'), datetime(2025, 1, 1))

    def test_start_of_day_truncates_time(self):
        self.assertEqual(start_of_day('2025-03-15T17:45:00'), datetime(2025, 3, 15))

    def test_start_of_day_rejects_invalid(self):
        with self.assertRaises(ValueError):
            start_of_day('yesterday-ish')

    def test_has_value(self):
        self.assertTrue(has_value('2025-01-01'))
        self.assertFalse(has_value(''))
        self.assertFalse(has_value('  '))
        self.assertFalse(has_value(None))


# ==========================================
# Lookup Endpoints
# ==========================================

class TestJobLookups(TestCase):
    """Tests for years, single job and importer counters."""

    def setUp(self):
        self.job = make_job(
            '00010', importer='Acme Metals Pvt. Ltd.', ie_code_no='IE1',
            containers=[
                {'container_number': 'MSKU1111111', 'size': ContainerSize.FT20},
                {'container_number': 'MSKU2222222', 'size': ContainerSize.FT40},
            ],
        )
        make_job('00011', importer='Acme Metals Pvt. Ltd.', status=JobStatus.COMPLETED)
        make_job('00012', importer='Acme Metals Pvt. Ltd.', status=JobStatus.CANCELLED)
        make_job('00001', year='24-25', importer='Acme Metals Pvt. Ltd.')

    def test_get_years_most_recent_first(self):
        response = self.client.get('/api/get-years/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), ['25-26', '24-25'])

    def test_get_job_with_containers_in_order(self):
        response = self.client.get('/api/get-job/25-26/00010/')
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['importer_url'], 'acme_metals_pvt_ltd')
        self.assertEqual(
            [c['container_number'] for c in data['container_nos']],
            ['MSKU1111111', 'MSKU2222222'],
        )

    def test_get_job_not_found(self):
        response = self.client.get('/api/get-job/25-26/99999/')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json(), {'message': 'Job not found'})

    def test_importer_job_counts(self):
        """Counters are [total, pending, completed, cancelled] for one year."""
        response = self.client.get('/api/get-importer-jobs/acme_metals_pvt_ltd/25-26/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), [3, 1, 1, 1])

    def test_importer_job_counts_accepts_display_name(self):
        self.assertEqual(
            JobLookupService.get_importer_job_counts('Acme Metals Pvt. Ltd.', '24-25'),
            [1, 1, 0, 0],
        )

    def test_importer_job_counts_unknown_importer(self):
        self.assertEqual(JobLookupService.get_importer_job_counts('nobody', '25-26'), [0, 0, 0, 0])


# ==========================================
# Container Inventory
# ==========================================

class TestContainerInventory(TestCase):
    """Tests for the arrived / in-transit container views."""

    def setUp(self):
        make_job(
            '00020', ie_code_no='IE1', port_of_reporting='INNSA1', importer='Acme',
            containers=[
                {'container_number': 'ARRV0000020', 'size': '20', 'arrival_date': '2025-03-01'},
                {'container_number': 'TRAN0000040', 'size': '40'},
                {'container_number': 'DONE0000040', 'size': '40', 'arrival_date': '2025-02-01',
                 'empty_container_offload_date': '2025-02-20'},
            ],
        )
        make_job(
            '00021', ie_code_no='IE1', port_of_reporting='INMUN1', importer='Acme',
            containers=[
                {'container_number': 'ARRV0000040', 'size': '40', 'arrival_date': '2025-04-10'},
            ],
        )
        # Billed job: ignored
        make_job('00022', ie_code_no='IE1', bill_no='B-1', containers=[
            {'container_number': 'BILL0000020', 'size': '20', 'arrival_date': '2025-03-01'},
        ])
        # Other IE code: ignored
        make_job('00023', ie_code_no='IE2', containers=[
            {'container_number': 'OTHR0000020', 'size': '20'},
        ])

    def test_summary_counts(self):
        result = ContainerInventoryService.summary('25-26', 'IE1')
        self.assertEqual(result['summary'], {
            '20_arrived': 1, '40_arrived': 1,
            '20_transit': 0, '40_transit': 1,
            'total_arrived': 2, 'total_transit': 1, 'grand_total': 3,
        })
        self.assertNotIn('breakdown', result)

    def test_summary_by_month(self):
        result = ContainerInventoryService.summary('25-26', 'IE1', group_by='month')
        self.assertEqual(result['breakdown'], {
            '2025-03': {'arrived': 1, 'transit': 0},
            '2025-04': {'arrived': 1, 'transit': 0},
            'Not Arrived': {'arrived': 0, 'transit': 1},
        })

    def test_summary_by_port(self):
        result = ContainerInventoryService.summary('25-26', 'IE1', group_by='port')
        self.assertEqual(result['breakdown'], {
            'INMUN1': {'arrived': 1, 'transit': 0},
            'INNSA1': {'arrived': 1, 'transit': 1},
        })

    def test_details_arrived_latest_first(self):
        rows = ContainerInventoryService.details('25-26', 'IE1', 'arrived')
        self.assertEqual([r['container_number'] for r in rows], ['ARRV0000040', 'ARRV0000020'])
        expected_days = (start_of_day() - datetime(2025, 4, 10)).days
        self.assertEqual(rows[0]['days_since_arrival'], expected_days)

    def test_details_transit_with_size(self):
        rows = ContainerInventoryService.details('25-26', 'IE1', 'transit', size='40')
        self.assertEqual(len(rows), 1)
        self.assertEqual(rows[0]['container_number'], 'TRAN0000040')
        self.assertIsNone(rows[0]['days_since_arrival'])

    def test_summary_endpoint_with_header(self):
        """The IE code may come from the X-IE-Code header."""
        response = self.client.get('/api/container-summary/?year=25-26', HTTP_X_IE_CODE='IE1')
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data['success'])
        self.assertEqual(data['summary']['grand_total'], 3)
        self.assertEqual(data['group_by'], 'status')
        self.assertEqual(data['year_filter'], '25-26')
        self.assertIn('last_updated', data)

    def test_summary_endpoint_requires_year_and_ie_code(self):
        response = self.client.get('/api/container-summary/?ie_code_no=IE1')
        self.assertEqual(response.status_code, 400)
        self.assertFalse(response.json()['success'])

        response = self.client.get('/api/container-summary/?year=25-26')
        self.assertEqual(response.status_code, 400)

    def test_summary_endpoint_rejects_unknown_group(self):
        response = self.client.get('/api/container-summary/?year=25-26&ie_code_no=IE1&groupBy=colour')
        self.assertEqual(response.status_code, 400)
        self.assertIn('status, size, month, port', response.json()['message'])

    def test_details_endpoint(self):
        response = self.client.get(
            '/api/container-details/?year=25-26&ie_code_no=IE1&status=arrived&size=20'
        )
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['total_count'], 1)
        self.assertEqual(data['data'][0]['container_number'], 'ARRV0000020')
        self.assertEqual(data['filters']['size'], '20')

    def test_details_endpoint_validates_parameters(self):
        base = '/api/container-details/?year=25-26&ie_code_no=IE1'
        self.assertEqual(self.client.get(base).status_code, 400)
        self.assertEqual(self.client.get(base + '&status=lost').status_code, 400)
        self.assertEqual(self.client.get(base + '&status=arrived&size=45').status_code, 400)


# ==========================================
# Job Listing API
# ==========================================

class TestJobListAPI(TestCase):
    """Tests for /api/jobs/."""

    def setUp(self):
        make_job('00030', importer='Acme', containers=[
            {'container_number': 'MSKU3030303', 'size': '20'},
            {'container_number': 'MSKU3131313', 'size': '40'},
        ])
        make_job('00031', importer='Beta Traders', status=JobStatus.COMPLETED)
        make_job('00001', year='24-25', importer='Acme')

    def test_list_filters_by_year(self):
        response = self.client.get('/api/jobs/?year=25-26')
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['count'], 2)
        counts = {row['job_no']: row['container_count'] for row in data['results']}
        self.assertEqual(counts, {'00030': 2, '00031': 0})

    def test_list_filters_by_status(self):
        response = self.client.get('/api/jobs/?status=Completed')
        self.assertEqual([r['job_no'] for r in response.json()['results']], ['00031'])

    def test_search_by_container_number(self):
        response = self.client.get('/api/jobs/?search=MSKU3131313')
        data = response.json()
        self.assertEqual(data['count'], 1)
        self.assertEqual(data['results'][0]['job_no'], '00030')

    def test_retrieve_includes_containers(self):
        job = Job.objects.get(year='25-26', job_no='00030')
        response = self.client.get(f'/api/jobs/{job.id}/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(len(response.json()['container_nos']), 2)

    def test_read_only(self):
        response = self.client.post('/api/jobs/', {'job_no': '1'})
        self.assertEqual(response.status_code, 405)


# ==========================================
# import_jobs Command
# ==========================================

class TestImportJobsCommand(TestCase):
    """Tests for loading a JSON export."""

    def write_export(self, payload):
        fd, path = tempfile.mkstemp(suffix='.json')
        with os.fdopen(fd, 'w', encoding='utf-8') as fh:
            json.dump(payload, fh)
        self.addCleanup(os.remove, path)
        return path

    def run_import(self, path, **options):
        out = StringIO()
        call_command('import_jobs', path, stdout=out, **options)
        return out.getvalue()

    def test_import_creates_jobs_and_containers(self):
        path = self.write_export([{
            'job_no': '00100',
            'year': '25-26',
            'importer': 'Acme Metals Pvt. Ltd.',
            'status': 'Pending',
            'out_of_charge': {'$date': '2025-05-02'},
            'net_weight_calculator': {'per_kg_cost': '12.5'},
            'container_nos': [
                {'container_number': 'MSKU0000100', 'size': '20', 'emptyContainerOffLoadDate': '2025-05-10'},
                {'container_number': 'MSKU0000101', 'size': '40'},
            ],
        }])
        output = self.run_import(path)

        job = Job.objects.get(year='25-26', job_no='00100')
        self.assertEqual(job.importer_url, 'acme_metals_pvt_ltd')
        self.assertEqual(job.out_of_charge, '2025-05-02')
        self.assertEqual(job.per_kg_cost, '12.5')
        containers = list(job.containers.all())
        self.assertEqual([c.container_number for c in containers], ['MSKU0000100', 'MSKU0000101'])
        self.assertEqual(containers[0].empty_container_offload_date, '2025-05-10')
        self.assertEqual(containers[1].rms, 'no')
        self.assertIn('1 created', output)

    def test_reimport_updates_and_replaces_containers(self):
        doc = {
            'job_no': '00101', 'year': '25-26', 'importer': 'Acme',
            'container_nos': [{'container_number': 'A'}, {'container_number': 'B'}],
        }
        self.run_import(self.write_export([doc]))

        doc['detailed_status'] = 'Arrived, BE Note Pending'
        doc['container_nos'] = [{'container_number': 'C'}]
        output = self.run_import(self.write_export({'jobs': [doc]}))

        job = Job.objects.get(year='25-26', job_no='00101')
        self.assertEqual(job.detailed_status, 'Arrived, BE Note Pending')
        self.assertEqual([c.container_number for c in job.containers.all()], ['C'])
        self.assertIn('1 updated', output)

    def test_year_option_and_skipped_documents(self):
        path = self.write_export([
            {'job_no': '00102'},
            {'importer': 'No Number'},
            'not a job',
        ])
        output = self.run_import(path, year='24-25')
        self.assertTrue(Job.objects.filter(year='24-25', job_no='00102').exists())
        self.assertIn('2 skipped', output)

    def test_unknown_status_falls_back_to_pending(self):
        self.run_import(self.write_export([{'job_no': '00103', 'year': '25-26', 'status': 'Archived'}]))
        self.assertEqual(Job.objects.get(job_no='00103').status, JobStatus.PENDING)

    def test_invalid_json_raises(self):
        fd, path = tempfile.mkstemp(suffix='.json')
        with os.fdopen(fd, 'w') as fh:
            fh.write('{not json')
        self.addCleanup(os.remove, path)
        with self.assertRaises(CommandError):
            self.run_import(path)
