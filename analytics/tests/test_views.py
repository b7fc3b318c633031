"""
API tests for the analytics endpoints.
"""

from unittest.mock import patch

from django.test import TestCase

from jobs.models import Job, Container, JobStatus
from analytics.cache import analytics_cache
from analytics.services import REQUIRED_STATUSES
from analytics.services.costs import parse_cost


def make_job(job_no, year='25-26', containers=(), **fields):
    job = Job.objects.create(job_no=job_no, year=year, **fields)
    for position, container in enumerate(containers):
        Container.objects.create(job=job, position=position, **container)
    return job


# ==========================================
# Import Clearance
# ==========================================

class TestImportClearanceAPI(TestCase):

    def setUp(self):
        make_job('00001', importer='Acme', ie_code_no='IE1', be_date='2025-04-28',
                 out_of_charge='2025-05-02', custom_house='ICD Sabarmati',
                 containers=[{'container_number': 'MSKU0000001', 'size': '40'}])
        make_job('00002', importer='Beta', ie_code_no='IE2', be_date='2025-04-28',
                 out_of_charge='2025-05-20', custom_house='ICD Khodiyar')

    def test_all_importers(self):
        response = self.client.get('/api/import-clearance/25-26/5/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['summary']['totalJobs'], 2)
        self.assertEqual(response.json()['summary']['totalTEUs'], 2)

    def test_single_importer(self):
        response = self.client.get('/api/import-clearance/25-26/5/Beta/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual([r['job_no'] for r in response.json()['jobDetails']], ['00002'])

    def test_ie_code(self):
        response = self.client.get('/api/import-clearance/25-26/5/ie-code/IE1/')
        self.assertEqual(response.status_code, 200)
        self.assertEqual([r['job_no'] for r in response.json()['jobDetails']], ['00001'])

    def test_empty_result_is_not_an_error(self):
        response = self.client.get('/api/import-clearance/25-26/5/Nobody/')
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['summary']['totalJobs'], 0)
        self.assertEqual(data['summary']['containerRatio'], 'N/A')
        self.assertEqual(data['charts'], {'daily': [], 'weekly': [], 'commodities': [], 'locations': []})

    def test_database_error_returns_generic_500(self):
        with patch('analytics.views.ImportClearanceAnalytics.build', side_effect=RuntimeError('db down')):
            with self.assertLogs('analytics.views', level='ERROR'):
                response = self.client.get('/api/import-clearance/25-26/5/')
        self.assertEqual(response.status_code, 500)
        self.assertNotIn('db down', response.content.decode())


# ==========================================
# Date Validity
# ==========================================

class TestDateValidityAPI(TestCase):

    URL = '/api/date-validity/25-26/'

    def setUp(self):
        analytics_cache.clear()
        self.addCleanup(analytics_cache.clear)

        make_job('00001', importer='Acme', containers=[
            {
                'container_number': 'TODY0000001',
                'arrival_date': '2025-06-10',
                'do_validity_upto_container_level': '2025-06-09',
                'detention_from': '2025-06-12',
            },
            {
                'container_number': 'LATE0000002',
                'arrival_date': '2025-06-01',
                'do_validity_upto_container_level': '2025-06-10',
                'detention_from': '2025-06-05',
            },
        ])
        make_job('00002', importer='Acme', containers=[
            {'container_number': 'RAIL0000003', 'arrival_date': '2025-06-02',
             'container_rail_out_date': '2025-06-10'},
        ])
        # Completed jobs and other importers are not on the dashboard
        make_job('00003', importer='Acme', status=JobStatus.COMPLETED, containers=[
            {'container_number': 'DONE0000004', 'arrival_date': '2025-06-10'},
        ])
        make_job('00004', importer='Beta', containers=[
            {'container_number': 'BETA0000005', 'arrival_date': '2025-06-10'},
        ])

    def test_importer_required(self):
        response = self.client.get(self.URL)
        self.assertEqual(response.status_code, 400)
        self.assertEqual(
            response.json()['message'],
            'Importer parameter is required for personalized analytics',
        )

    def test_all_importers_rejected(self):
        response = self.client.get(self.URL, {'importer': 'All Importers'})
        self.assertEqual(response.status_code, 400)

    def test_invalid_date_rejected(self):
        response = self.client.get(self.URL, {'importer': 'Acme', 'date': 'tomorrow-ish'})
        self.assertEqual(response.status_code, 400)

    def test_dashboard_counts(self):
        response = self.client.get(self.URL, {'importer': 'Acme', 'date': '2025-06-10'})
        self.assertEqual(response.status_code, 200)
        data = response.json()

        self.assertEqual(data['summary'], {'totalActiveJobs': 2, 'totalActiveContainers': 3})
        self.assertEqual(data['actionRequired'], {
            'detention': {'onDetention': 1, 'startsToday': 0, 'startsSoon3Days': 1},
            'do_validity': {'expired': 1, 'expiresToday': 1, 'expiresSoon3Days': 0},
            'arrivals': {'arrivingToday': 1},
            'rail_out': {'overdue': 1, 'completedToday': 1},
        })

    def test_detail_rows(self):
        data = self.client.get(self.URL, {'importer': 'Acme', 'date': '2025-06-10'}).json()
        self.assertEqual(
            [row['container_number'] for row in data['details']],
            ['TODY0000001', 'LATE0000002', 'RAIL0000003'],
        )
        first = data['details'][0]
        self.assertEqual(first['arrival'], {'status': 'ARRIVING_TODAY', 'days': 0})
        self.assertEqual(first['do_validity']['status'], 'EXPIRED')
        self.assertEqual(first['rail_out'], {'status': 'NOT_SET', 'days': None})

    def test_month_segment_accepted(self):
        response = self.client.get('/api/date-validity/25-26/6/', {'importer': 'Acme', 'date': '2025-06-10'})
        self.assertEqual(response.status_code, 200)

    def test_unknown_importer_zero_filled(self):
        data = self.client.get(self.URL, {'importer': 'Nobody', 'date': '2025-06-10'}).json()
        self.assertEqual(data['summary'], {'totalActiveJobs': 0, 'totalActiveContainers': 0})
        self.assertEqual(data['details'], [])

    def test_repeat_request_served_from_cache(self):
        """A second identical request is answered without touching the database."""
        params = {'importer': 'Acme', 'date': '2025-06-10'}
        first = self.client.get(self.URL, params)

        Job.objects.filter(job_no='00001').update(status=JobStatus.COMPLETED)
        with self.assertNumQueries(0):
            second = self.client.get(self.URL, params)

        self.assertEqual(first.content, second.content)

    def test_different_day_not_shared(self):
        self.client.get(self.URL, {'importer': 'Acme', 'date': '2025-06-10'})
        data = self.client.get(self.URL, {'importer': 'Acme', 'date': '2025-06-20'}).json()
        self.assertEqual(data['actionRequired']['arrivals']['arrivingToday'], 0)


# ==========================================
# Event Timeline & Status Distribution
# ==========================================

class TestEventTimelineAPI(TestCase):

    URL = '/api/event-timeline/25-26/'

    def setUp(self):
        make_job('00001', importer='Acme', out_of_charge='2025-06-10', containers=[
            {'container_number': 'A', 'arrival_date': '2025-06-01', 'delivery_date': '2025-06-09',
             'container_rail_out_date': '2025-04-01'},
            {'container_number': 'B', 'arrival_date': '2025-06-01', 'container_rail_out_date': '2025-06-03'},
        ])
        make_job('00002', importer='Beta', containers=[
            {'container_number': 'C', 'arrival_date': '2025-05-12'},
        ])
        make_job('00003', importer='Acme', status=JobStatus.CANCELLED, out_of_charge='2025-06-10')

    def test_thirty_day_window(self):
        response = self.client.get(self.URL, {'date': '2025-06-10'})
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(len(data['timeline']), 30)
        self.assertEqual(data['range'], {'from': '2025-05-12', 'to': '2025-06-10'})
        self.assertEqual(data['timeline'][0]['date'], '2025-05-12')
        self.assertEqual(data['timeline'][-1]['date'], '2025-06-10')

    def test_event_counts(self):
        data = self.client.get(self.URL, {'date': '2025-06-10'}).json()
        self.assertEqual(data['totals'], {'ooc': 1, 'arrival': 3, 'railOut': 1, 'delivery': 1})

        by_date = {row['date']: row for row in data['timeline']}
        self.assertEqual(by_date['2025-06-01']['arrival'], 2)
        self.assertEqual(by_date['2025-06-01']['total'], 2)
        self.assertEqual(by_date['2025-06-10']['ooc'], 1)

    def test_importer_filter(self):
        data = self.client.get(self.URL, {'date': '2025-06-10', 'importer': 'Beta'}).json()
        self.assertEqual(data['totals'], {'ooc': 0, 'arrival': 1, 'railOut': 0, 'delivery': 0})

    def test_all_importers_means_no_filter(self):
        data = self.client.get(self.URL, {'date': '2025-06-10', 'importer': 'All Importers'}).json()
        self.assertEqual(data['totals']['arrival'], 3)

    def test_invalid_date_rejected(self):
        response = self.client.get(self.URL, {'date': 'whenever'})
        self.assertEqual(response.status_code, 400)


class TestStatusDistributionAPI(TestCase):

    URL = '/api/status-distribution/25-26/'

    def setUp(self):
        make_job('00001', importer='Acme', detailed_status='Discharged')
        make_job('00002', importer='Acme', detailed_status='Discharged')
        make_job('00003', importer='Beta', detailed_status='Billing Pending')
        make_job('00004', importer='Beta', detailed_status='Something Else')
        make_job('00005', importer='Acme', detailed_status='Discharged', status=JobStatus.CANCELLED)

    def test_distribution_zero_filled(self):
        response = self.client.get(self.URL)
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(list(data['distribution']), list(REQUIRED_STATUSES))
        self.assertEqual(len(data['distribution']), 10)
        self.assertEqual(data['distribution']['Discharged'], 2)
        self.assertEqual(data['distribution']['Billing Pending'], 1)
        self.assertEqual(data['distribution']['Rail Out'], 0)
        self.assertEqual(data['unclassified'], 1)
        self.assertEqual(data['total'], 4)

    def test_importer_filter(self):
        data = self.client.get(self.URL, {'importer': 'Acme'}).json()
        self.assertEqual(data['importer'], 'Acme')
        self.assertEqual(data['total'], 2)

    def test_empty_year(self):
        data = self.client.get('/api/status-distribution/30-31/').json()
        self.assertEqual(data['total'], 0)
        self.assertTrue(all(count == 0 for count in data['distribution'].values()))


# ==========================================
# Cost Analytics
# ==========================================

class TestCostAnalyticsAPI(TestCase):

    def setUp(self):
        rows = [
            ('84713010', 'Alpha Exports', '10'),
            ('84713010', 'Alpha Exports', '20'),
            ('84713010', 'Beta Supplies', '12'),
            ('72044900', 'Gamma Metals', '5'),
            ('72044900', 'Gamma Metals', 'n/a'),
            ('72044900', 'Gamma Metals', ''),
            ('72044900', 'Gamma Metals', 'inf'),
            ('72044900', 'Gamma Metals', '1e400'),
            ('72044900', 'Gamma Metals', '-3'),
        ]
        for index, (cth_no, supplier, cost) in enumerate(rows):
            make_job(f'{index:05d}', cth_no=cth_no, supplier_exporter=supplier, per_kg_cost=cost)

    def test_per_kg_cost(self):
        response = self.client.get('/api/analytics/per-kg-cost/')
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertTrue(data['success'])
        self.assertEqual(data['data'], [
            {'hs_code': '84713010', 'supplier': 'Alpha Exports', 'avg_per_kg_cost': 15.0, 'shipment_count': 2},
            {'hs_code': '84713010', 'supplier': 'Beta Supplies', 'avg_per_kg_cost': 12.0, 'shipment_count': 1},
            {'hs_code': '72044900', 'supplier': 'Gamma Metals', 'avg_per_kg_cost': 5.0, 'shipment_count': 1},
        ])

    def test_best_suppliers(self):
        data = self.client.get('/api/analytics/best-suppliers/').json()['data']
        self.assertEqual(data, [
            {'hs_code': '72044900', 'best_supplier': 'Gamma Metals', 'min_avg_per_kg_cost': 5.0, 'shipment_count': 1},
            {'hs_code': '84713010', 'best_supplier': 'Beta Supplies', 'min_avg_per_kg_cost': 12.0, 'shipment_count': 1},
        ])

    def test_best_suppliers_filters(self):
        data = self.client.get('/api/analytics/best-suppliers/', {'hsCode': '8471'}).json()['data']
        self.assertEqual([row['hs_code'] for row in data], ['84713010'])

        data = self.client.get('/api/analytics/best-suppliers/', {'supplier': 'alpha'}).json()['data']
        self.assertEqual(data[0]['best_supplier'], 'Alpha Exports')

    def test_error_response(self):
        with patch('analytics.views.CostAnalytics.per_kg_cost', side_effect=RuntimeError('boom')):
            response = self.client.get('/api/analytics/per-kg-cost/')
        self.assertEqual(response.status_code, 500)
        self.assertEqual(response.json(), {'success': False, 'error': 'Error generating analytics'})

    def test_non_finite_and_negative_costs_ignored(self):
        """Overflowing or infinite costs never reach the JSON response."""
        response = self.client.get('/api/analytics/per-kg-cost/')
        self.assertEqual(response.status_code, 200)
        gamma = [row for row in response.json()['data'] if row['supplier'] == 'Gamma Metals']
        self.assertEqual(gamma[0]['shipment_count'], 1)

    def test_parse_cost(self):
        self.assertEqual(parse_cost(' 12.5 '), 12.5)
        self.assertIsNone(parse_cost('inf'))
        self.assertIsNone(parse_cost('-inf'))
        self.assertIsNone(parse_cost('nan'))
        self.assertIsNone(parse_cost('1e400'))
        self.assertIsNone(parse_cost('0'))
        self.assertIsNone(parse_cost(None))
