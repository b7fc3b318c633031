"""
EXIM Desk Core Tests
====================

Tests for:
1. Health endpoints (liveness, readiness)
2. Security headers middleware
3. Request audit logging
4. Logging configuration
"""

import logging
from unittest.mock import patch

from django.conf import settings
from django.test import TestCase, override_settings


class TestHealthEndpoints(TestCase):
    """Tests for the monitoring endpoints."""

    def test_health_endpoint_accessible(self):
        """Health check should be accessible without auth."""
        response = self.client.get('/health/')
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['status'], 'ok')
        self.assertEqual(data['service'], 'exim-desk')

    def test_readiness_reports_database_and_cache(self):
        """Readiness check should report both dependencies."""
        response = self.client.get('/health/ready/')
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertEqual(data['status'], 'healthy')
        self.assertEqual(data['checks']['database']['status'], 'healthy')
        self.assertEqual(data['checks']['cache']['status'], 'healthy')

    def test_readiness_lists_loaded_years(self):
        from jobs.models import Job
        Job.objects.create(job_no='00001', year='25-26')
        data = self.client.get('/health/ready/').json()
        self.assertEqual(data['checks']['jobs']['years'], ['25-26'])

    def test_readiness_unavailable_when_cache_fails(self):
        """A failing dependency turns readiness into a 503."""
        with patch('core.health.cache') as broken_cache:
            broken_cache.get.return_value = None
            with self.assertLogs('exim.monitoring', level='ERROR'):
                response = self.client.get('/health/ready/')
        self.assertEqual(response.status_code, 503)
        data = response.json()
        self.assertEqual(data['status'], 'unhealthy')
        self.assertEqual(data['checks']['cache']['status'], 'unhealthy')
        self.assertEqual(data['checks']['database']['status'], 'healthy')

    def test_health_rejects_post(self):
        """Health endpoints only answer GET."""
        response = self.client.post('/health/')
        self.assertEqual(response.status_code, 405)


class TestSecurityMiddleware(TestCase):
    """Tests for security middleware behavior."""

    def test_security_headers_present(self):
        """Response should contain security headers."""
        response = self.client.get('/health/')
        self.assertEqual(response['X-Content-Type-Options'], 'nosniff')
        self.assertEqual(response['X-Frame-Options'], 'DENY')
        self.assertEqual(response['Referrer-Policy'], 'strict-origin-when-cross-origin')

    @override_settings(DEBUG=False)
    def test_hsts_header_outside_debug(self):
        """HSTS is only sent when DEBUG is off."""
        response = self.client.get('/health/')
        self.assertIn('max-age=', response['Strict-Transport-Security'])

    @override_settings(DEBUG=True)
    def test_no_hsts_in_debug(self):
        response = self.client.get('/health/')
        self.assertNotIn('Strict-Transport-Security', response)


class TestRequestAuditMiddleware(TestCase):
    """API failures are written to the audit logger."""

    def test_client_error_logged_as_warning(self):
        with self.assertLogs('exim.audit', level='WARNING') as logs:
            response = self.client.get('/api/date-validity/25-26/')
        self.assertEqual(response.status_code, 400)
        self.assertIn('AUDIT [WARN]', logs.output[0])
        self.assertIn('/api/date-validity/25-26/', logs.output[0])

    def test_non_api_paths_not_audited(self):
        with self.assertNoLogs('exim.audit', level='WARNING'):
            self.client.get('/health/missing/')


class TestLoggingConfiguration(TestCase):
    """App loggers follow EXIM_LOG_LEVEL instead of the root level."""

    def test_app_loggers_configured(self):
        for name in ('exim', 'jobs', 'analytics'):
            entry = settings.LOGGING['loggers'][name]
            self.assertEqual(entry['level'], settings.EXIM_LOG_LEVEL)
            self.assertFalse(entry['propagate'])

        service_logger = logging.getLogger('analytics.services.date_validity')
        self.assertEqual(
            service_logger.getEffectiveLevel(),
            logging.getLevelName(settings.EXIM_LOG_LEVEL),
        )
