from django.core.exceptions import PermissionDenied, ValidationError
from django.http import Http404
from django.test import SimpleTestCase
from rest_framework import exceptions

from apps.api.exceptions import api_exception_handler
from apps.core.exceptions import ConflictError


class ExceptionHandlerTests(SimpleTestCase):
    def handle(self, exc):
        return api_exception_handler(exc, {})

    def test_field_validation_error(self):
        resp = self.handle(ValidationError({'year': 'Year must be between 1900 and 2100'}))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.data['error'], 'Year must be between 1900 and 2100')
        self.assertEqual(resp.data['details'], {'year': ['Year must be between 1900 and 2100']})

    def test_plain_validation_error_has_no_details(self):
        resp = self.handle(ValidationError('Missing required fields'))
        self.assertEqual(resp.data, {'error': 'Missing required fields'})

    def test_domain_exceptions(self):
        self.assertEqual(self.handle(ConflictError()).status_code, 409)
        self.assertEqual(self.handle(PermissionDenied()).data['error'], 'Forbidden')
        self.assertEqual(self.handle(Http404('Car not found')).data['error'], 'Car not found')
        resp = self.handle(exceptions.NotAuthenticated())
        self.assertEqual((resp.status_code, resp.data['error']), (401, 'Unauthorized'))

    def test_throttled_sets_retry_after(self):
        resp = self.handle(exceptions.Throttled(wait=30))
        self.assertEqual(resp.status_code, 429)
        self.assertEqual(resp['Retry-After'], '30')

    def test_unexpected_error_is_logged(self):
        with self.assertLogs('apps.api.exceptions', level='ERROR'):
            resp = self.handle(RuntimeError('boom'))
        self.assertEqual(resp.status_code, 500)
        self.assertEqual(resp.data['error'], 'Internal server error')
