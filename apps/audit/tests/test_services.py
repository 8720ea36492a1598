import json
from decimal import Decimal
from unittest import mock

from django.test import RequestFactory, TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from apps.audit.models import AuditLog
from apps.audit.services import get_client_ip, log_audit_action, snapshot
from tests.factories import AdminUserFactory, CompanyCarFactory, CompanyFactory, UserFactory


class ClientIpTests(TestCase):
    def setUp(self):
        self.factory = RequestFactory()

    def test_first_forwarded_address_wins(self):
        request = self.factory.get('/', HTTP_X_FORWARDED_FOR='203.0.113.7, 10.0.0.1', HTTP_X_REAL_IP='10.0.0.2')
        self.assertEqual(get_client_ip(request), '203.0.113.7')

    def test_real_ip_then_remote_addr(self):
        self.assertEqual(get_client_ip(self.factory.get('/', HTTP_X_REAL_IP='198.51.100.4')), '198.51.100.4')
        self.assertEqual(get_client_ip(self.factory.get('/', REMOTE_ADDR='192.0.2.9')), '192.0.2.9')
        self.assertIsNone(get_client_ip(None))


class LogAuditActionTests(TestCase):
    def test_snapshot_is_json_safe_and_hides_password(self):
        car = CompanyCarFactory(price_per_day=Decimal('1200.50'))
        data = snapshot(car)
        self.assertEqual(data['price_per_day'], '1200.50')
        self.assertIsInstance(data['created_at'], str)
        json.dumps(data)

        self.assertNotIn('password', snapshot(UserFactory()))

    def test_actor_and_company_come_from_request(self):
        company = CompanyFactory()
        request = RequestFactory().post('/', REMOTE_ADDR='192.0.2.1', HTTP_USER_AGENT='pytest')
        request.user = company.owner
        request.company = company

        entry = log_audit_action(request, 'company', company.pk, AuditLog.ACTION_UPDATE,
                                 {'name': 'Old'}, {'name': 'New'})

        self.assertEqual(entry.user, company.owner)
        self.assertEqual(entry.role, 'owner')
        self.assertEqual(entry.company, company)
        self.assertEqual(entry.entity_id, str(company.pk))
        self.assertEqual(entry.ip_address, '192.0.2.1')
        self.assertEqual(entry.user_agent, 'pytest')
        self.assertEqual(entry.after_state, {'name': 'New'})

    def test_failures_are_swallowed(self):
        with mock.patch.object(AuditLog.objects, 'create', side_effect=RuntimeError('db down')):
            with self.assertLogs('apps.audit.services', level='ERROR'):
                self.assertIsNone(log_audit_action(None, 'company', 1, AuditLog.ACTION_DELETE))


class AuditLogApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.company = CompanyFactory()
        log_audit_action(None, 'company_car', 5, AuditLog.ACTION_CREATE, company=self.company)
        log_audit_action(None, 'contract', 9, AuditLog.ACTION_UPDATE, company=self.company)

    def test_admin_only(self):
        self.client.force_login(self.company.owner)
        self.assertEqual(self.client.get(reverse('api:audit-log-list')).status_code, 403)

    def test_filter_by_entity_type(self):
        self.client.force_login(AdminUserFactory())
        resp = self.client.get(reverse('api:audit-log-list'),
                               {'filters': json.dumps({'entity_type': 'contract'})})
        self.assertEqual(resp.status_code, 200)
        rows = resp.json()['data']
        self.assertEqual([(row['entity_type'], row['entity_id']) for row in rows], [('contract', '9')])

    def test_audit_log_is_read_only(self):
        self.client.force_login(AdminUserFactory())
        entry = AuditLog.objects.filter(entity_type='contract').first()
        resp = self.client.delete(reverse('api:audit-log-detail', args=[entry.pk]))
        self.assertEqual(resp.status_code, 405)

    def test_impossible_date_filter_is_bad_request(self):
        self.client.force_login(AdminUserFactory())
        resp = self.client.get(reverse('api:audit-log-list'), {'from': '2026-13-40'})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()['details'], {'from': ['Invalid date']})
