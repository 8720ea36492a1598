from django.core.exceptions import PermissionDenied
from django.http import Http404
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from apps.audit.models import AuditLog
from apps.super_admin.models import PlatformConfig
from apps.super_admin.services import enter_company, get_platform_overview, update_platform_config
from tests.factories import AdminUserFactory, CompanyFactory, ManagerFactory, UserFactory


class EnterCompanyTests(TestCase):
    def setUp(self):
        self.admin = AdminUserFactory()
        self.company = CompanyFactory(name="Andaman Wheels")

    def test_enter_records_audit_entry(self):
        result = enter_company(actor=self.admin, company_id=self.company.pk)
        self.assertTrue(result["adminMode"])
        self.assertEqual(result["redirectUrl"], f"/dashboard/companies/{self.company.pk}?admin_mode=true")

        entry = AuditLog.objects.get(entity_type="company", action=AuditLog.ACTION_LOGIN)
        self.assertEqual(entry.user, self.admin)
        self.assertEqual(entry.company, self.company)
        self.assertEqual(entry.after_state["company_name"], "Andaman Wheels")

    def test_deleted_company_not_found(self):
        self.company.deleted_at = timezone.now()
        self.company.save()
        with self.assertRaises(Http404):
            enter_company(actor=self.admin, company_id=self.company.pk)

    def test_only_admins(self):
        with self.assertRaises(PermissionDenied):
            enter_company(actor=self.company.owner, company_id=self.company.pk)


class PlatformConfigTests(TestCase):
    def test_update_is_audited(self):
        admin = AdminUserFactory()
        cfg = update_platform_config(actor=admin, maintenance_mode=True, support_email="help@example.com",
                                     ignored="x")
        self.assertTrue(PlatformConfig.get_solo().maintenance_mode)
        self.assertEqual(cfg.support_email, "help@example.com")
        self.assertTrue(AuditLog.objects.filter(entity_type="platform_config", action="update").exists())

    def test_non_admin_rejected(self):
        with self.assertRaises(PermissionDenied):
            update_platform_config(actor=UserFactory(), maintenance_mode=True)
        self.assertFalse(PlatformConfig.get_solo().maintenance_mode)

    def test_api_patch(self):
        client = APIClient()
        client.force_login(AdminUserFactory())
        resp = client.patch(reverse("api:platform-config"), {"announcement": "New season prices"}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["announcement"], "New season prices")


class PlatformOverviewTests(TestCase):
    def test_counts(self):
        active = CompanyFactory()
        CompanyFactory(is_active=False)
        CompanyFactory(deleted_at=timezone.now())
        ManagerFactory(company=active)
        AdminUserFactory()

        overview = get_platform_overview()

        self.assertEqual(overview["companies_total"], 3)
        self.assertEqual(overview["companies_active"], 1)
        self.assertEqual(overview["companies_inactive"], 1)
        self.assertEqual(overview["companies_deleted"], 1)
        self.assertEqual(overview["users_by_role"]["owner"], 3)
        self.assertEqual(overview["users_by_role"]["manager"], 1)
        self.assertEqual(overview["users_by_role"]["client"], 0)
        self.assertFalse(overview["maintenance_mode"])

    def test_admin_only_endpoint(self):
        client = APIClient()
        client.force_login(UserFactory())
        self.assertEqual(client.get(reverse("api:platform-overview")).status_code, 403)
        client.force_login(AdminUserFactory())
        self.assertEqual(client.get(reverse("api:platform-overview")).status_code, 200)
