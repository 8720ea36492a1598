from django.test import TestCase
from django.urls import reverse

from apps.super_admin.models import PlatformConfig
from tests.factories import AdminUserFactory, CompanyFactory


class MaintenanceModeMiddlewareTests(TestCase):
    def setUp(self):
        self.company = CompanyFactory()
        self.admin = AdminUserFactory()
        self.cfg = PlatformConfig.get_solo()
        self.cfg.maintenance_mode = True
        self.cfg.save()

    def test_api_requests_get_json_503(self):
        self.client.force_login(self.company.owner)
        resp = self.client.get(reverse("api:stats"))
        self.assertEqual(resp.status_code, 503)
        self.assertIn("maintenance", resp.json()["error"])

    def test_admin_passes(self):
        self.client.force_login(self.admin)
        resp = self.client.get(reverse("api:platform-config"))
        self.assertEqual(resp.status_code, 200)
        self.assertTrue(resp.json()["maintenance_mode"])

    def test_auth_and_health_stay_reachable(self):
        resp = self.client.post(reverse("api:login"),
                                {"email": self.company.owner.email, "password": "Strong!Pass123"},
                                content_type="application/json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(self.client.get(reverse("monitoring:liveness")).status_code, 200)

    def test_switched_off(self):
        self.cfg.maintenance_mode = False
        self.cfg.save()
        self.client.force_login(self.company.owner)
        self.assertEqual(self.client.get(reverse("api:stats")).status_code, 200)
