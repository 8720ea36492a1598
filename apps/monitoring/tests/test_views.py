from django.test import TestCase
from django.urls import reverse

from tests.factories import CompanyCarFactory


class HealthEndpointTests(TestCase):
    def test_health_reports_checks(self):
        CompanyCarFactory()
        resp = self.client.get(reverse("monitoring:health"))
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body["status"], "healthy")
        self.assertEqual(body["checks"]["database"]["status"], "healthy")
        self.assertEqual(body["checks"]["application"]["cars"], 1)

    def test_liveness_and_readiness(self):
        self.assertEqual(self.client.get(reverse("monitoring:liveness")).json()["status"], "alive")
        self.assertEqual(self.client.get(reverse("monitoring:readiness")).json()["status"], "ready")

    def test_metrics(self):
        resp = self.client.get(reverse("monitoring:metrics"))
        self.assertEqual(resp.status_code, 200)
        self.assertIn("car_rental_cars_total 0", resp.json()["metrics"])
