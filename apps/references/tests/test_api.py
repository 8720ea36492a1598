from django.core.cache import cache
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from apps.audit.models import AuditLog
from apps.references.models import CarBrand, Citizenship, District, LocationSeason
from tests.factories import (
    AdminUserFactory, CarTemplateFactory, DistrictFactory, LocationFactory, UserFactory,
)


class ReferenceApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.admin = AdminUserFactory()

    def test_anonymous_gets_401(self):
        resp = self.client.get(reverse("api:car-brand-list"))
        self.assertEqual(resp.status_code, 401)
        self.assertEqual(resp.json()["error"], "Unauthorized")

    def test_any_user_reads_only_admin_writes(self):
        self.client.force_login(UserFactory())
        self.assertEqual(self.client.get(reverse("api:car-brand-list")).status_code, 200)
        resp = self.client.post(reverse("api:car-brand-list"), {"name": "Toyota"}, format="json")
        self.assertEqual(resp.status_code, 403)

        self.client.force_login(self.admin)
        resp = self.client.post(reverse("api:car-brand-list"), {"name": "Toyota"}, format="json")
        self.assertEqual(resp.status_code, 201)
        self.assertTrue(AuditLog.objects.filter(entity_type="car_brand", action="create").exists())

    def test_list_cache_is_invalidated_on_write(self):
        self.client.force_login(self.admin)
        CarBrand.objects.create(name="Honda")
        first = self.client.get(reverse("api:car-brand-list")).json()
        self.assertEqual([row["name"] for row in first["data"]], ["Honda"])

        CarBrand.objects.create(name="Mazda")
        second = self.client.get(reverse("api:car-brand-list")).json()
        self.assertEqual(second["totalCount"], 2)

    def test_districts_narrowed_by_location(self):
        phuket = LocationFactory(name="Phuket")
        krabi = LocationFactory(name="Krabi")
        DistrictFactory(location=phuket, name="Patong")
        DistrictFactory(location=krabi, name="Ao Nang")
        self.client.force_login(self.admin)

        resp = self.client.get(reverse("api:district-list"), {"location_id": phuket.pk})
        self.assertEqual([row["name"] for row in resp.json()["data"]], ["Patong"])

        resp = self.client.get(reverse("api:district-list"), {"location_id": "abc"})
        self.assertEqual(resp.status_code, 400)

    def test_datatable_request_is_paginated(self):
        for name in ("Audi", "BMW", "Chevrolet"):
            CarBrand.objects.create(name=name)
        self.client.force_login(self.admin)
        resp = self.client.get(reverse("api:car-brand-list"), {"page": 1, "pageSize": 2, "sortBy": "name",
                                                                "sortOrder": "desc"})
        body = resp.json()
        self.assertEqual(body["totalCount"], 3)
        self.assertEqual([row["name"] for row in body["data"]], ["Chevrolet", "BMW"])

    def test_delete_of_referenced_row_is_refused(self):
        template = CarTemplateFactory()
        self.client.force_login(self.admin)
        resp = self.client.delete(reverse("api:car-brand-detail", args=[template.brand_id]))
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "This record is in use and cannot be deleted")

    def test_delete_unreferenced_row(self):
        district = DistrictFactory()
        self.client.force_login(self.admin)
        resp = self.client.delete(reverse("api:district-detail", args=[district.pk]))
        self.assertEqual(resp.status_code, 204)
        self.assertFalse(District.objects.filter(pk=district.pk).exists())


class LocationSeasonApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        self.location = LocationFactory(name="Phuket")
        self.url = reverse("api:location-seasons")

    def test_location_is_required(self):
        self.client.force_login(UserFactory())
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "locationId is required")

    def test_admin_replaces_seasons(self):
        LocationSeason.objects.create(location=self.location, name="Old", start_date="01-01",
                                      end_date="12-31", price_coefficient=1)
        self.client.force_login(AdminUserFactory())
        resp = self.client.post(self.url, {
            "locationId": self.location.pk,
            "seasons": [
                {"name": "High", "start_date": "11-01", "end_date": "04-30", "price_coefficient": "1.50"},
                {"name": "Low", "start_date": "05-01", "end_date": "10-31", "price_coefficient": "0.80"},
            ],
        }, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(len(resp.json()["data"]), 2)
        self.assertEqual(LocationSeason.objects.filter(location=self.location).count(), 2)
        self.assertFalse(LocationSeason.objects.filter(name="Old").exists())

        resp = self.client.get(self.url, {"locationId": self.location.pk})
        self.assertEqual([row["name"] for row in resp.json()["data"]], ["Low", "High"])

    def test_bad_month_day_is_rejected_and_nothing_changes(self):
        LocationSeason.objects.create(location=self.location, name="Old", start_date="01-01",
                                      end_date="12-31", price_coefficient=1)
        self.client.force_login(AdminUserFactory())
        resp = self.client.post(self.url, {
            "locationId": self.location.pk,
            "seasons": [{"name": "Bad", "start_date": "13-01", "end_date": "04-30"}],
        }, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertTrue(LocationSeason.objects.filter(name="Old").exists())

    def test_non_admin_cannot_replace(self):
        self.client.force_login(UserFactory())
        resp = self.client.post(self.url, {"locationId": self.location.pk, "seasons": []}, format="json")
        self.assertEqual(resp.status_code, 403)


class CitizenshipApiTests(TestCase):
    def setUp(self):
        cache.clear()
        self.client = APIClient()
        for name, code in (("Thailand", "th"), ("Germany", "DE"), ("Georgia", "GE")):
            Citizenship.objects.create(name=name, code=code)

    def test_autocomplete_by_name_prefix(self):
        self.client.force_login(UserFactory())
        resp = self.client.get(reverse("api:citizenship-list"), {"search": "ge"})
        self.assertEqual([row["name"] for row in resp.json()["data"]], ["Georgia", "Germany"])

        resp = self.client.get(reverse("api:citizenship-list"))
        self.assertEqual(resp.json()["totalCount"], 3)
        self.assertEqual(resp.json()["data"][-1]["code"], "TH")

    def test_admin_adds_citizenship(self):
        self.client.force_login(AdminUserFactory())
        self.client.get(reverse("api:citizenship-list"))
        resp = self.client.post(reverse("api:citizenship-list"), {"name": "Laos", "code": "la"}, format="json")
        self.assertEqual(resp.status_code, 201)
        self.assertTrue(AuditLog.objects.filter(entity_type="citizenship", action="create").exists())
        self.assertEqual(self.client.get(reverse("api:citizenship-list")).json()["totalCount"], 4)
