from django.core.exceptions import PermissionDenied, ValidationError
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from apps.accounts.models import Manager
from apps.accounts.services import create_manager, managers_for_company, update_manager
from apps.audit.models import AuditLog
from tests.factories import AdminUserFactory, CompanyFactory, ManagerFactory, UserFactory


class ManagerServiceTests(TestCase):
    def setUp(self):
        self.company = CompanyFactory()
        self.owner = self.company.owner

    def test_owner_creates_manager_for_own_company(self):
        manager = create_manager(
            actor=self.owner, company=self.company, email=" New.Manager@Example.com ",
            password="Strong!Pass123", first_name="Somchai", last_name="Dee",
        )
        self.assertEqual(manager.company, self.company)
        self.assertEqual(manager.user.role, "manager")
        self.assertEqual(manager.user.username, "new.manager@example.com")
        self.assertTrue(manager.user.check_password("Strong!Pass123"))
        self.assertTrue(AuditLog.objects.filter(entity_type="manager", entity_id=str(manager.pk)).exists())

    def test_requires_email_and_password(self):
        with self.assertRaises(ValidationError):
            create_manager(actor=self.owner, company=self.company, email="", password="x")

    def test_duplicate_email_is_rejected(self):
        UserFactory(username="taken@example.com")
        with self.assertRaises(ValidationError):
            create_manager(actor=self.owner, company=self.company, email="TAKEN@example.com", password="x")

    def test_owner_of_other_company_is_forbidden(self):
        other = CompanyFactory()
        with self.assertRaises(PermissionDenied):
            create_manager(actor=other.owner, company=self.company, email="m@example.com", password="x")

    def test_manager_cannot_hire_managers(self):
        manager = ManagerFactory(company=self.company)
        with self.assertRaises(PermissionDenied):
            create_manager(actor=manager.user, company=self.company, email="m@example.com", password="x")

    def test_update_requires_is_active(self):
        manager = ManagerFactory(company=self.company)
        with self.assertRaises(ValidationError):
            update_manager(actor=self.owner, manager=manager)

    def test_deactivate_and_filter(self):
        active = ManagerFactory(company=self.company)
        inactive = ManagerFactory(company=self.company)
        update_manager(actor=self.owner, manager=inactive, is_active=False)

        self.assertEqual(list(managers_for_company(self.company, is_active=True)), [active])
        self.assertEqual(list(managers_for_company(self.company, is_active=False)), [inactive])


class ManagerApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.company = CompanyFactory()
        self.other = CompanyFactory()
        self.url = reverse("api:manager-list")

    def test_owner_lists_only_own_managers(self):
        mine = ManagerFactory(company=self.company)
        ManagerFactory(company=self.other)
        self.client.force_login(self.company.owner)
        resp = self.client.get(self.url)
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["totalCount"], 1)
        self.assertEqual(resp.json()["data"][0]["id"], mine.pk)

    def test_owner_creates_manager(self):
        self.client.force_login(self.company.owner)
        resp = self.client.post(self.url, {
            "email": "hire@example.com", "password": "Strong!Pass123", "name": "Nok", "surname": "Suk",
        }, format="json")
        self.assertEqual(resp.status_code, 201)
        self.assertTrue(Manager.objects.filter(company=self.company, user__email="hire@example.com").exists())

    def test_admin_must_name_company(self):
        self.client.force_login(AdminUserFactory())
        resp = self.client.post(self.url, {"email": "hire@example.com", "password": "x"}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "company_id is required")

    def test_cross_company_update_is_forbidden(self):
        foreign = ManagerFactory(company=self.other)
        self.client.force_login(self.company.owner)
        resp = self.client.patch(reverse("api:manager-detail", args=[foreign.pk]), {"is_active": False}, format="json")
        self.assertEqual(resp.status_code, 403)
        foreign.refresh_from_db()
        self.assertTrue(foreign.is_active)

    def test_managers_cannot_manage_managers(self):
        manager = ManagerFactory(company=self.company)
        self.client.force_login(manager.user)
        self.assertEqual(self.client.get(self.url).status_code, 403)
