from django.core.exceptions import PermissionDenied, ValidationError
from django.test import TestCase
from django.urls import reverse
from rest_framework.test import APIClient

from apps.accounts.services import create_client, placeholder_email, search_clients, update_client
from tests.factories import CompanyFactory, ManagerFactory, UserFactory


class ClientServiceTests(TestCase):
    def setUp(self):
        self.manager = ManagerFactory().user

    def test_placeholder_email_prefers_phone_digits(self):
        self.assertEqual(placeholder_email("+66 81-234-5678"), "66812345678@noemail.com")
        self.assertEqual(placeholder_email("", "AB 123 456"), "ab123456@noemail.com")

    def test_create_without_email_uses_placeholder(self):
        client = create_client(actor=self.manager, phone="+66 81 234 5678", first_name=" Anna ")
        self.assertEqual(client.email, "66812345678@noemail.com")
        self.assertEqual(client.role, "client")
        self.assertEqual(client.first_name, "Anna")
        self.assertFalse(client.has_usable_password())

    def test_short_phone_is_rejected(self):
        with self.assertRaises(ValidationError) as ctx:
            create_client(actor=self.manager, phone="12345")
        self.assertIn("phone", ctx.exception.message_dict)

    def test_duplicate_email_is_rejected(self):
        UserFactory(username="dup@example.com")
        with self.assertRaises(ValidationError):
            create_client(actor=self.manager, phone="0812345678", email="dup@example.com")

    def test_clients_cannot_register_clients(self):
        with self.assertRaises(PermissionDenied):
            create_client(actor=UserFactory(), phone="0812345678")

    def test_update_and_search(self):
        client = create_client(actor=self.manager, phone="0812345678", last_name="Petrova")
        update_client(actor=self.manager, client=client, city="Krabi", passport_number="P-77")
        client.refresh_from_db()
        self.assertEqual(client.city, "Krabi")
        self.assertEqual(list(search_clients("P-77")), [client])
        self.assertEqual(list(search_clients("petro")), [client])


class ClientApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.company = CompanyFactory()

    def test_staff_registers_client(self):
        self.client.force_login(self.company.owner)
        resp = self.client.post(reverse("api:client-list"), {"phone": "0812345678", "first_name": "Ivan"}, format="json")
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["email"], "0812345678@noemail.com")

    def test_search_by_query(self):
        UserFactory(first_name="Marina", last_name="Zed")
        UserFactory(first_name="Boris", last_name="Yak")
        self.client.force_login(self.company.owner)
        resp = self.client.get(reverse("api:client-list"), {"q": "marina"})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["totalCount"], 1)

    def test_search_by_exact_email(self):
        found = UserFactory(email="marina@example.com")
        self.client.force_login(self.company.owner)
        url = reverse("api:client-search")

        resp = self.client.get(url, {"email": " Marina@Example.com "})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["user"]["id"], found.pk)

        resp = self.client.get(url, {"email": "nobody@example.com"})
        self.assertEqual(resp.json(), {"user": None})

        resp = self.client.get(url)
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Email is required")

    def test_search_by_text(self):
        client = UserFactory(first_name="Anna", last_name="Petrova", passport_number="P-77")
        UserFactory(first_name="Anna", last_name="Ivanov")
        self.client.force_login(ManagerFactory(company=self.company).user)
        resp = self.client.get(reverse("api:client-search"), {"q": "petro"})
        self.assertEqual([row["id"] for row in resp.json()["data"]], [client.pk])

    def test_clients_are_forbidden(self):
        self.client.force_login(UserFactory())
        self.assertEqual(self.client.get(reverse("api:client-list")).status_code, 403)
