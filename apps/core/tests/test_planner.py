import json
from datetime import timedelta

from django.core.exceptions import PermissionDenied, ValidationError
from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework.test import APIClient

from apps.audit.models import AuditLog
from apps.core.models import CalendarEvent, Task
from apps.core.services import task_service
from tests.factories import AdminUserFactory, CompanyFactory, ManagerFactory, UserFactory


class TaskServiceTests(TestCase):
    def setUp(self):
        self.company = CompanyFactory()
        self.owner = self.company.owner
        self.manager = ManagerFactory(company=self.company).user

    def test_assignees_are_owner_and_active_managers(self):
        ManagerFactory(company=self.company, is_active=False)
        ManagerFactory()
        assignees = task_service.task_assignees(self.company)
        self.assertEqual(assignees[0], self.owner)
        self.assertEqual(set(assignees), {self.owner, self.manager})

    def test_one_task_per_recipient(self):
        tasks = task_service.create_tasks(actor=self.owner, company=self.company, title=" Wash cars ",
                                          assigned_to=[self.manager.pk, self.owner.pk, self.manager.pk])
        self.assertEqual(len(tasks), 2)
        self.assertEqual({t.assigned_to for t in tasks}, {self.manager, self.owner})
        self.assertTrue(all(t.title == "Wash cars" for t in tasks))
        self.assertEqual(AuditLog.objects.filter(entity_type="task", action="create").count(), 2)

    def test_recipient_outside_company_is_rejected(self):
        stranger = ManagerFactory().user
        with self.assertRaises(ValidationError) as ctx:
            task_service.create_tasks(actor=self.owner, company=self.company, title="Check",
                                      assigned_to=[stranger.pk])
        self.assertIn("assigned_to", ctx.exception.message_dict)
        self.assertFalse(Task.objects.exists())

    def test_manager_deletes_only_own_tasks(self):
        [from_owner] = task_service.create_tasks(actor=self.owner, company=self.company, title="A",
                                                 assigned_to=[self.manager.pk])
        [own] = task_service.create_tasks(actor=self.manager, company=self.company, title="B",
                                          assigned_to=[self.owner.pk])
        with self.assertRaises(PermissionDenied):
            task_service.delete_task(actor=self.manager, task=from_owner)
        task_service.delete_task(actor=self.manager, task=own)
        self.assertEqual(list(Task.objects.all()), [from_owner])
        self.assertTrue(AuditLog.objects.filter(entity_type="task", action="delete", entity_id=str(own.pk)).exists())

    def test_admin_without_company_sends_to_owners(self):
        admin = AdminUserFactory()
        other = CompanyFactory()
        self.assertIn(other.owner, task_service.task_assignees(None))
        tasks = task_service.create_tasks(actor=admin, company=None, title="Renew licence",
                                          assigned_to=[self.owner.pk, other.owner.pk])
        self.assertEqual({t.company for t in tasks}, {self.company, other})

    def test_only_admin_may_skip_company(self):
        with self.assertRaises(PermissionDenied):
            task_service.create_tasks(actor=self.owner, company=None, title="X", assigned_to=[self.owner.pk])


class TaskApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.company = CompanyFactory()
        self.owner = self.company.owner
        self.manager = ManagerFactory(company=self.company).user
        self.client.force_login(self.owner)

    def test_create_for_several_recipients(self):
        due = (timezone.now() + timedelta(days=1)).isoformat()
        resp = self.client.post(reverse("api:task-list"), {
            "title": "Prepare car", "assigned_to": [self.manager.pk, self.owner.pk], "due_date": due,
        }, format="json")
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertEqual(body["created"], 2)
        self.assertEqual(body["data"]["id"], body["tasks"][0]["id"])
        self.assertEqual(body["data"]["created_by"]["id"], self.owner.pk)

    def test_single_recipient_may_be_a_number(self):
        resp = self.client.post(reverse("api:task-list"), {"title": "Call client", "assigned_to": self.manager.pk},
                                format="json")
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(resp.json()["tasks"][0]["assigned_to"]["id"], self.manager.pk)

    def test_create_requires_title_and_recipient(self):
        resp = self.client.post(reverse("api:task-list"), {"assigned_to": [self.manager.pk]}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Title is required")

        resp = self.client.post(reverse("api:task-list"), {"title": "Lonely"}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "At least one recipient is required")

    def test_list_sorted_by_due_date_with_undated_last(self):
        now = timezone.now()
        for title, due in (("undated", None), ("later", now + timedelta(days=3)), ("sooner", now + timedelta(days=1))):
            task_service.create_tasks(actor=self.owner, company=self.company, title=title,
                                      assigned_to=[self.manager.pk], due_date=due)
        resp = self.client.get(reverse("api:task-list"))
        self.assertEqual([row["title"] for row in resp.json()["data"]], ["sooner", "later", "undated"])

    def test_status_filter_accepts_a_list(self):
        for title, status in (("a", "pending"), ("b", "in_progress"), ("c", "completed")):
            task_service.create_tasks(actor=self.owner, company=self.company, title=title,
                                      assigned_to=[self.manager.pk], status=status)
        resp = self.client.get(reverse("api:task-list"),
                               {"filters": json.dumps({"status": ["pending", "in_progress"]})})
        self.assertEqual(sorted(row["title"] for row in resp.json()["data"]), ["a", "b"])

        resp = self.client.get(reverse("api:task-list"), {"filters": json.dumps({"status": "completed"})})
        self.assertEqual([row["title"] for row in resp.json()["data"]], ["c"])

    def test_other_company_tasks_are_hidden(self):
        other = CompanyFactory()
        [theirs] = task_service.create_tasks(actor=other.owner, company=other, title="Theirs",
                                             assigned_to=[other.owner.pk])
        self.assertEqual(self.client.get(reverse("api:task-list")).json()["totalCount"], 0)
        self.assertEqual(self.client.get(reverse("api:task-detail", args=[theirs.pk])).status_code, 404)

    def test_update_status_and_empty_update(self):
        [task] = task_service.create_tasks(actor=self.owner, company=self.company, title="Fuel up",
                                           assigned_to=[self.manager.pk])
        url = reverse("api:task-detail", args=[task.pk])
        self.client.force_login(self.manager)
        resp = self.client.patch(url, {"status": "completed"}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["status"], "completed")

        resp = self.client.patch(url, {}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "No data to update")

    def test_manager_cannot_delete_task_from_owner(self):
        [task] = task_service.create_tasks(actor=self.owner, company=self.company, title="Fuel up",
                                           assigned_to=[self.manager.pk])
        self.client.force_login(self.manager)
        resp = self.client.delete(reverse("api:task-detail", args=[task.pk]))
        self.assertEqual(resp.status_code, 403)

        self.client.force_login(self.owner)
        resp = self.client.delete(reverse("api:task-detail", args=[task.pk]))
        self.assertEqual(resp.json(), {"message": "Task deleted successfully"})

    def test_company_users(self):
        resp = self.client.get(reverse("api:task-company-users"))
        self.assertEqual([row["id"] for row in resp.json()["data"]], [self.owner.pk, self.manager.pk])

        self.client.force_login(AdminUserFactory())
        ids = [row["id"] for row in self.client.get(reverse("api:task-company-users")).json()["data"]]
        self.assertIn(self.owner.pk, ids)
        self.assertNotIn(self.manager.pk, ids)

    def test_clients_have_no_access(self):
        self.client.force_login(UserFactory())
        self.assertEqual(self.client.get(reverse("api:task-list")).status_code, 403)


class CalendarEventApiTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.company = CompanyFactory()
        self.client.force_login(self.company.owner)

    def _event(self, title, event_date, company=None, **extra):
        company = company or self.company
        return CalendarEvent.objects.create(company=company, created_by=company.owner, title=title,
                                            event_date=event_date, **extra)

    def test_create_event(self):
        resp = self.client.post(reverse("api:calendar-event-list"), {
            "title": "Deliver Yaris", "event_date": "2025-03-01", "start_time": "09:00",
            "end_time": "10:30", "event_type": "delivery",
        }, format="json")
        self.assertEqual(resp.status_code, 201)
        body = resp.json()
        self.assertEqual(body["color"], "#3B82F6")
        self.assertEqual(body["company"], self.company.pk)
        self.assertTrue(AuditLog.objects.filter(entity_type="calendar_event", action="create").exists())

    def test_create_requires_title_and_date(self):
        resp = self.client.post(reverse("api:calendar-event-list"), {"title": "No date"}, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Title and event date are required")

    def test_end_time_must_follow_start_time(self):
        resp = self.client.post(reverse("api:calendar-event-list"), {
            "title": "Meeting", "event_date": "2025-03-01", "start_time": "11:00", "end_time": "10:00",
        }, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("end_time", resp.json()["details"])

    def test_bad_color_is_rejected(self):
        resp = self.client.post(reverse("api:calendar-event-list"), {
            "title": "Meeting", "event_date": "2025-03-01", "color": "blue",
        }, format="json")
        self.assertEqual(resp.status_code, 400)
        self.assertIn("color", resp.json()["details"])

    def test_list_range_and_isolation(self):
        self._event("early", "2025-02-27")
        self._event("inside", "2025-03-02")
        self._event("late", "2025-03-10")
        self._event("theirs", "2025-03-02", company=CompanyFactory())
        resp = self.client.get(reverse("api:calendar-event-list"),
                               {"start_date": "2025-03-01", "end_date": "2025-03-05"})
        self.assertEqual(resp.json()["totalCount"], 1)
        self.assertEqual([row["title"] for row in resp.json()["data"]], ["inside"])

    def test_impossible_range_date_is_bad_request(self):
        resp = self.client.get(reverse("api:calendar-event-list"), {"start_date": "2025-02-30"})
        self.assertEqual(resp.status_code, 400)
        self.assertEqual(resp.json()["error"], "Invalid date")

    def test_update_and_delete(self):
        event = self._event("Meeting", "2025-03-01")
        url = reverse("api:calendar-event-detail", args=[event.pk])
        resp = self.client.patch(url, {"event_type": "meeting", "color": "#10B981"}, format="json")
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()["event_type"], "meeting")

        resp = self.client.patch(url, {}, format="json")
        self.assertEqual(resp.json()["error"], "No data to update")

        resp = self.client.delete(url)
        self.assertEqual(resp.json(), {"message": "Event deleted successfully"})
        self.assertFalse(CalendarEvent.objects.exists())
