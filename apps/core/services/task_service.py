import logging
from typing import Iterable, List, Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction

from apps.accounts.permissions import ensure_admin, ensure_company_access
from apps.audit.services import log_audit_action, snapshot
from apps.companies.models import Company
from apps.core.models import Task

logger = logging.getLogger(__name__)

STATUSES = [choice[0] for choice in Task.STATUS_CHOICES]
UPDATABLE_FIELDS = ('title', 'description', 'status', 'due_date', 'assigned_to')


def task_assignees(company: Optional[Company]) -> List:
    """
    Users a task may be sent to.

    Inside a company that is its owner and its active managers; without a
    company (platform admin) it is every company owner.
    """
    User = get_user_model()
    if company is None:
        owner_ids = Company.objects.filter(deleted_at__isnull=True, owner__isnull=False).values('owner_id')
        return list(User.objects.filter(pk__in=owner_ids, role=User.ROLE_OWNER).order_by('email'))

    users = []
    if company.owner_id:
        users.append(company.owner)
    for manager in company.managers.select_related('user').filter(is_active=True).order_by('user__email'):
        if manager.user not in users:
            users.append(manager.user)
    return users


def _check_status(status):
    if status not in STATUSES:
        raise ValidationError({'status': f'Status must be one of: {", ".join(STATUSES)}'})


def _assignee(company, user_id):
    for user in task_assignees(company):
        if user.pk == user_id:
            return user
    raise ValidationError({'assigned_to': f'User {user_id} cannot receive tasks in this company'})


@transaction.atomic
def create_tasks(*, actor, company: Optional[Company], title, assigned_to: Iterable[int], description: str = "",
                 status: str = Task.STATUS_PENDING, due_date=None, request=None) -> List[Task]:
    """
    Create one task per recipient; all of them share the text and due date.

    A platform admin outside any company sends tasks to owners; each task is
    filed under the recipient's company.
    """
    if company is None:
        ensure_admin(actor)
    else:
        ensure_company_access(actor, company)
    title = (title or "").strip()
    if not title:
        raise ValidationError({'title': 'Title is required'})
    _check_status(status)
    recipients = list(dict.fromkeys(assigned_to or []))
    if not recipients:
        raise ValidationError({'assigned_to': 'At least one recipient is required'})

    tasks = []
    for user_id in recipients:
        assignee = _assignee(company, user_id)
        target = company or Company.objects.filter(owner=assignee, deleted_at__isnull=True).first()
        task = Task(
            company=target,
            title=title,
            description=(description or "").strip(),
            status=status,
            due_date=due_date,
            assigned_to=assignee,
            created_by=actor,
            updated_by=actor,
        )
        task.full_clean()
        task.save()
        log_audit_action(request, 'task', task.pk, 'create', None, snapshot(task), company=target, user=actor)
        tasks.append(task)

    logger.info(f"{len(tasks)} task(s) created by user {actor.pk}")
    return tasks


@transaction.atomic
def update_task(*, actor, task: Task, request=None, **fields) -> Task:
    ensure_company_access(actor, task.company)
    changes = {key: fields[key] for key in UPDATABLE_FIELDS if key in fields}
    if not changes:
        raise ValidationError('No data to update')

    before = snapshot(task)
    if 'title' in changes:
        task.title = (changes['title'] or "").strip()
        if not task.title:
            raise ValidationError({'title': 'Title is required'})
    if 'description' in changes:
        task.description = (changes['description'] or "").strip()
    if 'status' in changes:
        _check_status(changes['status'])
        task.status = changes['status']
    if 'due_date' in changes:
        task.due_date = changes['due_date']
    if 'assigned_to' in changes:
        user_id = changes['assigned_to']
        task.assigned_to = _assignee(task.company, user_id) if user_id else None

    task.updated_by = actor
    task.full_clean()
    task.save()
    log_audit_action(request, 'task', task.pk, 'update', before, snapshot(task), company=task.company, user=actor)
    return task


@transaction.atomic
def delete_task(*, actor, task: Task, request=None) -> None:
    """Managers may delete only the tasks they created."""
    ensure_company_access(actor, task.company)
    if getattr(actor, 'role', None) == 'manager' and task.created_by_id != actor.pk:
        raise PermissionDenied('Forbidden')

    before = snapshot(task)
    pk = task.pk
    task.delete()
    log_audit_action(request, 'task', pk, 'delete', before, None, company=task.company, user=actor)
