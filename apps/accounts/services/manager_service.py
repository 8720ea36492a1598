import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Q, QuerySet

from apps.accounts.models import Manager
from apps.accounts.permissions import ensure_company_access
from apps.accounts.scope import reset_user_scope
from apps.audit.services import log_audit_action, snapshot

logger = logging.getLogger(__name__)


@transaction.atomic
def create_manager(*, actor, company, email, password, first_name="", last_name="",
                   phone="", is_active=True, request=None) -> Manager:
    """Create a manager-role user and attach them to ``company``.

    Only admins and the company's owner may hire managers.
    """
    ensure_company_access(actor, company, write=True)

    User = get_user_model()
    email = (email or "").strip().lower()
    if not email or not password:
        raise ValidationError('Email and password are required')
    if User.objects.filter(Q(email__iexact=email) | Q(username__iexact=email)).exists():
        raise ValidationError({'email': 'A user with this email already exists.'})

    try:
        user = User.objects.create_user(
            username=email,
            email=email,
            password=password,
            first_name=(first_name or "").strip(),
            last_name=(last_name or "").strip(),
            phone=(phone or "").strip(),
            role=User.ROLE_MANAGER,
        )
    except IntegrityError:
        raise ValidationError({'email': 'A user with this email already exists.'})

    manager = Manager(user=user, company=company, is_active=bool(is_active))
    manager.full_clean()
    manager.save()

    logger.info(f"Manager created: user {user.pk} at company {company.pk} by {actor.pk}")
    log_audit_action(request, 'manager', manager.pk, 'create', None, snapshot(manager),
                     company=company, user=actor)
    return manager


@transaction.atomic
def update_manager(*, actor, manager: Manager, request=None, **fields) -> Manager:
    """Toggle a manager's ``is_active`` flag; nothing else is editable."""
    if 'is_active' not in fields:
        raise ValidationError('No data to update')
    ensure_company_access(actor, manager.company, write=True)

    before = snapshot(manager)
    manager.is_active = bool(fields['is_active'])
    manager.save(update_fields=['is_active', 'updated_at'])
    reset_user_scope(manager.user)

    state = 'activated' if manager.is_active else 'deactivated'
    logger.info(f"Manager {manager.pk} {state} by user {actor.pk}")
    log_audit_action(request, 'manager', manager.pk, 'update', before, snapshot(manager),
                     company=manager.company, user=actor)
    return manager


def managers_for_company(company, q: str = "", is_active=None) -> QuerySet:
    qs = Manager.objects.select_related('user', 'company').filter(company=company)
    q = (q or "").strip()
    if q:
        qs = qs.filter(
            Q(user__first_name__icontains=q)
            | Q(user__last_name__icontains=q)
            | Q(user__email__icontains=q)
        )
    if is_active is not None:
        qs = qs.filter(is_active=is_active)
    return qs
