import logging
from datetime import timedelta
from typing import Any, Dict

from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count
from django.http import Http404
from django.utils import timezone

from apps.accounts.permissions import ensure_admin
from apps.audit.models import AuditLog
from apps.audit.services import log_audit_action, snapshot
from apps.companies.models import Company

from .models import PlatformConfig

logger = logging.getLogger(__name__)

CONFIG_FIELDS = ('maintenance_mode', 'support_email', 'announcement')


def enter_company(*, actor, company_id, request=None) -> Dict[str, Any]:
    """
    Open a company's dashboard in admin mode.

    The visit is recorded as a ``login`` audit entry against the company.
    """
    ensure_admin(actor)
    company = Company.objects.filter(pk=company_id, deleted_at__isnull=True).first()
    if company is None:
        raise Http404('Company not found')

    logger.info(f"Admin {actor.pk} entered company {company.pk}")
    log_audit_action(
        request, 'company', company.pk, AuditLog.ACTION_LOGIN,
        after_state={'admin_entered_company': True, 'company_name': company.name},
        company=company, user=actor,
    )
    return {
        'success': True,
        'company': {'id': company.pk, 'name': company.name},
        'adminMode': True,
        'redirectUrl': f'/dashboard/companies/{company.pk}?admin_mode=true',
    }


@transaction.atomic
def update_platform_config(*, actor, request=None, **fields) -> PlatformConfig:
    ensure_admin(actor)
    cfg = PlatformConfig.get_solo()
    before = snapshot(cfg)
    for key in CONFIG_FIELDS:
        if key in fields:
            setattr(cfg, key, fields[key])
    cfg.full_clean()
    cfg.save()

    logger.info(f"Platform configuration updated by {actor.pk}: maintenance={cfg.maintenance_mode}")
    log_audit_action(request, 'platform_config', cfg.pk, 'update', before, snapshot(cfg), user=actor)
    return cfg


def get_platform_overview() -> Dict[str, Any]:
    """Aggregate read-only, cross-company metrics for the admin home."""
    cfg = PlatformConfig.get_solo()

    companies_qs = Company.objects.all()
    companies_total = companies_qs.count()
    companies_active = companies_qs.filter(is_active=True, deleted_at__isnull=True).count()
    companies_inactive = companies_qs.filter(is_active=False, deleted_at__isnull=True).count()
    companies_deleted = companies_qs.filter(deleted_at__isnull=False).count()

    users_by_role = {role: 0 for role, _ in get_user_model().ROLE_CHOICES}
    for row in get_user_model().objects.values('role').annotate(total=Count('id')):
        users_by_role[row['role']] = row['total']

    last_audit_timestamp = (
        AuditLog.objects
        .order_by('-created_at')
        .values_list('created_at', flat=True)
        .first()
    )

    recent_window_start = timezone.now() - timedelta(hours=24)
    recent_audit_entries = AuditLog.objects.filter(created_at__gte=recent_window_start).count()

    return {
        'companies_total': companies_total,
        'companies_active': companies_active,
        'companies_inactive': companies_inactive,
        'companies_deleted': companies_deleted,
        'users_by_role': users_by_role,
        'maintenance_mode': cfg.maintenance_mode,
        'last_audit_timestamp': last_audit_timestamp,
        'audit_entries_24h': recent_audit_entries,
    }
