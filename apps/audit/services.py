import json
import logging
from typing import Any, Optional

from django.core.serializers.json import DjangoJSONEncoder
from django.db import transaction

from .models import AuditLog

logger = logging.getLogger(__name__)


def get_client_ip(request) -> Optional[str]:
    """First ``X-Forwarded-For`` entry, else ``X-Real-IP``, else ``REMOTE_ADDR``."""
    if request is None:
        return None
    meta = request.META
    xff = meta.get('HTTP_X_FORWARDED_FOR')
    if xff:
        return xff.split(',')[0].strip()
    return meta.get('HTTP_X_REAL_IP') or meta.get('REMOTE_ADDR') or None


def to_json_safe(value: Any) -> Any:
    """Round-trip through the Django encoder so decimals and dates become strings."""
    if value is None:
        return None
    return json.loads(json.dumps(value, cls=DjangoJSONEncoder))


def snapshot(instance) -> Optional[dict]:
    """JSON-safe dict of a model instance's concrete fields."""
    if instance is None:
        return None
    data = {
        field.attname: getattr(instance, field.attname)
        for field in instance._meta.concrete_fields
        if field.attname != 'password'
    }
    return to_json_safe(data)


def log_audit_action(request, entity_type: str, entity_id, action: str,
                     before_state=None, after_state=None, company=None,
                     user=None) -> Optional[AuditLog]:
    """
    Write one audit row for the acting user.

    The company defaults to the request's resolved company. Errors are logged
    and swallowed so auditing never breaks the surrounding operation.
    """
    try:
        if user is None and request is not None:
            candidate = getattr(request, 'user', None)
            user = candidate if candidate is not None and candidate.is_authenticated else None
        if company is None and request is not None:
            company = getattr(request, 'company', None)

        with transaction.atomic():
            return AuditLog.objects.create(
                user=user,
                role=getattr(user, 'role', '') or '',
                company=company,
                entity_type=entity_type,
                entity_id='' if entity_id is None else str(entity_id),
                action=action,
                before_state=to_json_safe(before_state),
                after_state=to_json_safe(after_state),
                ip_address=get_client_ip(request),
                user_agent=(request.META.get('HTTP_USER_AGENT', '') if request is not None else ''),
            )
    except Exception as e:
        logger.error(f"Failed to write audit log for {entity_type}#{entity_id} ({action}): {e}")
        return None
