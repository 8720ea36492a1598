import logging

from django.core.exceptions import ValidationError
from django.db import transaction

from apps.accounts.permissions import ensure_company_access
from apps.audit.services import log_audit_action, snapshot
from apps.companies.models import Company
from apps.core.models import CalendarEvent

logger = logging.getLogger(__name__)

EVENT_FIELDS = ('title', 'description', 'event_date', 'start_time', 'end_time', 'event_type', 'color')
NULLABLE_FIELDS = ('start_time', 'end_time')


def _apply(event: CalendarEvent, fields) -> None:
    for key in EVENT_FIELDS:
        if key not in fields:
            continue
        value = fields[key]
        if value is None and key not in NULLABLE_FIELDS:
            continue
        if isinstance(value, str):
            value = value.strip()
        setattr(event, key, value)
    if not event.title:
        raise ValidationError({'title': 'Title is required'})


@transaction.atomic
def create_event(*, actor, company: Company, request=None, **fields) -> CalendarEvent:
    ensure_company_access(actor, company)
    if not fields.get('title') or not fields.get('event_date'):
        raise ValidationError('Title and event date are required')

    event = CalendarEvent(company=company, created_by=actor, updated_by=actor)
    _apply(event, fields)
    event.full_clean()
    event.save()

    log_audit_action(request, 'calendar_event', event.pk, 'create', None, snapshot(event),
                     company=company, user=actor)
    return event


@transaction.atomic
def update_event(*, actor, event: CalendarEvent, request=None, **fields) -> CalendarEvent:
    ensure_company_access(actor, event.company)
    if not any(key in fields for key in EVENT_FIELDS):
        raise ValidationError('No data to update')

    before = snapshot(event)
    _apply(event, fields)
    event.updated_by = actor
    event.full_clean()
    event.save()

    log_audit_action(request, 'calendar_event', event.pk, 'update', before, snapshot(event),
                     company=event.company, user=actor)
    return event


@transaction.atomic
def delete_event(*, actor, event: CalendarEvent, request=None) -> None:
    ensure_company_access(actor, event.company)
    before = snapshot(event)
    pk = event.pk
    event.delete()
    logger.info(f"Calendar event {pk} deleted by user {actor.pk}")
    log_audit_action(request, 'calendar_event', pk, 'delete', before, None, company=event.company, user=actor)
