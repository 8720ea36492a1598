import logging
import math
from datetime import datetime
from decimal import Decimal
from typing import Union

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction
from django.http import Http404
from django.utils.dateparse import parse_datetime

from apps.accounts.permissions import ensure_company_access
from apps.audit.services import log_audit_action, snapshot
from apps.core.models import Booking, CompanyCar

logger = logging.getLogger(__name__)


def _parse_moment(value: Union[str, datetime], field: str) -> datetime:
    if isinstance(value, datetime):
        return value
    try:
        parsed = parse_datetime(str(value))
    except ValueError:
        parsed = None
    if parsed is None:
        raise ValidationError({field: 'Invalid date'})
    return parsed


def booking_total(price_per_day, start: datetime, end: datetime) -> Decimal:
    """Whole days (rounded up) times the daily price."""
    days = math.ceil((end - start).total_seconds() / 86400)
    return (Decimal(days) * Decimal(price_per_day)).quantize(Decimal('0.01'))


@transaction.atomic
def create_booking(*, actor, company_car_id=None, start_date=None, end_date=None,
                   client_id=None, notes: str = "", request=None) -> Booking:
    """
    Create a pending booking.

    Clients book for themselves; staff must name the client.
    """
    if not company_car_id or not start_date or not end_date:
        raise ValidationError('Missing required fields')

    if actor.role == 'client':
        client = actor
    else:
        if not client_id:
            raise ValidationError({'client_id': 'Client ID is required'})
        client = get_user_model().objects.filter(pk=client_id).first()
        if client is None:
            raise Http404('Client not found')

    car = CompanyCar.objects.select_related('company').filter(pk=company_car_id).first()
    if car is None:
        raise Http404('Car not found')
    if actor.role != 'client':
        ensure_company_access(actor, car.company)

    start = _parse_moment(start_date, 'start_date')
    end = _parse_moment(end_date, 'end_date')

    booking = Booking(
        company=car.company,
        car=car,
        client=client,
        start_date=start,
        end_date=end,
        total_amount=booking_total(car.price_per_day, start, end),
        status=Booking.STATUS_PENDING,
        notes=(notes or "").strip(),
        created_by=actor,
        updated_by=actor,
    )
    booking.full_clean()
    booking.save()

    logger.info(f"Booking created: #{booking.pk} car {car.pk} client {client.pk}")
    log_audit_action(request, 'booking', booking.pk, 'create', None, snapshot(booking),
                     company=car.company, user=actor)
    return booking


@transaction.atomic
def update_booking_status(*, actor, booking: Booking, status: str, request=None) -> Booking:
    ensure_company_access(actor, booking.company)
    allowed = (Booking.STATUS_CONFIRMED, Booking.STATUS_CANCELLED)
    if status not in allowed:
        raise ValidationError({'status': f'Status must be one of: {", ".join(allowed)}'})
    if booking.status != Booking.STATUS_PENDING:
        raise ValidationError({'status': 'Only pending bookings can be confirmed or cancelled'})

    before = snapshot(booking)
    booking.status = status
    booking.updated_by = actor
    booking.save(update_fields=['status', 'updated_by', 'updated_at'])

    log_audit_action(request, 'booking', booking.pk, 'update', before, snapshot(booking),
                     company=booking.company, user=actor)
    return booking
