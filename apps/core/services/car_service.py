import logging
from datetime import date, timedelta
from decimal import Decimal, InvalidOperation
from typing import Dict, List, Optional

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import F, Q
from django.utils import timezone

from apps.accounts.permissions import ensure_company_access
from apps.audit.services import log_audit_action, snapshot
from apps.companies.pricing import STANDARD_SEASON_ID
from apps.core.models import CompanyCar
from .concurrency import ensure_version

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = (
    'template', 'color', 'year', 'mileage', 'vin', 'license_plate',
    'price_per_day', 'price_per_month', 'seasonal_prices',
    'island_trip_price', 'krabi_trip_price', 'full_insurance_price', 'baby_seat_price',
    'status', 'next_oil_change_mileage', 'insurance_expiry', 'registration_expiry',
    'insurance_type', 'photos', 'document_photos', 'featured_image_index',
    'marketing_headline', 'description',
)

INTEGRITY_MESSAGES = {
    'unique_plate_per_company': {'license_plate': 'A car with this license plate already exists.'},
    'unique_vin_per_company': {'vin': 'A car with this VIN already exists.'},
}


def _raise_friendly_integrity_error(error: IntegrityError):
    text = str(error)
    for constraint, message in INTEGRITY_MESSAGES.items():
        if constraint in text:
            raise ValidationError(message)
    if 'license_plate' in text:
        raise ValidationError(INTEGRITY_MESSAGES['unique_plate_per_company'])
    if 'vin' in text:
        raise ValidationError(INTEGRITY_MESSAGES['unique_vin_per_company'])
    raise error


def validate_seasonal_prices(company, seasonal_prices: Optional[Dict]) -> Dict:
    """
    Check a ``{season_id: {range_id: price}}`` table against company settings.

    Empty cells are dropped; prices must be non-negative numbers.
    """
    if not seasonal_prices:
        return {}
    if not isinstance(seasonal_prices, dict):
        raise ValidationError({'seasonal_prices': 'Seasonal prices must be an object'})

    season_ids = {s['id'] for s in company.seasons} or {STANDARD_SEASON_ID}
    range_ids = {r['id'] for r in company.duration_ranges}

    cleaned = {}
    for season_id, row in seasonal_prices.items():
        if season_id not in season_ids:
            raise ValidationError({'seasonal_prices': f'Unknown season "{season_id}"'})
        if not isinstance(row, dict):
            raise ValidationError({'seasonal_prices': f'Prices for season "{season_id}" must be an object'})
        cleaned_row = {}
        for range_id, value in row.items():
            if range_id not in range_ids:
                raise ValidationError({'seasonal_prices': f'Unknown duration range "{range_id}"'})
            if value in (None, ''):
                continue
            try:
                price = Decimal(str(value))
            except (InvalidOperation, ValueError):
                raise ValidationError({'seasonal_prices': f'Price for "{season_id}"/"{range_id}" must be a number'})
            if price < 0:
                raise ValidationError({'seasonal_prices': 'Seasonal prices cannot be negative'})
            cleaned_row[range_id] = float(price)
        if cleaned_row:
            cleaned[season_id] = cleaned_row
    return cleaned


@transaction.atomic
def create_car(*, actor, company, template, license_plate: str, year: int, price_per_day,
               request=None, **fields) -> CompanyCar:
    """
    Add a car to a company fleet.

    Rules:
    - Admin (or admin mode) and the company owner may create cars.
    - License plate and VIN are unique per company among live cars.
    """
    ensure_company_access(actor, company, write=True)

    car = CompanyCar(
        company=company,
        template=template,
        license_plate=(license_plate or '').strip().upper(),
        year=int(year),
        price_per_day=price_per_day,
        created_by=actor,
        updated_by=actor,
    )
    for key, value in fields.items():
        if key in UPDATABLE_FIELDS and key not in ('template', 'license_plate', 'year', 'price_per_day'):
            setattr(car, key, value)
    car.seasonal_prices = validate_seasonal_prices(company, fields.get('seasonal_prices'))

    car.full_clean()
    try:
        with transaction.atomic():
            car.save()
    except IntegrityError as e:
        _raise_friendly_integrity_error(e)

    logger.info(f"Car created: {car.license_plate} (id={car.pk}) for company {company.pk}")
    log_audit_action(request, 'company_car', car.pk, 'create', None, snapshot(car),
                     company=company, user=actor)
    return car


@transaction.atomic
def update_car(*, actor, car: CompanyCar, expected_updated_at=None, request=None, **fields) -> CompanyCar:
    """
    Update a car field-wise.

    ``expected_updated_at`` is the version the caller edited; a stale value
    raises ``ConflictError``.
    """
    car = CompanyCar.objects.select_for_update().get(pk=car.pk)
    ensure_company_access(actor, car.company, write=True)
    ensure_version(car, expected_updated_at)

    before = snapshot(car)
    for key in UPDATABLE_FIELDS:
        if key in fields:
            setattr(car, key, fields[key])
    if 'seasonal_prices' in fields:
        car.seasonal_prices = validate_seasonal_prices(car.company, fields['seasonal_prices'])
    car.updated_by = actor

    car.full_clean()
    try:
        with transaction.atomic():
            car.save()
    except IntegrityError as e:
        _raise_friendly_integrity_error(e)

    log_audit_action(request, 'company_car', car.pk, 'update', before, snapshot(car),
                     company=car.company, user=actor)
    return car


@transaction.atomic
def soft_delete_car(*, actor, car: CompanyCar, request=None) -> CompanyCar:
    ensure_company_access(actor, car.company, write=True)
    if car.has_active_contract():
        raise ValidationError({'car': 'Cannot delete a car with an active contract'})

    before = snapshot(car)
    car.updated_by = actor
    car.soft_delete()
    logger.info(f"Car soft-deleted: {car.license_plate} (id={car.pk})")
    log_audit_action(request, 'company_car', car.pk, 'delete', before, None,
                     company=car.company, user=actor)
    return car


@transaction.atomic
def record_maintenance(*, actor, car: CompanyCar, performed_at_mileage, next_interval,
                       request=None) -> Dict:
    """
    Record an oil change.

    The next change is due at ``performed_at_mileage + next_interval``; the
    car's mileage moves up to the performed mileage.
    """
    ensure_company_access(actor, car.company)
    if performed_at_mileage in (None, '') or next_interval in (None, ''):
        raise ValidationError({'performed_at_mileage': 'Missing required fields'})
    try:
        performed = int(performed_at_mileage)
        interval = int(next_interval)
    except (TypeError, ValueError):
        raise ValidationError({'performed_at_mileage': 'Mileage values must be whole numbers'})
    if performed < 0 or interval <= 0:
        raise ValidationError({'next_interval': 'Mileage values must be positive'})

    before = snapshot(car)
    next_due = performed + interval
    car.next_oil_change_mileage = next_due
    car.mileage = max(car.mileage or 0, performed)
    car.updated_by = actor
    car.save(update_fields=['next_oil_change_mileage', 'mileage', 'updated_by', 'updated_at'])

    logger.info(f"Maintenance recorded for car {car.pk}: next oil change at {next_due} km")
    log_audit_action(request, 'company_car', car.pk, 'update', before, snapshot(car),
                     company=car.company, user=actor)
    return {'success': True, 'next_due': next_due}


def cars_needing_attention(company, within_days: int = 30, today: Optional[date] = None) -> List[Dict]:
    """
    Cars with an oil change due or insurance/registration expiring soon.

    Returns one entry per car with the list of reasons.
    """
    today = today or timezone.localdate()
    horizon = today + timedelta(days=within_days)

    cars = (
        CompanyCar.objects.for_company(company)
        .select_related('template__brand', 'template__model')
        .filter(
            Q(next_oil_change_mileage__isnull=False, mileage__gte=F('next_oil_change_mileage'))
            | Q(insurance_expiry__lte=horizon)
            | Q(registration_expiry__lte=horizon)
        )
        .order_by('license_plate')
    )

    result = []
    for car in cars:
        reasons = []
        if car.next_oil_change_mileage is not None and car.mileage >= car.next_oil_change_mileage:
            reasons.append('oil_change')
        if car.insurance_expiry and car.insurance_expiry <= horizon:
            reasons.append('insurance_expired' if car.insurance_expiry < today else 'insurance_expiring')
        if car.registration_expiry and car.registration_expiry <= horizon:
            reasons.append('registration_expired' if car.registration_expiry < today else 'registration_expiring')
        result.append({
            'id': car.pk,
            'license_plate': car.license_plate,
            'name': car.display_name,
            'mileage': car.mileage,
            'next_oil_change_mileage': car.next_oil_change_mileage,
            'insurance_expiry': car.insurance_expiry,
            'registration_expiry': car.registration_expiry,
            'reasons': reasons,
        })
    return result
