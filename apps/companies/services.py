import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, Optional

from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction
from django.db.models import Count, Q, Sum

from apps.accounts.permissions import ensure_admin, ensure_company_access
from apps.accounts.scope import reset_user_scope
from apps.audit.services import log_audit_action, snapshot
from apps.references.models import Currency, District
from .models import Company, CompanyCurrency, DeliveryPrice
from .pricing import validate_duration_ranges, validate_seasons

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ('name', 'location', 'currency', 'address', 'phone', 'email', 'logo_url')
FREE_DELIVERY_REQUIRED = 'At least one active district must have zero delivery cost (Free Delivery)'


@transaction.atomic
def create_company(*, actor, name: str, location, owner=None, currency=None, address: str = "",
                   phone: str = "", email: str = "", logo_url: str = "",
                   settings: Optional[Dict] = None, is_active: bool = True, request=None) -> Company:
    """
    Create a company.

    Admins may create a company for any owner; an owner creates it for
    themself and may hold only one live company.
    """
    role = getattr(actor, 'role', None)
    if role not in ('admin', 'owner'):
        raise PermissionDenied('Forbidden')
    if role == 'owner':
        owner = actor
        if Company.objects.filter(owner=actor, deleted_at__isnull=True).exists():
            raise ValidationError({'owner': 'You already own a company.'})
    if owner is not None and owner.role != 'owner':
        raise ValidationError({'owner': 'Company owner must have the owner role.'})

    company = Company(
        name=(name or "").strip(),
        owner=owner,
        location=location,
        currency=currency,
        address=(address or "").strip(),
        phone=(phone or "").strip(),
        email=(email or "").strip().lower(),
        logo_url=(logo_url or "").strip(),
        settings=settings or {},
        is_active=is_active,
    )
    company.full_clean()
    company.save()

    if owner is not None:
        reset_user_scope(owner)
    logger.info(f"Company created: {company.name} (id={company.pk}) by user {actor.pk}")
    log_audit_action(request, 'company', company.pk, 'create', None, snapshot(company),
                     company=company, user=actor)
    return company


@transaction.atomic
def update_company(*, actor, company: Company, request=None, **fields) -> Company:
    ensure_company_access(actor, company, write=True)
    before = snapshot(company)

    for key in EDITABLE_FIELDS:
        if key not in fields:
            continue
        value = fields[key]
        if isinstance(value, str):
            value = value.strip()
            if key == 'email':
                value = value.lower()
        setattr(company, key, value)

    if 'is_active' in fields:
        ensure_admin(actor)
        company.is_active = bool(fields['is_active'])

    company.full_clean()
    company.save()
    log_audit_action(request, 'company', company.pk, 'update', before, snapshot(company),
                     company=company, user=actor)
    return company


def activate_company(*, actor, company: Company, request=None) -> Company:
    ensure_admin(actor)
    before = snapshot(company)
    company.activate()
    log_audit_action(request, 'company', company.pk, 'update', before, snapshot(company),
                     company=company, user=actor)
    return company


def deactivate_company(*, actor, company: Company, request=None) -> Company:
    ensure_admin(actor)
    before = snapshot(company)
    company.deactivate()
    log_audit_action(request, 'company', company.pk, 'update', before, snapshot(company),
                     company=company, user=actor)
    return company


def soft_delete_company(*, actor, company: Company, request=None) -> Company:
    ensure_admin(actor)
    before = snapshot(company)
    company.soft_delete()
    logger.info(f"Company soft-deleted: {company.name} (id={company.pk})")
    log_audit_action(request, 'company', company.pk, 'delete', before, None,
                     company=company, user=actor)
    return company


@transaction.atomic
def update_company_seasons(*, actor, company: Company, seasons: List[Dict], request=None) -> Company:
    ensure_company_access(actor, company, write=True)
    validate_seasons(seasons)
    before = {'seasons': company.seasons}
    company.set_setting('seasons', list(seasons))
    log_audit_action(request, 'company', company.pk, 'update', before, {'seasons': company.seasons},
                     company=company, user=actor)
    return company


@transaction.atomic
def update_company_duration_ranges(*, actor, company: Company, duration_ranges: List[Dict],
                                   request=None) -> Company:
    ensure_company_access(actor, company, write=True)
    validate_duration_ranges(duration_ranges)
    ordered = sorted(duration_ranges, key=lambda r: r['min_days'])
    before = {'duration_ranges': company.duration_ranges}
    company.set_setting('duration_ranges', ordered)
    log_audit_action(request, 'company', company.pk, 'update', before,
                     {'duration_ranges': company.duration_ranges}, company=company, user=actor)
    return company


def list_company_currencies(company: Company) -> List[Dict]:
    """Every active currency, flagged with the company's selection."""
    links = {
        link.currency_id: link.is_default
        for link in CompanyCurrency.objects.filter(company=company)
    }
    return [
        {
            'id': currency.pk,
            'code': currency.code,
            'symbol': currency.symbol,
            'name': currency.name,
            'is_selected': currency.pk in links,
            'is_default': links.get(currency.pk, False),
        }
        for currency in Currency.objects.filter(is_active=True).order_by('code')
    ]


@transaction.atomic
def set_company_currencies(*, actor, company: Company, currency_ids: Iterable[int],
                           default_id: Optional[int], request=None) -> List[Dict]:
    ensure_company_access(actor, company, write=True)
    currency_ids = sorted({int(pk) for pk in currency_ids or []})
    if not currency_ids:
        raise ValidationError({'currency_ids': 'Select at least one currency'})
    if default_id is None:
        raise ValidationError({'default_currency_id': 'A default currency is required'})
    default_id = int(default_id)
    if default_id not in currency_ids:
        raise ValidationError({'default_currency_id': 'The default currency must be selected'})

    found = set(Currency.objects.filter(pk__in=currency_ids, is_active=True).values_list('pk', flat=True))
    unknown = [pk for pk in currency_ids if pk not in found]
    if unknown:
        raise ValidationError({'currency_ids': f'Unknown currencies: {unknown}'})

    before = list_company_currencies(company)
    CompanyCurrency.objects.filter(company=company).delete()
    CompanyCurrency.objects.bulk_create([
        CompanyCurrency(company=company, currency_id=pk, is_default=(pk == default_id))
        for pk in currency_ids
    ])
    company.currency_id = default_id
    company.save(update_fields=['currency', 'updated_at'])

    after = list_company_currencies(company)
    log_audit_action(request, 'company_currencies', company.pk, 'update', before, after,
                     company=company, user=actor)
    return after


def list_delivery_prices(company: Company) -> List[Dict]:
    """Active districts of the company's location with the company price or null."""
    prices = {
        dp.district_id: dp
        for dp in DeliveryPrice.objects.filter(company=company)
    }
    rows = []
    for district in District.objects.filter(location_id=company.location_id, is_active=True).order_by('name'):
        dp = prices.get(district.pk)
        rows.append({
            'district_id': district.pk,
            'district_name': district.name,
            'price': dp.price if dp else None,
            'is_active': dp.is_active if dp else False,
        })
    return rows


@transaction.atomic
def upsert_delivery_prices(*, actor, company: Company, items: Iterable[Dict], request=None) -> List[Dict]:
    ensure_company_access(actor, company, write=True)
    items = list(items or [])
    try:
        district_ids = {int(item['district_id']) for item in items}
    except (KeyError, TypeError, ValueError):
        raise ValidationError({'district_id': 'Every item needs a district_id'})
    allowed = set(
        District.objects.filter(pk__in=district_ids, location_id=company.location_id)
        .values_list('pk', flat=True)
    )

    rows = []
    for item in items:
        district_id = int(item['district_id'])
        if district_id not in allowed:
            raise ValidationError({'district_id': f'District {district_id} does not belong to the company location'})
        try:
            price = Decimal(str(item.get('price')))
        except (InvalidOperation, ValueError):
            raise ValidationError({'price': 'Price must be a number'})
        if not price.is_finite():
            raise ValidationError({'price': 'Price must be a number'})
        if price < 0:
            raise ValidationError({'price': 'Price cannot be negative'})
        rows.append((district_id, price, bool(item.get('is_active', True))))

    if not any(is_active and price == 0 for _, price, is_active in rows):
        raise ValidationError({'price': FREE_DELIVERY_REQUIRED})

    before = list_delivery_prices(company)
    for district_id, price, is_active in rows:
        DeliveryPrice.objects.update_or_create(
            company=company,
            district_id=district_id,
            defaults={'price': price, 'is_active': is_active},
        )

    after = list_delivery_prices(company)
    log_audit_action(request, 'delivery_prices', company.pk, 'update', before, after,
                     company=company, user=actor)
    return after


def get_company_stats(company: Company) -> Dict:
    from apps.core.models import CompanyCar, Contract, Payment

    contracts = Contract.objects.filter(company=company).aggregate(
        total=Count('id'),
        active=Count('id', filter=Q(status=Contract.STATUS_ACTIVE)),
        completed=Count('id', filter=Q(status=Contract.STATUS_COMPLETED)),
    )
    managers = company.managers.aggregate(
        total=Count('id'),
        active=Count('id', filter=Q(is_active=True)),
    )
    revenue = (
        Payment.objects
        .filter(company=company, payment_status__value__gt=0)
        .aggregate(total=Sum('amount'))['total']
    )
    return {
        'carsCount': CompanyCar.objects.filter(company=company).count(),
        'contractsCount': contracts['total'],
        'activeContracts': contracts['active'],
        'completedContracts': contracts['completed'],
        'totalRevenue': float(revenue or 0),
        'managersCount': managers['total'],
        'activeManagers': managers['active'],
    }
