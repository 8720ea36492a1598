import logging
from decimal import Decimal
from typing import Dict, Iterable, Optional, Union

from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction
from django.http import Http404

from apps.accounts.permissions import ensure_company_access
from apps.audit.services import log_audit_action, snapshot
from apps.core.models import Booking, CompanyCar, Contract
from . import payment_service
from .concurrency import ensure_version
from .contract_notes import ContractDetails, decode_notes, encode_notes, validate_contract_details

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = ('client', 'manager', 'start_date', 'end_date', 'total_amount',
                    'deposit_amount', 'status', 'photos')


def _as_details(details: Union[ContractDetails, Dict, None]) -> ContractDetails:
    if isinstance(details, ContractDetails):
        return details
    return ContractDetails.from_dict(details)


@transaction.atomic
def create_contract(*, actor, company, car: CompanyCar, client, start_date, end_date, total_amount,
                    deposit_amount=None, details: Union[ContractDetails, Dict, None] = None,
                    manager=None, booking: Optional[Booking] = None, photos=None,
                    car_version=None, request=None) -> Contract:
    """
    Rent a car to a client.

    Rules:
    - The car must belong to the company and be available or booked.
    - ``car_version`` (the car's ``updated_at`` as read by the caller) guards
      against concurrent edits of the car.
    - Pickup details are validated and encoded into ``notes``.
    - The car becomes rented, the source booking is confirmed, and pending
      rental-fee / deposit payments are created.
    """
    ensure_company_access(actor, company)

    car = CompanyCar.objects.select_for_update().filter(pk=car.pk, company=company).first()
    if car is None:
        raise ValidationError({'company_car_id': 'Car not found in this company'})
    ensure_version(car, car_version)
    if not car.is_rentable:
        raise ValidationError({'company_car_id': f'Car is not available (status: {car.status})'})

    details = _as_details(details)
    validate_contract_details(details, car)

    if booking is not None and booking.company_id != company.pk:
        raise ValidationError({'booking_id': 'Booking not found in this company'})

    contract = Contract(
        company=company,
        car=car,
        client=client,
        manager=manager or actor,
        booking=booking,
        start_date=start_date,
        end_date=end_date,
        total_amount=total_amount,
        deposit_amount=deposit_amount if deposit_amount not in (None, '') else Decimal('0'),
        notes=encode_notes(details),
        photos=photos or [],
        created_by=actor,
        updated_by=actor,
    )
    contract.full_clean()
    contract.save()

    car.status = CompanyCar.STATUS_RENTED
    car.updated_by = actor
    car.save(update_fields=['status', 'updated_by', 'updated_at'])

    if booking is not None:
        booking.status = Booking.STATUS_CONFIRMED
        booking.updated_by = actor
        booking.save(update_fields=['status', 'updated_by', 'updated_at'])

    payment_service.create_auto_payments(contract=contract, actor=actor)

    logger.info(f"Contract created: #{contract.pk} car {car.pk} client {client.pk} company {company.pk}")
    log_audit_action(request, 'contract', contract.pk, 'create', None, snapshot(contract),
                     company=company, user=actor)
    return contract


@transaction.atomic
def update_contract(*, actor, contract: Contract, expected_updated_at=None,
                    details: Union[ContractDetails, Dict, None] = None, request=None,
                    **fields) -> Contract:
    """
    Update a contract field-wise under an optimistic lock.

    Owners and managers may only edit contracts whose car belongs to their
    company. Passing ``details`` re-encodes the notes column.
    """
    contract = Contract.objects.select_for_update().get(pk=contract.pk)
    if contract.car.company_id != contract.company_id:
        raise PermissionDenied('Forbidden')
    ensure_company_access(actor, contract.company)
    ensure_version(contract, expected_updated_at)

    before = snapshot(contract)
    for key in UPDATABLE_FIELDS:
        if key in fields:
            value = fields[key]
            if key == 'deposit_amount' and value in (None, ''):
                value = Decimal('0')
            setattr(contract, key, value)

    if details is not None:
        details = _as_details(details)
        validate_contract_details(details, None)
        contract.notes = encode_notes(details)
    elif 'notes' in fields:
        merged = decode_notes(contract.notes)
        merged.notes = (fields['notes'] or '').strip()
        contract.notes = encode_notes(merged)

    contract.updated_by = actor
    contract.full_clean()
    contract.save()

    log_audit_action(request, 'contract', contract.pk, 'update', before, snapshot(contract),
                     company=contract.company, user=actor)
    return contract


@transaction.atomic
def close_contract(*, actor, contract_id, fees: Optional[Iterable[Dict]] = None,
                   request=None) -> Dict:
    """
    Complete a contract, free its car and charge closing fees.

    Raises:
        Http404: unknown contract
        ValidationError: contract already completed or cancelled
    """
    contract = Contract.objects.select_for_update().filter(pk=contract_id).first()
    if contract is None:
        raise Http404('Contract not found')
    ensure_company_access(actor, contract.company)
    if contract.is_closed:
        raise ValidationError('Contract is already closed')

    before = snapshot(contract)
    contract.status = Contract.STATUS_COMPLETED
    contract.updated_by = actor
    contract.save(update_fields=['status', 'updated_by', 'updated_at'])

    car = contract.car
    car.status = CompanyCar.STATUS_AVAILABLE
    car.updated_by = actor
    car.save(update_fields=['status', 'updated_by', 'updated_at'])

    payments = payment_service.create_fee_payments(contract=contract, fees=fees, actor=actor)

    logger.info(f"Contract closed: #{contract.pk} with {len(payments)} closing fee(s)")
    log_audit_action(request, 'contract', contract.pk, 'update', before, snapshot(contract),
                     company=contract.company, user=actor)
    return {'success': True, 'fees_created': len(payments)}
