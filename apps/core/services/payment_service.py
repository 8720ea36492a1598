import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, Optional

from django.core.exceptions import ValidationError
from django.db import transaction
from django.http import Http404

from apps.accounts.permissions import ensure_company_access
from apps.audit.services import log_audit_action, snapshot
from apps.core.models import Contract, Payment
from apps.references.models import PaymentStatus, PaymentType

logger = logging.getLogger(__name__)

RENTAL_FEE_NOTE = 'Rental Fee (Auto-created)'
DEPOSIT_NOTE = 'Deposit Received (Auto-created)'
CLOSING_FEE_NOTE = 'Fee added at closing'


def get_pending_status() -> Optional[PaymentStatus]:
    """Status named "pending" (any case), else the one with value 0."""
    statuses = list(PaymentStatus.objects.all())
    return next((s for s in statuses if s.is_pending), None)


def find_payment_type(name_contains: str, sign: Optional[str] = None) -> Optional[PaymentType]:
    qs = PaymentType.objects.filter(name__icontains=name_contains, is_active=True)
    if sign:
        qs = qs.filter(sign=sign)
    return qs.order_by('id').first()


def _to_amount(value, field='amount') -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValidationError({field: 'Amount must be a number'})


def create_auto_payments(*, contract: Contract, actor) -> List[Payment]:
    """
    Pending rental-fee and deposit payments for a new contract.

    Skipped with a warning when the pending status or the rental/deposit
    payment types are missing.
    """
    pending = get_pending_status()
    rental_type = find_payment_type('rental')
    deposit_type = find_payment_type('deposit', sign=PaymentType.SIGN_INCOME)
    if not (pending and rental_type and deposit_type):
        logger.warning(
            f"Skipping auto payments for contract {contract.pk}: "
            f"pending status or rental/deposit payment type is not configured"
        )
        return []

    payments = []
    if contract.total_amount and contract.total_amount > 0:
        payments.append(Payment(
            company=contract.company, contract=contract, payment_status=pending,
            payment_type=rental_type, amount=contract.total_amount,
            payment_method=Payment.METHOD_PENDING, notes=RENTAL_FEE_NOTE,
            created_by=actor, updated_by=actor,
        ))
    if contract.deposit_amount and contract.deposit_amount > 0:
        payments.append(Payment(
            company=contract.company, contract=contract, payment_status=pending,
            payment_type=deposit_type, amount=contract.deposit_amount,
            payment_method=Payment.METHOD_PENDING, notes=DEPOSIT_NOTE,
            created_by=actor, updated_by=actor,
        ))
    for payment in payments:
        payment.save()
    return payments


def create_fee_payments(*, contract: Contract, fees: Iterable[Dict], actor) -> List[Payment]:
    """
    Pending payments for fees charged when a contract is closed.

    ``type_id == 'custom'`` (or missing) falls back to a payment type named
    like "Other", prefixing the notes with the custom fee name.
    """
    fees = list(fees or [])
    if not fees:
        return []

    pending = get_pending_status()
    if pending is None:
        logger.warning(f"Skipping closing fees for contract {contract.pk}: no pending payment status")
        return []

    fallback = find_payment_type('Other')
    created = []
    for fee in fees:
        type_id = fee.get('type_id')
        notes = fee.get('notes') or CLOSING_FEE_NOTE
        custom_name = fee.get('custom_name')

        payment_type = None
        if type_id in (None, '', 'custom'):
            if fallback is not None:
                payment_type = fallback
                if custom_name:
                    notes = f'{custom_name}: {notes}'
            else:
                payment_type = PaymentType.objects.order_by('id').first()
                if custom_name:
                    notes = f'Custom Fee ({custom_name}): {notes}'
        else:
            payment_type = PaymentType.objects.filter(pk=type_id).first()

        if payment_type is None:
            logger.warning(f"Skipping closing fee on contract {contract.pk}: unknown payment type {type_id}")
            continue

        payment = Payment(
            company=contract.company, contract=contract, payment_status=pending,
            payment_type=payment_type, amount=_to_amount(fee.get('amount')),
            payment_method=Payment.METHOD_PENDING, notes=notes,
            created_by=actor, updated_by=actor,
        )
        payment.full_clean()
        payment.save()
        created.append(payment)
    return created


@transaction.atomic
def create_payment(*, actor, company, contract_id=None, payment_status_id=None, amount=None,
                   payment_method=None, payment_type_id=None, notes: str = "",
                   request=None) -> Payment:
    if not contract_id or not payment_status_id or amount in (None, '') or not payment_method:
        raise ValidationError('Missing required fields')

    ensure_company_access(actor, company)
    contract = Contract.objects.filter(pk=contract_id, company=company).first()
    if contract is None:
        raise Http404('Contract not found')

    payment = Payment(
        company=company,
        contract=contract,
        payment_status_id=payment_status_id,
        payment_type_id=payment_type_id or None,
        amount=_to_amount(amount),
        payment_method=payment_method,
        notes=(notes or "").strip(),
        created_by=actor,
        updated_by=actor,
    )
    payment.full_clean()
    payment.save()

    log_audit_action(request, 'payment', payment.pk, 'create', None, snapshot(payment),
                     company=company, user=actor)
    return payment


@transaction.atomic
def update_payment(*, actor, payment: Payment, request=None, **fields) -> Payment:
    ensure_company_access(actor, payment.company)
    before = snapshot(payment)

    if 'payment_status_id' in fields:
        payment.payment_status_id = fields['payment_status_id']
    if 'payment_type_id' in fields:
        payment.payment_type_id = fields['payment_type_id'] or None
    if 'amount' in fields:
        payment.amount = _to_amount(fields['amount'])
    if 'payment_method' in fields:
        payment.payment_method = fields['payment_method']
    if 'notes' in fields:
        payment.notes = (fields['notes'] or "").strip()
    payment.updated_by = actor

    payment.full_clean()
    payment.save()
    log_audit_action(request, 'payment', payment.pk, 'update', before, snapshot(payment),
                     company=payment.company, user=actor)
    return payment


@transaction.atomic
def delete_payment(*, actor, payment: Payment, request=None) -> None:
    ensure_company_access(actor, payment.company, write=True)
    before = snapshot(payment)
    payment_id, company = payment.pk, payment.company
    payment.delete()
    logger.info(f"Payment {payment_id} deleted by user {actor.pk}")
    log_audit_action(request, 'payment', payment_id, 'delete', before, None,
                     company=company, user=actor)
