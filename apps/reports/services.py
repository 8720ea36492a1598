"""
Financial reporting over company payments.

A report compares a period (day, week, month, year or a custom date range)
with the period of the same length immediately before it.
"""

import calendar
import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Dict, Optional, Tuple, Union

from django.core.exceptions import ValidationError
from django.db.models import Q
from django.utils import timezone
from django.utils.dateparse import parse_date

from apps.core.models import CompanyCar, Contract, Payment
from apps.references.models import PaymentType

logger = logging.getLogger(__name__)

PERIOD_DAY = 'day'
PERIOD_WEEK = 'week'
PERIOD_MONTH = 'month'
PERIOD_YEAR = 'year'
PERIODS = (PERIOD_DAY, PERIOD_WEEK, PERIOD_MONTH, PERIOD_YEAR)

Range = Tuple[datetime, datetime]


def _start_of(day: date) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.min))


def _end_of(day: date) -> datetime:
    return timezone.make_aware(datetime.combine(day, time.max))


def _as_date(value: Union[str, date, None], field: str) -> Optional[date]:
    if value in (None, ''):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    parsed = parse_date(str(value)[:10])
    if parsed is None:
        raise ValidationError({field: 'Invalid date'})
    return parsed


def period_ranges(period: str = PERIOD_MONTH, start_date=None, end_date=None,
                  now: Optional[datetime] = None) -> Tuple[Range, Range]:
    """
    Current and previous ``(start, end)`` ranges for a report.

    A custom ``start_date``/``end_date`` pair wins over ``period``; its end is
    the last microsecond of ``end_date`` and the previous range has the same
    duration. Weeks start on Sunday. Unknown periods fall back to month.
    """
    now = timezone.localtime(now or timezone.now())
    today = now.date()

    custom_start = _as_date(start_date, 'startDate')
    custom_end = _as_date(end_date, 'endDate')
    if custom_start and custom_end:
        start, end = _start_of(custom_start), _end_of(custom_end)
        previous_end = start - timedelta(microseconds=1)
        return (start, end), (previous_end - (end - start), previous_end)

    if period == PERIOD_DAY:
        current = (_start_of(today), _end_of(today))
        yesterday = today - timedelta(days=1)
        previous = (_start_of(yesterday), _end_of(yesterday))
    elif period == PERIOD_WEEK:
        sunday = today - timedelta(days=(today.weekday() + 1) % 7)
        current = (_start_of(sunday), _end_of(sunday + timedelta(days=6)))
        previous_sunday = sunday - timedelta(days=7)
        previous = (_start_of(previous_sunday), _end_of(previous_sunday + timedelta(days=6)))
    elif period == PERIOD_YEAR:
        current = (_start_of(date(today.year, 1, 1)), _end_of(date(today.year, 12, 31)))
        previous = (_start_of(date(today.year - 1, 1, 1)), _end_of(date(today.year - 1, 12, 31)))
    else:
        first = today.replace(day=1)
        last = today.replace(day=calendar.monthrange(today.year, today.month)[1])
        previous_last = first - timedelta(days=1)
        current = (_start_of(first), _end_of(last))
        previous = (_start_of(previous_last.replace(day=1)), _end_of(previous_last))
    return current, previous


def is_income(payment: Payment) -> bool:
    """``+`` payment types are income; untyped payments count when positive."""
    if payment.payment_type_id is None:
        return payment.amount > 0
    return payment.payment_type.sign == PaymentType.SIGN_INCOME


def _totals(payments) -> Dict[str, Decimal]:
    income = Decimal('0')
    expenses = Decimal('0')
    for payment in payments:
        if is_income(payment):
            income += abs(payment.amount)
        else:
            expenses += abs(payment.amount)
    return {'income': income, 'expenses': expenses, 'profit': income - expenses}


def _trend(current: Decimal, previous: Decimal) -> Decimal:
    if previous > 0:
        return (current - previous) / previous * 100
    return Decimal('100') if current > 0 else Decimal('0')


def _profit_trend(current: Decimal, previous: Decimal) -> Decimal:
    if previous != 0:
        return (current - previous) / abs(previous) * 100
    if current > 0:
        return Decimal('100')
    return Decimal('-100') if current < 0 else Decimal('0')


def _rounded(values: Dict[str, Decimal]) -> Dict[str, float]:
    return {key: round(float(value), 2) for key, value in values.items()}


def financial_report(company, period: str = PERIOD_MONTH, start_date=None, end_date=None,
                     now: Optional[datetime] = None) -> Dict:
    """Income, expenses and profit of ``company`` against the previous period."""
    period = period if period in PERIODS else PERIOD_MONTH
    (start, end), (previous_start, previous_end) = period_ranges(period, start_date, end_date, now)

    report = {
        'period': {'start': start.isoformat(), 'end': end.isoformat(), 'type': period},
        'current': {'income': 0, 'expenses': 0, 'profit': 0},
        'previous': {'income': 0, 'expenses': 0, 'profit': 0},
        'trends': {'income': 0, 'expenses': 0, 'profit': 0},
    }

    if not CompanyCar.objects.filter(company=company).exists():
        return report
    if not Contract.objects.filter(company=company).exists():
        return report

    payments = Payment.objects.filter(company=company, contract__company=company).select_related('payment_type')
    current = _totals(payments.filter(created_at__gte=start, created_at__lte=end))
    previous = _totals(payments.filter(created_at__gte=previous_start, created_at__lte=previous_end))

    report['current'] = _rounded(current)
    report['previous'] = _rounded(previous)
    report['trends'] = _rounded({
        'income': _trend(current['income'], previous['income']),
        'expenses': _trend(current['expenses'], previous['expenses']),
        'profit': _profit_trend(current['profit'], previous['profit']),
    })
    logger.debug(f"Financial report for company {company.pk}: {period} {start.date()}..{end.date()}")
    return report


def dashboard_stats(company) -> Dict:
    """Headline counters for the company dashboard."""
    cars = CompanyCar.objects.filter(company=company, deleted_at__isnull=True)
    contracts = Contract.objects.filter(company=company, deleted_at__isnull=True)
    paid = (
        Payment.objects
        .filter(company=company, payment_status__value__gt=0)
        .filter(Q(payment_type__sign=PaymentType.SIGN_INCOME) | Q(payment_type__isnull=True, amount__gt=0))
        .select_related('payment_type')
    )
    return {
        'totalCars': cars.count(),
        'availableCars': cars.filter(status=CompanyCar.STATUS_AVAILABLE).count(),
        'totalContracts': contracts.count(),
        'activeContracts': contracts.filter(status=Contract.STATUS_ACTIVE).count(),
        'totalClients': contracts.values('client_id').distinct().count(),
        'totalRevenue': round(float(sum((abs(p.amount) for p in paid), Decimal('0'))), 2),
    }
