"""
Seasonal pricing configuration for companies.

Seasons split the year into ``MM-DD`` ranges on a 366-day (leap) calendar and
may wrap across the new year. Duration ranges split rental lengths into
contiguous day buckets. A car's ``seasonal_prices`` holds an explicit daily
price per (season id, range id); empty cells fall back to the base price
multiplied by both coefficients.
"""

import math
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, List, Optional

from django.core.exceptions import ValidationError

DAYS_IN_MONTHS = [31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31]
DAYS_IN_YEAR = 366

STANDARD_SEASON_ID = 'standard'

DEFAULT_DURATION_RANGES = (
    {'id': 'd1', 'name': '1-3 days', 'min_days': 1, 'max_days': 3, 'price_coefficient': 1.0},
    {'id': 'd2', 'name': '4-7 days', 'min_days': 4, 'max_days': 7, 'price_coefficient': 0.95},
    {'id': 'd3', 'name': '8-14 days', 'min_days': 8, 'max_days': 14, 'price_coefficient': 0.90},
    {'id': 'd4', 'name': '15-21 days', 'min_days': 15, 'max_days': 21, 'price_coefficient': 0.85},
    {'id': 'd5', 'name': '22-28 days', 'min_days': 22, 'max_days': 28, 'price_coefficient': 0.80},
    {'id': 'd6', 'name': '29+ days', 'min_days': 29, 'max_days': None, 'price_coefficient': 0.75},
)


def day_of_year(mmdd: str) -> int:
    """Convert ``MM-DD`` to a day number 1..366 on a leap calendar."""
    try:
        month, day = (int(part) for part in mmdd.split('-'))
    except (AttributeError, ValueError):
        raise ValidationError(f'Invalid date "{mmdd}", expected MM-DD')
    if not 1 <= month <= 12 or not 1 <= day <= DAYS_IN_MONTHS[month - 1]:
        raise ValidationError(f'Invalid date "{mmdd}", expected MM-DD')
    return sum(DAYS_IN_MONTHS[:month - 1]) + day


def season_days(start: str, end: str) -> List[int]:
    start_day = day_of_year(start)
    end_day = day_of_year(end)
    if start_day > end_day:
        return list(range(start_day, DAYS_IN_YEAR + 1)) + list(range(1, end_day + 1))
    return list(range(start_day, end_day + 1))


def validate_seasons(seasons: Iterable[Dict]) -> None:
    """
    Check that seasons cover every day of the year exactly once.

    Raises:
        ValidationError: keyed by ``seasons`` with the first problem found
    """
    seasons = list(seasons or [])
    if not seasons:
        raise ValidationError({'seasons': 'At least one season is required'})

    owners: Dict[int, str] = {}
    for season in seasons:
        for day in season_days(season['start_date'], season['end_date']):
            if day in owners:
                raise ValidationError({
                    'seasons': f'Date overlap detected between "{season["name"]}" and "{owners[day]}"'
                })
            owners[day] = season['name']

    missing = DAYS_IN_YEAR - len(owners)
    if missing > 0:
        raise ValidationError({
            'seasons': f'Gap detected in year coverage. {missing} days are not assigned to any season.'
        })


def validate_duration_ranges(ranges: Iterable[Dict]) -> None:
    """
    Check that duration ranges start at one day and touch without gaps.

    Raises:
        ValidationError: keyed by ``duration_ranges`` with the first problem found
    """
    ranges = list(ranges or [])
    if not ranges:
        raise ValidationError({'duration_ranges': 'At least one duration range is required'})

    ordered = sorted(ranges, key=lambda r: r['min_days'])
    if ordered[0]['min_days'] != 1:
        raise ValidationError({'duration_ranges': 'Duration ranges must start from 1 day'})

    for current, following in zip(ordered, ordered[1:]):
        if current.get('max_days') is None:
            raise ValidationError({
                'duration_ranges': f'"{current["name"]}" has unlimited max days but is not the last range'
            })
        if following['min_days'] > current['max_days'] + 1:
            raise ValidationError({
                'duration_ranges': f'Gap detected between "{current["name"]}" and "{following["name"]}"'
            })
        if following['min_days'] <= current['max_days']:
            raise ValidationError({
                'duration_ranges': f'Overlap detected between "{current["name"]}" and "{following["name"]}"'
            })


def find_season(seasons: Iterable[Dict], on: date) -> Optional[Dict]:
    if isinstance(on, datetime):
        on = on.date()
    target = day_of_year(f'{on.month:02d}-{on.day:02d}')
    for season in seasons or []:
        if target in season_days(season['start_date'], season['end_date']):
            return season
    return None


def find_duration_range(ranges: Iterable[Dict], days: int) -> Optional[Dict]:
    for item in ranges or []:
        max_days = item.get('max_days')
        if item['min_days'] <= days and (max_days is None or days <= max_days):
            return item
    return None


def rental_days(start: datetime, end: datetime) -> int:
    """Billable days between two moments, rounded up, never below one."""
    seconds = (end - start).total_seconds()
    return max(1, math.ceil(seconds / 86400))


def _to_decimal(value) -> Optional[Decimal]:
    if value in (None, ''):
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def quote_daily_price(car, start: datetime, end: datetime) -> Decimal:
    """
    Daily price of ``car`` for a rental from ``start`` to ``end``.

    Uses the car's explicit seasonal price for the matching season and
    duration range, else ``price_per_day`` times the season and duration
    coefficients.
    """
    company = car.company
    days = rental_days(start, end)
    season = find_season(company.seasons, start)
    duration = find_duration_range(company.duration_ranges, days)

    season_id = season['id'] if season else STANDARD_SEASON_ID
    explicit = None
    if duration is not None:
        explicit = _to_decimal((car.seasonal_prices or {}).get(season_id, {}).get(duration['id']))
    if explicit is not None:
        return explicit.quantize(Decimal('0.01'))

    price = Decimal(car.price_per_day or 0)
    if season:
        price *= Decimal(str(season.get('price_coefficient', 1)))
    if duration:
        price *= Decimal(str(duration.get('price_coefficient', 1)))
    return price.quantize(Decimal('0.01'))
