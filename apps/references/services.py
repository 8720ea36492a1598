"""
Reference data access: cached lists and admin-only replacements.
"""

import logging
from typing import Callable, Dict, Iterable, List

from django.conf import settings
from django.core.cache import cache
from django.core.exceptions import ValidationError
from django.db import transaction

from apps.accounts.permissions import ensure_admin
from apps.audit.services import log_audit_action, to_json_safe

from .models import LocationSeason

logger = logging.getLogger(__name__)

CACHE_PREFIX = 'references'


def _ttl() -> int:
    return getattr(settings, 'CACHE_TTL', {}).get('REFERENCE_DATA', 3600)


def cache_key(kind: str, **params) -> str:
    suffix = ':'.join(f'{key}={params[key]}' for key in sorted(params) if params[key] not in (None, ''))
    return f'{CACHE_PREFIX}:{kind}:{suffix}' if suffix else f'{CACHE_PREFIX}:{kind}'


def _kinds_key(kind: str) -> str:
    return f'{CACHE_PREFIX}:keys:{kind}'


def get_cached_list(kind: str, build: Callable[[], List[Dict]], **params) -> List[Dict]:
    """Serve a reference list from cache, building and storing it on a miss."""
    key = cache_key(kind, **params)
    data = cache.get(key)
    if data is not None:
        return data

    data = build()
    cache.set(key, data, timeout=_ttl())
    known = cache.get(_kinds_key(kind)) or []
    if key not in known:
        cache.set(_kinds_key(kind), known + [key], timeout=_ttl())
    return data


def invalidate(kind: str) -> None:
    keys = cache.get(_kinds_key(kind)) or []
    cache.delete_many(keys + [_kinds_key(kind)])
    logger.debug(f"Reference cache invalidated: {kind} ({len(keys)} key(s))")


@transaction.atomic
def replace_location_seasons(*, actor, location, seasons: Iterable[Dict], request=None) -> List[LocationSeason]:
    """Replace every season of ``location``; an empty list clears them."""
    ensure_admin(actor)
    seasons = list(seasons or [])

    LocationSeason.objects.filter(location=location).delete()
    created = []
    for index, item in enumerate(seasons):
        season = LocationSeason(
            location=location,
            name=(item.get('name') or '').strip(),
            start_date=item.get('start_date') or '',
            end_date=item.get('end_date') or '',
            price_coefficient=item.get('price_coefficient', 1),
        )
        try:
            season.full_clean()
        except ValidationError as e:
            raise ValidationError({f'seasons[{index}]': e.messages})
        season.save()
        created.append(season)

    logger.info(f"Location {location.pk} seasons replaced: {len(created)} season(s)")
    after = {
        'location_id': location.pk,
        'seasons': [
            {'id': s.pk, 'name': s.name, 'start_date': s.start_date,
             'end_date': s.end_date, 'price_coefficient': s.price_coefficient}
            for s in created
        ],
    }
    log_audit_action(request, 'location_season', location.pk, 'update', None, to_json_safe(after), user=actor)
    return created
