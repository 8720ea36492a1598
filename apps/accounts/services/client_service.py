import logging
import re
import time

from django.contrib.auth import get_user_model
from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction
from django.db.models import Q, QuerySet

from apps.audit.services import log_audit_action, snapshot

logger = logging.getLogger(__name__)

CLIENT_FIELDS = (
    'first_name', 'last_name', 'second_phone', 'telegram', 'passport_number',
    'citizenship', 'city', 'gender', 'passport_photos', 'driver_license_photos',
)


def placeholder_email(phone: str = "", passport: str = "") -> str:
    """Email for clients registered without one: phone digits, else passport, else a timestamp."""
    local = re.sub(r'\D', '', phone or '') or re.sub(r'\s', '', passport or '') or str(int(time.time() * 1000))
    return f'{local}@noemail.com'.lower()


def normalize_phone(phone: str) -> str:
    digits = re.sub(r'\D', '', phone or '')
    if len(digits) < 10:
        raise ValidationError({'phone': 'Phone number must contain at least 10 digits.'})
    return digits


@transaction.atomic
def create_client(*, actor, phone, email="", password=None, request=None, **profile):
    """
    Register a rental client on behalf of a customer.

    A missing email is replaced by ``{digits}@noemail.com`` so every client
    keeps a unique login identifier.
    """
    User = get_user_model()
    if actor.role not in User.STAFF_ROLES:
        raise PermissionDenied('Forbidden')

    phone = normalize_phone(phone)
    email = (email or "").strip().lower()
    if not email:
        email = placeholder_email(phone, profile.get('passport_number', ''))
    if User.objects.filter(Q(email__iexact=email) | Q(username__iexact=email)).exists():
        raise ValidationError({'email': 'A user with this email already exists.'})

    values = {key: profile[key] for key in CLIENT_FIELDS if profile.get(key) is not None}
    for key, value in values.items():
        if isinstance(value, str):
            values[key] = value.strip()

    client = User(username=email, email=email, phone=phone, role=User.ROLE_CLIENT, **values)
    if password:
        client.set_password(password)
    else:
        client.set_unusable_password()
    client.save()

    logger.info(f"Client created: user {client.pk} by {actor.pk}")
    log_audit_action(request, 'client', client.pk, 'create', None, snapshot(client), user=actor)
    return client


@transaction.atomic
def update_client(*, actor, client, request=None, **fields):
    User = get_user_model()
    if actor.role not in User.STAFF_ROLES:
        raise PermissionDenied('Forbidden')

    before = snapshot(client)
    for key in CLIENT_FIELDS:
        if key in fields:
            value = fields[key]
            setattr(client, key, value.strip() if isinstance(value, str) else value)
    if 'phone' in fields:
        client.phone = normalize_phone(fields['phone'])
    client.save()

    log_audit_action(request, 'client', client.pk, 'update', before, snapshot(client), user=actor)
    return client


def search_clients(q: str = "") -> QuerySet:
    qs = get_user_model().objects.filter(role='client', is_active=True)
    q = (q or "").strip()
    if q:
        qs = qs.filter(
            Q(first_name__icontains=q)
            | Q(last_name__icontains=q)
            | Q(phone__icontains=q)
            | Q(email__icontains=q)
            | Q(passport_number__icontains=q)
        )
    return qs.order_by('last_name', 'first_name')


def find_user_by_email(email: str):
    """Exact, case-insensitive email lookup used before registering a client."""
    email = (email or "").strip()
    if not email:
        raise ValidationError({'email': 'Email is required'})
    return get_user_model().objects.filter(email__iexact=email).first()
