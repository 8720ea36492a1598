import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.contrib.auth.tokens import default_token_generator
from django.core.exceptions import ValidationError
from django.core.mail import send_mail
from django.db import transaction
from django.db.models import Q
from django.utils.encoding import force_bytes, force_str
from django.utils.http import urlsafe_base64_decode, urlsafe_base64_encode

from apps.audit.services import log_audit_action, snapshot

logger = logging.getLogger(__name__)

SELF_SERVICE_ROLES = ('owner', 'client')


def confirmation_link(user) -> str:
    uid = urlsafe_base64_encode(force_bytes(user.pk))
    token = default_token_generator.make_token(user)
    base = getattr(settings, 'ACCOUNT_CONFIRM_URL', '/auth/confirm')
    return f"{base}?uid={uid}&token={token}"


def send_confirmation_email(user) -> None:
    try:
        send_mail(
            subject='Confirm your email',
            message=f"Open this link to activate your account:\n{confirmation_link(user)}",
            from_email=settings.DEFAULT_FROM_EMAIL,
            recipient_list=[user.email],
            fail_silently=False,
        )
    except Exception as e:
        # The account exists; the user can ask for the link again
        logger.error(f"Failed to send confirmation email to user {user.pk}: {e}")


@transaction.atomic
def register_user(*, email, password, role='client', name="", phone="", company_name="",
                  location_id=None, request=None):
    """
    Self-service sign-up for company owners and rental clients.

    The account stays inactive until the emailed link is confirmed. Owners
    name their company and its location; the company is created with them.
    """
    from apps.companies.services import create_company
    from apps.references.models import Location

    User = get_user_model()
    if role not in SELF_SERVICE_ROLES:
        raise ValidationError({'role': 'Role must be owner or client'})

    email = (email or "").strip().lower()
    if not email or not password:
        raise ValidationError('Email and password are required')
    if User.objects.filter(Q(email__iexact=email) | Q(username__iexact=email)).exists():
        raise ValidationError({'email': 'A user with this email already exists.'})

    location = None
    if role == 'owner':
        company_name = (company_name or "").strip()
        if not company_name:
            raise ValidationError({'company_name': 'Company name is required'})
        location = Location.objects.filter(pk=location_id).first() if location_id else None
        if location is None:
            raise ValidationError({'location_id': 'Location is required'})

    user = User(
        username=email,
        email=email,
        first_name=(name or "").strip(),
        phone=(phone or "").strip(),
        role=role,
        is_active=False,
    )
    try:
        validate_password(password, user)
    except ValidationError as e:
        raise ValidationError({'password': e.messages})
    user.set_password(password)
    user.save()

    if role == 'owner':
        create_company(actor=user, name=company_name, location=location, phone=user.phone,
                       email=email, request=request)

    logger.info(f"User registered: {user.pk} as {role}")
    log_audit_action(request, 'user', user.pk, 'create', None, snapshot(user), user=user)
    transaction.on_commit(lambda: send_confirmation_email(user))
    return user


@transaction.atomic
def confirm_email(*, uid, token, request=None):
    """Activate the account behind a confirmation link."""
    User = get_user_model()
    try:
        user = User.objects.get(pk=force_str(urlsafe_base64_decode(uid or "")))
    except (TypeError, ValueError, OverflowError, User.DoesNotExist):
        user = None
    if user is None or not default_token_generator.check_token(user, token or ""):
        raise ValidationError({'token': 'Invalid or expired confirmation link'})

    if not user.is_active:
        before = snapshot(user)
        user.is_active = True
        user.save(update_fields=['is_active'])
        logger.info(f"Email confirmed for user {user.pk}")
        log_audit_action(request, 'user', user.pk, 'update', before, snapshot(user), user=user)
    return user
