from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import transaction

from apps.audit.services import log_audit_action, snapshot

PROFILE_FIELDS = (
    'first_name', 'last_name', 'email', 'phone', 'second_phone', 'telegram',
    'citizenship', 'city', 'gender', 'avatar_url',
)


@transaction.atomic
def update_profile(*, user, request=None, **fields):
    """Update the current user's own contact profile.

    Role, activation and company bindings are never changed here.
    """
    if not getattr(user, "is_authenticated", False):
        raise ValidationError({"__all__": "Authentication required."})

    User = get_user_model()
    before = snapshot(user)

    for key in PROFILE_FIELDS:
        if key not in fields:
            continue
        value = fields[key]
        setattr(user, key, (value or "").strip() if isinstance(value, str) or value is None else value)

    if 'email' in fields:
        user.email = user.email.lower()
        if not user.email:
            raise ValidationError({'email': 'Email is required.'})
        if User.objects.exclude(pk=user.pk).filter(email__iexact=user.email).exists():
            raise ValidationError({'email': 'A user with this email already exists.'})

    user.save()
    log_audit_action(request, 'user', user.pk, 'update', before, snapshot(user), user=user)
    return user
