"""
Role scopes and the permission rule shared by every API surface.

- admin: ``system`` scope, may act on any company
- owner / manager: ``company`` scope, limited to their company
- client: ``self`` scope, limited to their own records
"""

from dataclasses import dataclass
from typing import Optional

SCOPE_SYSTEM = 'system'
SCOPE_COMPANY = 'company'
SCOPE_SELF = 'self'


@dataclass(frozen=True)
class UserScope:
    role: str
    scope: str
    company_id: Optional[int] = None


def get_user_scope(user) -> UserScope:
    """
    Resolve the scope of an authenticated user.

    Owners resolve to their first live company, managers to the company of
    their active manager record. The result is memoized on the user instance
    for the lifetime of the request.
    """
    cached = getattr(user, '_user_scope', None)
    if cached is not None:
        return cached

    from apps.companies.models import Company
    from .models import Manager, User

    role = getattr(user, 'role', User.ROLE_CLIENT)
    if role == User.ROLE_ADMIN:
        scope = UserScope(role=role, scope=SCOPE_SYSTEM)
    elif role == User.ROLE_OWNER:
        company_id = (
            Company.objects
            .filter(owner=user, deleted_at__isnull=True)
            .order_by('id')
            .values_list('id', flat=True)
            .first()
        )
        scope = UserScope(role=role, scope=SCOPE_COMPANY, company_id=company_id)
    elif role == User.ROLE_MANAGER:
        company_id = (
            Manager.objects
            .filter(user=user, is_active=True, company__deleted_at__isnull=True)
            .order_by('id')
            .values_list('company_id', flat=True)
            .first()
        )
        scope = UserScope(role=role, scope=SCOPE_COMPANY, company_id=company_id)
    else:
        scope = UserScope(role=User.ROLE_CLIENT, scope=SCOPE_SELF)

    user._user_scope = scope
    return scope


def reset_user_scope(user) -> None:
    """Forget a memoized scope after company or manager changes."""
    if hasattr(user, '_user_scope'):
        del user._user_scope


def has_permission(scope: UserScope, permission_scope: Optional[str] = None) -> bool:
    """
    Decide whether a scope satisfies a permission's scope requirement.

    Admins always pass. Owners and managers never get ``system`` permissions;
    ``company`` (or unscoped) permissions need a company scope and ``self``
    permissions a self scope. Clients only get ``self`` permissions.
    """
    if scope.role == 'admin':
        return True
    if scope.role in ('owner', 'manager'):
        if permission_scope == SCOPE_SYSTEM:
            return False
        if permission_scope in (SCOPE_COMPANY, None):
            return scope.scope == SCOPE_COMPANY
        if permission_scope == SCOPE_SELF:
            return scope.scope == SCOPE_SELF
        return False
    if scope.role == 'client':
        return permission_scope == SCOPE_SELF and scope.scope == SCOPE_SELF
    return False
