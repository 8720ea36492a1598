from django.core.exceptions import PermissionDenied
from rest_framework.permissions import SAFE_METHODS, BasePermission

from .scope import SCOPE_COMPANY, SCOPE_SYSTEM, get_user_scope, has_permission


def _role(user):
    if not user or not user.is_authenticated:
        return None
    return get_user_scope(user).role


def can_read_company(user, company) -> bool:
    """Admins read every company; owners and managers only their own."""
    if company is None:
        return False
    scope = get_user_scope(user)
    if scope.role == 'admin':
        return True
    return has_permission(scope, SCOPE_COMPANY) and scope.company_id == company.pk


def can_write_company(user, company) -> bool:
    """Admins write every company; owners only their own."""
    if company is None:
        return False
    scope = get_user_scope(user)
    if scope.role == 'admin':
        return True
    return scope.role == 'owner' and scope.company_id == company.pk


def ensure_company_access(user, company, write=False) -> None:
    allowed = can_write_company(user, company) if write else can_read_company(user, company)
    if not allowed:
        raise PermissionDenied('Forbidden')


def ensure_admin(user, message='Forbidden: Admin access required') -> None:
    if _role(user) != 'admin':
        raise PermissionDenied(message)


class IsAdmin(BasePermission):
    message = 'Forbidden: Admin access required'

    def has_permission(self, request, view):
        return _role(request.user) == 'admin'


class IsStaff(BasePermission):
    """Admin, owner or manager."""

    def has_permission(self, request, view):
        role = _role(request.user)
        if role is None:
            return False
        return has_permission(get_user_scope(request.user), SCOPE_COMPANY)


class IsAdminOrOwner(BasePermission):
    def has_permission(self, request, view):
        return _role(request.user) in ('admin', 'owner')


class IsAdminOrReadOnly(BasePermission):
    """Any authenticated user may read; only admins write (reference data)."""

    def has_permission(self, request, view):
        if not request.user or not request.user.is_authenticated:
            return False
        if request.method in SAFE_METHODS:
            return True
        return has_permission(get_user_scope(request.user), SCOPE_SYSTEM)

