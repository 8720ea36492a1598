"""
Company middleware for multi-tenancy support.

Resolves the company the authenticated user acts for (their own company, or the
company an admin opened in admin mode) and stores it in thread-local storage for
the duration of the request.
"""

from typing import Optional

from django.http import JsonResponse
from django.utils.deprecation import MiddlewareMixin

from apps.accounts.scope import get_user_scope
from .context import clear_current_company, set_current_company
from .models import Company


def _parse_company_id(value) -> Optional[int]:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def get_admin_mode_company_id(request) -> Optional[int]:
    """
    Return the ``company_id`` query parameter when an admin is in admin mode.

    Admin mode is requested with ``?admin_mode=true&company_id=N``; it is
    ignored for every other role.
    """
    user = getattr(request, 'user', None)
    if not user or not user.is_authenticated:
        return None
    if get_user_scope(user).role != 'admin':
        return None
    if request.GET.get('admin_mode') != 'true':
        return None
    return _parse_company_id(request.GET.get('company_id'))


def resolve_company_for_request(request, company_id=None) -> Optional[Company]:
    """
    Resolve the company a request acts on.

    Order: admin-mode company, then the owner/manager company, then an explicit
    ``company_id`` supplied by an admin (query parameter or argument).
    """
    user = getattr(request, 'user', None)
    if not user or not user.is_authenticated:
        return None

    scope = get_user_scope(user)
    resolved_id = get_admin_mode_company_id(request)
    if resolved_id is None and scope.scope == 'company':
        resolved_id = scope.company_id
    if resolved_id is None and scope.role == 'admin':
        resolved_id = _parse_company_id(company_id or request.GET.get('company_id'))
    if resolved_id is None:
        return None
    return Company.objects.filter(pk=resolved_id, deleted_at__isnull=True).first()


class CompanyMiddleware(MiddlewareMixin):
    """
    Middleware to set the current company based on the authenticated user.

    **How it works:**
    1. Anonymous users and Django admin pages get no company context
    2. Admins get the admin-mode company when one is requested
    3. Owners and managers get the company resolved from their scope
    4. Context is cleared after every request

    **Security:**
    - An owner or manager whose company is deactivated is refused with 403
    """

    def process_request(self, request):
        clear_current_company()
        request.company = None

        path = request.path or ''
        if path.startswith('/admin/') or path == '/admin':
            return None

        user = getattr(request, 'user', None)
        if not user or not user.is_authenticated:
            return None

        company = resolve_company_for_request(request)
        scope = get_user_scope(user)

        if company is not None and scope.role != 'admin' and not company.is_active:
            return JsonResponse(
                {'error': "Your company's account is not active. Please contact support."},
                status=403,
            )

        set_current_company(company)
        request.company = company
        return None

    def process_response(self, request, response):
        clear_current_company()
        return response

    def process_exception(self, request, exception):
        clear_current_company()
        return None
