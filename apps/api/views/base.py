from django.core.exceptions import PermissionDenied, ValidationError
from rest_framework import viewsets

from apps.accounts.scope import get_user_scope
from apps.companies.middleware import resolve_company_for_request


def request_company_id(request):
    """``company_id`` from the query string, else from a JSON body."""
    company_id = request.query_params.get('company_id')
    if company_id is None and isinstance(request.data, dict):
        company_id = request.data.get('company_id')
    return company_id


class CompanyContextMixin:
    """
    Resolve the company a request acts on.

    Admin mode wins, then the owner or manager company, then an explicit
    ``company_id`` from an admin.
    """

    def get_company(self, required=True):
        request = self.request
        company = getattr(request, 'company', None)
        if company is None:
            company = resolve_company_for_request(request, request_company_id(request))
        if company is None and required:
            if get_user_scope(request.user).role == 'admin':
                raise ValidationError({'company_id': 'company_id is required'})
            raise PermissionDenied('Forbidden')
        return company

    def is_admin(self):
        return get_user_scope(self.request.user).role == 'admin'


class CompanyScopedViewSet(CompanyContextMixin, viewsets.GenericViewSet):
    """
    Lists and lookups limited to the resolved company.

    Admins without a company see every company's rows; everyone else without
    a company sees nothing.
    """

    base_queryset = None

    def get_queryset(self):
        qs = self.base_queryset.all()
        company = self.get_company(required=False)
        if company is not None:
            return qs.filter(company=company)
        if self.is_admin():
            return qs
        return qs.none()
