"""
DataTable query parameters: ``sortBy`` / ``sortOrder``, a JSON ``filters``
object and the free-text ``q``.

Views opt in through class attributes:

- ``datatable_sort_fields``: mapping of ``sortBy`` values to ORM fields
- ``datatable_default_sort``: ordering used without ``sortBy``
- ``datatable_filter_fields``: mapping of ``filters`` keys to ORM lookups
- ``datatable_search_fields``: ORM lookups matched with ``icontains`` by ``q``
"""

import json

from django.db.models import Q
from rest_framework.exceptions import ValidationError
from rest_framework.filters import BaseFilterBackend


def parse_filters(request) -> dict:
    raw = request.query_params.get('filters')
    if not raw:
        return {}
    try:
        filters = json.loads(raw)
    except ValueError:
        raise ValidationError({'filters': 'filters must be a JSON object'})
    if not isinstance(filters, dict):
        raise ValidationError({'filters': 'filters must be a JSON object'})
    return filters


def search_term(request) -> str:
    """``q`` from the query string, else from the ``filters`` object."""
    q = request.query_params.get('q')
    if q is None:
        q = parse_filters(request).get('q')
    return (q or '').strip() if isinstance(q, str) else ''


class DataTableFilterBackend(BaseFilterBackend):

    def filter_queryset(self, request, queryset, view):
        queryset = self._filter(request, queryset, view)
        queryset = self._search(request, queryset, view)
        return self._sort(request, queryset, view)

    def _filter(self, request, queryset, view):
        allowed = getattr(view, 'datatable_filter_fields', {})
        for key, value in parse_filters(request).items():
            if key not in allowed or value in (None, ''):
                continue
            queryset = queryset.filter(**{allowed[key]: value})
        return queryset

    def _search(self, request, queryset, view):
        fields = getattr(view, 'datatable_search_fields', ())
        q = search_term(request)
        if not q or not fields:
            return queryset
        condition = Q()
        for field in fields:
            condition |= Q(**{f'{field}__icontains': q})
        return queryset.filter(condition)

    def _sort(self, request, queryset, view):
        allowed = getattr(view, 'datatable_sort_fields', {})
        sort_by = request.query_params.get('sortBy')
        if sort_by in allowed:
            prefix = '' if request.query_params.get('sortOrder') == 'asc' else '-'
            return queryset.order_by(f'{prefix}{allowed[sort_by]}', f'{prefix}pk')
        default = getattr(view, 'datatable_default_sort', None)
        return queryset.order_by(*default) if default else queryset

    def get_schema_operation_parameters(self, view):
        return [
            {'name': 'sortBy', 'required': False, 'in': 'query', 'schema': {'type': 'string'}},
            {'name': 'sortOrder', 'required': False, 'in': 'query',
             'schema': {'type': 'string', 'enum': ['asc', 'desc']}},
            {'name': 'filters', 'required': False, 'in': 'query', 'schema': {'type': 'string'},
             'description': 'JSON object of column filters'},
            {'name': 'q', 'required': False, 'in': 'query', 'schema': {'type': 'string'}},
        ]
