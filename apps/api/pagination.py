"""
DataTable pagination: ``page`` / ``pageSize`` in, ``{data, totalCount}`` out.
"""

from django.conf import settings
from rest_framework.exceptions import NotFound
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response

_SETTINGS = getattr(settings, 'PAGINATION_SETTINGS', {})


class DataTablePagination(PageNumberPagination):
    page_size = _SETTINGS.get('DEFAULT_PAGE_SIZE', 20)
    page_query_param = 'page'
    page_size_query_param = _SETTINGS.get('PAGE_SIZE_QUERY_PARAM', 'pageSize')
    max_page_size = _SETTINGS.get('MAX_PAGE_SIZE', 100)

    def paginate_queryset(self, queryset, request, view=None):
        try:
            rows = super().paginate_queryset(queryset, request, view)
        except NotFound:
            # A page past the end is empty, not missing
            self.total_count = self.django_paginator_class(queryset, 1).count
            return []
        self.total_count = self.page.paginator.count
        return rows

    def get_paginated_response(self, data):
        return Response({
            'data': data,
            'totalCount': self.total_count,
        })

    def get_paginated_response_schema(self, schema):
        return {
            'type': 'object',
            'required': ['data', 'totalCount'],
            'properties': {
                'data': schema,
                'totalCount': {'type': 'integer', 'example': 123},
            },
        }
