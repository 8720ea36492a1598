from django.core.exceptions import ValidationError
from django.utils.dateparse import parse_date
from rest_framework import mixins, viewsets

from apps.accounts.permissions import IsAdmin
from apps.api.serializers import AuditLogSerializer
from apps.audit.models import AuditLog


class AuditLogViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Platform-wide audit trail, read-only and admin only."""

    serializer_class = AuditLogSerializer
    permission_classes = [IsAdmin]
    queryset = AuditLog.objects.select_related('user', 'company')
    datatable_search_fields = ('entity_type', 'entity_id', 'user__email', 'company__name')
    datatable_sort_fields = {'created_at': 'created_at', 'action': 'action', 'entity_type': 'entity_type'}
    datatable_filter_fields = {
        'entity_type': 'entity_type', 'action': 'action', 'user_id': 'user_id',
        'company_id': 'company_id', 'entity_id': 'entity_id',
    }
    filterset_fields = ('entity_type', 'action', 'user', 'company')
    datatable_default_sort = ('-created_at',)

    def get_queryset(self):
        qs = super().get_queryset()
        params = self.request.query_params
        date_from = self._date_param(params, 'from')
        date_to = self._date_param(params, 'to')
        if date_from:
            qs = qs.filter(created_at__date__gte=date_from)
        if date_to:
            qs = qs.filter(created_at__date__lte=date_to)
        return qs

    @staticmethod
    def _date_param(params, field):
        try:
            return parse_date(params.get(field) or '')
        except ValueError:
            raise ValidationError({field: 'Invalid date'})
