from django.core.exceptions import ValidationError
from django.utils.dateparse import parse_datetime
from rest_framework import mixins, status
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.accounts.permissions import IsStaff
from apps.api.serializers import CompanyCarInputSerializer, CompanyCarSerializer, MaintenanceInputSerializer
from apps.audit.models import AuditLog
from apps.audit.services import log_audit_action
from apps.companies.pricing import quote_daily_price, rental_days
from apps.core.models import CompanyCar
from apps.core.services import car_service
from .base import CompanyScopedViewSet


def _query_moment(request, field):
    try:
        return parse_datetime(request.query_params.get(field) or '')
    except ValueError:
        raise ValidationError({field: 'Invalid date'})


class CompanyCarViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, CompanyScopedViewSet):
    """Company fleet; owners and admins edit, managers read and record maintenance."""

    serializer_class = CompanyCarSerializer
    permission_classes = [IsStaff]
    base_queryset = CompanyCar.objects.select_related(
        'company', 'template__brand', 'template__model', 'template__body_type',
        'template__fuel_type', 'color',
    )
    datatable_search_fields = ('license_plate', 'vin', 'template__brand__name', 'template__model__name')
    datatable_sort_fields = {
        'created_at': 'created_at', 'license_plate': 'license_plate', 'year': 'year',
        'price_per_day': 'price_per_day', 'status': 'status', 'mileage': 'mileage',
    }
    datatable_filter_fields = {'status': 'status', 'year': 'year', 'template_id': 'template_id',
                               'brand_id': 'template__brand_id'}
    datatable_default_sort = ('-created_at',)

    def create(self, request):
        company = self.get_company()
        serializer = CompanyCarInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        data.pop('updated_at', None)
        car = car_service.create_car(
            actor=request.user,
            company=company,
            template=data.pop('template'),
            license_plate=data.pop('license_plate'),
            year=data.pop('year'),
            price_per_day=data.pop('price_per_day'),
            request=request,
            **data
        )
        return Response(CompanyCarSerializer(car).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        car = self.get_object()
        serializer = CompanyCarInputSerializer(car, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)
        expected = data.pop('updated_at', None)
        car = car_service.update_car(actor=request.user, car=car, expected_updated_at=expected,
                                     request=request, **data)
        return Response(CompanyCarSerializer(car).data)

    def destroy(self, request, pk=None):
        car_service.soft_delete_car(actor=request.user, car=self.get_object(), request=request)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    def maintenance(self, request, pk=None):
        serializer = MaintenanceInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = car_service.record_maintenance(
            actor=request.user,
            car=self.get_object(),
            performed_at_mileage=serializer.validated_data.get('performed_at_mileage'),
            next_interval=serializer.validated_data.get('next_interval'),
            request=request,
        )
        return Response(result)

    @action(detail=False, methods=['get'])
    def attention(self, request):
        company = self.get_company()
        try:
            within_days = int(request.query_params.get('within_days', 30))
        except ValueError:
            raise ValidationError({'within_days': 'within_days must be a number'})
        return Response({'data': car_service.cars_needing_attention(company, within_days=within_days)})

    @action(detail=True, methods=['get'])
    def quote(self, request, pk=None):
        """Daily and total price for ``start``..``end`` under the company pricing."""
        car = self.get_object()
        start = _query_moment(request, 'start')
        end = _query_moment(request, 'end')
        if start is None or end is None:
            raise ValidationError('start and end are required')
        if end <= start:
            raise ValidationError({'end': 'End date must be after start date'})
        daily = quote_daily_price(car, start, end)
        days = rental_days(start, end)
        return Response({'daily_price': daily, 'days': days, 'total': daily * days})

    def retrieve(self, request, *args, **kwargs):
        car = self.get_object()
        log_audit_action(request, 'company_car', car.pk, AuditLog.ACTION_VIEW, company=car.company)
        return Response(self.get_serializer(car).data)
