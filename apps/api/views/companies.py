from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.accounts.permissions import IsAdmin, IsStaff, ensure_company_access
from apps.accounts.scope import get_user_scope
from apps.api.serializers import (
    CompanyCurrenciesInputSerializer, CompanySerializer, DeliveryPriceInputSerializer,
    DurationRangeSerializer, SeasonSerializer,
)
from apps.companies import services as company_service
from apps.companies.models import Company
from apps.super_admin.services import enter_company


class CompanyViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Companies and their settings.

    Admins see every company; owners and managers only their own.
    """

    serializer_class = CompanySerializer
    permission_classes = [IsStaff]
    datatable_search_fields = ('name', 'email', 'phone', 'owner__email')
    datatable_sort_fields = {'name': 'name', 'created_at': 'created_at', 'is_active': 'is_active'}
    datatable_filter_fields = {'is_active': 'is_active', 'location_id': 'location_id'}
    datatable_default_sort = ('name',)

    def get_queryset(self):
        qs = Company.objects.filter(deleted_at__isnull=True).select_related('owner', 'location', 'currency')
        scope = get_user_scope(self.request.user)
        if scope.role == 'admin':
            return qs
        return qs.filter(pk=scope.company_id) if scope.company_id else qs.none()

    def get_permissions(self):
        if self.action in ('activate', 'deactivate', 'destroy', 'enter'):
            return [IsAdmin()]
        return super().get_permissions()

    def create(self, request):
        serializer = CompanySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        company = company_service.create_company(actor=request.user, request=request, **serializer.validated_data)
        return Response(CompanySerializer(company).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        company = self.get_object()
        serializer = CompanySerializer(company, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        company = company_service.update_company(actor=request.user, company=company, request=request,
                                                 **serializer.validated_data)
        return Response(CompanySerializer(company).data)

    def destroy(self, request, pk=None):
        company_service.soft_delete_company(actor=request.user, company=self.get_object(), request=request)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['post'])
    def activate(self, request, pk=None):
        company = company_service.activate_company(actor=request.user, company=self.get_object(), request=request)
        return Response(CompanySerializer(company).data)

    @action(detail=True, methods=['post'])
    def deactivate(self, request, pk=None):
        company = company_service.deactivate_company(actor=request.user, company=self.get_object(), request=request)
        return Response(CompanySerializer(company).data)

    @action(detail=True, methods=['post'])
    def enter(self, request, pk=None):
        return Response(enter_company(actor=request.user, company_id=pk, request=request))

    @action(detail=True, methods=['get'])
    def stats(self, request, pk=None):
        company = self.get_object()
        ensure_company_access(request.user, company)
        return Response(company_service.get_company_stats(company))

    @action(detail=True, methods=['get', 'put'])
    def currencies(self, request, pk=None):
        company = self.get_object()
        if request.method == 'GET':
            return Response({'data': company_service.list_company_currencies(company)})

        serializer = CompanyCurrenciesInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = company_service.set_company_currencies(
            actor=request.user,
            company=company,
            currency_ids=serializer.validated_data['currency_ids'],
            default_id=serializer.validated_data.get('default_currency_id'),
            request=request,
        )
        return Response({'data': data})

    @action(detail=True, methods=['get', 'put'], url_path='delivery-prices')
    def delivery_prices(self, request, pk=None):
        company = self.get_object()
        if request.method == 'GET':
            return Response({'data': company_service.list_delivery_prices(company)})

        items = request.data.get('items', []) if isinstance(request.data, dict) else request.data
        serializer = DeliveryPriceInputSerializer(data=items, many=True)
        serializer.is_valid(raise_exception=True)
        data = company_service.upsert_delivery_prices(actor=request.user, company=company,
                                                      items=serializer.validated_data, request=request)
        return Response({'data': data})

    @action(detail=True, methods=['get', 'put'])
    def seasons(self, request, pk=None):
        company = self.get_object()
        if request.method == 'GET':
            return Response({'data': company.seasons})

        serializer = SeasonSerializer(data=request.data.get('seasons', []), many=True)
        serializer.is_valid(raise_exception=True)
        company = company_service.update_company_seasons(
            actor=request.user, company=company,
            seasons=[dict(item) for item in serializer.validated_data], request=request,
        )
        return Response({'data': company.seasons})

    @action(detail=True, methods=['get', 'put'])
    def durations(self, request, pk=None):
        company = self.get_object()
        if request.method == 'GET':
            return Response({'data': company.duration_ranges})

        serializer = DurationRangeSerializer(data=request.data.get('duration_ranges', []), many=True)
        serializer.is_valid(raise_exception=True)
        company = company_service.update_company_duration_ranges(
            actor=request.user, company=company,
            duration_ranges=[dict(item) for item in serializer.validated_data], request=request,
        )
        return Response({'data': company.duration_ranges})
