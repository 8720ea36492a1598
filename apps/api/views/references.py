"""
Reference data endpoints: readable by every signed-in user, written by admins.
"""

from django.core.exceptions import ValidationError
from django.db.models import ProtectedError
from django.shortcuts import get_object_or_404
from rest_framework import viewsets
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.accounts.permissions import IsAdminOrReadOnly, ensure_admin
from apps.api import serializers as s
from apps.audit.services import log_audit_action, snapshot
from apps.references import models as m
from apps.references.services import get_cached_list, replace_location_seasons

DATATABLE_PARAMS = ('page', 'pageSize', 'q', 'sortBy', 'filters')


class ReferenceViewSet(viewsets.ModelViewSet):
    """
    CRUD for one reference table.

    Plain list requests are served whole from the reference cache; DataTable
    requests (paging, search, sorting) hit the database.
    """

    permission_classes = [IsAdminOrReadOnly]
    http_method_names = ['get', 'post', 'patch', 'delete', 'head', 'options']
    cache_kind = None
    entity_type = None
    # query parameter -> ORM lookup narrowing plain lists
    list_params = {}
    datatable_search_fields = ('name',)
    datatable_sort_fields = {'name': 'name', 'id': 'id'}

    def _narrow(self, qs, params):
        lookups = {}
        for key, value in params.items():
            if value in (None, ''):
                continue
            if key.endswith('_id') and not str(value).isdigit():
                raise ValidationError({key: f'{key} must be a number'})
            lookups[self.list_params[key]] = value
        return qs.filter(**lookups)

    def list(self, request, *args, **kwargs):
        if any(param in request.query_params for param in DATATABLE_PARAMS):
            queryset = self._narrow(self.get_queryset(), {
                key: request.query_params.get(key) for key in self.list_params
            })
            page = self.paginate_queryset(self.filter_queryset(queryset))
            return self.get_paginated_response(self.get_serializer(page, many=True).data)

        params = {key: request.query_params.get(key) for key in self.list_params}
        data = get_cached_list(
            self.cache_kind,
            lambda: list(self.get_serializer(self._narrow(self.get_queryset(), params), many=True).data),
            **params
        )
        return Response({'data': data, 'totalCount': len(data)})

    def perform_create(self, serializer):
        instance = serializer.Meta.model(**serializer.validated_data)
        instance.full_clean()
        instance.save()
        serializer.instance = instance
        log_audit_action(self.request, self.entity_type, instance.pk, 'create', None, snapshot(instance))

    def perform_update(self, serializer):
        instance = serializer.instance
        before = snapshot(instance)
        for key, value in serializer.validated_data.items():
            setattr(instance, key, value)
        instance.full_clean()
        instance.save()
        log_audit_action(self.request, self.entity_type, instance.pk, 'update', before, snapshot(instance))

    def perform_destroy(self, instance):
        before = snapshot(instance)
        pk = instance.pk
        try:
            instance.delete()
        except ProtectedError:
            raise ValidationError('This record is in use and cannot be deleted')
        log_audit_action(self.request, self.entity_type, pk, 'delete', before, None)


class LocationViewSet(ReferenceViewSet):
    queryset = m.Location.objects.all()
    serializer_class = s.LocationSerializer
    cache_kind = 'locations'
    entity_type = 'location'


class DistrictViewSet(ReferenceViewSet):
    queryset = m.District.objects.select_related('location')
    serializer_class = s.DistrictSerializer
    cache_kind = 'districts'
    entity_type = 'district'
    list_params = {'location_id': 'location_id'}
    datatable_filter_fields = {'location_id': 'location_id', 'is_active': 'is_active'}


class HotelViewSet(ReferenceViewSet):
    queryset = m.Hotel.objects.select_related('district')
    serializer_class = s.HotelSerializer
    cache_kind = 'hotels'
    entity_type = 'hotel'
    list_params = {'location_id': 'location_id', 'district_id': 'district_id'}
    datatable_filter_fields = {'location_id': 'location_id', 'district_id': 'district_id'}


class CurrencyViewSet(ReferenceViewSet):
    queryset = m.Currency.objects.all()
    serializer_class = s.CurrencySerializer
    cache_kind = 'currencies'
    entity_type = 'currency'
    datatable_search_fields = ('code', 'name')
    datatable_sort_fields = {'code': 'code', 'name': 'name'}


class CarBrandViewSet(ReferenceViewSet):
    queryset = m.CarBrand.objects.all()
    serializer_class = s.CarBrandSerializer
    cache_kind = 'brands'
    entity_type = 'car_brand'


class CarModelViewSet(ReferenceViewSet):
    queryset = m.CarModel.objects.select_related('brand')
    serializer_class = s.CarModelSerializer
    cache_kind = 'models'
    entity_type = 'car_model'
    list_params = {'brand_id': 'brand_id'}
    datatable_search_fields = ('name', 'brand__name')
    datatable_filter_fields = {'brand_id': 'brand_id'}


class CarBodyTypeViewSet(ReferenceViewSet):
    queryset = m.CarBodyType.objects.all()
    serializer_class = s.CarBodyTypeSerializer
    cache_kind = 'body_types'
    entity_type = 'car_body_type'


class CarFuelTypeViewSet(ReferenceViewSet):
    queryset = m.CarFuelType.objects.all()
    serializer_class = s.CarFuelTypeSerializer
    cache_kind = 'fuel_types'
    entity_type = 'car_fuel_type'


class CarColorViewSet(ReferenceViewSet):
    queryset = m.CarColor.objects.all()
    serializer_class = s.CarColorSerializer
    cache_kind = 'colors'
    entity_type = 'car_color'


class CarTemplateViewSet(ReferenceViewSet):
    queryset = m.CarTemplate.objects.select_related('brand', 'model', 'body_type', 'fuel_type')
    serializer_class = s.CarTemplateSerializer
    cache_kind = 'car_templates'
    entity_type = 'car_template'
    list_params = {'brand_id': 'brand_id', 'model_id': 'model_id'}
    datatable_search_fields = ('brand__name', 'model__name', 'description')
    datatable_sort_fields = {'brand': 'brand__name', 'model': 'model__name', 'created_at': 'created_at'}
    datatable_filter_fields = {'brand_id': 'brand_id', 'transmission': 'transmission'}


class PaymentStatusViewSet(ReferenceViewSet):
    queryset = m.PaymentStatus.objects.all()
    serializer_class = s.PaymentStatusSerializer
    cache_kind = 'payment_statuses'
    entity_type = 'payment_status'


class PaymentTypeViewSet(ReferenceViewSet):
    queryset = m.PaymentType.objects.all()
    serializer_class = s.PaymentTypeSerializer
    cache_kind = 'payment_types'
    entity_type = 'payment_type'
    list_params = {'sign': 'sign'}


class CitizenshipViewSet(ReferenceViewSet):
    queryset = m.Citizenship.objects.all()
    serializer_class = s.CitizenshipSerializer
    cache_kind = 'citizenships'
    entity_type = 'citizenship'
    # autocomplete: names starting with the typed text
    list_params = {'search': 'name__istartswith'}
    datatable_search_fields = ('name', 'code')
    datatable_filter_fields = {'is_active': 'is_active'}


class LocationSeasonView(APIView):
    """Seasons of one location; admins replace the whole list."""

    permission_classes = [IsAdminOrReadOnly]

    def get(self, request):
        location_id = request.query_params.get('locationId')
        if not location_id:
            raise ValidationError({'locationId': 'locationId is required'})
        if not str(location_id).isdigit():
            raise ValidationError({'locationId': 'locationId must be a number'})
        data = get_cached_list(
            'location_seasons',
            lambda: list(s.LocationSeasonSerializer(
                m.LocationSeason.objects.filter(location_id=location_id).order_by('start_date'), many=True
            ).data),
            location_id=location_id,
        )
        return Response({'data': data})

    def post(self, request):
        ensure_admin(request.user)
        location_id = request.data.get('locationId')
        seasons = request.data.get('seasons')
        if not location_id or seasons is None:
            raise ValidationError('locationId and seasons are required')
        location = get_object_or_404(m.Location, pk=location_id)
        created = replace_location_seasons(actor=request.user, location=location, seasons=seasons, request=request)
        return Response({'data': s.LocationSeasonSerializer(created, many=True).data})
