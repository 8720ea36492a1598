"""
Catalog for the client-facing site; no sign-in required.
"""

from rest_framework import mixins, viewsets
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.api.serializers import CarBrandSerializer, PublicCarSerializer
from apps.core.models import CompanyCar
from apps.references.models import CarBrand
from apps.references.services import get_cached_list


class PublicCarViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Available cars of active companies, newest first."""

    serializer_class = PublicCarSerializer
    permission_classes = [AllowAny]
    authentication_classes = []
    queryset = CompanyCar.objects.filter(
        status=CompanyCar.STATUS_AVAILABLE,
        company__is_active=True,
        company__deleted_at__isnull=True,
    ).select_related('company', 'template__brand', 'template__model', 'template__body_type',
                     'template__fuel_type', 'color')
    datatable_search_fields = ('template__brand__name', 'template__model__name', 'description')
    datatable_sort_fields = {'price': 'price_per_day', 'newest': 'created_at', 'year': 'year'}
    datatable_filter_fields = {
        'brand_id': 'template__brand_id',
        'model_id': 'template__model_id',
        'body_type_id': 'template__body_type_id',
        'company_id': 'company_id',
        'price_min': 'price_per_day__gte',
        'price_max': 'price_per_day__lte',
    }
    datatable_default_sort = ('-created_at', '-pk')


class PublicBrandListView(APIView):
    """Car brands for the catalog filters."""

    permission_classes = [AllowAny]
    authentication_classes = []

    def get(self, request):
        data = get_cached_list(
            'brands',
            lambda: list(CarBrandSerializer(CarBrand.objects.all(), many=True).data),
        )
        return Response({'data': data, 'totalCount': len(data)})
