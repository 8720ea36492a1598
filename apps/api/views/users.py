from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.fields import BooleanField
from rest_framework.response import Response

from apps.accounts.models import Manager
from apps.accounts.permissions import IsAdminOrOwner, IsStaff
from apps.accounts.services import client_service, manager_service
from apps.api.serializers import (
    ClientInputSerializer, ClientSerializer, ManagerInputSerializer, ManagerSerializer,
)
from .base import CompanyScopedViewSet

User = get_user_model()


class ClientViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """Rental clients; staff search, register and edit them."""

    serializer_class = ClientSerializer
    permission_classes = [IsStaff]
    datatable_search_fields = ('first_name', 'last_name', 'phone', 'email', 'passport_number')
    datatable_sort_fields = {'created_at': 'created_at', 'name': 'first_name', 'surname': 'last_name',
                             'email': 'email'}
    datatable_filter_fields = {'citizenship': 'citizenship', 'city': 'city'}
    datatable_default_sort = ('-created_at',)

    def get_queryset(self):
        return User.objects.filter(role=User.ROLE_CLIENT, is_active=True)

    def create(self, request):
        serializer = ClientInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        client = client_service.create_client(actor=request.user, request=request, **serializer.validated_data)
        return Response(ClientSerializer(client).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        client = self.get_object()
        serializer = ClientInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        client = client_service.update_client(actor=request.user, client=client, request=request,
                                              **serializer.validated_data)
        return Response(ClientSerializer(client).data)

    @action(detail=False, methods=['get'])
    def search(self, request):
        """
        ``?email=`` finds one user by exact email (``{"user": ...}`` or null);
        ``?q=`` returns up to 20 clients matching name, phone, email or passport.
        """
        params = request.query_params
        if 'q' in params and 'email' not in params:
            clients = client_service.search_clients(params.get('q'))[:20]
            return Response({'data': ClientSerializer(clients, many=True).data})
        user = client_service.find_user_by_email(params.get('email'))
        return Response({'user': ClientSerializer(user).data if user else None})


class ManagerViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, CompanyScopedViewSet):
    """Company managers; owners hire them and toggle their access."""

    serializer_class = ManagerSerializer
    permission_classes = [IsAdminOrOwner]
    base_queryset = Manager.objects.select_related('user', 'company')
    datatable_search_fields = ('user__first_name', 'user__last_name', 'user__email')
    datatable_sort_fields = {'created_at': 'created_at', 'is_active': 'is_active',
                             'email': 'user__email', 'name': 'user__first_name'}
    datatable_filter_fields = {'is_active': 'is_active'}
    datatable_default_sort = ('-created_at',)

    def get_queryset(self):
        qs = super().get_queryset()
        is_active = self.request.query_params.get('is_active')
        if is_active in ('true', 'false'):
            qs = qs.filter(is_active=is_active == 'true')
        return qs

    def create(self, request):
        company = self.get_company()
        serializer = ManagerInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        manager = manager_service.create_manager(
            actor=request.user,
            company=company,
            email=data.get('email'),
            password=data.get('password'),
            first_name=data.get('name', ''),
            last_name=data.get('surname', ''),
            phone=data.get('phone', ''),
            is_active=data.get('is_active', True),
            request=request,
        )
        return Response(ManagerSerializer(manager).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        # Unscoped lookup: a manager of another company is refused with 403, not hidden
        manager = get_object_or_404(Manager.objects.select_related('company', 'user'), pk=pk)
        fields = {}
        if 'is_active' in request.data:
            fields['is_active'] = BooleanField().to_internal_value(request.data['is_active'])
        manager = manager_service.update_manager(actor=request.user, manager=manager, request=request, **fields)
        return Response(ManagerSerializer(manager).data)
