from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.http import Http404
from django.shortcuts import get_object_or_404
from rest_framework import mixins, status
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.accounts.permissions import IsStaff
from apps.accounts.scope import get_user_scope
from apps.api.serializers import (
    BookingInputSerializer, BookingSerializer, BookingStatusSerializer, CloseContractSerializer,
    ContractInputSerializer, ContractSerializer, PaymentInputSerializer, PaymentSerializer,
)
from apps.audit.models import AuditLog
from apps.audit.services import log_audit_action
from apps.core.models import Booking, CompanyCar, Contract, Payment
from apps.core.services import booking_service, contract_service, payment_service
from .base import CompanyScopedViewSet

User = get_user_model()

REQUIRED_CONTRACT_FIELDS = ('company_car_id', 'client_id', 'start_date', 'end_date', 'total_amount')


class ContractViewSet(mixins.ListModelMixin, CompanyScopedViewSet):
    """Rental contracts of the resolved company."""

    serializer_class = ContractSerializer
    permission_classes = [IsStaff]
    base_queryset = Contract.objects.select_related(
        'company', 'client', 'manager', 'car__template__brand', 'car__template__model',
    )
    datatable_search_fields = ('status', 'client__first_name', 'client__last_name', 'car__license_plate')
    datatable_sort_fields = {
        'created_at': 'created_at', 'start_date': 'start_date', 'end_date': 'end_date',
        'total_amount': 'total_amount', 'status': 'status',
    }
    datatable_filter_fields = {'status': 'status', 'client_id': 'client_id', 'car_id': 'car_id'}
    datatable_default_sort = ('-created_at',)

    def retrieve(self, request, pk=None):
        contract = self.get_object()
        log_audit_action(request, 'contract', contract.pk, AuditLog.ACTION_VIEW, company=contract.company)
        return Response(ContractSerializer(contract).data)

    def create(self, request):
        company = self.get_company()
        serializer = ContractInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        if any(data.get(key) in (None, '') for key in REQUIRED_CONTRACT_FIELDS):
            raise ValidationError('Missing required fields')

        car = CompanyCar.objects.filter(pk=data['company_car_id'], company=company).first()
        if car is None:
            raise Http404('Car not found')
        client = get_object_or_404(User, pk=data['client_id'])
        manager = get_object_or_404(User, pk=data['manager_id']) if data.get('manager_id') else None
        booking = None
        if data.get('booking_id'):
            booking = get_object_or_404(Booking, pk=data['booking_id'], company=company)

        details = data.get('details')
        if details is not None and 'notes' in data:
            details.notes = (data['notes'] or '').strip()

        contract = contract_service.create_contract(
            actor=request.user,
            company=company,
            car=car,
            client=client,
            start_date=data['start_date'],
            end_date=data['end_date'],
            total_amount=data['total_amount'],
            deposit_amount=data.get('deposit_amount'),
            details=details,
            manager=manager,
            booking=booking,
            photos=data.get('photos'),
            car_version=data.get('car_updated_at'),
            request=request,
        )
        return Response(ContractSerializer(contract).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        contract = self.get_object()
        serializer = ContractInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        data = dict(serializer.validated_data)

        fields = {}
        for key in ('start_date', 'end_date', 'total_amount', 'deposit_amount', 'status', 'photos', 'notes'):
            if key in data:
                fields[key] = data[key]
        if 'client_id' in data:
            fields['client'] = get_object_or_404(User, pk=data['client_id'])
        if data.get('manager_id'):
            fields['manager'] = get_object_or_404(User, pk=data['manager_id'])

        details = data.get('details')
        if details is not None and 'notes' in data:
            details.notes = (data['notes'] or '').strip()

        contract = contract_service.update_contract(
            actor=request.user,
            contract=contract,
            expected_updated_at=data.get('updated_at'),
            details=details,
            request=request,
            **fields
        )
        return Response(ContractSerializer(contract).data)

    @action(detail=True, methods=['post'])
    def close(self, request, pk=None):
        serializer = CloseContractSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = contract_service.close_contract(
            actor=request.user,
            contract_id=pk,
            fees=serializer.validated_data.get('fees', []),
            request=request,
        )
        return Response(result)


class PaymentViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, CompanyScopedViewSet):
    serializer_class = PaymentSerializer
    permission_classes = [IsStaff]
    base_queryset = Payment.objects.select_related('payment_status', 'payment_type', 'contract__client')
    datatable_search_fields = ('notes', 'payment_method', 'contract__client__first_name',
                               'contract__client__last_name')
    datatable_sort_fields = {'created_at': 'created_at', 'amount': 'amount', 'payment_method': 'payment_method'}
    datatable_filter_fields = {'contract_id': 'contract_id', 'payment_status_id': 'payment_status_id',
                               'payment_type_id': 'payment_type_id', 'payment_method': 'payment_method'}
    filterset_fields = ('contract', 'payment_status', 'payment_type', 'payment_method')
    datatable_default_sort = ('-created_at',)

    def get_queryset(self):
        qs = super().get_queryset()
        sign = self.request.query_params.get('sign')
        if sign in ('+', '-'):
            qs = qs.filter(payment_type__sign=sign)
        return qs

    def create(self, request):
        company = self.get_company()
        serializer = PaymentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payment = payment_service.create_payment(actor=request.user, company=company, request=request,
                                                 **serializer.validated_data)
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        payment = self.get_object()
        serializer = PaymentInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        fields = dict(serializer.validated_data)
        fields.pop('contract_id', None)
        payment = payment_service.update_payment(actor=request.user, payment=payment, request=request, **fields)
        return Response(PaymentSerializer(payment).data)

    def destroy(self, request, pk=None):
        payment_service.delete_payment(actor=request.user, payment=self.get_object(), request=request)
        return Response(status=status.HTTP_204_NO_CONTENT)


class BookingViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, CompanyScopedViewSet):
    """
    Bookings: clients see and create their own, managers see pending ones,
    owners and admins see every booking of the company.
    """

    serializer_class = BookingSerializer
    base_queryset = Booking.objects.select_related('client', 'car__template__brand', 'car__template__model')
    datatable_search_fields = ('client__first_name', 'client__last_name', 'car__license_plate', 'notes')
    datatable_sort_fields = {'created_at': 'created_at', 'start_date': 'start_date', 'status': 'status'}
    datatable_filter_fields = {'status': 'status', 'car_id': 'car_id'}
    datatable_default_sort = ('-created_at',)

    def get_queryset(self):
        scope = get_user_scope(self.request.user)
        if scope.role == 'client':
            return self.base_queryset.filter(client=self.request.user)
        qs = super().get_queryset()
        if scope.role == 'manager':
            qs = qs.filter(status=Booking.STATUS_PENDING)
        return qs

    def create(self, request):
        serializer = BookingInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = booking_service.create_booking(actor=request.user, request=request, **serializer.validated_data)
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], permission_classes=[IsStaff], url_path='status')
    def set_status(self, request, pk=None):
        serializer = BookingStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = booking_service.update_booking_status(
            actor=request.user, booking=self.get_object(),
            status=serializer.validated_data['status'], request=request,
        )
        return Response(BookingSerializer(booking).data)
