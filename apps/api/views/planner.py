"""
Staff planner: tasks sent between owners and managers, and the company calendar.
"""

from django.core.exceptions import ValidationError
from django.db.models import F
from django.utils.dateparse import parse_date
from rest_framework import mixins, status
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.accounts.permissions import IsStaff
from apps.api.filters import parse_filters
from apps.api.serializers import (
    CalendarEventInputSerializer, CalendarEventSerializer, TaskInputSerializer, TaskSerializer,
    TaskUpdateSerializer, UserSummarySerializer,
)
from apps.core.models import CalendarEvent, Task
from apps.core.services import calendar_service, task_service
from .base import CompanyScopedViewSet


class TaskViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, CompanyScopedViewSet):
    """Tasks of the company, soonest due first; undated tasks go last."""

    serializer_class = TaskSerializer
    permission_classes = [IsStaff]
    base_queryset = Task.objects.select_related('assigned_to', 'created_by')
    datatable_search_fields = ('title', 'description')
    datatable_sort_fields = {'due_date': 'due_date', 'created_at': 'created_at', 'status': 'status',
                             'title': 'title'}
    datatable_filter_fields = {'created_by': 'created_by_id', 'assigned_to': 'assigned_to_id'}
    datatable_default_sort = (F('due_date').asc(nulls_last=True), 'pk')

    def get_queryset(self):
        qs = super().get_queryset()
        wanted = parse_filters(self.request).get('status')
        if isinstance(wanted, list):
            qs = qs.filter(status__in=wanted)
        elif wanted:
            qs = qs.filter(status=wanted)
        return qs

    def create(self, request):
        serializer = TaskInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        company = self.get_company(required=not self.is_admin())
        tasks = task_service.create_tasks(actor=request.user, company=company, request=request,
                                          **serializer.validated_data)
        data = TaskSerializer(tasks, many=True).data
        return Response({'data': data[0], 'created': len(data), 'tasks': data}, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        serializer = TaskUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        task = task_service.update_task(actor=request.user, task=self.get_object(), request=request,
                                        **serializer.validated_data)
        return Response(TaskSerializer(task).data)

    def destroy(self, request, pk=None):
        task_service.delete_task(actor=request.user, task=self.get_object(), request=request)
        return Response({'message': 'Task deleted successfully'})

    @action(detail=False, methods=['get'], url_path='company-users')
    def company_users(self, request):
        """People a task can be sent to."""
        company = self.get_company(required=not self.is_admin())
        users = task_service.task_assignees(company)
        return Response({'data': UserSummarySerializer(users, many=True).data})


class CalendarEventViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, CompanyScopedViewSet):
    """Company calendar; ``start_date`` / ``end_date`` bound the listed range."""

    serializer_class = CalendarEventSerializer
    permission_classes = [IsStaff]
    base_queryset = CalendarEvent.objects.select_related('created_by')
    datatable_search_fields = ('title', 'description')
    datatable_filter_fields = {'event_type': 'event_type'}
    datatable_default_sort = ('event_date', 'start_time', 'pk')
    pagination_class = None

    def get_queryset(self):
        qs = super().get_queryset()
        for param, lookup in (('start_date', 'event_date__gte'), ('end_date', 'event_date__lte')):
            try:
                value = parse_date(self.request.query_params.get(param) or '')
            except ValueError:
                raise ValidationError({param: 'Invalid date'})
            if value:
                qs = qs.filter(**{lookup: value})
        return qs

    def list(self, request, *args, **kwargs):
        events = self.filter_queryset(self.get_queryset())
        data = self.get_serializer(events, many=True).data
        return Response({'data': data, 'totalCount': len(data)})

    def create(self, request):
        serializer = CalendarEventInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        event = calendar_service.create_event(actor=request.user, company=self.get_company(), request=request,
                                              **serializer.validated_data)
        return Response(CalendarEventSerializer(event).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        serializer = CalendarEventInputSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        event = calendar_service.update_event(actor=request.user, event=self.get_object(), request=request,
                                              **serializer.validated_data)
        return Response(CalendarEventSerializer(event).data)

    def destroy(self, request, pk=None):
        calendar_service.delete_event(actor=request.user, event=self.get_object(), request=request)
        return Response({'message': 'Event deleted successfully'})
