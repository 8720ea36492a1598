from rest_framework.response import Response
from rest_framework.views import APIView

from apps.accounts.permissions import IsAdminOrOwner, IsStaff
from apps.reports.services import dashboard_stats, financial_report
from .base import CompanyContextMixin


class FinancialReportView(CompanyContextMixin, APIView):
    """Income, expenses and profit for a period against the one before it."""

    permission_classes = [IsAdminOrOwner]

    def get(self, request):
        params = request.query_params
        report = financial_report(
            self.get_company(),
            period=params.get('period', 'month'),
            start_date=params.get('startDate'),
            end_date=params.get('endDate'),
        )
        return Response(report)


class StatsView(CompanyContextMixin, APIView):
    permission_classes = [IsStaff]

    def get(self, request):
        return Response(dashboard_stats(self.get_company()))
