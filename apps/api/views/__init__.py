from .audit import AuditLogViewSet
from .companies import CompanyViewSet
from .contracts import BookingViewSet, ContractViewSet, PaymentViewSet
from .fleet import CompanyCarViewSet
from .planner import CalendarEventViewSet, TaskViewSet
from .platform import PlatformConfigView, PlatformOverviewView
from .public import PublicBrandListView, PublicCarViewSet
from .references import (
    CarBodyTypeViewSet, CarBrandViewSet, CarColorViewSet, CarFuelTypeViewSet, CarModelViewSet,
    CarTemplateViewSet, CitizenshipViewSet, CurrencyViewSet, DistrictViewSet, HotelViewSet,
    LocationSeasonView, LocationViewSet, PaymentStatusViewSet, PaymentTypeViewSet,
)
from .reports import FinancialReportView, StatsView
from .users import ClientViewSet, ManagerViewSet
