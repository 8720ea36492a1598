"""
API URL configuration for the car-rental back-office.
"""

from django.urls import path, include
from rest_framework.routers import DefaultRouter
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView, SpectacularRedocView
from . import views

app_name = 'api'

router = DefaultRouter()
router.register(r'companies', views.CompanyViewSet, basename='company')
router.register(r'managers', views.ManagerViewSet, basename='manager')
router.register(r'clients', views.ClientViewSet, basename='client')
router.register(r'cars', views.CompanyCarViewSet, basename='car')
router.register(r'contracts', views.ContractViewSet, basename='contract')
router.register(r'payments', views.PaymentViewSet, basename='payment')
router.register(r'bookings', views.BookingViewSet, basename='booking')
router.register(r'audit-logs', views.AuditLogViewSet, basename='audit-log')
router.register(r'tasks', views.TaskViewSet, basename='task')
router.register(r'calendar-events', views.CalendarEventViewSet, basename='calendar-event')
router.register(r'public/cars', views.PublicCarViewSet, basename='public-car')

# Reference data
router.register(r'locations', views.LocationViewSet, basename='location')
router.register(r'districts', views.DistrictViewSet, basename='district')
router.register(r'hotels', views.HotelViewSet, basename='hotel')
router.register(r'currencies', views.CurrencyViewSet, basename='currency')
router.register(r'car-brands', views.CarBrandViewSet, basename='car-brand')
router.register(r'car-models', views.CarModelViewSet, basename='car-model')
router.register(r'car-body-types', views.CarBodyTypeViewSet, basename='car-body-type')
router.register(r'car-fuel-types', views.CarFuelTypeViewSet, basename='car-fuel-type')
router.register(r'car-colors', views.CarColorViewSet, basename='car-color')
router.register(r'car-templates', views.CarTemplateViewSet, basename='car-template')
router.register(r'payment-statuses', views.PaymentStatusViewSet, basename='payment-status')
router.register(r'payment-types', views.PaymentTypeViewSet, basename='payment-type')
router.register(r'citizenships', views.CitizenshipViewSet, basename='citizenship')

urlpatterns = [
    path('v1/auth/', include('apps.accounts.urls')),
    path('v1/location-seasons/', views.LocationSeasonView.as_view(), name='location-seasons'),
    path('v1/reports/financial/', views.FinancialReportView.as_view(), name='financial-report'),
    path('v1/reports/stats/', views.StatsView.as_view(), name='stats'),
    path('v1/platform/overview/', views.PlatformOverviewView.as_view(), name='platform-overview'),
    path('v1/platform/config/', views.PlatformConfigView.as_view(), name='platform-config'),
    path('v1/public/brands/', views.PublicBrandListView.as_view(), name='public-brands'),
    path('v1/', include(router.urls)),
    path('schema/', SpectacularAPIView.as_view(), name='schema'),
    path('docs/', SpectacularSwaggerView.as_view(url_name='api:schema'), name='swagger-ui'),
    path('redoc/', SpectacularRedocView.as_view(url_name='api:schema'), name='redoc'),
]
