from django.urls import path

from .views import HealthCheckView, LivenessView, MetricsView, ReadinessView

app_name = 'monitoring'

urlpatterns = [
    path('', HealthCheckView.as_view(), name='health'),
    path('metrics/', MetricsView.as_view(), name='metrics'),
    path('ready/', ReadinessView.as_view(), name='readiness'),
    path('live/', LivenessView.as_view(), name='liveness'),
]
