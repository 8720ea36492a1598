from rest_framework.response import Response
from rest_framework.views import APIView

from apps.accounts.permissions import IsAdmin
from apps.api.serializers import PlatformConfigSerializer
from apps.super_admin.models import PlatformConfig
from apps.super_admin.services import get_platform_overview, update_platform_config


class PlatformOverviewView(APIView):
    permission_classes = [IsAdmin]

    def get(self, request):
        return Response(get_platform_overview())


class PlatformConfigView(APIView):
    """Maintenance switch, support address and announcement."""

    permission_classes = [IsAdmin]

    def get(self, request):
        return Response(PlatformConfigSerializer(PlatformConfig.get_solo()).data)

    def patch(self, request):
        serializer = PlatformConfigSerializer(PlatformConfig.get_solo(), data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        cfg = update_platform_config(actor=request.user, request=request, **serializer.validated_data)
        return Response(PlatformConfigSerializer(cfg).data)
