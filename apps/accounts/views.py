"""
Session authentication endpoints for the back-office front-end.
"""

from django.contrib.auth import authenticate, login, logout
from django.views.decorators.csrf import ensure_csrf_cookie
from django.utils.decorators import method_decorator
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.accounts.scope import get_user_scope
from apps.accounts.services import profile_service, registration_service
from apps.accounts.signals import note_registration_attempt
from apps.api.serializers import ConfirmEmailSerializer, MeSerializer, ProfileSerializer, RegisterSerializer


class LoginView(APIView):
    """Log in with ``email`` (or ``username``) and ``password``."""

    permission_classes = [permissions.AllowAny]

    def post(self, request):
        identifier = (request.data.get('email') or request.data.get('username') or '').strip()
        password = request.data.get('password') or ''
        if not identifier or not password:
            return Response({'error': 'Email and password are required'},
                            status=status.HTTP_400_BAD_REQUEST)

        user = authenticate(request, username=identifier, password=password)
        if user is None:
            return Response({'error': 'Invalid login credentials'},
                            status=status.HTTP_401_UNAUTHORIZED)

        scope = get_user_scope(user)
        if scope.role != 'admin' and scope.company_id is not None:
            from apps.companies.models import Company
            if not Company.objects.filter(pk=scope.company_id, is_active=True).exists():
                return Response(
                    {'error': "Your company's account is not active. Please contact support."},
                    status=status.HTTP_403_FORBIDDEN,
                )

        login(request, user)
        return Response(MeSerializer(user).data)


class RegisterView(APIView):
    """Sign up as a company owner or a rental client; the account waits for email confirmation."""

    permission_classes = [permissions.AllowAny]

    def post(self, request):
        note_registration_attempt(request)
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = registration_service.register_user(request=request, **serializer.validated_data)
        return Response(
            {'id': user.pk, 'email': user.email, 'role': user.role, 'email_confirmed': False},
            status=status.HTTP_201_CREATED,
        )


class ConfirmEmailView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = ConfirmEmailSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = registration_service.confirm_email(request=request, **serializer.validated_data)
        return Response({'id': user.pk, 'email': user.email, 'email_confirmed': True})


class LogoutView(APIView):
    def post(self, request):
        logout(request)
        return Response({'success': True})


@method_decorator(ensure_csrf_cookie, name='get')
class MeView(APIView):
    """Current user with scope; PATCH updates the own profile."""

    def get(self, request):
        return Response(MeSerializer(request.user).data)

    def patch(self, request):
        serializer = ProfileSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = profile_service.update_profile(user=request.user, request=request,
                                              **serializer.validated_data)
        return Response(MeSerializer(user).data)
