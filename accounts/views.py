import logging

from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenObtainPairView

from .exceptions import InvalidCredentials
from .permissions import IsVisitAdministrator
from .serializers import AdminTokenObtainPairSerializer, LogoutSerializer, UserSerializer

logger = logging.getLogger(__name__)


class AdminLoginView(TokenObtainPairView):
    """
    POST /api/auth/login/

    Exchange an administrator's username and password for a JWT pair.
    The refresh token is the session context: it lives until logout.
    """
    serializer_class = AdminTokenObtainPairSerializer
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = 'login'

    def post(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)

        try:
            serializer.is_valid(raise_exception=True)
        except InvalidCredentials as exc:
            return Response(
                {'error': str(exc.detail), 'code': exc.default_code},
                status=exc.status_code
            )

        return Response(serializer.validated_data, status=status.HTTP_200_OK)


class LogoutView(APIView):
    """
    POST /api/auth/logout/

    Blacklists the refresh token, ending the session.
    """
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        serializer = LogoutSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {'error': 'Refresh token is required'},
                status=status.HTTP_400_BAD_REQUEST
            )

        try:
            token = RefreshToken(serializer.validated_data['refresh_token'])
            token.blacklist()
        except TokenError as e:
            return Response(
                {'error': str(e)},
                status=status.HTTP_400_BAD_REQUEST
            )

        logger.info(f"User {request.user.username} signed out")
        return Response({
            'message': 'Logout successful'
        }, status=status.HTTP_200_OK)


class SessionView(APIView):
    """
    GET /api/auth/session/

    Report the administrator attached to the current access token.
    """
    permission_classes = [IsVisitAdministrator]

    def get(self, request):
        return Response({
            'authenticated': True,
            'user': UserSerializer(request.user).data,
        })
