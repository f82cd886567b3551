import logging

from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework import serializers
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from .exceptions import InvalidCredentials

logger = logging.getLogger(__name__)
User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """Serializer for the signed-in administrator."""
    full_name = serializers.CharField(source='get_full_name', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'full_name', 'role', 'last_login_at']
        read_only_fields = fields


class AdminTokenObtainPairSerializer(TokenObtainPairSerializer):
    """
    JWT login for dashboard administrators.

    Unknown usernames, wrong passwords, inactive accounts and non-admin
    accounts all fail with the same InvalidCredentials message.
    """
    def validate(self, attrs):
        username = attrs.get(self.username_field, '')
        try:
            data = super().validate(attrs)
        except AuthenticationFailed:
            logger.info("Rejected dashboard login attempt")
            raise InvalidCredentials()

        if not self.user.is_visit_admin:
            logger.info("Rejected dashboard login attempt")
            raise InvalidCredentials()

        data['user'] = UserSerializer(self.user).data

        # Update last login
        self.user.last_login_at = timezone.now()
        self.user.save(update_fields=['last_login_at'])

        logger.info(f"Administrator {username} signed in")
        return data


class LogoutSerializer(serializers.Serializer):
    refresh_token = serializers.CharField(required=True)
