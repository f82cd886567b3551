from django.contrib.auth.models import AbstractUser
from django.db import models
import uuid


class User(AbstractUser):
    """
    Custom User model extending Django's AbstractUser.

    Administrators review the farm visit dashboard; extension officers may
    hold accounts but submitting the visit form does not require one.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class UserRole(models.TextChoices):
        ADMIN = 'ADMIN', 'Administrator'
        EXTENSION_OFFICER = 'EXTENSION_OFFICER', 'Extension Officer'

    role = models.CharField(
        max_length=50,
        choices=UserRole.choices,
        default=UserRole.EXTENSION_OFFICER,
        db_index=True,
        help_text="User's primary role in the system"
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)
    last_login_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'users'
        verbose_name = 'User'
        verbose_name_plural = 'Users'

    def __str__(self):
        return f"{self.username} ({self.get_role_display()})"

    @property
    def is_visit_admin(self):
        """Whether this user may open the farm visit dashboard."""
        return self.is_active and (self.is_superuser or self.role == self.UserRole.ADMIN)
