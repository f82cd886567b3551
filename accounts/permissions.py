"""
Farm Visit Dashboard Permissions
"""
from rest_framework import permissions


class IsVisitAdministrator(permissions.BasePermission):
    """
    Permission for administrators reviewing submitted farm visits.
    """
    message = 'Administrator access required'

    def has_permission(self, request, view):
        """Check if user is authenticated and holds the admin role."""
        return bool(
            request.user and
            request.user.is_authenticated and
            getattr(request.user, 'is_visit_admin', False)
        )
