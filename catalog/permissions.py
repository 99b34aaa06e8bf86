from rest_framework import permissions

from users.models import User
from users.permissions import is_role_allowed


class IsAdminOrReadOnly(permissions.BasePermission):
    message = "Insufficient permissions"

    def has_permission(self, request, view):
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and is_role_allowed(user.role, {User.Role.ADMIN})
        )
