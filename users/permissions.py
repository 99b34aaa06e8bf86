from rest_framework import permissions

from .models import User


def is_role_allowed(role, allowed_roles):
    return role in allowed_roles


def require_roles(*roles):
    """Build a permission class admitting authenticated users with ``roles``."""
    allowed = frozenset(roles)

    class HasRole(permissions.BasePermission):
        message = "Insufficient permissions"

        def has_permission(self, request, view):
            user = request.user
            if not user or not user.is_authenticated:
                return False
            return is_role_allowed(user.role, allowed)

    HasRole.__name__ = f"HasRole[{','.join(sorted(allowed))}]"
    return HasRole


IsAdmin = require_roles(User.Role.ADMIN)


def is_self_or_admin(user, user_id):
    return str(user.pk) == str(user_id) or user.is_admin
