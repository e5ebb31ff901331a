# users/permissions.py

from rest_framework.permissions import BasePermission


# ---------------- BASE ROLE PERMISSION ----------------
class HasRole(BasePermission):
    """
    Base permission to check user role safely.
    """

    allowed_roles = set()

    def has_permission(self, request, view):
        user = request.user
        return bool(user and user.is_authenticated and user.role in self.allowed_roles)


# ---------------- ROLE PERMISSIONS ----------------
class IsSuperAdmin(HasRole):
    allowed_roles = {"super_admin"}
