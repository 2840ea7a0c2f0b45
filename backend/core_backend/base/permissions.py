"""
Permissions for archiving functionality.

Staff members archive and restore catalog records.
"""

from rest_framework.permissions import BasePermission


class IsStaffUser(BasePermission):
    """
    Allows access only to authenticated staff members (kitchen managers,
    purchasing leads). Regular operators keep read/write access to the
    day-to-day workflow endpoints.
    """

    def has_permission(self, request, view):
        return bool(request.user and request.user.is_authenticated and request.user.is_staff)


class CanArchiveRecords(IsStaffUser):
    """
    Permission to archive records.
    Only staff members can archive records.
    """

    def has_object_permission(self, request, view, obj):
        return self.has_permission(request, view)


class CanUnarchiveRecords(IsStaffUser):
    """
    Permission to unarchive records.
    Only staff members can unarchive records.
    """

    def has_object_permission(self, request, view, obj):
        return self.has_permission(request, view)
