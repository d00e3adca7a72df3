# core/permissions.py

import logging

from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import BasePermission, SAFE_METHODS

logger = logging.getLogger(__name__)


def is_admin(user):
    return bool(user and user.is_authenticated and user.is_admin)


def enforce_gym_access(user, gym, action='access'):
    """
    Hard rejection for targeted operations.
    Non-admin users may only touch records of their assigned gym.
    """
    if is_admin(user):
        return
    if gym != user.assigned_gym:
        logger.warning(
            "Gym access denied: user=%s assigned_gym=%s target_gym=%s action=%s",
            user.pk, user.assigned_gym, gym, action,
        )
        raise PermissionDenied(f'Not authorized to {action} records of gym "{gym}".')


# =========================
# Basic / Authenticated Permissions
# =========================

class IsAuthenticatedAndActive(BasePermission):
    def has_permission(self, request, view):
        return bool(
            request.user
            and request.user.is_authenticated
            and request.user.is_active
        )


class IsAdmin(BasePermission):
    message = 'Administrator role required.'

    def has_permission(self, request, view):
        return is_admin(request.user)


class IsAdminOrReadOnly(BasePermission):
    """Anyone authenticated can read, only admins can write."""
    message = 'Administrator role required.'

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return bool(request.user and request.user.is_authenticated)
        return is_admin(request.user)


# =========================
# Gym Permissions
# =========================

class HasObjectGymAccess(BasePermission):
    """
    Object-level gym enforcement.
    Object must expose the field named by `view.gym_field` (default `gym`).
    """

    def has_object_permission(self, request, view, obj):
        gym_field = getattr(view, 'gym_field', 'gym')
        enforce_gym_access(request.user, getattr(obj, gym_field), action=view.action or 'access')
        return True
