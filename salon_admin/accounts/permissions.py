from __future__ import annotations

from typing import Any

from django.conf import settings
from rest_framework.permissions import BasePermission

DEFAULT_SUPER_ROLE = "super_admin"

# View action -> permission verb, e.g. "create" on salons needs "salons.create".
ACTION_VERBS = {
    "list": "view",
    "retrieve": "view",
    "create": "create",
    "update": "edit",
    "partial_update": "edit",
    "destroy": "delete",
    "set_status": "update_status",
}


def super_role() -> str:
    return getattr(settings, "SALON_SUPER_ROLE", DEFAULT_SUPER_ROLE)


def has_permission(user: Any, permission: str) -> bool:
    """Flat membership check; the super-role passes every check."""

    if user is None:
        return False
    if getattr(user, "role", None) == super_role():
        return True
    return permission in (getattr(user, "permissions", None) or ())


class HasDashboardPermission(BasePermission):
    """Require ``<view.permission_resource>.<verb>`` for the current action."""

    message = "You don't have permission to perform this action."

    def has_permission(self, request, view):
        resource = getattr(view, "permission_resource", None)
        verb = ACTION_VERBS.get(getattr(view, "action", None) or "")
        if not resource or not verb:
            return True
        return has_permission(getattr(request, "user", None), f"{resource}.{verb}")
