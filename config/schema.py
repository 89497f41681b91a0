"""Custom OpenAPI schema hooks for drf-spectacular.

Groups every operation under one feature tag so the docs page is partitioned
by dashboard section instead of by URL fragment.
"""

from __future__ import annotations

from typing import Any

# Method names that contain operations in the OpenAPI path item
_HTTP_METHODS = {"get", "post", "put", "patch", "delete", "options", "head"}


PATTERN_TAGS = [
    ("/api/v1/auth/", "Authentication"),
    ("/api/v1/dashboard/salons", "Salons"),
    ("/api/v1/dashboard/services", "Services"),
    ("/api/v1/dashboard/staff", "Staff"),
    ("/api/v1/dashboard/bookings", "Bookings"),
    ("/api/v1/dashboard/offers", "Offers"),
    ("/api/v1/dashboard/", "Dashboard"),
]

ALL_TAGS = list(dict.fromkeys(t for _, t in PATTERN_TAGS))


def assign_group_tag(path: str) -> str | None:
    """Return the first matching tag name for a given path."""
    for prefix, tag in PATTERN_TAGS:
        if path.startswith(prefix):
            return tag
    return None


def group_tags(result: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
    """Post-processing hook forcing exactly one tag per operation."""
    paths = result.get("paths", {})
    for path, path_item in paths.items():
        tag = assign_group_tag(path)
        if not tag:
            continue
        for method, op_obj in path_item.items():
            if method.lower() not in _HTTP_METHODS:
                continue
            if not isinstance(op_obj, dict):
                continue
            op_obj["tags"] = [tag]

    # Declared tags list contains every group, in PATTERN_TAGS order
    existing = {t.get("name") for t in result.get("tags", [])}
    tag_list = result.setdefault("tags", [])
    for tag in ALL_TAGS:
        if tag not in existing:
            tag_list.append({"name": tag})
    return result
