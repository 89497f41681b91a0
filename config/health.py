from __future__ import annotations

from typing import Any

import requests
from django.conf import settings
from django.db import connection
from django.http import JsonResponse


def check_db() -> dict[str, Any]:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    else:
        return {"ok": True}


def check_api() -> dict[str, Any]:
    backend = getattr(settings, "SALON_BACKEND", "remote")
    if backend != "remote":
        return {"ok": True, "skipped": True}
    url = getattr(settings, "SALON_API_BASE_URL", None)
    if not url:
        return {"ok": False, "error": "SALON_API_BASE_URL not configured"}
    try:
        # Any HTTP answer means the API is reachable; auth is not needed here.
        response = requests.get(url, timeout=2)
    except requests.RequestException as exc:
        return {"ok": False, "error": str(exc)}
    else:
        return {"ok": response.status_code < 500, "status_code": response.status_code}


def health(request):
    db = check_db()
    api_info = check_api()
    components = {"db": db, "api": api_info}

    all_ok = all(v.get("ok", False) for v in components.values())
    some_ok = any(v.get("ok", False) for v in components.values())

    status = "ok" if all_ok else ("degraded" if some_ok else "down")
    http_status = 200 if all_ok else 503

    return JsonResponse(
        {
            "status": status,
            "backend": getattr(settings, "SALON_BACKEND", "remote"),
            "components": components,
        },
        status=http_status,
    )
