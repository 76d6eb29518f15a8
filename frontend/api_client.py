from __future__ import annotations

from typing import Any, Dict, Optional

import requests


class ApiError(RuntimeError):
    """Backend unreachable or answered with a non-2xx status."""


def _error_message(r: requests.Response) -> str:
    try:
        body = r.json()
    except ValueError:
        return r.text or f"HTTP {r.status_code}"
    if isinstance(body, dict):
        detail = body.get("message") or body.get("detail")
        if detail:
            return str(detail)
    return f"HTTP {r.status_code}"


def api_call(
    base: str,
    method: str,
    path: str,
    payload: Optional[Dict[str, Any]] = None,
    headers: Optional[Dict[str, str]] = None,
    **kwargs: Any,
) -> Any:
    try:
        r = requests.request(method, f"{base}{path}", json=payload, headers=headers or {}, timeout=30, **kwargs)
    except requests.RequestException as e:
        raise ApiError(f"Backend not reachable at {base}: {e}") from e
    if not r.ok:
        raise ApiError(_error_message(r))
    return r.json()
