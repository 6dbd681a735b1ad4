"""
Role resolution from Supabase JWT claims.

Supabase puts user-editable data in ``user_metadata`` and server-managed data
in ``app_metadata``; roles have been written to several keys over time, so all
of them are checked.
"""

from collections.abc import Iterable
from typing import Any

ATHLETE_ROLE = "athlete"
OPERATOR_ROLE = "operator"
ADMIN_ROLE = "admin"

_SINGLE_ROLE_KEYS = (
    ("user_metadata", "role"),
    ("user_metadata", "role_type"),
    ("app_metadata", "role"),
)
_ROLE_LIST_KEYS = (
    ("user_metadata", "roles"),
    ("user_metadata", "permissions"),
    ("app_metadata", "roles"),
    ("app_metadata", "permissions"),
)
_ADMIN_FLAG_KEYS = ("admin", "is_admin", "isAdmin")


def _normalize_role(role: Any) -> str | None:
    return role.lower() if isinstance(role, str) else None


def _is_truthy(value: Any) -> bool:
    return value is True or value == "true"


def _metadata(claims: dict, section: str) -> dict:
    value = claims.get(section)
    return value if isinstance(value, dict) else {}


def has_role(claims: dict | None, role: str, admin_emails: Iterable[str] = ()) -> bool:
    """Return True when the JWT claims grant ``role`` (case-insensitive)."""
    if not claims or not role:
        return False

    wanted = _normalize_role(role)
    if not wanted:
        return False

    for section, key in _SINGLE_ROLE_KEYS:
        if _normalize_role(_metadata(claims, section).get(key)) == wanted:
            return True

    for section, key in _ROLE_LIST_KEYS:
        values = _metadata(claims, section).get(key)
        if isinstance(values, list) and any(_normalize_role(v) == wanted for v in values):
            return True

    if wanted == ADMIN_ROLE:
        for section in ("user_metadata", "app_metadata"):
            meta = _metadata(claims, section)
            if any(_is_truthy(meta.get(flag)) for flag in _ADMIN_FLAG_KEYS):
                return True

        email = claims.get("email")
        allowlist = {e.lower() for e in admin_emails}
        if isinstance(email, str) and email.strip().lower() in allowlist:
            return True

    return False
