"""Identity context resolved from an incoming request.

A request is either made by an authenticated ``Principal`` or by a guest,
represented as ``None``.  Services receive the resolved value explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class Principal:
    """Authenticated caller."""

    id: Any
    email: str
    display_name: str
    is_admin: bool = False


Identity = Optional[Principal]


def principal_from_user(user: Any) -> Identity:
    """Build a ``Principal`` from a Django user, ``None`` for anonymous users."""
    if user is None or not getattr(user, "is_authenticated", False):
        return None
    display_name = ""
    if hasattr(user, "get_full_name"):
        display_name = user.get_full_name()
    if not display_name:
        display_name = user.get_username()
    return Principal(
        id=user.pk,
        email=user.email or "",
        display_name=display_name,
        is_admin=bool(getattr(user, "is_staff", False)),
    )


def resolve_identity(request: Any) -> Identity:
    """Return the identity attached to a DRF/Django request."""
    return principal_from_user(getattr(request, "user", None))
