from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional

from ..core.enums import Permission


def display_name_from(given_name: Optional[str], family_name: Optional[str], email: Optional[str]) -> str:
    name = f"{given_name or ''} {family_name or ''}".strip()
    return name or (email or "")


@dataclass(frozen=True)
class Identity:
    """Authenticated caller as supplied by the authentication provider.

    Note: pure data object; the provider itself lives outside this package.
    """

    user_id: str
    display_name: str
    email: Optional[str] = None
    permissions: frozenset[str] = field(default_factory=frozenset)

    def has_permission(self, permission: Permission) -> bool:
        return permission.value in self.permissions

    @property
    def actor_label(self) -> str:
        return self.email or self.display_name

    @classmethod
    def build(
        cls,
        *,
        user_id: str,
        given_name: Optional[str] = None,
        family_name: Optional[str] = None,
        email: Optional[str] = None,
        permissions: Iterable[str] = (),
    ) -> "Identity":
        return cls(
            user_id=str(user_id),
            display_name=display_name_from(given_name, family_name, email),
            email=email,
            permissions=frozenset(permissions),
        )

    @classmethod
    def from_session(cls, session: Mapping) -> Optional["Identity"]:
        if not session.get("user_id"):
            return None
        return cls(
            user_id=str(session["user_id"]),
            display_name=str(session.get("name") or session.get("email") or ""),
            email=session.get("email"),
            permissions=frozenset(session.get("permissions") or ()),
        )
