"""Request identities: anonymous visitors and authenticated accounts."""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, Union
from uuid import UUID


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


@dataclass(frozen=True)
class AccessTokenInfo:
    """The access token used by the current request, without its secret."""

    id: int
    created_at: datetime
    last_user_ip: str
    last_user_agent: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "createdAt": _iso(self.created_at),
            "lastUserIp": self.last_user_ip,
            "lastUserAgent": self.last_user_agent,
        }


@dataclass(frozen=True)
class AnonymousUser:
    """A client-held UUID with no stored account."""

    id: UUID

    is_authenticated = False

    @property
    def name(self) -> Optional[str]:
        return None

    @property
    def self_description(self) -> Optional[str]:
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {"anonymous": {"id": str(self.id)}}


@dataclass(frozen=True)
class AuthenticatedUser:
    """A stored account resolved from a bearer access token."""

    id: UUID
    created_at: datetime
    updated_at: datetime
    email: str
    name: str
    self_description: str
    access_token: AccessTokenInfo

    is_authenticated = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "authenticated": {
                "id": str(self.id),
                "createdAt": _iso(self.created_at),
                "updatedAt": _iso(self.updated_at),
                "email": self.email,
                "name": self.name,
                "selfDescription": self.self_description,
                "accessToken": self.access_token.to_dict(),
            }
        }


CurrentUser = Union[AnonymousUser, AuthenticatedUser]
