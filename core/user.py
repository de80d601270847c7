from dataclasses import dataclass
from typing import Any, Dict

from .status import UserRole

DEFAULT_PROFILE_ID = "1"


@dataclass
class UserProfile:
    id: str
    name: str
    email: str
    avatar: str = ""
    role: UserRole = UserRole.MEMBER

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "avatar": self.avatar,
            "role": self.role.value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserProfile":
        return cls(
            id=str(data["id"]),
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            avatar=str(data.get("avatar") or ""),
            role=UserRole.from_string(data.get("role") or UserRole.MEMBER),
        )


def default_profile() -> UserProfile:
    """Placeholder profile used until one has been cached or fetched."""
    return UserProfile(
        id=DEFAULT_PROFILE_ID,
        name="Diretor Expandix",
        email="admin@expandix.com",
        avatar="",
        role=UserRole.ADMIN,
    )
