# This project was developed with assistance from AI tools.
"""Account, session and admin-management schemas.

``userType`` is a deprecated alias of ``role``. It is accepted on input and
echoed on output, but only ``role`` is stored. A request carrying both with
different values is rejected rather than guessing which one is meant.
"""

from datetime import datetime
from typing import Any

from db.enums import UserRole, VerificationStatus
from pydantic import Field, model_validator

from . import ApiModel, SuccessResponse

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class RegisterRequest(ApiModel):
    username: str = Field(min_length=3, max_length=150)
    email: str = Field(pattern=_EMAIL_PATTERN, max_length=255)
    name: str = Field(min_length=1, max_length=200)
    password: str = Field(min_length=8, max_length=128)
    role: UserRole | None = None
    user_type: UserRole | None = None

    @model_validator(mode="after")
    def _resolve_role(self) -> "RegisterRequest":
        if self.role is not None and self.user_type is not None and self.role != self.user_type:
            raise ValueError(
                f"role '{self.role.value}' and userType '{self.user_type.value}' disagree"
            )
        resolved = self.role or self.user_type
        if resolved is None:
            raise ValueError("role is required")
        if resolved not in UserRole.self_service_roles():
            raise ValueError(f"role '{resolved.value}' cannot be chosen at registration")
        self.role = resolved
        self.user_type = None
        return self


class LoginRequest(ApiModel):
    username: str = Field(min_length=1, description="Username or email.")
    password: str = Field(min_length=1)


class CreateAdminRequest(ApiModel):
    username: str = Field(min_length=3, max_length=150)
    email: str = Field(pattern=_EMAIL_PATTERN, max_length=255)
    name: str = Field(min_length=1, max_length=200)
    password: str = Field(min_length=8, max_length=128)


class UserResponse(ApiModel):
    id: int
    username: str
    email: str
    name: str
    role: UserRole
    user_type: UserRole
    anonymous_id: str
    verification_status: VerificationStatus | None = None
    created_at: datetime | None = None

    @classmethod
    def from_account(cls, account) -> "UserResponse":
        return cls(
            id=account.id,
            username=account.username,
            email=account.email,
            name=account.name,
            role=account.role,
            user_type=account.role,
            anonymous_id=account.anonymous_id,
            verification_status=account.verification_status,
            created_at=account.created_at,
        )


class AuthResponse(SuccessResponse):
    user: UserResponse
    next_step: str | None = Field(
        default=None,
        description="'founder-documents' right after a founder registers, else 'dashboard'.",
    )


class UserListResponse(SuccessResponse):
    users: list[UserResponse]


class MessageResponse(SuccessResponse):
    message: str


class AdminActionItem(ApiModel):
    id: int
    timestamp: datetime
    user_id: str | None = None
    user_role: str | None = None
    event_type: str
    target_type: str | None = None
    target_id: int | None = None
    event_data: dict[str, Any] | None = None


class AdminActionsResponse(SuccessResponse):
    count: int
    actions: list[AdminActionItem]


class UpdateAdminRequest(ApiModel):
    """Partial update; omitted fields are left as they are."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: str | None = Field(default=None, pattern=_EMAIL_PATTERN, max_length=255)
    password: str | None = Field(default=None, min_length=8, max_length=128)


class AdminListResponse(SuccessResponse):
    admins: list[UserResponse]


class AdminEnvelope(SuccessResponse):
    admin: UserResponse
