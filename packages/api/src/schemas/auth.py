# This project was developed with assistance from AI tools.
"""Authentication and authorization schemas."""

from db.enums import UserRole, VerificationStatus
from pydantic import BaseModel, ConfigDict, Field


class DataScope(BaseModel):
    """Data visibility rules injected by RBAC middleware."""

    own_data_only: bool = False
    user_id: int | None = None
    full_access: bool = False


class UserContext(BaseModel):
    """Injected by auth middleware into every authenticated request."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    role: UserRole
    email: str
    name: str
    username: str = ""
    anonymous_id: str = ""
    verification_status: VerificationStatus | None = None
    data_scope: DataScope = Field(default_factory=DataScope)

    @property
    def is_staff(self) -> bool:
        return self.role in UserRole.staff_roles()

    @property
    def is_verified_founder(self) -> bool:
        return (
            self.role == UserRole.FOUNDER
            and self.verification_status == VerificationStatus.APPROVED
        )


class SessionPayload(BaseModel):
    """Decoded session token claims."""

    sub: str
    role: UserRole
    iat: int | None = None
    exp: int | None = None
