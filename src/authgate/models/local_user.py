"""Local user models."""

from typing import Optional

from pydantic import BaseModel, Field

from authgate.models.enums import RoleType


class LocalUser(BaseModel):
    """
    Persisted local user record.

    The plaintext password never reaches this model; only its bcrypt digest.
    The role lives on the principal referenced by principal_id.
    """

    username: str
    password_digest: str
    disabled: bool = False
    principal_id: str


class LocalUserCreate(BaseModel):
    """Input for adding a local user."""

    username: str
    password: str
    role: str
    disabled: bool = False


class LocalUserUpdate(BaseModel):
    """
    Partial update of a local user.

    Absent or empty fields mean "no change", never "clear".
    """

    password: Optional[str] = None
    role: Optional[str] = None
    disabled: Optional[bool] = None


class LocalUserInfo(BaseModel):
    """Public view of a local user (no secrets)."""

    username: str
    role: RoleType
    disabled: bool = Field(default=False)
