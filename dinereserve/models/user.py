"""User identity returned by the auth boundary."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class UserRole(str, Enum):
    """Role that decides which pages a user can reach."""

    CUSTOMER = "customer"
    MANAGER = "manager"
    ADMIN = "admin"


class User(BaseModel):
    """Authenticated user."""

    model_config = ConfigDict(frozen=True)

    id: str
    email: str
    name: str
    role: UserRole = UserRole.CUSTOMER


class Credentials(BaseModel):
    """Email/password login body."""

    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class Registration(Credentials):
    """Sign-up body."""

    name: str = Field(..., min_length=1)


class PasswordResetRequest(BaseModel):
    email: str = Field(..., min_length=3)


class PasswordCheck(BaseModel):
    password: str


class GoogleLogin(BaseModel):
    """OAuth access token obtained by the browser from Google."""

    access_token: str = Field(..., min_length=1)
