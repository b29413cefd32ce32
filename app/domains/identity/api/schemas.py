"""
Identity API Schemas

Request bodies for auth and user management. Responses are the entity
dictionaries wrapped in the standard envelope.
"""

from datetime import date

from pydantic import EmailStr, Field

from app.api.schemas.common import CamelModel
from app.domains.identity.domain.value_objects import Gender, UserRole, UserStatus


class RegisterBody(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    phone: str | None = Field(None, max_length=20)


class LoginBody(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RefreshTokenBody(CamelModel):
    refresh_token: str = Field(..., min_length=1)


class ProfileUpdateBody(CamelModel):
    first_name: str | None = Field(None, min_length=1, max_length=50)
    last_name: str | None = Field(None, min_length=1, max_length=50)
    phone: str | None = Field(None, max_length=20)
    avatar: str | None = None
    bio: str | None = Field(None, max_length=500)
    date_of_birth: date | None = None
    gender: Gender | None = None


class ChangePasswordBody(CamelModel):
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)


class AddressBody(CamelModel):
    label: str = Field("Home", max_length=30)
    full_name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(..., min_length=1, max_length=20)
    street: str = Field(..., min_length=1, max_length=200)
    city: str = Field(..., min_length=1, max_length=100)
    state: str | None = Field(None, max_length=100)
    zip_code: str | None = Field(None, max_length=20)
    country: str = Field("Bangladesh", max_length=100)
    is_default: bool = False


class AddressUpdateBody(CamelModel):
    label: str | None = Field(None, max_length=30)
    full_name: str | None = Field(None, max_length=100)
    phone: str | None = Field(None, max_length=20)
    street: str | None = Field(None, max_length=200)
    city: str | None = Field(None, max_length=100)
    state: str | None = Field(None, max_length=100)
    zip_code: str | None = Field(None, max_length=20)
    country: str | None = Field(None, max_length=100)
    is_default: bool | None = None


class AdminUserUpdateBody(CamelModel):
    role: UserRole | None = None
    status: UserStatus | None = None
    first_name: str | None = Field(None, min_length=1, max_length=50)
    last_name: str | None = Field(None, min_length=1, max_length=50)
    phone: str | None = Field(None, max_length=20)
