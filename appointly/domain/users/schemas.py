"""User domain schemas - Pydantic models for validation"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from ...access import Capability, Role
from ...shared.validators import require_text, validate_email


class UserCreate(BaseModel):
    name: str = Field(..., max_length=255)
    email: str = Field(..., max_length=255)
    role: Role = Role.EMPLOYEE
    password: str = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return require_text(v, "name")

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        return validate_email(require_text(v, "email"))


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, max_length=255)
    email: Optional[str] = Field(None, max_length=255)
    role: Optional[Role] = None
    password: Optional[str] = Field(None, min_length=1)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is None:
            return v
        return require_text(v, "name")

    @field_validator("email")
    @classmethod
    def validate_email_field(cls, v):
        if v is None:
            return v
        return validate_email(require_text(v, "email"))


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    role: Role

    class Config:
        from_attributes = True


class MeResponse(UserResponse):
    capabilities: list[Capability]
    expiresAt: Optional[datetime] = None


class LoginRequest(BaseModel):
    email: str
    password: str


class LoginResponse(BaseModel):
    token: str
    user: UserResponse
