"""
Pydantic schemas for accounts and authentication.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field, model_validator

from cinebook.models.user import UserRole

_NAME = r"^[A-Za-z][A-Za-z' -]*$"
_PHONE = r"^\+?[\d\s()-]{7,20}$"


class UserCreate(BaseModel):
    first_name: str = Field(..., min_length=2, max_length=50, pattern=_NAME)
    last_name: str = Field(..., min_length=2, max_length=50, pattern=_NAME)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=128)
    confirm_password: str
    phone: Optional[str] = Field(None, pattern=_PHONE)

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserLogin(BaseModel):
    email: EmailStr
    password: str


class UserUpdate(BaseModel):
    first_name: Optional[str] = Field(None, min_length=2, max_length=50, pattern=_NAME)
    last_name: Optional[str] = Field(None, min_length=2, max_length=50, pattern=_NAME)
    phone: Optional[str] = Field(None, pattern=_PHONE)


class PasswordChange(BaseModel):
    current_password: str
    new_password: str = Field(..., min_length=8, max_length=128)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords do not match")
        return self


class UserResponse(BaseModel):
    id: int
    email: str
    first_name: str
    last_name: str
    phone: Optional[str]
    role: UserRole
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class AuthResponse(BaseModel):
    user: UserResponse
    token: Token
