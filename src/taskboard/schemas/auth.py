"""Pydantic schemas for registration and login.

Field rules (username length, email format, password length) are
enforced by AuthService so they report one message at a time, in a
fixed order. These schemas only guarantee the fields are present
strings. UserRead has no password_hash field, so it can't leak.
"""

import uuid

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    username: str
    email: str
    password: str


class LoginRequest(BaseModel):
    email: str
    password: str


class UserRead(BaseModel):
    id: uuid.UUID
    username: str
    email: str

    model_config = {"from_attributes": True}


class AuthResponse(BaseModel):
    message: str
    token: str
    user: UserRead
