"""Pydantic schemas for auth requests. Fields are optional so missing ones get our own 400 message."""
from pydantic import BaseModel, Field


class RegisterSchema(BaseModel):
    email: str | None = None
    password: str | None = None
    name: str | None = None


class LoginSchema(BaseModel):
    email: str | None = None
    password: str | None = None


class ResetPasswordSchema(BaseModel):
    current_password: str | None = Field(default=None, alias="currentPassword")
    new_password: str | None = Field(default=None, alias="newPassword")
