from typing import Optional, Union

from pydantic import AliasChoices, BaseModel, EmailStr, Field


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3)
    email: EmailStr
    password: str = Field(min_length=8)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class User(BaseModel):
    id: Optional[Union[int, str]] = Field(default=None, validation_alias=AliasChoices("id", "_id"))
    username: str = ""
    email: str = ""

    class Config:
        from_attributes = True
        populate_by_name = True


class AuthResponse(BaseModel):
    user: User
    token: str


class SignupForm(BaseModel):
    username: str = ""
    email: str = ""
    password: str = ""
    confirmPassword: str = ""


class LoginForm(BaseModel):
    email: str = ""
    password: str = ""


class FieldState(BaseModel):
    value: str = ""
    error: Optional[str] = None


class FormStateResponse(BaseModel):
    fields: dict[str, FieldState]
    valid: bool


class PasswordRequirement(BaseModel):
    label: str
    met: bool


class PasswordStrengthResponse(BaseModel):
    score: int
    label: str
    severity: str
    requirements: list[PasswordRequirement]


class SlugRequest(BaseModel):
    text: str = ""


class PasswordStrengthRequest(BaseModel):
    password: str = ""
