# backend/quoteportal/auth/schemas.py
from pydantic import EmailStr
from ..shared.schemas import CamelModel


class LoginIn(CamelModel):
    email: EmailStr
    password: str


class TokenOut(CamelModel):
    access_token: str
    token_type: str = "bearer"


class UserOut(CamelModel):
    id: str
    email: EmailStr
    name: str | None = None
