from typing import Literal

from pydantic import BaseModel, EmailStr


class AuthUser(BaseModel):
    id: str
    email: EmailStr | None = None
    phone: str | None = None
    role: str | None = "customer"
    name: str | None = None


class RoleOut(BaseModel):
    role: Literal["customer", "vendor", "admin"]
