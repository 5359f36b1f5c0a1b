from typing import Optional, Literal

from pydantic import EmailStr, Field, model_validator

from schemas.base import RequestSchema


class RegisterRequest(RequestSchema):
    username: str = Field(..., min_length=3, max_length=30)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    # admins are promoted by another admin, never self-registered
    role: Literal["learner", "instructor"] = "learner"


class LoginRequest(RequestSchema):
    username: Optional[str] = None
    email: Optional[str] = None
    password: str = Field(..., min_length=1)

    @model_validator(mode="after")
    def require_identifier(self):
        if not self.username and not self.email:
            raise ValueError("Please provide username or email")
        return self


class ProfileUpdate(RequestSchema):
    first_name: Optional[str] = Field(None, max_length=100)
    last_name: Optional[str] = Field(None, max_length=100)
    profile_picture: Optional[str] = Field(None, max_length=255)


class RoleUpdate(RequestSchema):
    role: Literal["learner", "instructor", "admin"]
