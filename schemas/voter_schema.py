from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import AliasChoices, BaseModel, EmailStr, Field, field_validator, model_validator

from schemas.base_schema import CamelSchema


class VoterRegisterSchema(CamelSchema):
    full_name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=1)
    password2: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("password2", "confirmPassword", "confirm_password"),
    )

    @field_validator("full_name")
    @classmethod
    def strip_full_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Please fill all the fields")
        return v

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, v: str) -> str:
        return v.lower()

    @model_validator(mode="after")
    def check_passwords(self) -> "VoterRegisterSchema":
        if len(self.password.strip()) < 6:
            raise ValueError("Password must be at least 6 characters")
        if self.password != self.password2:
            raise ValueError("Passwords do not match")
        return self


class VoterLoginSchema(BaseModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class VoterResponse(CamelSchema):
    id: UUID
    full_name: str
    email: str
    is_admin: bool
    voted_elections: List[UUID] = Field(default_factory=list)
    created_at: Optional[datetime] = None


class LoginResponse(CamelSchema):
    token: str
    id: UUID
    voted_elections: List[UUID] = Field(default_factory=list)
    is_admin: bool


class MessageResponse(BaseModel):
    message: str


class TokenIdentity(BaseModel):
    """Identity decoded from a verified bearer token."""

    id: UUID
    is_admin: bool = False
