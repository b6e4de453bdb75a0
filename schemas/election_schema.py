from datetime import datetime
from typing import List, Optional
from uuid import UUID
from pydantic import BaseModel, Field, field_validator

from schemas.base_schema import CamelSchema


class ElectionFormSchema(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1)

    @field_validator("title", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class ElectionResponse(CamelSchema):
    id: UUID
    title: str
    description: str
    thumbnail: str
    candidates: List[UUID] = Field(default_factory=list)
    voters: List[UUID] = Field(default_factory=list)
    created_at: Optional[datetime] = None
