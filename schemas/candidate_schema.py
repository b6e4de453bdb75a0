from datetime import datetime
from typing import Optional
from uuid import UUID
from pydantic import AliasChoices, BaseModel, Field, field_validator

from schemas.base_schema import CamelSchema


class CandidateFormSchema(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=100)
    motto: str = Field(..., min_length=1, max_length=300)
    election_id: UUID

    @field_validator("full_name", "motto")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v


class CandidateResponse(CamelSchema):
    id: UUID
    full_name: str
    motto: str
    image: str
    vote_count: int
    election: UUID = Field(validation_alias=AliasChoices("election_id", "election"))
    created_at: Optional[datetime] = None


class CandidateCreatedResponse(BaseModel):
    message: str
    candidate: CandidateResponse


class VoteRequestSchema(CamelSchema):
    selected_election: Optional[UUID] = Field(
        None, validation_alias=AliasChoices("selectedElection", "electionId", "selected_election")
    )
    current_voter_id: Optional[UUID] = Field(
        None, validation_alias=AliasChoices("currentVoterId", "voterId", "current_voter_id")
    )
