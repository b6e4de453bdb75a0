import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, DateTime, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column

from core.base import Base


VOTER_ELECTION_CONSTRAINT = "uq_voted_elections_voter_election"


class VotedElection(Base):
    """One row per (voter, election) pair in which a vote has been cast."""

    __tablename__ = "voted_elections"
    __table_args__ = (
        UniqueConstraint('voter_id', 'election_id', name=VOTER_ELECTION_CONSTRAINT),
    )

    voter_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("voters.id"), nullable=False)
    election_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("elections.id"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)
