from typing import Sequence, Optional
from uuid import UUID
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models import Candidate, Election


class CandidateCrud:
    def __init__(self):
        self.table = Candidate

    async def create_candidate(self, session: AsyncSession, election: Election, candidate_data: dict) -> Candidate:
        """Create a candidate and link it into ``election.candidates``.

        ``election`` must have been loaded with its candidates.
        """
        candidate = Candidate(**candidate_data, vote_count=0)
        election.candidates.append(candidate)
        session.add(candidate)
        await session.flush()
        await session.refresh(candidate, attribute_names=["created_at"])
        return candidate

    async def get_candidate_by_id(self, session: AsyncSession, candidate_id: UUID) -> Optional[Candidate]:
        stmt = select(Candidate).where(Candidate.id == candidate_id)
        result = await session.execute(stmt)
        return result.scalars().first()

    async def get_candidates_by_election(self, session: AsyncSession, election_id: UUID) -> Sequence[Candidate]:
        stmt = (
            select(Candidate)
            .where(Candidate.election_id == election_id)
            .order_by(Candidate.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def delete_candidate(self, session: AsyncSession, election: Optional[Election], candidate: Candidate) -> None:
        """Detach the candidate from its election, then delete it."""
        if election is not None and candidate in election.candidates:
            election.candidates.remove(candidate)
        await session.delete(candidate)
        await session.flush()


candidate_crud = CandidateCrud()
