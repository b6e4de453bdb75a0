from typing import Sequence, Optional, Dict, Any, List
from uuid import UUID
from sqlalchemy import update, select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from models import Election, Candidate, VotedElection


class ElectionCrud:
    def __init__(self):
        self.table = Election

    async def create_election(self, session: AsyncSession, election_data: dict) -> Election:
        election = Election(**election_data)
        session.add(election)
        await session.flush()
        return await self.get_election_by_id(session, election.id, with_relations=True)

    async def get_election_by_id(
        self,
        session: AsyncSession,
        election_id: UUID,
        with_relations: bool = False
    ) -> Optional[Election]:
        stmt = select(Election).where(Election.id == election_id)
        if with_relations:
            stmt = stmt.options(
                selectinload(Election.candidates),
                selectinload(Election.voters),
            ).execution_options(populate_existing=True)
        result = await session.execute(stmt)
        return result.scalars().first()

    async def get_all_elections(self, session: AsyncSession) -> Sequence[Election]:
        stmt = (
            select(Election)
            .options(selectinload(Election.candidates), selectinload(Election.voters))
            .order_by(Election.created_at.desc())
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def update_election(self, session: AsyncSession, election_id: UUID, election_data: dict) -> None:
        stmt = (
            update(Election)
            .where(Election.id == election_id)
            .values(**election_data)
            .execution_options(synchronize_session=False)
        )
        await session.execute(stmt)

    async def delete_election(self, session: AsyncSession, election_id: UUID) -> List[str]:
        """Delete an election with its candidates and vote history.

        Returns the asset ids of the deleted candidates' images.
        """
        result = await session.execute(
            select(Candidate.image_asset_id).where(Candidate.election_id == election_id)
        )
        image_asset_ids = [asset_id for asset_id in result.scalars().all() if asset_id]

        await session.execute(
            delete(VotedElection)
            .where(VotedElection.election_id == election_id)
            .execution_options(synchronize_session=False)
        )
        await session.execute(
            delete(Candidate)
            .where(Candidate.election_id == election_id)
            .execution_options(synchronize_session=False)
        )
        await session.execute(
            delete(Election)
            .where(Election.id == election_id)
            .execution_options(synchronize_session=False)
        )
        return image_asset_ids

    def build_election_response_data(self, election: Election) -> Dict[str, Any]:
        return {
            "id": election.id,
            "title": election.title,
            "description": election.description,
            "thumbnail": election.thumbnail,
            "candidates": [candidate.id for candidate in election.candidates],
            "voters": [voter.id for voter in election.voters],
            "created_at": election.created_at,
        }


election_crud = ElectionCrud()
