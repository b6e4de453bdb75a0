import logging
from collections import defaultdict
from typing import Dict, List, Sequence
from uuid import UUID

from sqlalchemy import select, insert, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import AlreadyVotedError, NotFoundError
from models import Candidate, Voter, VotedElection
from models.voted_election_model import VOTER_ELECTION_CONSTRAINT

logger = logging.getLogger(__name__)


def is_duplicate_vote(error: IntegrityError) -> bool:
    """True only when the (voter, election) unique constraint was violated."""
    diag = getattr(error.orig, "diag", None)
    constraint_name = getattr(diag, "constraint_name", None)
    if constraint_name is not None:
        return constraint_name == VOTER_ELECTION_CONSTRAINT
    # sqlite reports the violated columns instead of the constraint name
    message = str(error.orig)
    return "UNIQUE constraint failed" in message and "voted_elections.voter_id" in message


class VoteCrud:

    def __init__(self):
        self.table = VotedElection

    async def has_voted(self, session: AsyncSession, voter_id: UUID, election_id: UUID) -> bool:
        stmt = select(VotedElection.id).where(
            VotedElection.voter_id == voter_id,
            VotedElection.election_id == election_id
        )
        result = await session.execute(stmt)
        return result.first() is not None

    async def get_voted_election_ids(self, session: AsyncSession, voter_id: UUID) -> List[UUID]:
        stmt = (
            select(VotedElection.election_id)
            .where(VotedElection.voter_id == voter_id)
            .order_by(VotedElection.created_at)
        )
        result = await session.execute(stmt)
        return list(result.scalars().all())

    async def get_voted_election_ids_for_voters(
        self,
        session: AsyncSession,
        voter_ids: Sequence[UUID]
    ) -> Dict[UUID, List[UUID]]:
        history: Dict[UUID, List[UUID]] = defaultdict(list)
        if not voter_ids:
            return history
        stmt = (
            select(VotedElection.voter_id, VotedElection.election_id)
            .where(VotedElection.voter_id.in_(voter_ids))
            .order_by(VotedElection.created_at)
        )
        result = await session.execute(stmt)
        for row in result:
            history[row.voter_id].append(row.election_id)
        return history

    async def get_voters_by_election(self, session: AsyncSession, election_id: UUID) -> Sequence[Voter]:
        stmt = (
            select(Voter)
            .join(VotedElection, VotedElection.voter_id == Voter.id)
            .where(VotedElection.election_id == election_id)
            .order_by(VotedElection.created_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def record_vote(
        self,
        session: AsyncSession,
        voter_id: UUID,
        election_id: UUID,
        candidate_id: UUID
    ) -> None:
        """Record the voter's participation and bump the candidate's tally.

        Must run inside the caller's transaction. The history insert goes
        first: the (voter_id, election_id) unique constraint rejects a second
        vote even when a concurrent request already passed ``has_voted``.
        Any error leaves the transaction to be rolled back by the caller, so
        a history row never commits without its counter increment.
        """
        stmt = insert(VotedElection).values(voter_id=voter_id, election_id=election_id)
        try:
            await session.execute(stmt)
        except IntegrityError as e:
            if not is_duplicate_vote(e):
                raise
            logger.info(f"Rejected concurrent vote by voter {voter_id} in election {election_id}")
            raise AlreadyVotedError("You have already voted in this election") from None

        result = await session.execute(
            update(Candidate)
            .where(Candidate.id == candidate_id, Candidate.election_id == election_id)
            .values(vote_count=Candidate.vote_count + 1)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise NotFoundError("Candidate not found")


vote_crud = VoteCrud()
