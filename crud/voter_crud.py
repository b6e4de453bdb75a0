from typing import Iterable, Optional
from uuid import UUID
from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from models import Voter
from core.auth import get_password_hash_async
from core.settings import settings


class VoterCrud:

    def __init__(self):
        self.table = Voter

    async def create_voter(self, session: AsyncSession, voter_data: dict) -> Voter:
        voter_data["hashed_password"] = await get_password_hash_async(voter_data.pop("password"))
        voter_data.setdefault("is_admin", self.is_admin_email(voter_data["email"]))
        voter = Voter(**voter_data)
        session.add(voter)
        await session.flush()
        await session.refresh(voter)
        return voter

    def is_admin_email(self, email: str) -> bool:
        return email.strip().lower() in settings.ADMIN_EMAILS

    async def get_voter_by_email(self, session: AsyncSession, email: str) -> Optional[Voter]:
        stmt = select(Voter).where(func.lower(Voter.email) == email.strip().lower())
        result = await session.execute(stmt)
        return result.scalars().first()

    async def get_voter_by_id(self, session: AsyncSession, voter_id: UUID) -> Optional[Voter]:
        stmt = select(Voter).where(Voter.id == voter_id)
        result = await session.execute(stmt)
        return result.scalars().first()

    async def promote_admins(self, session: AsyncSession, emails: Iterable[str]) -> int:
        """Flag every voter whose email is listed as an administrator."""
        emails = [email.strip().lower() for email in emails if email]
        if not emails:
            return 0
        stmt = (
            update(Voter)
            .where(func.lower(Voter.email).in_(emails), Voter.is_admin == False)  # noqa: E712
            .values(is_admin=True)
        )
        result = await session.execute(stmt)
        return result.rowcount


voter_crud = VoterCrud()
