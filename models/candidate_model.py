import uuid
from datetime import datetime
from typing import Optional

from sqlalchemy import String, Integer, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import Mapped, relationship, mapped_column

from core.base import Base


class Candidate(Base):
    __tablename__ = "candidates"
    __table_args__ = (
        CheckConstraint("vote_count >= 0", name="ck_candidates_vote_count_non_negative"),
    )

    full_name: Mapped[str] = mapped_column(String(100), nullable=False)
    motto: Mapped[str] = mapped_column(String(300), nullable=False)
    image: Mapped[str] = mapped_column(String(500), nullable=False)
    image_asset_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    vote_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    election_id: Mapped[uuid.UUID] = mapped_column(ForeignKey("elections.id"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)

    election: Mapped["Election"] = relationship(back_populates="candidates")
