from datetime import datetime
from typing import List, Optional

from sqlalchemy import String, Text, DateTime, func
from sqlalchemy.orm import Mapped, relationship, mapped_column

from core.base import Base


class Election(Base):
    __tablename__ = "elections"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    thumbnail: Mapped[str] = mapped_column(String(500), nullable=False)
    thumbnail_asset_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)

    candidates: Mapped[List["Candidate"]] = relationship(
        back_populates="election",
        cascade="all, delete-orphan",
        order_by="Candidate.created_at",
    )
    voters: Mapped[List["Voter"]] = relationship(secondary="voted_elections", viewonly=True)
