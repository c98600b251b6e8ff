#tender_system/models/bid.py
from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    String,
    Text,
    DateTime,
    Integer,
    ForeignKey,
    UniqueConstraint,
    CheckConstraint,
    Index,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tender_system.db.base import Base
from tender_system.models.enums import BidStatus


def _now():
    return datetime.now(timezone.utc)


class Bid(Base):
    """
    Stable identity of a bid against one tender.

    author_id is an employee id when author_type is "user" and an
    organization id when it is "organization".
    """
    __tablename__ = "bid"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    tender_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tender.id", ondelete="CASCADE"), nullable=False
    )

    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=BidStatus.created.value
    )
    author_type: Mapped[str] = mapped_column(String(16), nullable=False)
    author_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)

    current_version_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now
    )

    current_version = relationship(
        "BidVersion",
        primaryjoin="foreign(Bid.current_version_id) == BidVersion.id",
        viewonly=True,
        uselist=False,
        lazy="joined",
    )

    __table_args__ = (
        Index("ix_bid_tender_status", "tender_id", "status"),
        Index("ix_bid_author", "author_type", "author_id"),
    )

    @property
    def name(self) -> str:
        return self.current_version.name

    @property
    def description(self) -> str:
        return self.current_version.description

    @property
    def version(self) -> int:
        return self.current_version.version


class BidVersion(Base):
    __tablename__ = "bid_version"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    bid_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("bid.id", ondelete="CASCADE"), nullable=False
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now
    )

    __table_args__ = (
        UniqueConstraint("bid_id", "version", name="uq_bid_version_bid_version"),
        CheckConstraint("version >= 1", name="ck_bid_version_positive"),
    )
