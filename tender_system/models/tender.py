#tender_system/models/tender.py
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
from tender_system.models.enums import TenderStatus


def _now():
    return datetime.now(timezone.utc)


class Tender(Base):
    """
    Stable identity of a tender. Content lives in TenderVersion rows;
    `current_version_id` points at the one that is live.
    """
    __tablename__ = "tender"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    organization_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("organization.id", ondelete="CASCADE"), nullable=False
    )

    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default=TenderStatus.created.value
    )

    # no FK: the version row references this table, and both are written in one transaction
    current_version_id: Mapped[Optional[uuid.UUID]] = mapped_column(Uuid, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now
    )

    current_version = relationship(
        "TenderVersion",
        primaryjoin="foreign(Tender.current_version_id) == TenderVersion.id",
        viewonly=True,
        uselist=False,
        lazy="joined",
    )

    __table_args__ = (
        Index("ix_tender_organization_created", "organization_id", "created_at"),
    )

    # ─────────────────────────────
    # Current content
    # ─────────────────────────────
    @property
    def name(self) -> str:
        return self.current_version.name

    @property
    def description(self) -> str:
        return self.current_version.description

    @property
    def service_type(self) -> str:
        return self.current_version.service_type

    @property
    def version(self) -> int:
        return self.current_version.version


class TenderVersion(Base):
    __tablename__ = "tender_version"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    tender_id: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("tender.id", ondelete="CASCADE"), nullable=False
    )
    version: Mapped[int] = mapped_column(Integer, nullable=False)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    service_type: Mapped[str] = mapped_column(String(16), nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_now
    )

    __table_args__ = (
        UniqueConstraint("tender_id", "version", name="uq_tender_version_tender_version"),
        CheckConstraint("version >= 1", name="ck_tender_version_positive"),
    )
