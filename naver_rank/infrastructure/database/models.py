"""
SQLAlchemy ORM models.

Accounts and their point ledger, plus the rank observation log. Application
dataclasses are mapped to/from these models inside the repository
implementations.
"""
import uuid
from datetime import datetime

from sqlalchemy import (
    DateTime,
    Enum as SAEnum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    func,
)
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column

from naver_rank.domain.enums.content_type import ContentType
from naver_rank.infrastructure.database.connection import Base

_content_type_enum = SAEnum(
    ContentType,
    name="content_type",
    values_callable=lambda obj: [e.value for e in obj],
)


class AccountModel(Base):
    __tablename__ = "accounts"

    id: Mapped[str] = mapped_column(String(128), primary_key=True)
    points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )


class PointHistoryModel(Base):
    __tablename__ = "point_history"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    account_id: Mapped[str] = mapped_column(
        String(128),
        ForeignKey("accounts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    # Negative for debits
    delta: Mapped[int] = mapped_column(Integer, nullable=False)
    balance_after: Mapped[int] = mapped_column(Integer, nullable=False)
    memo: Mapped[str] = mapped_column(String(512), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )


class RankHistoryModel(Base):
    __tablename__ = "rank_history"

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    account_id: Mapped[str] = mapped_column(String(128), nullable=False)
    content_type: Mapped[str] = mapped_column(_content_type_enum, nullable=False)
    target_id: Mapped[str] = mapped_column(String(256), nullable=False)
    keyword_id: Mapped[str] = mapped_column(String(256), nullable=False)

    keyword: Mapped[str] = mapped_column(String(256), nullable=False)
    target_url: Mapped[str] = mapped_column(String(2048), nullable=False)
    rank: Mapped[int] = mapped_column(Integer, nullable=False)
    page: Mapped[int | None] = mapped_column(Integer, nullable=True)
    search_type: Mapped[str] = mapped_column(String(32), nullable=False)
    total_results: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    found: Mapped[dict | None] = mapped_column(JSONB, nullable=True)  # type: ignore[type-arg]
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    searched_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        Index(
            "ix_rank_history_lookup",
            "account_id",
            "content_type",
            "target_id",
            "keyword_id",
            "searched_at",
        ),
    )
