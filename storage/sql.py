from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, create_engine, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker

from storage.base import ChatStore, MessageRecord, Role, SessionRecord, utc_now


logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


class ChatSessionRow(Base):
    __tablename__ = "sessions"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)


class ChatMessageRow(Base):
    __tablename__ = "messages"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    session_id: Mapped[str] = mapped_column(
        String(255), ForeignKey("sessions.id"), nullable=False, index=True
    )
    role: Mapped[str] = mapped_column(String(16), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now, nullable=False)


def _to_session(row: ChatSessionRow) -> SessionRecord:
    return SessionRecord(id=row.id, created_at=row.created_at, updated_at=row.updated_at)


def _to_message(row: ChatMessageRow) -> MessageRecord:
    return MessageRecord(
        id=row.id,
        session_id=row.session_id,
        role=Role(row.role),
        content=row.content,
        created_at=row.created_at,
    )


class SQLChatStore(ChatStore):
    """SQLAlchemy-backed store. Every write commits in its own transaction."""

    def __init__(self, database_url: str) -> None:
        connect_args = {}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine = create_engine(database_url, connect_args=connect_args, future=True)
        self._session_factory = sessionmaker(
            bind=self.engine, autoflush=False, expire_on_commit=False, future=True
        )

    def initialize(self) -> None:
        Base.metadata.create_all(self.engine)
        logger.info("Chat store ready: %s", self.engine.url.render_as_string(hide_password=True))

    def close(self) -> None:
        self.engine.dispose()

    def create_session_if_absent(self, session_id: str) -> bool:
        with self._session_factory() as db:
            if db.get(ChatSessionRow, session_id) is not None:
                return False
            now = utc_now()
            db.add(ChatSessionRow(id=session_id, created_at=now, updated_at=now))
            try:
                db.commit()
            except IntegrityError:
                # Another request inserted the same id first.
                db.rollback()
                return False
            return True

    def get_session(self, session_id: str) -> Optional[SessionRecord]:
        with self._session_factory() as db:
            row = db.get(ChatSessionRow, session_id)
            return _to_session(row) if row is not None else None

    def touch_session(self, session_id: str) -> None:
        with self._session_factory() as db:
            row = db.get(ChatSessionRow, session_id)
            if row is None:
                return
            row.updated_at = utc_now()
            db.commit()

    def insert_message(self, session_id: str, role: Role, content: str) -> MessageRecord:
        with self._session_factory() as db:
            row = ChatMessageRow(
                session_id=session_id,
                role=Role(role).value,
                content=content,
                created_at=utc_now(),
            )
            db.add(row)
            db.commit()
            return _to_message(row)

    def list_recent_messages(self, session_id: str, limit: int) -> List[MessageRecord]:
        stmt = (
            select(ChatMessageRow)
            .where(ChatMessageRow.session_id == session_id)
            .order_by(ChatMessageRow.id.desc())
            .limit(limit)
        )
        with self._session_factory() as db:
            return [_to_message(row) for row in db.scalars(stmt)]

    def list_all_messages(self, session_id: str) -> List[MessageRecord]:
        stmt = (
            select(ChatMessageRow)
            .where(ChatMessageRow.session_id == session_id)
            .order_by(ChatMessageRow.id.asc())
        )
        with self._session_factory() as db:
            return [_to_message(row) for row in db.scalars(stmt)]

    def list_sessions(self) -> List[SessionRecord]:
        stmt = select(ChatSessionRow).order_by(ChatSessionRow.updated_at.desc())
        with self._session_factory() as db:
            return [_to_session(row) for row in db.scalars(stmt)]
