"""Per-user study state: the word cursor, streak and word dispositions."""
from datetime import datetime
from uuid import uuid4
from sqlalchemy import Column, String, DateTime, Date, ForeignKey, Integer, UniqueConstraint, Index
from sqlalchemy.orm import relationship

from core.database import Base, GUID
from models.enums import VocabStatus


class UserProgress(Base):
    """One row per user; mutated by the daily word fetch and skip actions"""
    __tablename__ = "user_progress"

    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    current_vocab_index = Column(Integer, nullable=False, default=0)  # Cursor into the current level
    last_word_id = Column(GUID, ForeignKey("vocabulary.id", ondelete="SET NULL"), nullable=True)
    streak_days = Column(Integer, nullable=False, default=0)
    last_study_date = Column(Date, nullable=True)
    words_learned_count = Column(Integer, nullable=False, default=0)
    words_skipped_count = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("User", back_populates="progress")


class UserVocabStatus(Base):
    """Latest disposition of a word for a user. Upserted, not a history log"""
    __tablename__ = "user_vocab_status"
    __table_args__ = (
        UniqueConstraint("user_id", "vocab_id", name="uq_user_vocab_status"),
        Index("ix_user_vocab_status_user_status", "user_id", "status"),
    )

    id = Column(GUID, primary_key=True, default=uuid4)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    vocab_id = Column(GUID, ForeignKey("vocabulary.id", ondelete="CASCADE"), nullable=False)
    status = Column(String(20), nullable=False, default=VocabStatus.LEARNING.value)
    marked_at = Column(DateTime, default=datetime.utcnow)
