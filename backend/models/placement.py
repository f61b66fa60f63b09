from datetime import datetime
from uuid import uuid4
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Integer, Index

from core.database import Base, GUID, StringList


class PlacementQuestion(Base):
    """Multiple-choice question in the fixed placement bank.

    correct_answer and wrong_answers never leave the server as such; the
    question listing only exposes a merged, shuffled option list.
    """
    __tablename__ = "placement_questions"

    id = Column(GUID, primary_key=True, default=uuid4)
    question_text = Column(Text, nullable=False)
    correct_answer = Column(String(500), nullable=False)
    wrong_answers = Column(StringList, default=list)
    difficulty_level = Column(String(2), nullable=False)
    order_index = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, default=datetime.utcnow)


class PlacementTestResult(Base):
    """Append-only record of one submission"""
    __tablename__ = "placement_test_results"
    __table_args__ = (
        Index("ix_placement_test_results_user_completed", "user_id", "completed_at"),
    )

    id = Column(GUID, primary_key=True, default=uuid4)
    user_id = Column(GUID, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    test_score = Column(Integer, nullable=False)
    assigned_level = Column(String(2), nullable=False)
    completed_at = Column(DateTime, nullable=False, default=datetime.utcnow)
