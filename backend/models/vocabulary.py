from datetime import datetime
from uuid import uuid4
from sqlalchemy import Column, String, DateTime, Text, Integer, UniqueConstraint

from core.database import Base, GUID, StringList


class Vocabulary(Base):
    """Seeded vocabulary item, totally ordered within its level by index_position"""
    __tablename__ = "vocabulary"
    __table_args__ = (
        UniqueConstraint("jlpt_level", "index_position", name="uq_vocabulary_level_position"),
    )

    id = Column(GUID, primary_key=True, default=uuid4)
    word = Column(String(255), nullable=False)
    reading = Column(String(255), nullable=False)
    short_meaning = Column(String(500), nullable=False)
    detailed_explanation = Column(Text, default="")
    example_sentences = Column(StringList, default=list)
    usage_notes = Column(Text, default="")
    jlpt_level = Column(String(2), nullable=False, index=True)
    index_position = Column(Integer, nullable=False)  # Zero-based, no gaps
    created_at = Column(DateTime, default=datetime.utcnow)
