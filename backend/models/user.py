from datetime import datetime
from uuid import uuid4
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from core.database import Base, GUID
from models.enums import DEFAULT_LEVEL


class User(Base):
    """Learner account with the currently assigned JLPT level"""
    __tablename__ = "users"

    id = Column(GUID, primary_key=True, default=uuid4)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    current_level = Column(String(2), nullable=False, default=DEFAULT_LEVEL.value)  # Only the placement test changes this
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    progress = relationship("UserProgress", back_populates="user", uselist=False, cascade="all, delete-orphan")
