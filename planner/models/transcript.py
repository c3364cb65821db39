"""Uploaded transcript with its extracted course list."""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from planner.core.database import Base


class Transcript(Base):
    __tablename__ = "transcripts"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    filename = Column(String(255), nullable=False)
    parsed_data = Column(JSON, nullable=True)  # list of parsed course dicts, in extraction order
    extraction_strategy = Column(String(20), nullable=True)  # "vision" | "text"
    uploaded_at = Column(DateTime(timezone=True), server_default=func.now())
