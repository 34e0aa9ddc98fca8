# database/models.py
import uuid

from pgvector.sqlalchemy import Vector
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base

from config import settings

Base = declarative_base()

# --- SQLAlchemy Models ---

class DocumentEntity(Base):
    __tablename__ = "documents"
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    content = Column(Text, nullable=False)  # English text the embedding was built from
    original_content = Column(Text, nullable=False)
    embedding = Column(Vector(settings.EMBEDDING_DIM), nullable=False)
    # "metadata" is reserved on declarative classes
    meta = Column("metadata", JSONB, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class DonatorEntity(Base):
    __tablename__ = "donator"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String, nullable=False, default="Anonymous")
    message = Column(Text, nullable=False, default="")
    file_path = Column(String, nullable=False)
    allowed = Column(Boolean, nullable=False, default=False, server_default="false")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
