# core/domain.py
"""Shared enumerations and domain models used across the application."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

# ============= Enums =============

class ErrorKind(str, Enum):
    """Closed set of error categories. Drives HTTP status and message policy."""
    VALIDATION = "validation"
    AUTHORIZATION = "authorization"
    NOT_FOUND = "not_found"
    UPSTREAM = "upstream"
    STORE = "store"
    INTERNAL = "internal"


class PipelineStage(str, Enum):
    """Chat request pipeline stages."""
    RECEIVED = "received"
    TRANSLATING = "translating"
    RETRIEVING = "retrieving"
    GENERATING = "generating"
    STREAMING = "streaming"
    COMPLETED = "completed"
    FAILED = "failed"


class ChatRole(str, Enum):
    """Conversation roles understood by the generation provider."""
    USER = "user"
    MODEL = "model"


# ============= Domain Models =============

@dataclass
class ChatMessage:
    """One conversation turn; only lives for the duration of a request"""
    role: ChatRole
    parts: List[str]

    def to_content(self) -> Dict[str, Any]:
        return {
            "role": self.role.value,
            "parts": [{"text": text} for text in self.parts],
        }


@dataclass
class DocumentInput:
    """A document ready to be embedded and stored"""
    content: str
    original_content: str
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass
class StoredDocument:
    """Domain model for documents"""
    id: str
    content: str
    original_content: str
    metadata: Dict[str, Any]
    created_at: Optional[datetime] = None
    embedding: Optional[List[float]] = None  # Not loaded on list queries


@dataclass
class RetrievedDocument:
    """Domain model for similarity search results"""
    content: str
    original_content: str
    metadata: Dict[str, Any]
    score: float


@dataclass
class Donator:
    """Domain model for donation records"""
    id: int
    name: str
    message: str
    file_path: str
    allowed: bool
    created_at: Optional[datetime] = None
