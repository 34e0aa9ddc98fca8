# api/schemas.py
from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from core.domain import ChatMessage, ChatRole, Donator, StoredDocument

# --- Chat ---

class MessagePart(BaseModel):
    text: str

class HistoryMessage(BaseModel):
    role: Literal["user", "model"]
    parts: List[MessagePart] = []

    def to_domain(self) -> ChatMessage:
        return ChatMessage(role=ChatRole(self.role), parts=[part.text for part in self.parts])

class ChatRequest(BaseModel):
    # Left optional so a missing query gets the same message as a blank one
    query: Optional[str] = None
    history: List[HistoryMessage] = []

# --- Documents ---

class AddDocumentRequest(BaseModel):
    content: Optional[str] = None
    metadata: Dict[str, Any] = {}

class DocumentOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    content: str
    original_content: str = Field(alias="originalContent")
    metadata: Dict[str, Any]
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, document: StoredDocument) -> "DocumentOut":
        return cls(
            id=document.id,
            content=document.content,
            original_content=document.original_content,
            metadata={**document.metadata, "originalContent": document.original_content},
            created_at=document.created_at,
        )

class AddDocumentResponse(DocumentOut):
    message: str = "Document added successfully"

class DocumentsListResponse(BaseModel):
    message: str = "Documents retrieved successfully"
    documents: List[DocumentOut]

class DeleteDocumentResponse(BaseModel):
    message: str = "Document deleted successfully"
    id: str

# --- Donators ---

class DonatorOut(BaseModel):
    id: int
    name: str
    message: str
    file_path: str
    allowed: bool
    created_at: Optional[datetime] = None

    @classmethod
    def from_domain(cls, donator: Donator) -> "DonatorOut":
        return cls(
            id=donator.id,
            name=donator.name,
            message=donator.message,
            file_path=donator.file_path,
            allowed=donator.allowed,
            created_at=donator.created_at,
        )

class DonatorResponse(BaseModel):
    message: str
    donator: DonatorOut

class DonatorsListResponse(BaseModel):
    message: str = "Donators retrieved successfully"
    donators: List[DonatorOut]

class MessageResponse(BaseModel):
    message: str

# --- Health ---

class HealthResponse(BaseModel):
    status: str
    timestamp: str
