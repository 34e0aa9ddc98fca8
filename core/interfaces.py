# core/interfaces.py
"""Core interfaces for the RAG system"""
from abc import ABC, abstractmethod
from typing import Any, AsyncIterator, Dict, List, Optional

from core.domain import DocumentInput, Donator, RetrievedDocument, StoredDocument

# ============= Generative AI Provider Interface =============
class IGenerativeClient(ABC):
    """Sole integration point with the generative-AI provider"""

    @abstractmethod
    async def translate(self, text: str) -> str:
        """Translate text into English. Raises TranslationError."""
        pass

    @abstractmethod
    async def embed(self, text: str, task_type: str = "RETRIEVAL_DOCUMENT") -> List[float]:
        """Request a single embedding. Raises EmbeddingError."""
        pass

    @abstractmethod
    def stream_generate(
        self,
        model: str,
        system_instruction: str,
        contents: List[Dict[str, Any]],
    ) -> AsyncIterator[str]:
        """
        Start a streaming completion.

        Returns an async iterator of text fragments. Normal exhaustion means
        the model finished; a GenerationError raised from the iterator means
        output failed partway.
        """
        pass

# ============= Embedding Service Interface =============
class IEmbeddingService(ABC):
    """Interface for embedding generation"""

    @abstractmethod
    async def generate_embeddings(self, texts: List[str]) -> List[List[float]]:
        """Generate embeddings for a batch of texts (all or nothing)"""
        pass

    @abstractmethod
    async def generate_query_embedding(self, query: str) -> List[float]:
        """Generate embedding for search query"""
        pass

# ============= Vector Store Interface =============
class IVectorStore(ABC):
    """Interface for the similarity-searchable document table"""

    @abstractmethod
    async def similarity_search(self, query_text: str, k: int) -> List[RetrievedDocument]:
        """Return up to k documents, best match first. Raises VectorStoreError."""
        pass

    @abstractmethod
    async def add_documents(self, documents: List[DocumentInput]) -> List[StoredDocument]:
        """Embed and persist documents. Raises VectorStoreError."""
        pass

# ============= Repository Interfaces =============
class IDocumentRepository(ABC):
    """
    Interface for reading and deleting stored documents.

    Writes go through IVectorStore since every row needs an embedding.
    """

    @abstractmethod
    async def list_all(self) -> List[StoredDocument]:
        """List all documents, newest first"""
        pass

    @abstractmethod
    async def delete(self, document_id: str) -> bool:
        """Delete document record. False when it does not exist."""
        pass


class IDonatorRepository(ABC):
    """Interface for donation records"""

    @abstractmethod
    async def create(self, name: str, message: str, file_path: str) -> Donator:
        pass

    @abstractmethod
    async def list_all(self) -> List[Donator]:
        pass

    @abstractmethod
    async def list_by_allowed(self, allowed: bool) -> List[Donator]:
        pass

    @abstractmethod
    async def set_allowed(self, donator_id: int, allowed: bool) -> Optional[Donator]:
        """Flip the moderation flag. None when the donator does not exist."""
        pass

    @abstractmethod
    async def delete(self, donator_id: int) -> bool:
        pass

# ============= File Storage Interface =============
class IFileStorage(ABC):
    """Interface for physical file storage operations"""

    @abstractmethod
    async def save(self, content: bytes, filename: str) -> str:
        """
        Write content under the storage directory.

        The filename should already be unique (see generate_slip_filename).

        Returns:
            str: Path relative to the working directory, e.g. "uploads/slip-1-2.png"
        """
        pass

    @abstractmethod
    async def delete(self, filename: str) -> bool:
        """Delete a stored file."""
        pass
