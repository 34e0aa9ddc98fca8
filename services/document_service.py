# services/document_service.py
import logging
from typing import Any, Dict, List, Optional

from config import settings
from core.domain import DocumentInput, StoredDocument
from core.errors import NotFoundError, ValidationError
from core.interfaces import IDocumentRepository, IGenerativeClient, IVectorStore
from utils.common import validate_document_id

logger = logging.getLogger(settings.LOGGER_NAME)


class DocumentService:
    """Knowledge-base administration: add, list and delete documents"""

    def __init__(
        self,
        genai: IGenerativeClient,
        vector_store: IVectorStore,
        document_repo: IDocumentRepository,
    ):
        self.genai = genai
        self.vector_store = vector_store
        self.document_repo = document_repo

    async def add_document(self, content, metadata: Optional[Dict[str, Any]] = None) -> StoredDocument:
        """
        Translate a document to English, embed it and store both texts.

        The English text is what gets embedded and searched; the original is
        kept alongside it for the original-language context block.
        """
        if not isinstance(content, str) or not content.strip():
            raise ValidationError("Content is required and must be a string")

        english_content = await self.genai.translate(content)
        stored = await self.vector_store.add_documents(
            [
                DocumentInput(
                    content=english_content,
                    original_content=content,
                    metadata=dict(metadata or {}),
                )
            ]
        )
        document = stored[0]
        logger.info(f"Document {document.id} added ({len(content)} chars)")
        return document

    async def list_documents(self) -> List[StoredDocument]:
        return await self.document_repo.list_all()

    async def delete_document(self, document_id: str) -> None:
        # Malformed ids can never match a row, so they are reported like missing ones
        if not validate_document_id(document_id) or not await self.document_repo.delete(document_id):
            raise NotFoundError("Document not found", detail=f"id={document_id}")
        logger.info(f"Document {document_id} deleted")
