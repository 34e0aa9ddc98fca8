# infrastructure/vector_stores.py
"""pgvector-backed vector store over the documents table"""
import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from config import settings
from core.domain import DocumentInput, RetrievedDocument, StoredDocument
from core.errors import EmbeddingError, VectorStoreError
from core.interfaces import IEmbeddingService, IVectorStore
from database.models import DocumentEntity
from database.session import Database

logger = logging.getLogger(settings.LOGGER_NAME)


class PGVectorStore(IVectorStore):
    """Similarity search and embedded writes against Postgres + pgvector"""

    def __init__(self, database: Database, embedding_service: IEmbeddingService):
        self.database = database
        self.embedding_service = embedding_service

    async def similarity_search(self, query_text: str, k: int) -> List[RetrievedDocument]:
        """Best match first. Zero rows is an empty list, never an error."""
        try:
            query_embedding = await self.embedding_service.generate_query_embedding(query_text)
        except EmbeddingError as e:
            raise VectorStoreError("Similarity search failed", detail=f"embedding: {e.detail or e}") from e

        distance = DocumentEntity.embedding.cosine_distance(query_embedding).label("distance")
        stmt = (
            select(
                DocumentEntity.content,
                DocumentEntity.original_content,
                DocumentEntity.meta.label("meta"),
                distance,
            )
            .order_by(distance)
            .limit(k)
        )
        try:
            async with self.database.session() as session:
                rows = (await session.execute(stmt)).all()
        except SQLAlchemyError as e:
            logger.error(f"Similarity search query failed: {e}")
            raise VectorStoreError("Similarity search failed", detail=str(e)) from e

        results = [
            RetrievedDocument(
                content=row.content,
                original_content=row.original_content,
                metadata=dict(row.meta or {}),
                score=1.0 - float(row.distance),  # Convert distance to similarity
            )
            for row in rows
        ]
        logger.debug(f"Similarity search returned {len(results)} of k={k} documents")
        return results

    async def add_documents(self, documents: List[DocumentInput]) -> List[StoredDocument]:
        """
        Embed and persist documents.

        All embeddings are computed before anything is written, and the rows
        are inserted in a single transaction.
        """
        if not documents:
            return []

        try:
            embeddings = await self.embedding_service.generate_embeddings(
                [doc.content for doc in documents]
            )
        except EmbeddingError as e:
            raise VectorStoreError("Failed to add documents", detail=f"embedding: {e.detail or e}") from e

        entities = [
            DocumentEntity(
                content=doc.content,
                original_content=doc.original_content,
                embedding=embedding,
                meta=dict(doc.metadata),
            )
            for doc, embedding in zip(documents, embeddings)
        ]
        try:
            async with self.database.session() as session:
                session.add_all(entities)
                await session.commit()
                for entity in entities:
                    await session.refresh(entity, attribute_names=["created_at"])
        except SQLAlchemyError as e:
            logger.error(f"Failed to insert {len(entities)} documents: {e}")
            raise VectorStoreError("Failed to add documents", detail=str(e)) from e

        logger.info(f"Stored {len(entities)} document(s)")
        return [
            StoredDocument(
                id=entity.id,
                content=entity.content,
                original_content=entity.original_content,
                metadata=dict(entity.meta or {}),
                created_at=entity.created_at,
                embedding=embedding,
            )
            for entity, embedding in zip(entities, embeddings)
        ]
