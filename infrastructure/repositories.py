# infrastructure/repositories.py
"""Database repository implementations"""
import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from config import settings
from core.domain import Donator, StoredDocument
from core.errors import StoreError
from core.interfaces import IDocumentRepository, IDonatorRepository
from database.models import DocumentEntity, DonatorEntity
from database.session import Database

logger = logging.getLogger(settings.LOGGER_NAME)


def _store_error(operation: str, exc: SQLAlchemyError) -> StoreError:
    logger.error(f"Database operation '{operation}' failed: {exc}")
    return StoreError(f"Database operation failed: {operation}", detail=str(exc))


class SQLDocumentRepository(IDocumentRepository):
    def __init__(self, database: Database):
        self.database = database

    async def list_all(self) -> List[StoredDocument]:
        # Embedding column is not loaded on list queries
        stmt = select(
            DocumentEntity.id,
            DocumentEntity.content,
            DocumentEntity.original_content,
            DocumentEntity.meta.label("meta"),
            DocumentEntity.created_at,
        ).order_by(DocumentEntity.created_at.desc())
        try:
            async with self.database.session() as session:
                rows = (await session.execute(stmt)).all()
        except SQLAlchemyError as e:
            raise _store_error("list documents", e) from e

        return [
            StoredDocument(
                id=row.id,
                content=row.content,
                original_content=row.original_content,
                metadata=dict(row.meta or {}),
                created_at=row.created_at,
            )
            for row in rows
        ]

    async def delete(self, document_id: str) -> bool:
        try:
            async with self.database.session() as session:
                doc = await session.get(DocumentEntity, document_id)
                if not doc:
                    return False
                await session.delete(doc)
                await session.commit()
                return True
        except SQLAlchemyError as e:
            raise _store_error("delete document", e) from e


class SQLDonatorRepository(IDonatorRepository):
    def __init__(self, database: Database):
        self.database = database

    def _to_domain(self, entity: DonatorEntity) -> Donator:
        return Donator(
            id=entity.id,
            name=entity.name,
            message=entity.message,
            file_path=entity.file_path,
            allowed=entity.allowed,
            created_at=entity.created_at,
        )

    async def create(self, name: str, message: str, file_path: str) -> Donator:
        entity = DonatorEntity(name=name, message=message, file_path=file_path, allowed=False)
        try:
            async with self.database.session() as session:
                session.add(entity)
                await session.commit()
                await session.refresh(entity)
                return self._to_domain(entity)
        except SQLAlchemyError as e:
            raise _store_error("create donator", e) from e

    async def _list(self, operation: str, *criteria) -> List[Donator]:
        stmt = (
            select(DonatorEntity)
            .where(*criteria)
            .order_by(DonatorEntity.created_at.desc(), DonatorEntity.id.desc())
        )
        try:
            async with self.database.session() as session:
                result = await session.execute(stmt)
                return [self._to_domain(d) for d in result.scalars().all()]
        except SQLAlchemyError as e:
            raise _store_error(operation, e) from e

    async def list_all(self) -> List[Donator]:
        return await self._list("list donators")

    async def list_by_allowed(self, allowed: bool) -> List[Donator]:
        return await self._list(
            "list allowed donators" if allowed else "list unallowed donators",
            DonatorEntity.allowed.is_(allowed),
        )

    async def set_allowed(self, donator_id: int, allowed: bool) -> Optional[Donator]:
        try:
            async with self.database.session() as session:
                entity = await session.get(DonatorEntity, donator_id)
                if not entity:
                    return None
                entity.allowed = allowed
                await session.commit()
                await session.refresh(entity)
                return self._to_domain(entity)
        except SQLAlchemyError as e:
            raise _store_error("update donator", e) from e

    async def delete(self, donator_id: int) -> bool:
        try:
            async with self.database.session() as session:
                entity = await session.get(DonatorEntity, donator_id)
                if not entity:
                    return False
                await session.delete(entity)
                await session.commit()
                return True
        except SQLAlchemyError as e:
            raise _store_error("delete donator", e) from e
