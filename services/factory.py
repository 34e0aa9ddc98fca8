# services/factory.py
from fastapi import Depends, Request

from config import settings
from core.interfaces import (
    IDocumentRepository, IDonatorRepository, IEmbeddingService,
    IFileStorage, IGenerativeClient, IVectorStore
)
from database.session import Database
from infrastructure.embedding_services import GeminiEmbeddingService
from infrastructure.file_storage import LocalFileStorage
from infrastructure.repositories import SQLDocumentRepository, SQLDonatorRepository
from infrastructure.vector_stores import PGVectorStore
from services.chat_service import ChatService
from services.document_service import DocumentService
from services.donator_service import DonatorService

# Process-wide resources are created in the app lifespan and kept on app.state.
# Everything else is cheap and built per request from them.

def get_database(request: Request) -> Database:
    return request.app.state.database

def get_genai_client(request: Request) -> IGenerativeClient:
    return request.app.state.genai_client

def get_embedding_service(genai: IGenerativeClient = Depends(get_genai_client)) -> IEmbeddingService:
    """Create embedding service based on configuration."""
    return GeminiEmbeddingService(genai, dim=settings.EMBEDDING_DIM)

def get_vector_store(
    database: Database = Depends(get_database),
    embedding_service: IEmbeddingService = Depends(get_embedding_service),
) -> IVectorStore:
    return PGVectorStore(database, embedding_service)

def get_file_storage() -> IFileStorage:
    """Create file storage based on configuration."""
    return LocalFileStorage(base_path=settings.UPLOADS_DIR)

def get_document_repository(database: Database = Depends(get_database)) -> IDocumentRepository:
    return SQLDocumentRepository(database)

def get_donator_repository(database: Database = Depends(get_database)) -> IDonatorRepository:
    return SQLDonatorRepository(database)

# Service providers using FastAPI DI
def get_chat_service(
    genai: IGenerativeClient = Depends(get_genai_client),
    vector_store: IVectorStore = Depends(get_vector_store),
) -> ChatService:
    return ChatService(
        genai=genai,
        vector_store=vector_store,
        model=settings.GENAI_MODEL,
        top_k=settings.RETRIEVAL_TOP_K,
        assistant_name=settings.ASSISTANT_NAME,
    )

def get_document_service(
    genai: IGenerativeClient = Depends(get_genai_client),
    vector_store: IVectorStore = Depends(get_vector_store),
    document_repo: IDocumentRepository = Depends(get_document_repository),
) -> DocumentService:
    return DocumentService(genai=genai, vector_store=vector_store, document_repo=document_repo)

def get_donator_service(
    donator_repo: IDonatorRepository = Depends(get_donator_repository),
    file_storage: IFileStorage = Depends(get_file_storage),
) -> DonatorService:
    """
    Create donator service with injected repository and storage.

    Override get_donator_repository / get_file_storage to test it in isolation.
    """
    return DonatorService(
        donator_repo=donator_repo,
        file_storage=file_storage,
        max_slip_size=settings.MAX_SLIP_SIZE,
        allowed_extensions=settings.SLIP_EXTENSIONS,
    )
