# api/documents.py
from fastapi import APIRouter, Depends

from api.schemas import (
    AddDocumentRequest, AddDocumentResponse, DeleteDocumentResponse,
    DocumentOut, DocumentsListResponse
)
from api.security import require_api_key
from services.document_service import DocumentService
from services.factory import get_document_service

router = APIRouter(
    prefix="/add-document",
    tags=["Documents"],
    dependencies=[Depends(require_api_key)],
)


@router.post("", response_model=AddDocumentResponse)
async def add_document(
    request: AddDocumentRequest,
    document_service: DocumentService = Depends(get_document_service),
):
    document = await document_service.add_document(request.content, request.metadata)
    return AddDocumentResponse.from_domain(document)


@router.get("", response_model=DocumentsListResponse)
async def list_documents(document_service: DocumentService = Depends(get_document_service)):
    documents = await document_service.list_documents()
    return DocumentsListResponse(documents=[DocumentOut.from_domain(d) for d in documents])


@router.delete("/{document_id}", response_model=DeleteDocumentResponse)
async def delete_document(
    document_id: str,
    document_service: DocumentService = Depends(get_document_service),
):
    await document_service.delete_document(document_id)
    return DeleteDocumentResponse(id=document_id)
