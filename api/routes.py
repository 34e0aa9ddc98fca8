# api/routes.py
from fastapi import APIRouter

from api import chat, documents, donators, health

router = APIRouter()
router.include_router(chat.router)
router.include_router(documents.router)
router.include_router(donators.router)
router.include_router(health.router)
