# api/chat.py
from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from api.schemas import ChatRequest
from services.chat_service import ChatService
from services.factory import get_chat_service
from utils.sse import SSE_HEADERS

router = APIRouter(tags=["Chat"])


@router.post("/chat")
async def chat(
    request: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
):
    """
    Answer a question as a server-sent event stream.

    Translation, retrieval and the first generated chunk all happen before
    the response starts, so their failures still come back as JSON errors.
    """
    stream = await chat_service.open_stream(
        request.query,
        [message.to_domain() for message in request.history],
    )
    return StreamingResponse(
        stream.events(),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
        # Closes the provider stream when the body is never iterated
        background=BackgroundTask(stream.aclose),
    )
