# services/chat_service.py
"""Retrieval-augmented chat: translate, retrieve, prompt, stream"""
import logging
from typing import AsyncIterator, List, Optional
from uuid import uuid4

from config import settings
from core.domain import ChatMessage, ChatRole, PipelineStage, RetrievedDocument
from core.errors import AppError, ValidationError, public_message
from core.interfaces import IGenerativeClient, IVectorStore
from utils.sse import DONE_EVENT, format_event

logger = logging.getLogger(settings.LOGGER_NAME)

BASE_SYSTEM_INSTRUCTION = """You are {assistant_name}, a helpful AI assistant designed to deliver accurate, relevant, and well-structured responses.

When answering user questions, follow these guidelines carefully:

Evaluate Context First: Begin by assessing whether the provided Retrieval-Augmented Generation (RAG) context is relevant to the user's query.
Leverage Relevant Information: If the RAG context is relevant, use it as the foundation for your response. Synthesize and present the information clearly and comprehensively.
Use General Knowledge When Needed: If the RAG context is not applicable or missing, rely on your internal knowledge to provide the best possible answer.
Maintain a Natural and Helpful Tone: Always respond in a conversational, friendly, and informative manner that makes the user feel supported."""


def build_rag_context(documents: List[RetrievedDocument]) -> str:
    """Both context blocks, one line per document in retrieval order."""
    original_block = "\n".join(doc.original_content for doc in documents)
    english_block = "\n".join(doc.content for doc in documents)
    return (
        "RAG Context:\n"
        f"- Original language:\n{original_block}\n"
        f"- English context:\n{english_block}"
    )


def build_system_instruction(base_instruction: str, documents: List[RetrievedDocument]) -> str:
    return f"{base_instruction}\n\n{build_rag_context(documents)}"


def _log_stage(request_id: str, stage: PipelineStage, note: str = "") -> None:
    logger.debug(f"[chat {request_id}] {stage.value}{' - ' + note if note else ''}")


class ChatStream:
    """
    An opened generation whose first chunk has already arrived.

    ``events()`` yields ready-to-write SSE frames and always closes the
    provider stream, including when the client goes away mid-answer.
    ``aclose()`` covers a response whose body is never iterated.
    """

    def __init__(self, request_id: str, first_chunk: Optional[str], chunks: AsyncIterator[str]):
        self.request_id = request_id
        self._first_chunk = first_chunk
        self._chunks = chunks

    async def aclose(self) -> None:
        """Close the provider stream. Safe to call more than once."""
        aclose = getattr(self._chunks, "aclose", None)
        if aclose is None:
            return
        try:
            await aclose()
        except Exception as e:
            logger.warning(f"[chat {self.request_id}] Closing provider stream failed: {e}")

    async def events(self) -> AsyncIterator[str]:
        _log_stage(self.request_id, PipelineStage.STREAMING)
        try:
            if self._first_chunk:
                yield format_event({"text": self._first_chunk})
            async for chunk in self._chunks:
                if chunk:
                    yield format_event({"text": chunk})
        except Exception as e:
            err = AppError.wrap(e)
            _log_stage(self.request_id, PipelineStage.FAILED, str(err))
            logger.error(
                f"Error during streaming: {err} ({err.detail})",
                exc_info=not err.is_operational,
            )
            message = public_message(err, settings.is_development)
            if settings.is_development and err.detail:
                message = f"{message} ({err.detail})"
            yield format_event({"error": f"Streaming error: {message}"})
            return
        finally:
            await self.aclose()

        yield DONE_EVENT
        _log_stage(self.request_id, PipelineStage.COMPLETED)


class ChatService:
    def __init__(
        self,
        genai: IGenerativeClient,
        vector_store: IVectorStore,
        model: str,
        top_k: int = 9,
        assistant_name: str = "BitAI",
    ):
        self.genai = genai
        self.vector_store = vector_store
        self.model = model
        self.top_k = top_k
        self.base_instruction = BASE_SYSTEM_INSTRUCTION.format(assistant_name=assistant_name)

    async def _first_chunk(self, chunks: AsyncIterator[str]) -> Optional[str]:
        async for chunk in chunks:
            if chunk:
                return chunk
        return None

    async def open_stream(self, query, history: List[ChatMessage]) -> ChatStream:
        """
        Run everything up to the first generated chunk.

        Any failure here is raised to the caller before a single byte of the
        response has been written, so it can still become a JSON error.
        """
        request_id = uuid4().hex[:8]
        stage = PipelineStage.RECEIVED
        _log_stage(request_id, stage, f"{len(history)} history turn(s)")

        chunks: Optional[AsyncIterator[str]] = None
        try:
            if not isinstance(query, str) or not query.strip():
                raise ValidationError("Query is required and must be a string")

            stage = PipelineStage.TRANSLATING
            _log_stage(request_id, stage)
            english_query = await self.genai.translate(query)

            stage = PipelineStage.RETRIEVING
            _log_stage(request_id, stage)
            documents = await self.vector_store.similarity_search(english_query, self.top_k)
            system_instruction = build_system_instruction(self.base_instruction, documents)

            contents = [message.to_content() for message in history]
            contents.append(ChatMessage(role=ChatRole.USER, parts=[query]).to_content())

            stage = PipelineStage.GENERATING
            _log_stage(request_id, stage, f"{len(documents)} context document(s)")
            chunks = self.genai.stream_generate(self.model, system_instruction, contents)
            first_chunk = await self._first_chunk(chunks)
        except Exception as e:
            _log_stage(request_id, PipelineStage.FAILED, f"during {stage.value}: {e}")
            if chunks is not None and hasattr(chunks, "aclose"):
                try:
                    await chunks.aclose()
                except Exception as close_error:
                    logger.warning(f"[chat {request_id}] Closing provider stream failed: {close_error}")
            raise

        return ChatStream(request_id, first_chunk, chunks)
