# infrastructure/genai_client.py
"""Gemini REST client: translation, embeddings and streamed generation"""
import json
import logging
from typing import Any, AsyncIterator, Dict, List, Optional

import httpx

from config import settings
from core.errors import EmbeddingError, GenerationError, TranslationError
from core.interfaces import IGenerativeClient

logger = logging.getLogger(settings.LOGGER_NAME)

TRANSLATION_PROMPT = (
    "Translate the following text to English and just give me the result "
    'do not add anything: "{text}"'
)


def _model_path(model: str) -> str:
    return model if model.startswith("models/") else f"models/{model}"


def _candidate_texts(payload: Dict[str, Any]) -> List[str]:
    """Text parts of the first candidate, skipping model 'thought' parts."""
    candidates = payload.get("candidates") or []
    if not candidates:
        return []
    parts = ((candidates[0] or {}).get("content") or {}).get("parts") or []
    return [
        part["text"]
        for part in parts
        if isinstance(part, dict) and part.get("text") and not part.get("thought")
    ]


def _describe_http_error(exc: httpx.HTTPStatusError) -> str:
    body = exc.response.text[:300] if exc.response is not None else ""
    return f"provider returned {exc.response.status_code}: {body}"


class GeminiClient(IGenerativeClient):
    """
    Thin async wrapper over the Gemini REST API.

    One instance (and one pooled httpx client) lives for the whole process.
    No retries: a provider failure is terminal for the request that hit it.
    """

    def __init__(
        self,
        api_key: str,
        model: str = "gemini-2.5-flash",
        embedding_model: str = "text-embedding-004",
        base_url: str = "https://generativelanguage.googleapis.com/v1beta",
        timeout: float = 60.0,
        thinking_budget: Optional[int] = -1,
        url_context: bool = True,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.model = model
        self.embedding_model = embedding_model
        self.base_url = base_url.rstrip("/")
        self.thinking_budget = thinking_budget
        self.url_context = url_context
        self._headers = {"x-goog-api-key": api_key}
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_settings(cls) -> "GeminiClient":
        return cls(
            api_key=settings.GOOGLE_API_KEY.get_secret_value(),
            model=settings.GENAI_MODEL,
            embedding_model=settings.EMBEDDING_MODEL,
            base_url=settings.GENAI_BASE_URL,
            timeout=settings.GENAI_TIMEOUT,
            thinking_budget=settings.GENAI_THINKING_BUDGET,
            url_context=settings.GENAI_URL_CONTEXT,
        )

    def _url(self, model: str, method: str) -> str:
        return f"{self.base_url}/{_model_path(model)}:{method}"

    async def _post_json(self, url: str, body: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._http.post(url, json=body, headers=self._headers)
        response.raise_for_status()
        return response.json()

    async def translate(self, text: str) -> str:
        """Translate text to English. Raises TranslationError on any failure."""
        message = "Failed to translate text to English"
        body = {
            "contents": [
                {"role": "user", "parts": [{"text": TRANSLATION_PROMPT.format(text=text)}]}
            ]
        }
        try:
            data = await self._post_json(self._url(self.model, "generateContent"), body)
        except httpx.HTTPStatusError as e:
            logger.error(f"Translation request rejected: {_describe_http_error(e)}")
            raise TranslationError(message, detail=_describe_http_error(e)) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Translation request failed: {e}")
            raise TranslationError(message, detail=str(e)) from e

        translated = "".join(_candidate_texts(data)).strip()
        if not translated:
            logger.error("Translation response contained no text")
            raise TranslationError(message, detail="No valid translation found in the response")
        return translated

    async def embed(self, text: str, task_type: str = "RETRIEVAL_DOCUMENT") -> List[float]:
        """Request one embedding. Raises EmbeddingError on any failure."""
        message = "Failed to generate embedding"
        body = {
            "model": _model_path(self.embedding_model),
            "content": {"parts": [{"text": text}]},
            "taskType": task_type,
        }
        try:
            data = await self._post_json(self._url(self.embedding_model, "embedContent"), body)
        except httpx.HTTPStatusError as e:
            logger.error(f"Embedding request rejected: {_describe_http_error(e)}")
            raise EmbeddingError(message, detail=_describe_http_error(e)) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Embedding request failed: {e}")
            raise EmbeddingError(message, detail=str(e)) from e

        values = (data.get("embedding") or {}).get("values")
        if not values:
            raise EmbeddingError(
                message,
                detail=f"response is empty or invalid for text: {text[:80]!r}",
            )
        return [float(v) for v in values]

    def _generation_body(self, system_instruction: str, contents: List[Dict[str, Any]]) -> Dict[str, Any]:
        generation_config: Dict[str, Any] = {"responseMimeType": "text/plain"}
        if self.thinking_budget is not None:
            generation_config["thinkingConfig"] = {"thinkingBudget": self.thinking_budget}

        body: Dict[str, Any] = {
            "contents": contents,
            "systemInstruction": {"parts": [{"text": system_instruction}]},
            "generationConfig": generation_config,
        }
        if self.url_context:
            body["tools"] = [{"urlContext": {}}]
        return body

    async def stream_generate(
        self,
        model: str,
        system_instruction: str,
        contents: List[Dict[str, Any]],
    ) -> AsyncIterator[str]:
        """
        Yield text fragments from a streamed completion, in order.

        The provider answers with server-sent events, one JSON payload per
        ``data:`` line. Closing this generator early abandons the request.
        """
        url = self._url(model, "streamGenerateContent")
        body = self._generation_body(system_instruction, contents)
        try:
            async with self._http.stream(
                "POST", url, params={"alt": "sse"}, json=body, headers=self._headers
            ) as response:
                if response.is_error:
                    await response.aread()
                    raise GenerationError(
                        "Generation request failed",
                        detail=f"provider returned {response.status_code}: {response.text[:300]}",
                    )

                async for line in response.aiter_lines():
                    if not line.startswith("data:"):
                        continue
                    data = line[len("data:"):].strip()
                    if not data:
                        continue
                    payload = json.loads(data)
                    if not isinstance(payload, dict):
                        raise GenerationError(
                            "Generation stream failed",
                            detail=f"unexpected event payload: {data[:100]}",
                        )

                    block_reason = (payload.get("promptFeedback") or {}).get("blockReason")
                    if block_reason:
                        raise GenerationError(
                            "The request was blocked by the provider", detail=block_reason
                        )

                    for text in _candidate_texts(payload):
                        yield text
        except GenerationError:
            raise
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Generation stream failed: {e}")
            raise GenerationError("Generation stream failed", detail=str(e)) from e

    async def aclose(self) -> None:
        await self._http.aclose()
