# infrastructure/embedding_services.py
"""Embedding generation with L2 normalization for consistent similarity scoring"""
import asyncio
import logging
from typing import List

import numpy as np

from config import settings
from core.errors import EmbeddingError
from core.interfaces import IEmbeddingService, IGenerativeClient

logger = logging.getLogger(settings.LOGGER_NAME)


class GeminiEmbeddingService(IEmbeddingService):
    """
    Provider-backed embeddings, normalized to unit length.

    pgvector's cosine distance does not need unit vectors, but storing them
    keeps ``1 - distance`` comparable across documents and queries.
    """

    def __init__(self, client: IGenerativeClient, dim: int = 768):
        self.client = client
        self.dim = dim

    def _l2_normalize(self, arr: np.ndarray) -> np.ndarray:
        """
        L2 normalize vectors to unit length (||v|| = 1).

        Args:
            arr: (N, D) array of N vectors with D dimensions

        Returns:
            (N, D) array of unit-normalized vectors
        """
        norms = np.linalg.norm(arr, axis=1, keepdims=True)
        norms[norms == 0] = 1e-12  # Avoid division by zero
        return arr / norms

    def _check_dim(self, vector: List[float]) -> None:
        if len(vector) != self.dim:
            raise EmbeddingError(
                "Failed to generate embedding",
                detail=f"expected {self.dim} dimensions, provider returned {len(vector)}",
            )

    async def generate_embeddings(self, texts: List[str]) -> List[List[float]]:
        """
        Embed every text concurrently; one failure fails the whole batch.

        Results keep the order of ``texts``.
        """
        if not texts:
            return []

        results = await asyncio.gather(
            *(self.client.embed(text) for text in texts),
            return_exceptions=True,
        )

        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            logger.error(f"{len(failures)} of {len(texts)} embeddings failed")
            first = failures[0]
            raise EmbeddingError(
                "Failed to generate embeddings",
                detail=f"{len(failures)} of {len(texts)} requests failed; first: {first}",
            ) from first

        for vector in results:
            self._check_dim(vector)

        normalized = self._l2_normalize(np.array(results, dtype="float32"))
        return normalized.tolist()

    async def generate_query_embedding(self, query: str) -> List[float]:
        raw = await self.client.embed(query)
        self._check_dim(raw)
        normalized = self._l2_normalize(
            np.array(raw, dtype="float32").reshape(1, -1)
        )
        return normalized[0].tolist()
