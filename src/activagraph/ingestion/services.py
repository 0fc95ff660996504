"""
Embedding and completion services backed by an OpenAI-compatible server.

LM Studio exposes local models through the OpenAI API, so both services are
thin wrappers around AsyncOpenAI. Failures are never retried and never
replaced by fallback values: every problem surfaces as ServiceFailure.
"""

import logging
import numpy as np
from typing import Optional, Protocol

from openai import AsyncOpenAI

from activagraph.config import NetworkConfig
from activagraph.errors import ServiceFailure

logger = logging.getLogger(__name__)

# Task prefixes expected by nomic-embed-text-v1.5
TASK_PREFIXES = {
    "learn": "search_document: ",
    "think": "search_query: ",
    "cluster": "clustering: ",
}

PROMPT_TEMPLATE = (
    'Based on this neural activation pathway pattern: "{narrative}", '
    "provide a relevant and thoughtful response. You are an advanced AI with "
    "activation-based memory responding to neural pathway patterns."
)


class EmbeddingService(Protocol):
    async def embed(self, text: str, task: str = "think") -> np.ndarray:
        ...


class CompletionService(Protocol):
    async def respond(self, prompt: str, model: str) -> str:
        ...


def prefix_for_task(text: str, task: str) -> str:
    """Prepend the embedding task prefix (unknown tasks embed as queries)."""
    return TASK_PREFIXES.get(task, TASK_PREFIXES["think"]) + text


def build_prompt(narrative: str) -> str:
    return PROMPT_TEMPLATE.format(narrative=narrative)


class LMStudioService:
    """
    Embedding + completion client for a local LM Studio server.

    Implements both EmbeddingService and CompletionService.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:1234/v1",
        api_key: str = "lm-studio",
        embed_model: str = "text-embedding-nomic-embed-text-v1.5@f16",
        timeout: float = 120.0,
        client: Optional[AsyncOpenAI] = None
    ):
        """
        Initialize the client.

        Args:
            base_url: OpenAI-compatible endpoint
            api_key: API key (LM Studio accepts any value)
            embed_model: Embedding model identifier
            timeout: Request timeout in seconds
            client: Pre-built AsyncOpenAI client (overrides the above)
        """
        self.client = client or AsyncOpenAI(
            base_url=base_url,
            api_key=api_key,
            timeout=timeout,
            max_retries=0
        )
        self.embed_model = embed_model

    @classmethod
    def from_config(cls, config: NetworkConfig) -> "LMStudioService":
        return cls(
            base_url=config.base_url,
            api_key=config.api_key,
            embed_model=config.embed_model,
            timeout=config.request_timeout
        )

    async def embed(self, text: str, task: str = "think") -> np.ndarray:
        """
        Embed text for the given task.

        Args:
            text: Input text
            task: 'learn', 'think' or 'cluster'

        Returns:
            Embedding vector as float32 array

        Raises:
            ServiceFailure: On any request failure or an empty embedding
        """
        try:
            response = await self.client.embeddings.create(
                model=self.embed_model,
                input=[prefix_for_task(text, task)]
            )
            embedding = response.data[0].embedding
        except Exception as e:
            message = f"Embedding generation failed: {e}"
            logger.error(message)
            raise ServiceFailure(message) from e

        if not embedding:
            raise ServiceFailure(f"Model {self.embed_model} returned an empty embedding")

        return np.asarray(embedding, dtype=np.float32)

    async def respond(self, prompt: str, model: str) -> str:
        """
        Get a completion for prompt from model.

        Raises:
            ServiceFailure: If the model is unavailable or returns no content
        """
        logger.debug("Sending prompt to %s", model)

        try:
            response = await self.client.chat.completions.create(
                model=model,
                messages=[{"role": "user", "content": prompt}]
            )
            content = response.choices[0].message.content if response.choices else None
        except Exception as e:
            message = f"Response generation failed for model {model}: {e}"
            logger.error(message)
            raise ServiceFailure(message) from e

        if not content:
            raise ServiceFailure(f"Model {model} returned empty response")

        logger.debug("Response received from %s", model)
        return content

    async def close(self):
        await self.client.close()
