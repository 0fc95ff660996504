"""Clients for the embedding and completion backend."""

from activagraph.ingestion.services import (
    CompletionService,
    EmbeddingService,
    LMStudioService,
    build_prompt,
    prefix_for_task
)

__all__ = [
    "EmbeddingService",
    "CompletionService",
    "LMStudioService",
    "build_prompt",
    "prefix_for_task"
]
