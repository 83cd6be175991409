"""Model backends for the two inference shapes the core consumes.

``transformers`` and ``sentence-transformers`` are heavy optional
dependencies (the ``semantic`` extra), so they are imported only when a
model is actually loaded.
"""

from __future__ import annotations

import gc
from typing import Any, Protocol

import numpy as np

from ..logging_config import get_logger
from .registry import ModelRole, ModelSpec

logger = get_logger(__name__)


class LoadedModel(Protocol):
    def close(self) -> None: ...


class ZeroShotModel:
    """Wraps a ``zero-shot-classification`` pipeline."""

    def __init__(self, pipeline: Any):
        self._pipeline = pipeline

    def classify(self, text: str, labels: list[str]) -> dict[str, float]:
        """Score ``text`` against each candidate label."""
        result = self._pipeline(text, candidate_labels=labels)
        return dict(zip(result["labels"], (float(s) for s in result["scores"])))

    def close(self) -> None:
        self._pipeline = None


class EmbeddingModel:
    """Wraps a ``SentenceTransformer`` encoder."""

    def __init__(self, model: Any):
        self._model = model

    def embed(self, texts: list[str]) -> np.ndarray:
        """One L2-normalized row per input text."""
        return np.asarray(
            self._model.encode(
                texts,
                convert_to_numpy=True,
                normalize_embeddings=True,
                show_progress_bar=False,
            )
        )

    def close(self) -> None:
        self._model = None


class ModelBackend(Protocol):
    def load(self, role: ModelRole, spec: ModelSpec, cache_dir: str) -> LoadedModel: ...


class HuggingFaceBackend:
    """Loads models from the Hugging Face hub into a local cache directory."""

    def load(self, role: ModelRole, spec: ModelSpec, cache_dir: str) -> LoadedModel:
        logger.info("Loading %s (~%d MB)", spec.description, spec.size_estimate_mb)
        if role == "zero_shot":
            from transformers import pipeline

            return ZeroShotModel(
                pipeline(spec.task, model=spec.hf_id, model_kwargs={"cache_dir": cache_dir})
            )
        if role == "sentence_similarity":
            from sentence_transformers import SentenceTransformer

            return EmbeddingModel(SentenceTransformer(spec.hf_id, cache_folder=cache_dir))
        raise ValueError(f"Unknown model role: {role}")


def release_memory() -> None:
    """Collect dropped model objects and return cached accelerator memory."""
    gc.collect()
    try:
        import torch
    except ImportError:
        return
    if torch.cuda.is_available():
        torch.cuda.empty_cache()
