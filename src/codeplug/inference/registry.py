"""Model registry: which Hugging Face model serves each role, per tier."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from ..config import ModelTier

ModelRole = Literal["zero_shot", "sentence_similarity"]


@dataclass(frozen=True)
class ModelSpec:
    hf_id: str
    task: str
    size_estimate_mb: int
    description: str


MODEL_REGISTRY: dict[str, dict[str, ModelSpec]] = {
    "zero_shot": {
        "default": ModelSpec(
            hf_id="facebook/bart-large-mnli",
            task="zero-shot-classification",
            size_estimate_mb=1630,
            description="BART-large-MNLI zero-shot classifier",
        ),
        "lite": ModelSpec(
            hf_id="typeform/distilbert-base-uncased-mnli",
            task="zero-shot-classification",
            size_estimate_mb=268,
            description="DistilBERT-MNLI zero-shot classifier",
        ),
    },
    "sentence_similarity": {
        "default": ModelSpec(
            hf_id="sentence-transformers/all-mpnet-base-v2",
            task="sentence-similarity",
            size_estimate_mb=438,
            description="MPNet sentence embeddings",
        ),
        "lite": ModelSpec(
            hf_id="sentence-transformers/all-MiniLM-L6-v2",
            task="sentence-similarity",
            size_estimate_mb=91,
            description="MiniLM sentence embeddings",
        ),
    },
}


def get_model_spec(role: ModelRole, tier: ModelTier) -> ModelSpec:
    return MODEL_REGISTRY[role][tier]


def total_disk_estimate(tier: ModelTier) -> int:
    """Megabytes needed to cache every role's model for ``tier``."""
    return sum(specs[tier].size_estimate_mb for specs in MODEL_REGISTRY.values())
