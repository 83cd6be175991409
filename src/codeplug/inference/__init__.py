"""Model registry, single-active-model manager and Hugging Face backend."""

from .backends import EmbeddingModel, HuggingFaceBackend, ModelBackend, ZeroShotModel
from .manager import ModelManager
from .registry import MODEL_REGISTRY, ModelRole, ModelSpec, get_model_spec, total_disk_estimate

__all__ = [
    "EmbeddingModel",
    "HuggingFaceBackend",
    "ModelBackend",
    "ZeroShotModel",
    "ModelManager",
    "MODEL_REGISTRY",
    "ModelRole",
    "ModelSpec",
    "get_model_spec",
    "total_disk_estimate",
]
