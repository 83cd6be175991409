"""Single-active-model manager with scoped acquisition."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from ..config import ModelsConfig
from ..exceptions import ModelBackendError
from ..logging_config import get_logger
from .backends import HuggingFaceBackend, LoadedModel, ModelBackend, release_memory
from .registry import ModelRole, ModelSpec, get_model_spec

logger = get_logger(__name__)


class ModelManager:
    """Owns at most one loaded model at a time.

    Loading a different role disposes the current model first. Use
    :meth:`session` so the model is also disposed when the phase ends::

        with ModelManager(settings.models).session() as models:
            zero_shot = models.load("zero_shot")
            scores = zero_shot.classify(text, ["related", "unrelated"])
    """

    def __init__(self, config: Optional[ModelsConfig] = None, backend: Optional[ModelBackend] = None):
        self.config = config or ModelsConfig()
        self.backend = backend or HuggingFaceBackend()
        self._role: Optional[ModelRole] = None
        self._model: Optional[LoadedModel] = None

    @property
    def current_role(self) -> Optional[ModelRole]:
        return self._role

    def is_loaded(self) -> bool:
        return self._model is not None

    def spec(self, role: ModelRole) -> ModelSpec:
        return get_model_spec(role, self.config.tier)

    def load(self, role: ModelRole) -> LoadedModel:
        """Return the model for ``role``, swapping out any other loaded model.

        Raises:
            ModelBackendError: The backend library is missing or the model failed to load
        """
        if self._model is not None and self._role == role:
            return self._model
        self.dispose()

        spec = self.spec(role)
        Path(self.config.cache_dir).mkdir(parents=True, exist_ok=True)
        try:
            model = self.backend.load(role, spec, self.config.cache_dir)
        except ImportError as e:
            raise ModelBackendError(role, f"{e} (install the 'semantic' extra)") from e
        except Exception as e:
            raise ModelBackendError(role, str(e)) from e

        self._role, self._model = role, model
        logger.debug("Loaded %s for role %s", spec.hf_id, role)
        return model

    def dispose(self) -> None:
        if self._model is None:
            return
        logger.debug("Disposing model for role %s", self._role)
        try:
            self._model.close()
        finally:
            self._model = None
            self._role = None
            release_memory()

    @contextmanager
    def session(self) -> Iterator[ModelManager]:
        try:
            yield self
        finally:
            self.dispose()
