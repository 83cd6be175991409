"""Schema-validated JSON files with whole-file atomic writes."""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ..config import CODEPLUG_DIR
from ..exceptions import SchemaValidationError, StoreWriteError
from ..logging_config import get_logger

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)


def state_dir(project_root: Path) -> Path:
    return Path(project_root) / CODEPLUG_DIR


def read_validated(path: Path, model: type[M]) -> M:
    """Parse ``path`` into ``model``.

    Raises:
        SchemaValidationError: Unreadable file, invalid JSON, or a shape mismatch
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaValidationError(path, f"cannot read: {e}")
    try:
        return model.model_validate_json(raw)
    except ValidationError as e:
        raise SchemaValidationError(path, str(e))


def write_json(path: Path, payload: Any) -> None:
    """Replace ``path`` with ``payload`` serialized as indented JSON.

    Written to a temporary sibling first and renamed over the target, so
    readers never see a partial file.

    Raises:
        StoreWriteError: The directory or file could not be written
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2)
                f.write("\n")
            os.replace(tmp, path)
        except BaseException:
            Path(tmp).unlink(missing_ok=True)
            raise
    except OSError as e:
        raise StoreWriteError(path, str(e))
    logger.debug("Wrote %s", path)
