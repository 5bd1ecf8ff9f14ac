"""Atomic writing of published JSON artifacts."""

import json
import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import Any

from maginhawa.errors import ArtifactWriteError

logger = logging.getLogger(__name__)


def dump_json(payload: Any) -> str:
    """Serialize an artifact payload the way every published file is laid out."""
    return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"


def _current_umask() -> int:
    umask = os.umask(0)
    os.umask(umask)
    return umask


def _artifact_mode(path: Path) -> int:
    """Permissions for a published artifact.

    An existing artifact keeps its mode; a new one gets the mode a plain
    open() would have given it under the current umask.
    """
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return 0o666 & ~_current_umask()


def write_json_artifact(path: Path, payload: Any) -> int:
    """Replace an artifact with a freshly generated one.

    The new content goes to a temporary file next to the target and is then
    renamed over it, so readers see either the old or the new artifact.

    Returns:
        Size of the written artifact in bytes

    Raises:
        ArtifactWriteError: If the artifact cannot be written
    """
    path = Path(path)
    content = dump_json(payload).encode("utf-8")

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    except OSError as e:
        raise ArtifactWriteError(path, str(e)) from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as tmp:
            tmp.write(content)
        os.chmod(tmp_path, _artifact_mode(path))
        os.replace(tmp_path, path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise ArtifactWriteError(path, str(e)) from e

    logger.debug(f"Wrote {len(content)} bytes to {path}")
    return len(content)
