"""
Atomic file replacement shared by the account store and the JSON storage.

A sibling temporary file is written, flushed, fsynced and renamed over
the target, so readers see either the old contents or the new ones.
"""

import contextlib
import os
import tempfile
from pathlib import Path

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from addressbook.services.storage.interface import IoFailureError


# Windows refuses the rename while another process briefly holds the target
@retry(
    retry=retry_if_exception_type(PermissionError),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=0.05, max=0.5),
    reraise=True,
)
def _replace(source: Path, target: Path) -> None:
    os.replace(source, target)


def atomic_write_text(path: Path, text: str, encoding: str = "utf-8") -> None:
    """
    Replace `path` with `text`, creating parent directories on demand.

    Raises:
        IoFailureError: If any step fails. The target is left untouched
            and the temporary file is removed.
    """
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.",
            suffix=".tmp",
            dir=path.parent,
        )
    except OSError as e:
        raise IoFailureError(f"Could not prepare {path}: {e}", cause=e) from e

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="\n") as handle:
            handle.write(text)
            handle.flush()
            os.fsync(handle.fileno())
        _replace(tmp_path, path)
    except OSError as e:
        with contextlib.suppress(OSError):
            tmp_path.unlink()
        raise IoFailureError(f"Could not write {path}: {e}", cause=e) from e
