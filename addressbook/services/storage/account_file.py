"""
File-backed Account Store

DESIGN DECISION: The account directory is a plain UTF-8 text file, one
record per line. It is small, human-inspectable and needs no database.

TRADEOFFS:
- Every mutation rewrites the whole file (no append-only log)
- No locking: concurrent external writers are out of scope. If the file
  changed under us between read and write we log it and carry on.
"""

from pathlib import Path
from typing import Optional, Sequence

from addressbook.accounts.codec import is_ignorable
from addressbook.audit import get_logger
from addressbook.services.storage.files import atomic_write_text
from addressbook.services.storage.interface import (
    AccountStoreInterface,
    IoFailureError,
)


class FileAccountStore(AccountStoreInterface):
    """
    Account store over a single text file.

    The file is created lazily by the first write.
    """

    def __init__(self, path: Path, encoding: str = "utf-8"):
        self._path = Path(path)
        self._encoding = encoding
        self._logger = get_logger(__name__)
        # (mtime_ns, size) seen at the last read/write; None means "absent"
        self._fingerprint: Optional[tuple[int, int]] = None
        self._observed = False

    @property
    def path(self) -> Path:
        return self._path

    @property
    def location(self) -> str:
        return str(self._path)

    def _current_fingerprint(self) -> Optional[tuple[int, int]]:
        try:
            stat = self._path.stat()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise IoFailureError(f"Could not stat {self._path}: {e}", cause=e) from e
        return (stat.st_mtime_ns, stat.st_size)

    def read_all(self) -> list[str]:
        """Read every record line, skipping blanks and comments."""
        try:
            data = self._path.read_bytes()
        except FileNotFoundError:
            self._fingerprint = None
            self._observed = True
            return []
        except OSError as e:
            raise IoFailureError(f"Could not read {self._path}: {e}", cause=e) from e

        self._fingerprint = self._current_fingerprint()
        self._observed = True

        # Undecodable bytes survive as lone surrogates so that only the
        # damaged line is rejected by the codec, not the whole file.
        # split("\n") rather than splitlines(): the latter also breaks on
        # \x1c-\x1e, which are legal delimiter choices
        text = data.decode(self._encoding, errors="surrogateescape")
        lines = [line.rstrip("\r") for line in text.split("\n")]
        return [line for line in lines if not is_ignorable(line)]

    def write_all(self, lines: Sequence[str]) -> None:
        """Atomically replace the file with `lines`."""
        if self._observed and self._current_fingerprint() != self._fingerprint:
            self._logger.warning(
                "external_modification_detected",
                path=str(self._path),
            )

        text = "".join(f"{line}\n" for line in lines)
        atomic_write_text(self._path, text, encoding=self._encoding)

        self._fingerprint = self._current_fingerprint()
        self._observed = True
