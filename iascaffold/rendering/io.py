"""File I/O operations for rendering."""

from __future__ import annotations

import errno
import logging
import os
import tempfile
from pathlib import Path

from ..core.errors import OutputAlreadyExistsError, WriteError

logger = logging.getLogger(__name__)

# errno values meaning the filesystem cannot hard link
_NO_HARDLINKS = {errno.EPERM, errno.EOPNOTSUPP, errno.ENOTSUP, errno.EXDEV, errno.ENOSYS}


def ensure_parent(path: Path) -> None:
    """Ensure parent directories exist for the given path.

    Args:
        path: Path whose parent directories should be created
    """
    path.parent.mkdir(parents=True, exist_ok=True)


def _publish(tmp_name: str, path: Path, text: str) -> None:
    try:
        os.link(tmp_name, path)
    except FileExistsError:
        raise
    except OSError as e:
        if e.errno not in _NO_HARDLINKS:
            raise
        logger.debug(f"Hard links unsupported for {path}, using exclusive create")
        handle = open(path, "x", encoding="utf-8")
        try:
            with handle:
                handle.write(text)
        except BaseException:
            # path was created by this call; leave nothing half-written
            os.remove(path)
            raise


def write_new_text(path: Path, text: str, mode: int = 0o644) -> None:
    """Write text to a file that must not already exist.

    The content is written to a temporary file beside ``path`` and then
    hard linked into place, which fails if ``path`` appeared meanwhile.

    Args:
        path: Destination file path
        text: Text content to write
        mode: File permissions (octal)

    Raises:
        OutputAlreadyExistsError: If ``path`` already exists
        WriteError: On any other I/O failure
    """
    path = Path(path)
    try:
        ensure_parent(path)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", dir=str(path.parent))
    except OSError as e:
        raise WriteError(path, e) from e

    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            tmp.write(text)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.chmod(tmp_name, mode)
        _publish(tmp_name, path, text)
        os.chmod(path, mode)
    except FileExistsError as e:
        raise OutputAlreadyExistsError(path) from e
    except (OSError, UnicodeError) as e:
        raise WriteError(path, e) from e
    finally:
        if os.path.exists(tmp_name):
            try:
                os.remove(tmp_name)
            except OSError as e:
                logger.warning(f"Could not remove temporary file {tmp_name}: {e}")
