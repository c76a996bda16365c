"""Safe file I/O utilities.

Provides an atomic whole-file write for the JSON journal: the new
content goes to a sibling temp file, is ``fsync``-ed, then renamed
over the target so a crash never leaves a half-written journal.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)


def atomic_write_text(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` atomically.

    * The temp file lives in the same directory so ``os.replace`` is a
      same-filesystem rename.
    * ``os.fsync`` ensures the data hits disk before the rename.
    * Parent directories are created on demand.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp",
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except FileNotFoundError:
            pass
        raise
    logger.debug("Wrote %d bytes to %s", len(text), path)
