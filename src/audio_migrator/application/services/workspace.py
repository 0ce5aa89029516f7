"""Per-item temporary workspaces."""

from __future__ import annotations

import logging
import re
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

logger = logging.getLogger(__name__)

_UNSAFE_PATH_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def workspace_prefix(item_id: str) -> str:
    """Return a filesystem-safe directory prefix derived from an item id."""

    safe = _UNSAFE_PATH_CHARS.sub("_", item_id).strip("._") or "item"
    return f"{safe[:64]}-"


@contextmanager
def scoped_workspace(item_id: str, root: Path | None = None) -> Iterator[Path]:
    """Yield a fresh directory for one item and remove it with its contents on exit."""

    if root is not None:
        root.mkdir(parents=True, exist_ok=True)
    path = Path(tempfile.mkdtemp(prefix=workspace_prefix(item_id), dir=root))
    try:
        yield path
    finally:
        try:
            shutil.rmtree(path)
        except OSError as exc:
            logger.warning("Could not remove workspace %s: %s", path, exc)


__all__ = ["scoped_workspace", "workspace_prefix"]
