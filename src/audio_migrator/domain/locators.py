"""Mapping between public object URLs and storage keys."""

from __future__ import annotations

import re
from dataclasses import dataclass
from urllib.parse import quote, unquote, urlsplit

from audio_migrator.domain.errors import TransferError

_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def locator_to_key(locator: str) -> str:
    """Return the storage key addressed by a public object URL.

    The key is the percent-decoded URL path without its leading separator.
    """

    parsed = urlsplit(locator.strip())
    if not parsed.scheme or not parsed.netloc:
        raise TransferError(f"Locator '{locator}' is not an absolute URL.")

    path = parsed.path[1:] if parsed.path.startswith("/") else parsed.path
    if _MALFORMED_ESCAPE.search(path):
        raise TransferError(f"Locator '{locator}' has a malformed percent escape.")
    try:
        key = unquote(path, errors="strict")
    except UnicodeDecodeError as exc:
        raise TransferError(f"Locator '{locator}' has an undecodable path: {exc}") from exc
    if not key:
        raise TransferError(f"Locator '{locator}' does not address an object.")
    return key


@dataclass(slots=True, frozen=True)
class DestinationLayout:
    """Destination key and public URL convention for migrated objects."""

    namespace: str
    format_subpath: str
    extension: str
    public_base_url: str
    secondary_suffix: str = "_dubbing"

    def key_for(self, item_id: str, suffix: str = "") -> str:
        """Build `<namespace>/<format_subpath>/<item_id><suffix>.<extension>`."""

        segments = [
            segment.strip("/")
            for segment in (self.namespace, self.format_subpath)
            if segment.strip("/")
        ]
        segments.append(f"{item_id}{suffix}.{self.extension.lstrip('.')}")
        return "/".join(segments)

    def public_url(self, key: str) -> str:
        """Return the public URL for a key; `locator_to_key` inverts it."""

        base = self.public_base_url.strip().rstrip("/")
        return f"{base}/{quote(key, safe='/')}"


__all__ = ["DestinationLayout", "locator_to_key"]
