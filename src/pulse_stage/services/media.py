"""Best-effort cleanup of media files referenced by posts."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Protocol

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)

MEDIA_PREFIX = "medias"


class MediaStore(Protocol):
    """Object storage holding uploaded images."""

    def delete(self, path: str) -> None:
        """Remove the object stored at ``path``."""


class LoggingMediaStore:
    """Media store used when no object storage is configured."""

    def delete(self, path: str) -> None:
        logger.info("Media store not configured; skipping delete of %s", path)


def extract_inline_images(text: str | None) -> list[str]:
    """Return the ``src`` of every ``<img>`` tag in an HTML body."""
    if not text:
        return []
    soup = BeautifulSoup(text, "html.parser")
    return [tag["src"] for tag in soup.find_all("img", src=True)]


def media_path(url: str) -> str:
    """Map a public image URL to its storage path."""
    filename = url.rstrip("/").rsplit("/", 1)[-1]
    return f"{MEDIA_PREFIX}/{filename}"


def cleanup_media(store: MediaStore, urls: Iterable[str]) -> int:
    """Delete every referenced file, logging and skipping individual failures.

    Returns:
        Number of files the store accepted for deletion.
    """
    deleted = 0
    for url in dict.fromkeys(urls):
        if not url:
            continue
        path = media_path(url)
        try:
            store.delete(path)
        except Exception as exc:  # noqa: BLE001 - cleanup must never block the caller
            logger.warning("Failed to delete media %s: %s", path, exc)
            continue
        deleted += 1
    return deleted


_media_store: MediaStore | None = None


def get_media_store() -> MediaStore:
    """Return the configured media store."""

    global _media_store
    if _media_store is None:
        _media_store = LoggingMediaStore()
    return _media_store
