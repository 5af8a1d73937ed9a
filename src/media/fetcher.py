# src/media/fetcher.py — v2
"""Media downloads into the collection's media folder.

File names are ``{keyword}_{token}.{ext}`` with an 8-character random
token, so repeated downloads for one keyword never collide. Bodies are
written to a ``.part`` file and renamed only once complete.
"""

from __future__ import annotations

import asyncio
import logging
import os
import re
import uuid
from pathlib import Path

from sentencekit.core.models import ArchivePaths, DownloadResult
from sentencekit.http.remote_client import RemoteClient
from sentencekit.media.archive import ArchiveError, extract_media

logger = logging.getLogger(__name__)

_UNSAFE_CHARS_RE = re.compile(r'[/\\:*?"<>|\s]')


def sanitize_filename(name: str) -> str:
    """Replace characters that are invalid or awkward in file names."""
    return _UNSAFE_CHARS_RE.sub("_", name).strip(".") or "media"


def unique_filename(keyword: str, extension: str) -> str:
    token = uuid.uuid4().hex[:8]
    return f"{sanitize_filename(keyword)}_{token}.{extension.lstrip('.')}"


def _write_atomic(target: Path, body: bytes) -> None:
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_name(target.name + ".part")
    try:
        tmp.write_bytes(body)
        os.replace(tmp, target)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


class MediaFetcher:
    """Downloads single media files or bundled archives."""

    def __init__(self, client: RemoteClient) -> None:
        self._client = client

    async def download(
        self,
        keyword: str,
        url: str,
        dest_dir: Path,
        extension: str,
    ) -> DownloadResult:
        """Download ``url`` into ``dest_dir`` under a fresh unique name.

        Returns:
            DownloadResult with the file name, or the failure reason.
        """
        if not url:
            return DownloadResult.failed("no media url")

        body = await self._client.fetch(url)
        if body is None:
            logger.info("Failed to download %s", url)
            return DownloadResult.failed(f"download failed: {url}")

        file_name = unique_filename(keyword, extension)
        try:
            await asyncio.to_thread(_write_atomic, Path(dest_dir) / file_name, body)
        except OSError as e:
            logger.warning("Failed to write %s: %s", file_name, e)
            return DownloadResult.failed(f"write failed: {e}")

        logger.info("%s added: %s", extension.upper(), file_name)
        return DownloadResult(file_name=file_name)

    async def download_archive(
        self, keyword: str, url: str, dest_dir: Path
    ) -> ArchivePaths | None:
        """Download a bundled archive and extract its media into ``dest_dir``.

        The package file itself is removed after extraction.

        Returns:
            Extracted picture/audio names, or None on any failure.
        """
        result = await self.download(keyword, url, dest_dir, "apkg")
        if result.file_name is None:
            return None

        package = Path(dest_dir) / result.file_name
        try:
            return await asyncio.to_thread(extract_media, package, Path(dest_dir))
        except (ArchiveError, OSError) as e:
            logger.warning("Failed to extract %s: %s", package.name, e)
            return None
        finally:
            package.unlink(missing_ok=True)
