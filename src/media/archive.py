# src/media/archive.py — v2
"""Extraction of bundled card archives.

An archive is a ZIP package holding numbered media entries plus a
``media`` manifest: a JSON object mapping entry names to output file
names, e.g. ``{"0": "sentence.mp3", "1": "sentence.jpg"}``.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import uuid
import zipfile
import zlib
from pathlib import Path

from sentencekit.core.models import ArchivePaths

logger = logging.getLogger(__name__)

MANIFEST_ENTRY = "media"
IMAGE_EXTENSIONS = (".png", ".jpg", ".jpeg")
AUDIO_EXTENSIONS = (".mp3", ".wav")

# Raised by zipfile while decompressing a damaged or unsupported member
_ENTRY_ERRORS = (zlib.error, NotImplementedError, EOFError, RuntimeError)


class ArchiveError(Exception):
    """Archive is unreadable or its manifest is malformed."""


def is_image(filename: str) -> bool:
    return filename.lower().endswith(IMAGE_EXTENSIONS)


def is_audio(filename: str) -> bool:
    return filename.lower().endswith(AUDIO_EXTENSIONS)


def read_manifest(zf: zipfile.ZipFile) -> dict[str, str]:
    """Return the entry -> output name mapping of an open archive."""
    try:
        raw = zf.read(MANIFEST_ENTRY)
    except KeyError as e:
        raise ArchiveError("archive has no media manifest") from e
    try:
        manifest = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ArchiveError(f"malformed media manifest: {e}") from e
    if not isinstance(manifest, dict):
        raise ArchiveError("media manifest is not an object")
    return {str(k): str(v) for k, v in manifest.items()}


def _free_name(dest_dir: Path, name: str) -> str:
    """``name`` if unused in ``dest_dir``, else ``{stem}_{token}{suffix}``."""
    if not (dest_dir / name).exists():
        return name
    path = Path(name)
    return f"{path.stem}_{uuid.uuid4().hex[:8]}{path.suffix}"


def _extract_entry(zf: zipfile.ZipFile, entry_name: str, target: Path) -> None:
    tmp = target.with_name(target.name + ".part")
    try:
        with zf.open(entry_name) as src, tmp.open("wb") as dst:
            shutil.copyfileobj(src, dst)
        os.replace(tmp, target)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def extract_media(archive_path: Path, dest_dir: Path) -> ArchivePaths:
    """Extract every manifest entry of ``archive_path`` into ``dest_dir``.

    Output names are reduced to their base name so entries cannot escape
    ``dest_dir``; a name already present there gets a random suffix.
    Entries listed in the manifest but missing from the archive are
    skipped. On failure, files extracted by this call are removed.

    Returns:
        First extracted image and first extracted audio file name.

    Raises:
        ArchiveError: If the file is not a ZIP, the manifest is bad or an
            entry cannot be decompressed.
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    picture: str | None = None
    audio: str | None = None
    extracted: list[Path] = []

    try:
        try:
            with zipfile.ZipFile(archive_path) as zf:
                manifest = read_manifest(zf)
                names = set(zf.namelist())
                for entry_name, output_name in manifest.items():
                    safe_name = Path(output_name).name
                    if entry_name not in names or not safe_name:
                        logger.debug("Manifest entry %s not extractable", entry_name)
                        continue
                    file_name = _free_name(dest_dir, safe_name)
                    _extract_entry(zf, entry_name, dest_dir / file_name)
                    extracted.append(dest_dir / file_name)

                    if picture is None and is_image(file_name):
                        picture = file_name
                    if audio is None and is_audio(file_name):
                        audio = file_name
        except zipfile.BadZipFile as e:
            raise ArchiveError(f"not a zip archive: {e}") from e
        except _ENTRY_ERRORS as e:
            raise ArchiveError(f"corrupt archive entry: {e}") from e
    except BaseException:
        _remove_all(extracted)
        raise

    return ArchivePaths(picture=picture, audio=audio)


def _remove_all(paths: list[Path]) -> None:
    for path in paths:
        path.unlink(missing_ok=True)
