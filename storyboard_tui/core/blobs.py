"""Read user-selected image and audio files into storable text blobs.

Blobs are data URLs (``data:<mime>;base64,<payload>``).  The bytes are
never decoded or inspected beyond their MIME type guess.
"""

from __future__ import annotations

import asyncio
import base64
import mimetypes
from pathlib import Path

from ..constants import BLOB_KINDS, FALLBACK_MIME
from ..errors import BlobReadFailed
from .pages import check_index
from .registry import Storyboard


def guess_mime(path: Path) -> str:
    mime, _ = mimetypes.guess_type(path.name)
    return mime or FALLBACK_MIME


def read_blob(path: Path, kind: str | None = None) -> str:
    """Return the contents of *path* as a data URL.

    Args:
        path: File chosen by the user.
        kind: ``"image"`` or ``"audio"`` to reject files of another type.

    Raises:
        BlobReadFailed: If the file cannot be read or has the wrong type.
    """
    if kind is not None and kind not in BLOB_KINDS:
        raise ValueError(f"Unknown blob kind: {kind!r}")
    mime = guess_mime(path)
    if kind is not None and not mime.startswith(f"{kind}/"):
        raise BlobReadFailed(f"{path.name} is not a supported {kind} file ({mime})")
    try:
        data = path.read_bytes()
    except OSError as exc:
        raise BlobReadFailed(f"Cannot read {path}: {exc.strerror or exc}") from exc
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime};base64,{encoded}"


async def attach_blob(
    storyboard: Storyboard, index: int, field: str, path: Path
) -> None:
    """Read *path* off the event loop and store it in the page's *field*.

    The page is looked up again after the read completes, by id, because
    other edits may have moved it while the file was loading.  On failure
    the page is left unchanged.

    Raises:
        IndexOutOfRange: If *index* is not a page position.
        BlobReadFailed: If the file cannot be read or the page is gone.
    """
    if field not in BLOB_KINDS:
        raise ValueError(f"Not a blob field: {field!r}")
    check_index(storyboard.pages, index)
    page_id = storyboard.pages[index].id
    blob = await asyncio.to_thread(read_blob, path, field)
    for position, page in enumerate(storyboard.pages):
        if page.id == page_id:
            storyboard.update_page(position, **{field: blob})
            return
    raise BlobReadFailed(f"Page was removed before {path.name} finished loading")
