from __future__ import annotations

import asyncio
import base64
import logging
import mimetypes
from pathlib import Path
from typing import Awaitable, Callable, Optional, Union

from ..errors import MediaReadError, UnsupportedMediaError
from .types import MediaPayload

logger = logging.getLogger(__name__)

_ACCEPTED_PREFIXES = ("image/", "video/")


def is_supported_mime_type(mime_type: Optional[str]) -> bool:
    return bool(mime_type) and mime_type.lower().startswith(_ACCEPTED_PREFIXES)


class MediaEncoder:
    """Turns user-selected files into base64 payloads for the model."""

    async def from_bytes(self, *, data: bytes, mime_type: Optional[str]) -> MediaPayload:
        content_type = self._check_mime_type(mime_type)
        encoded = base64.b64encode(data).decode("ascii")
        return MediaPayload(encoded_bytes=encoded, mime_type=content_type)

    async def from_upload(
        self,
        *,
        file_reader: Callable[[], Awaitable[bytes]],
        mime_type: Optional[str],
    ) -> MediaPayload:
        content_type = self._check_mime_type(mime_type)
        try:
            data = await file_reader()
        except OSError as exc:
            logger.warning("media.read.failed", extra={"error": repr(exc)})
            raise MediaReadError(f"upload read failed: {exc!r}") from exc
        return await self.from_bytes(data=data, mime_type=content_type)

    async def from_path(
        self,
        path: Union[str, Path],
        *,
        mime_type: Optional[str] = None,
    ) -> MediaPayload:
        file_path = Path(path)
        content_type = mime_type or mimetypes.guess_type(file_path.name)[0]
        content_type = self._check_mime_type(content_type)
        try:
            data = await asyncio.to_thread(file_path.read_bytes)
        except OSError as exc:
            logger.warning("media.read.failed", extra={"path": str(file_path), "error": repr(exc)})
            raise MediaReadError(f"cannot read {file_path}: {exc!r}") from exc
        logger.debug("media.read.done", extra={"path": str(file_path), "bytes": len(data)})
        return await self.from_bytes(data=data, mime_type=content_type)

    def _check_mime_type(self, mime_type: Optional[str]) -> str:
        if not is_supported_mime_type(mime_type):
            raise UnsupportedMediaError(f"unsupported content type: {mime_type!r}")
        return mime_type.strip().lower()
