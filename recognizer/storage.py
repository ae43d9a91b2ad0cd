"""Storage collaborator: turns uploaded bytes into a publicly resolvable URL."""

import asyncio
import base64
import logging
import mimetypes
import re
import uuid
from pathlib import Path
from typing import Protocol

from recognizer.config import RECOGNIZER_PUBLIC_BASE_URL, RECOGNIZER_UPLOAD_DIR

logger = logging.getLogger(__name__)

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class Storage(Protocol):
    async def store(self, data: bytes, filename: str) -> str:
        """Persist ``data`` and return a URL the model endpoint can fetch."""
        ...


def suffixed_name(filename: str) -> str:
    """Add a random suffix before the extension so repeated names never collide."""
    name = Path(filename or "upload").name
    stem, ext = Path(name).stem, Path(name).suffix
    stem = _UNSAFE_CHARS.sub("-", stem).strip("-") or "upload"
    ext = _UNSAFE_CHARS.sub("", ext)
    return f"{stem}-{uuid.uuid4().hex[:12]}{ext}"


class LocalStorage:
    """Writes uploads to a local directory served under a public base URL."""

    def __init__(
        self,
        root: str | Path = RECOGNIZER_UPLOAD_DIR,
        public_base_url: str = RECOGNIZER_PUBLIC_BASE_URL,
    ):
        self.root = Path(root)
        self.public_base_url = public_base_url.rstrip("/")

    async def store(self, data: bytes, filename: str) -> str:
        stored_name = suffixed_name(filename)
        path = self.root / stored_name
        # Run synchronous file I/O in thread pool to avoid blocking event loop
        await asyncio.to_thread(self._write, path, data)
        url = f"{self.public_base_url}/{stored_name}"
        logger.info(f"Stored upload {filename!r} ({len(data)} bytes) at {url}")
        return url

    def _write(self, path: Path, data: bytes) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)


class InlineStorage:
    """Embeds the bytes as a base64 data URL instead of uploading them.

    Vision endpoints accept data URLs, which lets the command line recognize
    local files without a public file host.
    """

    async def store(self, data: bytes, filename: str) -> str:
        mime_type = mimetypes.guess_type(filename or "")[0] or "image/jpeg"
        b64 = base64.b64encode(data).decode("utf-8")
        return f"data:{mime_type};base64,{b64}"
