"""Serialized, encoding-aware access to the shared user dictionary file.

All reads that precede a write and all writes to the dictionary go through
one FIFO lock per store. The text encoding is chosen from the host platform,
not from file content: Windows keeps its custom dictionary in UTF-16 LE,
everything else uses UTF-8.
"""

import asyncio
import contextlib
import sys
import uuid
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import TypeVar

import aiofiles
import aiofiles.os
from loguru import logger

from case_aware_spellcheck.exceptions import (
    DictionaryEncodingError,
    DictionaryFileNotFoundError,
    DictionaryPermissionError,
    DictionaryStoreError,
)

T = TypeVar("T")

BYTE_ORDER_MARK = "\ufeff"


def platform_encoding(platform: str | None = None) -> str:
    """Return the dictionary text encoding for a platform.

    Args:
        platform: Value in the style of ``sys.platform``; defaults to the
            current interpreter's platform

    Returns:
        ``"utf-16-le"`` on Windows, ``"utf-8"`` elsewhere
    """
    platform = sys.platform if platform is None else platform
    if platform == "win32":
        return "utf-16-le"
    return "utf-8"


class DictionarySyncStore:
    """Single point of access to one user dictionary file.

    Attributes:
        path: Location of the dictionary file
        encoding: Text encoding used for reads and writes
    """

    def __init__(self, path: str | Path, encoding: str | None = None):
        self.path = Path(path)
        self.encoding = encoding or platform_encoding()
        self._lock = asyncio.Lock()
        self._has_bom = False
        logger.debug(f"Initialized DictionarySyncStore for {self.path} ({self.encoding})")

    async def with_lock(self, action: Callable[[], Awaitable[T]]) -> T:
        """Run ``action`` once every previously queued action has finished.

        Waiters are served strictly in arrival order. If ``action`` raises,
        the exception reaches the caller and the lock is still released.

        Args:
            action: Zero-argument coroutine function to run under the lock

        Returns:
            Whatever ``action`` returns
        """
        async with self._lock:
            return await action()

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    async def read(self) -> str:
        """Read and decode the whole dictionary file.

        Raises:
            DictionaryFileNotFoundError: If the file does not exist
            DictionaryPermissionError: If the file cannot be read
            DictionaryEncodingError: If the bytes are not valid in ``encoding``
        """
        try:
            async with aiofiles.open(self.path, "rb") as f:
                data = await f.read()
        except FileNotFoundError as e:
            logger.error(f"Dictionary file not found: {self.path}")
            raise DictionaryFileNotFoundError(f"Dictionary file not found: {self.path}") from e
        except PermissionError as e:
            logger.error(f"Permission denied reading dictionary file: {self.path}")
            raise DictionaryPermissionError(
                f"Permission denied reading dictionary file: {self.path}"
            ) from e
        except OSError as e:
            logger.error(f"Failed to read dictionary file {self.path}: {e}")
            raise DictionaryStoreError(f"Failed to read dictionary file {self.path}: {e}") from e

        try:
            content = data.decode(self.encoding)
        except UnicodeDecodeError as e:
            logger.error(f"Failed to decode {self.path} as {self.encoding}")
            raise DictionaryEncodingError(
                f"Dictionary file {self.path} is not valid {self.encoding}: {e}"
            ) from e

        # Remember the BOM so write(read()) reproduces the file exactly
        self._has_bom = content.startswith(BYTE_ORDER_MARK)
        if self._has_bom:
            content = content[len(BYTE_ORDER_MARK) :]

        logger.debug(f"Read {len(data)} bytes from {self.path}")
        return content

    async def write(self, content: str) -> None:
        """Encode ``content`` and replace the dictionary file with it.

        The data goes to a temporary file next to the dictionary which is then
        renamed over it, so a reader never sees a half-written file.

        Raises:
            DictionaryFileNotFoundError: If the parent directory does not exist
            DictionaryPermissionError: If the directory or file is not writable
            DictionaryEncodingError: If ``content`` cannot be encoded
        """
        if self._has_bom:
            content = BYTE_ORDER_MARK + content

        try:
            data = content.encode(self.encoding)
        except UnicodeEncodeError as e:
            logger.error(f"Failed to encode dictionary content as {self.encoding}")
            raise DictionaryEncodingError(
                f"Dictionary content cannot be encoded as {self.encoding}: {e}"
            ) from e

        temp_path = self.path.with_name(f".{self.path.name}.{uuid.uuid4().hex}.tmp")
        try:
            async with aiofiles.open(temp_path, "wb") as f:
                await f.write(data)
            await aiofiles.os.replace(temp_path, self.path)
        except FileNotFoundError as e:
            logger.error(f"Dictionary directory not found: {self.path.parent}")
            raise DictionaryFileNotFoundError(
                f"Dictionary directory not found: {self.path.parent}"
            ) from e
        except PermissionError as e:
            await self._discard(temp_path)
            logger.error(f"Permission denied writing dictionary file: {self.path}")
            raise DictionaryPermissionError(
                f"Permission denied writing dictionary file: {self.path}"
            ) from e
        except OSError as e:
            await self._discard(temp_path)
            logger.error(f"Failed to write dictionary file {self.path}: {e}")
            raise DictionaryStoreError(f"Failed to write dictionary file {self.path}: {e}") from e

        logger.debug(f"Wrote {len(data)} bytes to {self.path}")

    async def read_with_lock(self) -> str:
        return await self.with_lock(self.read)

    async def write_with_lock(self, content: str) -> None:
        await self.with_lock(lambda: self.write(content))

    async def _discard(self, temp_path: Path) -> None:
        with contextlib.suppress(FileNotFoundError):
            await aiofiles.os.remove(temp_path)
