"""Download remote media into a staging directory for the lifetime of one call.

Every staged file lives inside its own ``async with`` scope and is removed when
the scope exits, whatever the outcome. A call that needs two files (video plus
cover image) nests two scopes, so a failure around one never skips the cleanup
of the other.
"""
from __future__ import annotations

import inspect
import logging
import re
import secrets
import time
from contextlib import asynccontextmanager
from pathlib import Path, PurePosixPath
from typing import Any, AsyncIterator, Callable, Optional
from urllib.parse import urlparse

import httpx

from .errors import DownloadError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024
_SAFE_NAME = re.compile(r"[^A-Za-z0-9_.-]+")
_SUFFIX = re.compile(r"^\.[A-Za-z0-9]{1,8}$")


def staged_filename(url: str, suggested_name: str, default_suffix: str) -> str:
    """``<name>-<utc millis>-<random hex><suffix>``, suffix taken from the URL path when it has one."""
    suffix = PurePosixPath(urlparse(url).path).suffix.lower()
    if not _SUFFIX.match(suffix):
        suffix = default_suffix
    name = _SAFE_NAME.sub("_", suggested_name).strip("._") or "download"
    return f"{name}-{int(time.time() * 1000)}-{secrets.token_hex(4)}{suffix}"


def remove_staged(path: Path) -> None:
    try:
        path.unlink()
        logger.debug("Removed staged file %s", path)
    except OSError as exc:
        logger.warning("Could not remove staged file %s: %s", path, exc)


class TransferPipeline:
    def __init__(self, staging_dir: Path, timeout: float = 60.0, client: Optional[httpx.AsyncClient] = None):
        self.staging_dir = Path(staging_dir)
        self.timeout = timeout
        self._client = client

    @asynccontextmanager
    async def _http(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(follow_redirects=True, timeout=self.timeout) as client:
            yield client

    @asynccontextmanager
    async def staged_download(self, url: str, suggested_name: str, default_suffix: str = ".bin") -> AsyncIterator[Path]:
        """Download ``url`` to a fresh staged path, yield it, and remove it on exit."""
        self.staging_dir.mkdir(parents=True, exist_ok=True)
        path = self.staging_dir / staged_filename(url, suggested_name, default_suffix)
        try:
            await self._download(url, path)
        except BaseException:
            # partial file from an interrupted transfer
            if path.exists():
                remove_staged(path)
            raise
        try:
            yield path
        finally:
            remove_staged(path)

    async def with_staged_download(
        self,
        url: str,
        suggested_name: str,
        body: Callable[[Path], Any],
        default_suffix: str = ".bin",
    ) -> Any:
        async with self.staged_download(url, suggested_name, default_suffix) as path:
            result = body(path)
            if inspect.isawaitable(result):
                result = await result
            return result

    async def _download(self, url: str, path: Path) -> None:
        logger.info("Downloading %s", url)
        try:
            async with self._http() as client:
                async with client.stream("GET", url) as response:
                    if not response.is_success:
                        raise DownloadError(response.status_code, url)
                    written = 0
                    with open(path, "wb") as handle:
                        async for chunk in response.aiter_bytes(CHUNK_SIZE):
                            handle.write(chunk)
                            written += len(chunk)
        except httpx.HTTPError as exc:
            raise DownloadError(None, url, str(exc) or type(exc).__name__) from exc
        logger.info("Staged %s (%d bytes) at %s", url, written, path)
