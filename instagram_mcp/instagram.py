"""Instagram private API access.

Handlers only see the :class:`SocialPlatform` protocol. The concrete
:class:`InstagrapiPlatform` wraps ``instagrapi.Client``; its calls block, so
each one runs in a worker thread to keep the event loop free. Every call logs
in again, sessions are never reused across calls.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Protocol

from instagrapi import Client
from instagrapi.exceptions import ClientError

from .errors import AuthError

logger = logging.getLogger(__name__)


class SocialPlatform(Protocol):
    async def login(self, username: str, password: str) -> Any: ...

    async def publish_photo(self, session: Any, path: Path, caption: Optional[str] = None) -> Dict[str, Any]: ...

    async def publish_video(
        self, session: Any, video_path: Path, cover_path: Path, caption: Optional[str] = None
    ) -> Dict[str, Any]: ...

    async def get_profile(self, session: Any, user_id: str) -> Dict[str, Any]: ...

    async def get_timeline_items(self, session: Any) -> List[Dict[str, Any]]: ...


def _dump(model: Any) -> Dict[str, Any]:
    return model.model_dump(mode="json")


class InstagrapiPlatform:
    async def login(self, username: str, password: str) -> Client:
        logger.info("Logging in to Instagram as %s", username)

        def _login() -> Client:
            client = Client()
            client.login(username, password)
            return client

        try:
            client = await asyncio.to_thread(_login)
        except ClientError as exc:
            logger.error("Login failed for %s: %s", username, exc)
            raise AuthError(f"Instagram login failed for {username}: {exc}") from exc
        logger.info("Login successful for %s", username)
        return client

    async def publish_photo(self, session: Client, path: Path, caption: Optional[str] = None) -> Dict[str, Any]:
        media = await asyncio.to_thread(session.photo_upload, Path(path), caption or "")
        logger.info("Photo uploaded: %s", media.pk)
        return _dump(media)

    async def publish_video(
        self, session: Client, video_path: Path, cover_path: Path, caption: Optional[str] = None
    ) -> Dict[str, Any]:
        media = await asyncio.to_thread(
            session.video_upload, Path(video_path), caption or "", thumbnail=Path(cover_path)
        )
        logger.info("Video uploaded: %s", media.pk)
        return _dump(media)

    async def get_profile(self, session: Client, user_id: str) -> Dict[str, Any]:
        user = await asyncio.to_thread(session.user_info, user_id)
        return _dump(user)

    async def get_timeline_items(self, session: Client) -> List[Dict[str, Any]]:
        feed = await asyncio.to_thread(session.get_timeline_feed)
        items = [item["media_or_ad"] for item in feed.get("feed_items", []) if "media_or_ad" in item]
        logger.info("Fetched %d items from timeline feed", len(items))
        if not items:
            logger.warning("No items found in the timeline feed")
        return items
