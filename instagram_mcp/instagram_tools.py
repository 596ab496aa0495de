"""Instagram tools: upload photo/video, profile lookup, timeline feed."""
from __future__ import annotations

import logging
from contextlib import nullcontext
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from pydantic import Field, model_validator

from .config import Settings
from .errors import CredentialsMissingError, NotFoundError
from .instagram import SocialPlatform
from .registry import CallKind, HandlerRegistry
from .schema import ArgumentSchema
from .staging import TransferPipeline

logger = logging.getLogger(__name__)

TIMELINE_MAX = 50


class Credentials(ArgumentSchema):
    username: str = Field(description="Instagram username")
    password: str = Field(description="Instagram password")


def _exactly_one(first: Optional[str], second: Optional[str], first_name: str, second_name: str) -> None:
    if bool(first) == bool(second):
        raise ValueError(f"Provide exactly one of '{first_name}' or '{second_name}'")


class UploadPhotoArgs(ArgumentSchema):
    image_url: Optional[str] = Field(default=None, alias="imageUrl", description="URL of the image to upload")
    file_path: Optional[str] = Field(default=None, alias="filePath", description="Path to a local image file")
    caption: Optional[str] = Field(default=None, description="Photo caption")
    credentials: Optional[Credentials] = Field(default=None, description="Overrides IG_USERNAME / IG_PASSWORD")

    @model_validator(mode="after")
    def _check_source(self):
        _exactly_one(self.image_url, self.file_path, "imageUrl", "filePath")
        return self


class UploadVideoArgs(ArgumentSchema):
    video_url: Optional[str] = Field(default=None, alias="videoUrl", description="URL of the video to upload")
    video_path: Optional[str] = Field(default=None, alias="videoPath", description="Path to a local video file")
    cover_image_url: Optional[str] = Field(default=None, alias="coverImageUrl", description="URL of the cover image")
    cover_image_path: Optional[str] = Field(default=None, alias="coverImagePath", description="Path to a local cover image")
    caption: Optional[str] = Field(default=None, description="Video caption")
    credentials: Optional[Credentials] = Field(default=None, description="Overrides IG_USERNAME / IG_PASSWORD")

    @model_validator(mode="after")
    def _check_sources(self):
        _exactly_one(self.video_url, self.video_path, "videoUrl", "videoPath")
        _exactly_one(self.cover_image_url, self.cover_image_path, "coverImageUrl", "coverImagePath")
        return self


class GetProfileArgs(ArgumentSchema):
    user_id: str = Field(alias="userId", description="Instagram user id")
    credentials: Optional[Credentials] = Field(default=None, description="Overrides IG_USERNAME / IG_PASSWORD")


class GetTimelineArgs(ArgumentSchema):
    limit: int = Field(default=10, ge=1, le=TIMELINE_MAX, description="Number of posts to fetch")
    credentials: Optional[Credentials] = Field(default=None, description="Overrides IG_USERNAME / IG_PASSWORD")


def resolve_credentials(supplied: Optional[Credentials], settings: Settings) -> Tuple[str, str]:
    if supplied is not None:
        return supplied.username, supplied.password
    if settings.ig_username and settings.ig_password:
        return settings.ig_username, settings.ig_password
    raise CredentialsMissingError("Instagram credentials not provided")


def _local_file(raw: str) -> Path:
    path = Path(raw).expanduser()
    if not path.is_file():
        raise NotFoundError(f"File not found: {raw}")
    return path


class InstagramTools:
    def __init__(self, platform: SocialPlatform, pipeline: TransferPipeline, settings: Settings):
        self.platform = platform
        self.pipeline = pipeline
        self.settings = settings

    def _media(self, url: Optional[str], path: Optional[str], name: str, suffix: str):
        if path:
            return nullcontext(_local_file(path))
        return self.pipeline.staged_download(url, name, suffix)

    async def upload_photo(self, args: UploadPhotoArgs) -> Dict[str, Any]:
        username, password = resolve_credentials(args.credentials, self.settings)
        async with self._media(args.image_url, args.file_path, "photo", ".jpg") as image:
            session = await self.platform.login(username, password)
            return await self.platform.publish_photo(session, image, args.caption)

    async def upload_video(self, args: UploadVideoArgs) -> Dict[str, Any]:
        username, password = resolve_credentials(args.credentials, self.settings)
        async with self._media(args.video_url, args.video_path, "video", ".mp4") as video:
            async with self._media(args.cover_image_url, args.cover_image_path, "cover", ".jpg") as cover:
                session = await self.platform.login(username, password)
                return await self.platform.publish_video(session, video, cover, args.caption)

    async def get_profile(self, args: GetProfileArgs) -> Dict[str, Any]:
        username, password = resolve_credentials(args.credentials, self.settings)
        session = await self.platform.login(username, password)
        return await self.platform.get_profile(session, args.user_id)

    async def get_timeline(self, args: GetTimelineArgs) -> List[Dict[str, Any]]:
        # limit is bounded by the schema; the feed may hold fewer items than asked for.
        username, password = resolve_credentials(args.credentials, self.settings)
        session = await self.platform.login(username, password)
        items = await self.platform.get_timeline_items(session)
        return items[: args.limit]


def register_instagram_tools(registry: HandlerRegistry, tools: InstagramTools) -> None:
    registry.register(
        CallKind.TOOL, "instagram_upload_photo", UploadPhotoArgs, tools.upload_photo,
        "Upload a photo to Instagram from a URL or a local file",
    )
    registry.register(
        CallKind.TOOL, "instagram_upload_video", UploadVideoArgs, tools.upload_video,
        "Upload a video with a cover image to Instagram",
    )
    registry.register(
        CallKind.TOOL, "instagram_get_profile", GetProfileArgs, tools.get_profile,
        "Get Instagram profile information",
    )
    registry.register(
        CallKind.TOOL, "instagram_get_timeline", GetTimelineArgs, tools.get_timeline,
        "Get timeline feed",
    )
