"""Shared fixtures: a fake Instagram platform and a mock HTTP transport."""
from pathlib import Path

import httpx
import pytest

from instagram_mcp.config import Settings
from instagram_mcp.dispatcher import Dispatcher
from instagram_mcp.errors import AuthError
from instagram_mcp.server import McpServer, build_registry
from instagram_mcp.staging import TransferPipeline

MEDIA = {
    "https://cdn.example.com/photo.png": b"\x89PNG fake image",
    "https://cdn.example.com/clip.mp4": b"fake video bytes",
    "https://cdn.example.com/cover.jpg": b"fake cover bytes",
    "https://cdn.example.com/noext": b"no extension",
}


def media_handler(request: httpx.Request) -> httpx.Response:
    body = MEDIA.get(str(request.url))
    if body is None:
        return httpx.Response(404, text="not found")
    return httpx.Response(200, content=body)


class FakePlatform:
    """In-memory stand-in for the Instagram API that records what it was given."""

    def __init__(self, timeline=None, fail_login=False):
        self.timeline = list(timeline or [])
        self.fail_login = fail_login
        self.calls = []
        self.uploaded = {}

    async def login(self, username, password):
        self.calls.append(("login", username))
        if self.fail_login:
            raise AuthError(f"Instagram login failed for {username}: bad password")
        return {"session_for": username}

    async def publish_photo(self, session, path, caption=None):
        self.calls.append(("publish_photo", Path(path)))
        self.uploaded["photo"] = Path(path).read_bytes()
        return {"pk": "100", "media_type": 1, "caption_text": caption or ""}

    async def publish_video(self, session, video_path, cover_path, caption=None):
        self.calls.append(("publish_video", Path(video_path), Path(cover_path)))
        self.uploaded["video"] = Path(video_path).read_bytes()
        self.uploaded["cover"] = Path(cover_path).read_bytes()
        return {"pk": "200", "media_type": 2, "caption_text": caption or ""}

    async def get_profile(self, session, user_id):
        self.calls.append(("get_profile", user_id))
        return {"pk": user_id, "username": "someone", "follower_count": 42}

    async def get_timeline_items(self, session):
        self.calls.append(("get_timeline_items",))
        return list(self.timeline)


@pytest.fixture
def staging_dir(tmp_path):
    return tmp_path / "staging"


@pytest.fixture
def settings(staging_dir):
    return Settings(ig_username="env_user", ig_password="env_pass", staging_dir=staging_dir)


@pytest.fixture
def platform():
    return FakePlatform(timeline=[{"id": str(i)} for i in range(3)])


@pytest.fixture
def pipeline(staging_dir):
    return TransferPipeline(staging_dir, client=httpx.AsyncClient(transport=httpx.MockTransport(media_handler)))


@pytest.fixture
def dispatcher(settings, platform, pipeline):
    return Dispatcher(build_registry(settings, platform, pipeline))


@pytest.fixture
def server(dispatcher, settings):
    return McpServer(dispatcher, settings)
