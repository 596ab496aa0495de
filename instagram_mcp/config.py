"""Runtime settings read from the environment (and an optional .env file)."""
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field


def _flag(value: Optional[str]) -> bool:
    return bool(value) and value.strip().lower() not in ("0", "false", "no", "off")


class Settings(BaseModel):
    ig_username: Optional[str] = None
    ig_password: Optional[str] = None
    staging_dir: Path = Field(default_factory=lambda: Path(tempfile.gettempdir()) / "instagram-mcp-staging")
    download_timeout: float = 60.0
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3001
    quiet: bool = False
    debug: bool = False


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from ``environ`` (defaults to ``os.environ`` after loading .env)."""
    if environ is None:
        load_dotenv()
        environ = os.environ
    values = {
        "ig_username": environ.get("IG_USERNAME") or None,
        "ig_password": environ.get("IG_PASSWORD") or None,
        "log_level": environ.get("LOG_LEVEL", "INFO").upper(),
        "host": environ.get("MCP_SERVER_HOST", "0.0.0.0"),
        "quiet": _flag(environ.get("MCP_SERVER_QUIET")),
        "debug": _flag(environ.get("MCP_SERVER_DEBUG")),
    }
    if environ.get("MCP_STAGING_DIR"):
        values["staging_dir"] = Path(environ["MCP_STAGING_DIR"])
    if environ.get("MCP_DOWNLOAD_TIMEOUT"):
        values["download_timeout"] = environ["MCP_DOWNLOAD_TIMEOUT"]
    if environ.get("MCP_SERVER_PORT"):
        values["port"] = environ["MCP_SERVER_PORT"]
    return Settings(**values)
