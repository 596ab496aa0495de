"""MCP-like demo server: tools, prompts and resources plus Instagram helpers."""

__version__ = "0.1.0"
