"""Exceptions raised by the scanning pipeline."""

from __future__ import annotations

from pathlib import Path


class ScannerError(Exception):
    """Base class for failures that abort a scan."""


class ConfigurationReadError(ScannerError):
    """A directory or file under the scan root could not be read."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"error reading {path}: {reason}")
        self.path = Path(path)


class KnowledgeBaseError(ScannerError):
    """The permission knowledge base is missing or malformed."""

    def __init__(self, path: Path | str, reason: str) -> None:
        super().__init__(f"error loading permissions from {path}: {reason}")
        self.path = Path(path)


class UnsupportedFormatError(ScannerError, ValueError):
    def __init__(self, fmt: str) -> None:
        super().__init__(f"unsupported format: {fmt}")
        self.format = fmt


__all__ = ["ConfigurationReadError", "KnowledgeBaseError", "ScannerError", "UnsupportedFormatError"]
