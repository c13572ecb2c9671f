"""Walk a directory of Terraform configuration and extract declared resources."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Optional

import hcl2
from lark.exceptions import LarkError

from core.constants import CONFIG_SUFFIX, STATE_FILE_MARKERS, STATE_FILE_NAME, STATE_FILE_SUFFIX
from core.errors import ConfigurationReadError
from core.models import BackendDescriptor, ParseResult
from core.parser.blocks import BlockNormalizer
from core.parser.fallback import LineScanner

logger = logging.getLogger(__name__)


def is_config_file(path: Path) -> bool:
    return path.name.endswith(CONFIG_SUFFIX)


def is_state_file(path: Path) -> bool:
    return path.name == STATE_FILE_NAME or path.name.endswith(STATE_FILE_SUFFIX)


def _read(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8-sig", errors="replace")
    except OSError as exc:
        raise ConfigurationReadError(path, exc.strerror or str(exc)) from exc


def backend_from_state(content: str) -> Optional[BackendDescriptor]:
    """Plain-text sniff of a state file; any marker implies an S3 backend."""
    if any(marker in content for marker in STATE_FILE_MARKERS):
        return BackendDescriptor(kind="s3")
    return None


@dataclass(slots=True)
class TerraformReader:
    """Load resources, data sources and the state backend from a path."""

    source: Path | str
    normalizer: BlockNormalizer = field(default_factory=BlockNormalizer)

    def load(self) -> ParseResult:
        root = Path(self.source)
        if not root.exists():
            raise ConfigurationReadError(root, "no such file or directory")

        result = ParseResult()
        for path in self._walk(root):
            if is_config_file(path):
                logger.debug("Parsing %s", path)
                result.extend(self.parse_file(path))
            if is_state_file(path):
                backend = backend_from_state(_read(path))
                if backend is not None:
                    logger.info("State file %s indicates a %s backend", path, backend.kind)
                result.merge_state_backend(backend)
        return result

    def parse_file(self, path: Path) -> ParseResult:
        return self.parse_text(_read(path), str(path))

    def parse_text(self, content: str, origin: str = "<string>") -> ParseResult:
        content = content.removeprefix("\ufeff")
        try:
            document = hcl2.loads(content)
        except (LarkError, ValueError) as exc:
            logger.info("Falling back to line scanning for %s: %s", origin, exc.__class__.__name__)
            return LineScanner().scan(content)
        return self.normalizer.transform(document)

    # Traversal -------------------------------------------------------------
    def _walk(self, path: Path) -> Iterator[Path]:
        if not path.is_dir():
            yield path
            return
        try:
            entries = sorted(os.scandir(path), key=lambda entry: entry.name)
        except OSError as exc:
            raise ConfigurationReadError(path, exc.strerror or str(exc)) from exc
        for entry in entries:
            child = Path(entry.path)
            if entry.is_dir(follow_symlinks=False):
                yield from self._walk(child)
            else:
                yield child


def parse_terraform_files(source: Path | str) -> ParseResult:
    """Extract everything declared under `source`."""
    return TerraformReader(source).load()


__all__ = ["TerraformReader", "backend_from_state", "is_config_file", "is_state_file", "parse_terraform_files"]
