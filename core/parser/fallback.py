"""Line-oriented scanner used when a configuration file does not parse."""

from __future__ import annotations

from dataclasses import dataclass

from core.models import BackendDescriptor, DeclaredResource, ParseResult

COMMENT_PREFIXES = ("#", "//")


def _label(token: str) -> str:
    return token.rstrip("{").strip('"')


@dataclass(slots=True)
class LineScanner:
    """Recover `resource`, `data` and backend declarations from raw text.

    The scanner tokenizes each line on whitespace and never raises: it
    returns whatever it recognized, which is the point when the structured
    parser has already rejected the file.
    """

    current_block: str = ""

    def scan(self, content: str) -> ParseResult:
        result = ParseResult()
        self.current_block = ""

        for line in content.splitlines():
            trimmed = line.strip()
            if not trimmed or trimmed.startswith(COMMENT_PREFIXES):
                continue

            if trimmed.startswith('resource "'):
                self.current_block = "resource"
                declared = self._declared(trimmed, is_data=False)
                if declared is not None:
                    result.resources.append(declared)
            elif trimmed.startswith('data "'):
                self.current_block = "data"
                declared = self._declared(trimmed, is_data=True)
                if declared is not None:
                    result.data_sources.append(declared)

            if 'backend "' in trimmed and self.current_block == "terraform":
                parts = trimmed.split()
                if len(parts) >= 2:
                    result.merge_block_backend(BackendDescriptor(kind=_label(parts[1])))

            if trimmed.startswith("terraform"):
                self.current_block = "terraform"

            if trimmed == "}":
                self.current_block = ""

        return result

    @staticmethod
    def _declared(line: str, *, is_data: bool) -> DeclaredResource | None:
        parts = line.split()
        if len(parts) < 2:
            return None
        name = _label(parts[2]) if len(parts) >= 3 else ""
        return DeclaredResource.declare(_label(parts[1]), name, is_data=is_data)


__all__ = ["LineScanner"]
