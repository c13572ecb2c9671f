"""Normalize python-hcl2 block trees into DeclaredResource models."""

from __future__ import annotations

import re
import textwrap
from typing import Any, Iterable, Iterator, Optional

from core.models import BackendDescriptor, DeclaredResource, ParseResult

TEMPLATE_MARKERS = ("${", "%{")

_HEREDOC = re.compile(r"^<<(-?)([A-Za-z_][A-Za-z0-9_]*)\n(.*?)\n?[ \t]*\2\s*$", re.DOTALL)
_ESCAPE = re.compile(r"\\(u[0-9a-fA-F]{4}|U[0-9a-fA-F]{8}|.)", re.DOTALL)
_SIMPLE_ESCAPES = {"n": "\n", "r": "\r", "t": "\t", '"': '"', "\\": "\\"}
# python-hcl2 8.x wraps unary expressions such as `-1.5e3` in an interpolation.
_NUMBER_EXPRESSION = re.compile(r"^\$\{\s*(-?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)\s*\}$")


class _Dynamic(Exception):
    """Raised internally when a value depends on runtime interpolation."""


def _strip_quotes(text: str) -> str:
    if len(text) >= 2 and text[0] == text[-1] == '"':
        return text[1:-1]
    return text


def _is_meta_key(key: str) -> bool:
    return key.startswith("__") and key.endswith("__")


def _is_nested_block(value: Any) -> bool:
    return isinstance(value, list) and bool(value) and all(isinstance(item, dict) for item in value)


def _is_label_body(key: str, value: Any) -> bool:
    # Extra block labels stay quoted keys, map attributes do not.
    return isinstance(value, dict) and key.startswith('"')


def _unescape(text: str) -> str:
    def replace(match: re.Match[str]) -> str:
        code = match.group(1)
        if len(code) > 1:
            return chr(int(code[1:], 16))
        return _SIMPLE_ESCAPES.get(code, match.group(0))

    return _ESCAPE.sub(replace, text)


def _template(text: str, raw: Any) -> str:
    """Reject interpolations and directives, then resolve `$${` and `%%{` escapes."""
    unescaped_markers = text.replace("$${", "").replace("%%{", "")
    if any(marker in unescaped_markers for marker in TEMPLATE_MARKERS):
        raise _Dynamic(raw)
    return text.replace("$${", "${").replace("%%{", "%{")


def _number(text: str) -> int | float:
    return float(text) if any(char in text for char in ".eE") else int(text)


def _string(value: str) -> Any:
    number = _NUMBER_EXPRESSION.match(value)
    if number:
        return _number(number.group(1))
    heredoc = _HEREDOC.match(_strip_quotes(value))
    if heredoc:
        indented, _, body = heredoc.groups()
        return _template(textwrap.dedent(body) if indented else body, value)
    if len(value) >= 2 and value[0] == value[-1] == '"':
        return _unescape(_template(value[1:-1], value))
    return _template(value, value)


def _evaluate(value: Any) -> Any:
    """Return the static value of an attribute or raise `_Dynamic` for expressions."""
    if isinstance(value, str):
        return _string(value)
    if isinstance(value, (bool, int, float)) or value is None:
        return value
    if isinstance(value, list):
        return [_evaluate(item) for item in value]
    if isinstance(value, dict):
        return {_strip_quotes(str(key)): _evaluate(item) for key, item in value.items() if not _is_meta_key(str(key))}
    raise _Dynamic(value)


class BlockNormalizer:
    """Convert the dictionary produced by `hcl2.loads` into a ParseResult."""

    def transform(self, document: dict[str, Any]) -> ParseResult:
        result = ParseResult()
        for body in self._blocks(document, "resource"):
            result.resources.extend(self._declared(body, is_data=False))
        for body in self._blocks(document, "data"):
            result.data_sources.extend(self._declared(body, is_data=True))
        for body in self._blocks(document, "terraform"):
            result.merge_block_backend(self._backend(body))
        return result

    @staticmethod
    def _blocks(document: dict[str, Any], block_type: str) -> Iterator[dict[str, Any]]:
        blocks = document.get(block_type) or []
        if isinstance(blocks, dict):
            blocks = [blocks]
        for block in blocks:
            if isinstance(block, dict):
                yield block

    def _declared(self, block: dict[str, Any], *, is_data: bool) -> Iterator[DeclaredResource]:
        # {"aws_s3_bucket": {"logs": {...body...}}}: both labels are keys.
        for raw_type, instances in block.items():
            if _is_meta_key(raw_type) or not isinstance(instances, dict):
                continue
            resource_type = _strip_quotes(raw_type)
            for raw_name, body in instances.items():
                if _is_meta_key(raw_name) or not isinstance(body, dict):
                    continue
                attributes = {} if is_data else self.attributes(body)
                yield DeclaredResource.declare(
                    resource_type,
                    _strip_quotes(raw_name),
                    is_data=is_data,
                    attributes=attributes,
                )

    @staticmethod
    def attributes(body: dict[str, Any]) -> dict[str, Any]:
        """Statically evaluable direct attributes of a block body."""
        captured: dict[str, Any] = {}
        for key, value in body.items():
            if _is_meta_key(key) or _is_nested_block(value) or _is_label_body(key, value):
                continue
            try:
                captured[key] = _evaluate(value)
            except _Dynamic:
                continue
        return captured

    def _backend(self, body: dict[str, Any]) -> Optional[BackendDescriptor]:
        for backend in self._nested(body.get("backend")):
            for raw_kind, settings in backend.items():
                if _is_meta_key(raw_kind):
                    continue
                values = self.attributes(settings) if isinstance(settings, dict) else {}
                return BackendDescriptor(
                    kind=_strip_quotes(raw_kind),
                    settings={key: value for key, value in values.items() if isinstance(value, str)},
                )
        return None

    @staticmethod
    def _nested(value: Any) -> Iterable[dict[str, Any]]:
        if isinstance(value, dict):
            return [value]
        if isinstance(value, list):
            return [item for item in value if isinstance(item, dict)]
        return []


__all__ = ["BlockNormalizer"]
