"""Output helpers for the tfiam CLI."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import TextIO

from core.models import ParseResult, PolicyDoc


def emit(rendered: str, output_path: Path | None = None) -> None:
    if output_path:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(rendered + ("\n" if not rendered.endswith("\n") else ""), encoding="utf-8")
        print(f"IAM policy written to: {output_path}")
    else:
        print(rendered)


def summary_lines(
    result: ParseResult,
    policy: PolicyDoc,
    *,
    include_state_backend: bool,
    least_privilege: bool,
) -> list[str]:
    lines = [
        "Summary:",
        f"  Resources found: {len(result.resources)}",
        f"  Data sources found: {len(result.data_sources)}",
    ]
    if result.backend is not None:
        lines.append(f"  Backend detected: {result.backend.kind}")
        if not include_state_backend:
            lines.append("  Hint: Use --include-state-backend to add backend permissions")
    if least_privilege:
        lines.append(f"  Services requiring permissions: {', '.join(policy.services)}")
    return lines


def write_summary(lines: list[str], stream: TextIO | None = None) -> None:
    stream = stream or sys.stderr
    print("", file=stream)
    for line in lines:
        print(line, file=stream)


__all__ = ["emit", "summary_lines", "write_summary"]
