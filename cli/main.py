"""Command line interface for scanning Terraform and generating IAM policies."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from cli import config, output
from core.errors import ScannerError
from core.parser.terraform_reader import TerraformReader
from core.permissions.database import PermissionDatabase, default_database
from core.policy.encoder import OutputFormat, encode
from core.policy.generator import PolicyGenerator

FORMAT_CHOICES = [fmt.value for fmt in OutputFormat]


class CLIError(Exception):
    def __init__(self, message: str, exit_code: int = 2) -> None:
        super().__init__(message)
        self.exit_code = exit_code


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tfiam",
        description="Scan Terraform files and generate the minimum IAM policy required to apply them",
    )
    parser.add_argument("--config", type=Path, default=Path("tfiam.yml"), help="Path to CLI configuration file")
    parser.add_argument("-p", "--path", type=Path, default=Path("."), help="Directory containing Terraform files")
    parser.add_argument("-o", "--output", type=Path, help="Write the policy to this file instead of stdout")
    parser.add_argument("-f", "--format", choices=FORMAT_CHOICES, help="Output format override")
    parser.add_argument(
        "--include-state-backend",
        action="store_true",
        default=None,
        help="Include permissions for Terraform state backend operations",
    )
    parser.add_argument(
        "--least-privilege",
        action="store_true",
        default=None,
        help="Generate separate statements per service with specific resource ARNs",
    )
    parser.add_argument("--permissions", type=Path, help="Path to a permissions database JSON file")
    parser.add_argument("--exclude-actions", help="Comma separated action patterns to drop, e.g. iam:Tag*")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def app(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        settings = config.load_settings(args.config).merge_cli(
            format_override=args.format,
            include_state_backend=args.include_state_backend,
            least_privilege=args.least_privilege,
            permissions_path=args.permissions,
            exclude_actions=args.exclude_actions,
        )
        return _cmd_scan(args, settings)
    except CLIError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return exc.exit_code
    except ScannerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except Exception as exc:  # pragma: no cover - unexpected errors bubble up
        print(f"Error: {exc}", file=sys.stderr)
        return 1


def _cmd_scan(args: argparse.Namespace, settings: config.Settings) -> int:
    if settings.default_format not in FORMAT_CHOICES:
        raise CLIError(f"invalid format {settings.default_format}. Valid formats: {', '.join(FORMAT_CHOICES)}")

    database = _load_database(settings)
    result = TerraformReader(args.path).load()

    if result.is_empty:
        print(f"Warning: No AWS resources or data sources found in {args.path}", file=sys.stderr)

    generator = PolicyGenerator(
        database,
        include_state_backend=settings.include_state_backend,
        least_privilege=settings.least_privilege,
        exclude_actions=settings.exclude_actions,
    )
    policy = generator.build(result)
    if not any(statement.action_list for statement in policy.statements):
        print("Warning: No IAM actions resolved for the scanned resources", file=sys.stderr)

    output.emit(encode(policy, settings.default_format), output_path=args.output)
    output.write_summary(
        output.summary_lines(
            result,
            policy,
            include_state_backend=settings.include_state_backend,
            least_privilege=settings.least_privilege,
        )
    )
    return 0


def _load_database(settings: config.Settings) -> PermissionDatabase:
    if settings.permissions_path is not None:
        return PermissionDatabase.load(settings.permissions_path)
    return default_database()


def main() -> None:
    raise SystemExit(app())


if __name__ == "__main__":
    main()
