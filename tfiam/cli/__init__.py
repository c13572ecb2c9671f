"""`python -m tfiam.cli` runs the scanner command."""

from cli.main import main

__all__ = ["main"]
