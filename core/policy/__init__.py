"""Policy generation helpers."""

from .encoder import OutputFormat, encode
from .generator import PolicyGenerator, generate_policy

__all__ = ["OutputFormat", "PolicyGenerator", "encode", "generate_policy"]
