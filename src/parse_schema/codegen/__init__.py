"""
Code generation from Parse schemas.
"""

from .typescript import generate_typescript, write_typescript

__all__ = [
    "generate_typescript",
    "write_typescript",
]
