"""
Utilities module for PoaWeaver.

- Sequence alphabet handling and validation
- Logging setup
"""

from .sequence_utils import (
    DEFAULT_ALPHABET,
    GAP_CHAR,
    resolve_alphabet,
    find_invalid_symbols,
    validate_sequence,
)
from .logging_utils import setup_logging

__all__ = [
    "DEFAULT_ALPHABET",
    "GAP_CHAR",
    "resolve_alphabet",
    "find_invalid_symbols",
    "validate_sequence",
    "setup_logging",
]
