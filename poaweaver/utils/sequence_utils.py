"""
PoaWeaver v0.1.0

Sequence utility functions for PoaWeaver.

Provides alphabet handling and validation of residue strings before they
are aligned into a graph.
"""

import string
from typing import Iterable, List, Optional

from poaweaver.poa_core.data_structures import InvalidSequence


# Letters cover IUPAC nucleotide and amino-acid codes; '*' is a stop codon.
DEFAULT_ALPHABET = string.ascii_letters + '*'

GAP_CHAR = '-'


def resolve_alphabet(alphabet: Optional[Iterable[str]] = None) -> frozenset:
    """
    Turn an alphabet specification into a set of allowed symbols.

    Args:
        alphabet: String or iterable of single characters (None = default)

    Returns:
        Frozen set of symbols

    Example:
        >>> sorted(resolve_alphabet("ACGT"))
        ['A', 'C', 'G', 'T']
    """
    if alphabet is None:
        alphabet = DEFAULT_ALPHABET
    symbols = frozenset(alphabet)
    if not symbols:
        raise ValueError("Alphabet must contain at least one symbol")
    for symbol in symbols:
        if not isinstance(symbol, str) or len(symbol) != 1:
            raise ValueError(f"Alphabet symbols must be single characters, got {symbol!r}")
        if symbol == GAP_CHAR or symbol.isspace():
            raise ValueError(f"Symbol {symbol!r} cannot be part of an alphabet")
    return symbols


def find_invalid_symbols(sequence: str, alphabet: Iterable[str]) -> List[str]:
    """
    List the distinct symbols of ``sequence`` missing from ``alphabet``.

    Example:
        >>> find_invalid_symbols("AC-GT", "ACGT")
        ['-']
    """
    allowed = alphabet if isinstance(alphabet, (set, frozenset)) else set(alphabet)
    invalid = []
    for symbol in sequence:
        if symbol not in allowed and symbol not in invalid:
            invalid.append(symbol)
    return invalid


def validate_sequence(sequence: str, alphabet: Optional[Iterable[str]] = None) -> str:
    """
    Check that a sequence can be aligned into a graph.

    Args:
        sequence: Residue string (bytes are decoded as ASCII)
        alphabet: Allowed symbols (None = letters and '*')

    Returns:
        The sequence as a str

    Raises:
        InvalidSequence: If the sequence is empty or has unsupported symbols
    """
    if isinstance(sequence, (bytes, bytearray)):
        try:
            sequence = sequence.decode('ascii')
        except UnicodeDecodeError as e:
            raise InvalidSequence(f"Sequence is not ASCII: {e}") from e
    if not isinstance(sequence, str):
        raise InvalidSequence(f"Sequence must be a string, got {type(sequence).__name__}")
    if not sequence:
        raise InvalidSequence("Sequence is empty")

    invalid = find_invalid_symbols(sequence, resolve_alphabet(alphabet))
    if invalid:
        raise InvalidSequence(
            f"Sequence contains unsupported symbols: {', '.join(repr(s) for s in invalid)}"
        )
    return sequence


__all__ = [
    'DEFAULT_ALPHABET',
    'GAP_CHAR',
    'resolve_alphabet',
    'find_invalid_symbols',
    'validate_sequence',
]
