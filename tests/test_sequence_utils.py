#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

Tests for sequence alphabet utilities.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest
from poaweaver.poa_core import InvalidSequence
from poaweaver.utils.sequence_utils import (
    DEFAULT_ALPHABET,
    find_invalid_symbols,
    resolve_alphabet,
    validate_sequence,
)


class TestAlphabet:
    """Test alphabet resolution."""

    def test_default_covers_letters_and_stop(self):
        symbols = resolve_alphabet()
        assert symbols == frozenset(DEFAULT_ALPHABET)
        assert {'A', 'c', 'Z', '*'} <= symbols
        assert '-' not in symbols

    def test_custom_alphabet(self):
        assert resolve_alphabet("ACGT") == frozenset("ACGT")
        assert resolve_alphabet(["A", "C"]) == frozenset("AC")

    def test_empty_alphabet_rejected(self):
        with pytest.raises(ValueError):
            resolve_alphabet("")

    def test_gap_symbol_rejected(self):
        with pytest.raises(ValueError):
            resolve_alphabet("ACGT-")

    def test_whitespace_rejected(self):
        with pytest.raises(ValueError):
            resolve_alphabet("AC GT")

    def test_multi_character_symbol_rejected(self):
        with pytest.raises(ValueError):
            resolve_alphabet(["AC", "G"])


class TestValidation:
    """Test sequence validation."""

    def test_valid_sequence_returned(self):
        assert validate_sequence("ACGT") == "ACGT"

    def test_case_sensitive(self):
        with pytest.raises(InvalidSequence):
            validate_sequence("acgt", "ACGT")

    def test_bytes_decoded(self):
        assert validate_sequence(b"MKV*") == "MKV*"

    def test_empty(self):
        with pytest.raises(InvalidSequence):
            validate_sequence("")

    def test_not_a_string(self):
        with pytest.raises(InvalidSequence):
            validate_sequence(1234)

    def test_non_ascii_bytes(self):
        with pytest.raises(InvalidSequence):
            validate_sequence(b"AC\xffGT")

    def test_invalid_symbols_listed_once(self):
        assert find_invalid_symbols("AC--GT1", "ACGT") == ['-', '1']
        assert find_invalid_symbols("ACGT", "ACGT") == []
