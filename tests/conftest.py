#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

Pytest configuration and shared fixtures.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest
from pathlib import Path
import tempfile
import shutil

from poaweaver.poa_core import POAEngine, POAGraph, ScoringScheme


@pytest.fixture
def temp_output_dir():
    """Create temporary output directory for tests."""
    temp_dir = tempfile.mkdtemp(prefix="poaweaver_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def scoring():
    """Scoring used throughout the alignment scenarios (mismatch 4, open 8, extend 2)."""
    return ScoringScheme(mismatch=4, gap_open=8, gap_extend=2)


@pytest.fixture
def empty_graph():
    return POAGraph()


@pytest.fixture
def engine(scoring):
    return POAEngine(scoring)


@pytest.fixture
def acgt_engine(engine):
    """Engine holding the single sequence ACGT (nodes 2..5)."""
    engine.add_sequence("ACGT")
    return engine


@pytest.fixture
def related_sequences():
    """Small family of related DNA sequences with SNPs and indels."""
    return [
        "ATCGATCGATCGATCG",
        "ATCGATCGTTCGATCG",  # SNP at position 8
        "ATCGATCGATCGAATCG",  # Insertion
        "ATCGTCGATCGATCG",  # Deletion
        "ATCGATCGATCGATCG",  # Duplicate of the first
        "TTCGATCGATCGATCGA",
    ]

# PoaWeaver v0.1.0
# Any usage is subject to this software's license.
