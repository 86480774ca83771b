#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

Tests for the handle-based interface.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest

from poaweaver.api import (
    GraphHandle,
    Status,
    add_sequence,
    add_sequence_weighted,
    create_graph,
    destroy_graph,
    get_gfa,
    get_msa,
)
from poaweaver.config import ConfigValidationError, load_config
from poaweaver.poa_core import GraphCorrupted


@pytest.fixture
def handle():
    h = create_graph()
    yield h
    destroy_graph(h)


class TestLifecycle:
    """Test graph creation and destruction."""

    def test_new_graph_is_empty(self, handle):
        assert handle.is_valid
        assert get_msa(handle) == []
        assert get_gfa(handle) == "H\tVN:Z:1.0\n"

    def test_destroy_invalidates(self):
        h = create_graph()
        destroy_graph(h)
        assert not h.is_valid
        assert add_sequence(h, "ACGT", 4, 8, 2) == Status.INVALID_HANDLE
        assert get_msa(h) == []
        assert get_gfa(h) is None

    def test_destroy_twice_and_none(self):
        h = create_graph()
        destroy_graph(h)
        destroy_graph(h)
        destroy_graph(None)

    def test_context_manager(self):
        with create_graph() as h:
            assert add_sequence(h, "ACGT", 4, 8, 2) == Status.OK
        assert not h.is_valid

    def test_handles_are_independent(self):
        a, b = create_graph(), create_graph()
        add_sequence(a, "ACGT", 4, 8, 2)
        assert get_msa(a) == ["ACGT"]
        assert get_msa(b) == []

    def test_none_handle(self):
        assert add_sequence(None, "ACGT", 4, 8, 2) == Status.INVALID_HANDLE
        assert get_gfa(None) is None

    def test_create_with_config(self):
        config = load_config()
        config['output']['gap_char'] = '.'
        h = create_graph(config)
        add_sequence(h, "ACGT", 4, 8, 2)
        add_sequence(h, "ACT", 4, 8, 2)
        assert get_msa(h) == ["ACGT", "AC.T"]

    def test_create_with_scoring_only_config(self):
        h = create_graph({'scoring': {'match': 2, 'mismatch': 4, 'gap_open': 8, 'gap_extend': 2}})
        assert h.is_valid
        assert add_sequence(h, "ACGT", 4, 8, 2) == Status.OK
        assert add_sequence(h, "ACT", 4, 8, 2) == Status.OK
        assert get_msa(h) == ["ACGT", "AC-T"]

    def test_create_with_empty_config(self):
        h = create_graph({})
        assert h.engine.scoring.match == 2
        assert get_gfa(h) == "H\tVN:Z:1.0\n"

    def test_create_with_invalid_config(self):
        config = load_config()
        config['output']['fasta_line_width'] = -1
        with pytest.raises(ConfigValidationError):
            create_graph(config)


class TestInsertion:
    """Test insertion status codes and results."""

    def test_scenarios(self, handle):
        assert add_sequence(handle, "ACGT", 4, 8, 2) == Status.OK
        assert add_sequence(handle, "ACT", 4, 8, 2) == Status.OK
        assert add_sequence(handle, "ACGGT", 4, 8, 2) == Status.OK
        msa = get_msa(handle)
        assert [row.replace('-', '') for row in msa] == ["ACGT", "ACT", "ACGGT"]
        assert msa[1] == "AC--T"

    def test_status_values(self):
        assert int(Status.OK) == 0
        assert int(Status.INVALID_HANDLE) == -1
        assert int(Status.INVALID_SEQUENCE) == -2
        assert int(Status.INVALID_SCORING) == -3
        assert int(Status.GRAPH_CORRUPTED) == -4

    @pytest.mark.parametrize("seq", ["", "AC-T", "ACG T"])
    def test_invalid_sequence(self, handle, seq):
        add_sequence(handle, "ACGT", 4, 8, 2)
        before = get_gfa(handle)
        assert add_sequence(handle, seq, 4, 8, 2) == Status.INVALID_SEQUENCE
        assert get_gfa(handle) == before

    @pytest.mark.parametrize("params", [(4, 2, 8), (-1, 8, 2), (4, 8, -2), (4, 8.0, 2)])
    def test_invalid_scoring(self, handle, params):
        add_sequence(handle, "ACGT", 4, 8, 2)
        before = get_gfa(handle)
        assert add_sequence(handle, "ACGA", *params) == Status.INVALID_SCORING
        assert get_gfa(handle) == before

    def test_zero_weight(self, handle):
        assert add_sequence_weighted(handle, "ACGT", 0, 4, 8, 2) == Status.INVALID_SEQUENCE
        assert get_msa(handle) == []

    def test_weighted(self, handle):
        assert add_sequence_weighted(handle, "ACGT", 3, 4, 8, 2) == Status.OK
        assert "RC:i:3" in get_gfa(handle)
        assert get_gfa(handle).rstrip("\n").endswith("WT:i:3")

    def test_scoring_per_call(self):
        """Penalties apply to the call that supplies them."""
        cheap, costly = create_graph(), create_graph()
        for h in (cheap, costly):
            add_sequence(h, "ACGT", 4, 8, 2)

        assert add_sequence(cheap, "ACCT", 4, 8, 2) == Status.OK
        assert get_msa(cheap) == ["ACGT", "ACCT"]

        # Mismatch 20 costs more than an insertion plus a deletion
        assert add_sequence(costly, "ACCT", 20, 8, 2) == Status.OK
        msa = get_msa(costly)
        assert len(msa[0]) == 5
        assert [row.replace('-', '') for row in msa] == ["ACGT", "ACCT"]

    def test_graph_corrupted(self, handle, monkeypatch):
        add_sequence(handle, "ACGT", 4, 8, 2)

        def broken(*args, **kwargs):
            raise GraphCorrupted("cycle")

        monkeypatch.setattr(handle.engine, "add_sequence", broken)
        assert add_sequence(handle, "ACGA", 4, 8, 2) == Status.GRAPH_CORRUPTED
        assert get_msa(handle) == ["ACGT"]

    def test_msa_none_when_corrupted(self, handle):
        add_sequence(handle, "ACGT", 4, 8, 2)
        handle.engine.graph.sequences[0].path = [5, 2]
        assert get_msa(handle) is None


class TestHandle:
    """Test GraphHandle itself."""

    def test_repr(self):
        h = create_graph()
        assert "POAGraph" in repr(h)
        h.release()
        assert "released" in repr(h)

    def test_wrong_type(self):
        assert add_sequence("not a handle", "ACGT", 4, 8, 2) == Status.INVALID_HANDLE
        assert isinstance(create_graph(), GraphHandle)
