#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

Tests for GFA serialization and import.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest

from poaweaver.io_utils import (
    graph_to_gfa,
    load_graph_from_gfa,
    parse_gfa,
    validate_gfa,
    write_gfa,
)
from poaweaver.poa_core import POAEngine


def _graph_state(graph):
    nodes = {
        node.id: (node.symbol, node.weight, frozenset(node.aligned_to))
        for node in graph.nodes.values()
    }
    edges = {key: (edge.weight, list(edge.sequence_ids)) for key, edge in graph.edges.items()}
    paths = [(r.name, r.sequence, r.weight, list(r.path)) for r in graph.sequences]
    return nodes, edges, paths


class TestGFAExport:
    """Test GFA text generation."""

    def test_empty_graph_header_only(self, empty_graph):
        assert graph_to_gfa(empty_graph) == "H\tVN:Z:1.0\n"

    def test_exact_records(self, acgt_engine):
        acgt_engine.add_sequence("ACGA")
        expected = "\n".join([
            "H\tVN:Z:1.0",
            "S\t2\tA\tRC:i:2",
            "S\t3\tC\tRC:i:2",
            "S\t4\tG\tRC:i:2",
            "S\t5\tT\tRC:i:1\tal:Z:6",
            "S\t6\tA\tRC:i:1\tal:Z:5",
            "L\t2\t+\t3\t+\t0M\tRC:i:2",
            "L\t3\t+\t4\t+\t0M\tRC:i:2",
            "L\t4\t+\t5\t+\t0M\tRC:i:1",
            "L\t4\t+\t6\t+\t0M\tRC:i:1",
            "P\tseq_0\t2+,3+,4+,5+\t*\tWT:i:1",
            "P\tseq_1\t2+,3+,4+,6+\t*\tWT:i:1",
        ]) + "\n"
        assert acgt_engine.get_gfa() == expected

    def test_sentinels_not_written(self, acgt_engine):
        for line in acgt_engine.get_gfa().splitlines():
            fields = line.split('\t')
            if fields[0] == 'S':
                assert int(fields[1]) >= 2
            elif fields[0] == 'L':
                assert int(fields[1]) >= 2 and int(fields[3]) >= 2

    def test_weighted_path(self, engine):
        engine.add_sequence("ACGT", weight=4)
        gfa = engine.get_gfa()
        assert "S\t2\tA\tRC:i:4" in gfa
        assert gfa.rstrip("\n").endswith("WT:i:4")

    def test_stop_residue_segment(self, engine):
        engine.add_sequence("MK*")
        lines = engine.get_gfa().splitlines()
        assert lines[3] == "S\t4\t*\tLN:i:1\tRC:i:1"
        assert lines[1] == "S\t2\tM\tRC:i:1"

    def test_stats(self, acgt_engine):
        acgt_engine.add_sequence("ACT")
        stats = validate_gfa(acgt_engine.get_gfa())
        assert stats == {'segments': 4, 'links': 4, 'paths': 2, 'version': '1.0'}


class TestGFAImport:
    """Test rebuilding graphs from GFA text."""

    def test_round_trip(self, engine, related_sequences):
        for i, seq in enumerate(related_sequences):
            engine.add_sequence(seq, weight=1 + i % 2)

        text = engine.get_gfa()
        loaded = parse_gfa(text)

        assert _graph_state(loaded) == _graph_state(engine.graph)
        assert graph_to_gfa(loaded) == text
        assert loaded.topological_order() == engine.graph.topological_order()

    def test_resume_alignment(self, scoring, related_sequences):
        original = POAEngine(scoring)
        for seq in related_sequences[:3]:
            original.add_sequence(seq)

        resumed = POAEngine.from_gfa(original.get_gfa(), scoring=scoring)
        for eng in (original, resumed):
            for seq in related_sequences[3:]:
                eng.add_sequence(seq)

        assert resumed.get_msa() == original.get_msa()
        assert resumed.get_gfa() == original.get_gfa()

    def test_stop_residue_round_trip(self, engine):
        engine.add_sequence("MKV*")
        engine.add_sequence("MK*")
        text = engine.get_gfa()

        loaded = parse_gfa(text)
        assert loaded.nodes[5].symbol == '*'
        assert _graph_state(loaded) == _graph_state(engine.graph)
        assert graph_to_gfa(loaded) == text

    def test_empty_document(self):
        graph = parse_gfa("H\tVN:Z:1.0\n")
        assert graph.num_nodes == 0
        assert graph.is_empty()

    def test_malformed_lines_skipped(self):
        text = "H\tVN:Z:1.0\nS\t2\nS\t3\tA\tRC:i:1\nL\t3\t+\n"
        graph = parse_gfa(text)
        assert graph.node_ids() == [3]

    def test_reverse_orientation_rejected(self):
        text = "S\t2\tA\nS\t3\tC\nL\t2\t+\t3\t-\t0M\n"
        with pytest.raises(ValueError):
            parse_gfa(text)

    def test_non_numeric_segment_rejected(self):
        with pytest.raises(ValueError):
            parse_gfa("S\tnode7\tA\tRC:i:1\n")

    def test_file_round_trip(self, acgt_engine, temp_output_dir):
        acgt_engine.add_sequence("ACGGT")
        path = write_gfa(acgt_engine.graph, temp_output_dir / "graph.gfa")

        loaded = load_graph_from_gfa(path)
        assert _graph_state(loaded) == _graph_state(acgt_engine.graph)

    def test_missing_file(self, temp_output_dir):
        with pytest.raises(FileNotFoundError):
            load_graph_from_gfa(temp_output_dir / "missing.gfa")


# PoaWeaver v0.1.0
# Any usage is subject to this software's license.
