#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

Threads a sequence alignment into the POA graph.

Matched residues reuse their node, substitutions join the aligned group
of the node they were aligned against, and insertions become new nodes.
Every node and edge on the sequence's path gains the sequence weight.
An insertion either fully succeeds or leaves the graph untouched: each
change is written to an undo log that is unwound if the insertion fails.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set, Tuple

from .aligner_module import AlignedPair
from .data_structures import (
    GraphCorrupted,
    InvalidSequence,
    POAGraph,
    SequenceRecord,
)

logger = logging.getLogger(__name__)

DEFAULT_NAME_PREFIX = "seq_"


def validate_weight(weight: int) -> int:
    """Sequence multiplicity must be a positive integer."""
    if isinstance(weight, bool) or not isinstance(weight, int):
        raise InvalidSequence(f"Sequence weight must be an integer, got {weight!r}")
    if weight < 1:
        raise InvalidSequence(f"Sequence weight must be >= 1, got {weight}")
    return weight


@dataclass
class UndoLog:
    """Changes made by one insertion, in the order they were applied."""
    created_nodes: List[int] = field(default_factory=list)
    created_edges: List[Tuple[int, int]] = field(default_factory=list)
    node_weights: List[Tuple[int, int]] = field(default_factory=list)
    # (edge key, weight added, whether a sequence id was appended)
    edge_updates: List[Tuple[Tuple[int, int], int, bool]] = field(default_factory=list)
    aligned_before: Dict[int, Set[int]] = field(default_factory=dict)
    record_appended: bool = False

    def __len__(self):
        return len(self.node_weights) + len(self.edge_updates)


class GraphMutator:
    """
    Apply alignments to a POA graph.

    The mutator is the only writer of a graph; callers must not run two
    insertions on the same graph at once.
    """

    def __init__(self, graph: POAGraph, name_prefix: str = DEFAULT_NAME_PREFIX):
        self.graph = graph
        self.name_prefix = name_prefix

    def apply(
        self,
        sequence: str,
        alignment: List[AlignedPair],
        weight: int = 1,
        name: Optional[str] = None
    ) -> SequenceRecord:
        """
        Add ``sequence`` to the graph along ``alignment``.

        Args:
            sequence: The aligned residue string
            alignment: Pairs produced by the aligner for this sequence
            weight: Multiplicity added to every node and edge on the path
            name: Sequence name (default ``seq_<index>``)

        Returns:
            The stored SequenceRecord

        Raises:
            InvalidSequence: non-positive weight
            GraphCorrupted: alignment inconsistent with the graph, or the
                graph would stop being acyclic; the graph is rolled back
        """
        validate_weight(weight)
        self._check_alignment(sequence, alignment)

        index = len(self.graph.sequences)
        undo = UndoLog()
        try:
            record = self._thread(sequence, alignment, weight, name, undo)
            self.graph.topological_order()
        except Exception:
            logger.error(
                f"Insertion of sequence #{index} failed; "
                f"undoing {len(undo)} changes"
            )
            self._rollback(undo)
            raise

        logger.debug(
            f"Added {record.name} (weight {weight}, {len(record.path)} nodes); "
            f"graph now has {self.graph.num_nodes} nodes"
        )
        return record

    def _check_alignment(self, sequence: str, alignment: List[AlignedPair]):
        """Every residue must appear once, in order, against a residue node."""
        expected = 0
        for pair in alignment:
            if pair.node_id is None and pair.seq_pos is None:
                raise GraphCorrupted("Alignment step with neither node nor residue")
            if pair.node_id is not None:
                if pair.node_id not in self.graph.nodes:
                    raise GraphCorrupted(f"Alignment references unknown node {pair.node_id}")
                if self.graph.is_sentinel(pair.node_id):
                    raise GraphCorrupted(f"Alignment references sentinel node {pair.node_id}")
            if pair.seq_pos is not None:
                if pair.seq_pos != expected:
                    raise GraphCorrupted(
                        f"Alignment visits residue {pair.seq_pos}, expected {expected}"
                    )
                expected += 1
        if expected != len(sequence):
            raise GraphCorrupted(
                f"Alignment covers {expected} of {len(sequence)} residues"
            )

    def _thread(
        self,
        sequence: str,
        alignment: List[AlignedPair],
        weight: int,
        name: Optional[str],
        undo: UndoLog
    ) -> SequenceRecord:
        graph = self.graph
        index = len(graph.sequences)
        record = SequenceRecord(
            index=index,
            name=name if name is not None else f"{self.name_prefix}{index}",
            sequence=sequence,
            weight=weight,
        )

        prev_id = graph.start_id
        for pair in alignment:
            if pair.seq_pos is None:
                continue  # Node skipped by this sequence
            symbol = sequence[pair.seq_pos]
            if pair.node_id is None:
                node_id = graph.add_node(symbol)
                undo.created_nodes.append(node_id)
            else:
                node_id = self._resolve_node(pair.node_id, symbol, undo)

            graph.nodes[node_id].weight += weight
            undo.node_weights.append((node_id, weight))
            self._add_edge(prev_id, node_id, weight, index, undo)
            record.path.append(node_id)
            prev_id = node_id

        self._add_edge(prev_id, graph.end_id, weight, index, undo)
        graph.sequences.append(record)
        undo.record_appended = True
        return record

    def _add_edge(self, from_id: int, to_id: int, weight: int, index: int, undo: UndoLog):
        key = (from_id, to_id)
        created = key not in self.graph.edges
        self.graph.add_edge(from_id, to_id, weight, sequence_id=index)
        if created:
            undo.created_edges.append(key)
        undo.edge_updates.append((key, weight, True))

    def _resolve_node(self, target_id: int, symbol: str, undo: UndoLog) -> int:
        """
        Node that should carry ``symbol`` in the column of ``target_id``.

        Reuses the target or one of its aligned nodes when the symbol
        matches, otherwise creates a substitution node aligned to it.
        """
        graph = self.graph
        target = graph.get_node(target_id)
        if target.symbol == symbol:
            return target_id
        for other_id in sorted(target.aligned_to):
            if graph.nodes[other_id].symbol == symbol:
                return other_id

        new_id = graph.add_node(symbol)
        undo.created_nodes.append(new_id)
        for member in graph.aligned_group(target_id):
            undo.aligned_before.setdefault(member, set(graph.nodes[member].aligned_to))
        graph.align_nodes(target_id, new_id)
        return new_id

    def _rollback(self, undo: UndoLog):
        """Unwind an undo log in reverse order. Node ids are not reissued."""
        graph = self.graph
        if undo.record_appended:
            graph.sequences.pop()

        for key, weight, appended in reversed(undo.edge_updates):
            edge = graph.edges[key]
            edge.weight -= weight
            if appended:
                edge.sequence_ids.pop()
        for node_id, weight in reversed(undo.node_weights):
            graph.nodes[node_id].weight -= weight

        for node_id, aligned in undo.aligned_before.items():
            graph.nodes[node_id].aligned_to = aligned
        for from_id, to_id in reversed(undo.created_edges):
            graph.discard_edge(from_id, to_id)
        for node_id in reversed(undo.created_nodes):
            graph.discard_node(node_id)

        graph.invalidate_order()
        logger.debug(f"Rolled back to {graph.num_nodes} nodes, {len(graph.sequences)} sequences")


# PoaWeaver v0.1.0
# Any usage is subject to this software's license.
