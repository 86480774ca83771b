#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

Sequence-to-graph aligner — global affine-gap dynamic programming over the
topological order of a POA graph.

Algorithm:
  1. Rank every node by the graph's topological order (sentinels included).
  2. Fill three score matrices indexed by (rank, sequence position):
       M  match/mismatch against node v
       Y  node v skipped (deletion, gap in the sequence)
       X  residue inserted after node v (gap in the graph)
     Each row considers all predecessors of its node, not a single
     previous row.
  3. Take the best cell over the end sentinel's predecessors at the last
     sequence position and trace back to the start sentinel.

Ties are broken by matrix (M, then Y, then X) and then by the lowest
predecessor node id, so repeated runs always produce the same path.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

import numpy as np

from .data_structures import GraphCorrupted, POAGraph
from .scoring import ScoringScheme
from ..utils.sequence_utils import resolve_alphabet, validate_sequence

logger = logging.getLogger(__name__)

NEG_INF = -np.inf

# Matrix identifiers, listed in tie-break preference order
MATCH = 'M'
DELETION = 'Y'
INSERTION = 'X'


# ============================================================================
# Alignment result structures
# ============================================================================

@dataclass(frozen=True)
class AlignedPair:
    """
    One step of a sequence-to-graph alignment.

    Both fields set: residue ``seq_pos`` aligned to node ``node_id``.
    ``seq_pos`` None: node skipped. ``node_id`` None: residue inserted.
    """
    node_id: Optional[int]
    seq_pos: Optional[int]

    @property
    def is_aligned(self) -> bool:
        return self.node_id is not None and self.seq_pos is not None

    @property
    def is_insertion(self) -> bool:
        return self.node_id is None

    @property
    def is_deletion(self) -> bool:
        return self.seq_pos is None


@dataclass
class AlignmentResult:
    """Outcome of aligning one sequence against a graph."""
    sequence: str
    score: int
    alignment: List[AlignedPair] = field(default_factory=list)
    matches: int = 0
    mismatches: int = 0
    insertions: int = 0
    deletions: int = 0

    @property
    def path_nodes(self) -> List[Optional[int]]:
        """Node id (or None for a new insertion) for each sequence position."""
        return [pair.node_id for pair in self.alignment if pair.seq_pos is not None]


# ============================================================================
# Scoring helpers
# ============================================================================

def score_alignment(
    graph: POAGraph,
    sequence: str,
    alignment: Iterable[AlignedPair],
    scoring: ScoringScheme
) -> int:
    """
    Recompute an alignment's score by walking its pairs.

    Runs of insertions or deletions are charged ``gap_open`` once and
    ``gap_extend`` for every further position. The result must equal the
    dynamic-programming score reported for the same alignment.
    """
    score = 0
    open_gap: Optional[str] = None
    for pair in alignment:
        if pair.is_aligned:
            symbol = graph.get_node(pair.node_id).symbol
            score += scoring.substitution(sequence[pair.seq_pos], symbol)
            open_gap = None
            continue

        gap_kind = INSERTION if pair.is_insertion else DELETION
        if open_gap == gap_kind:
            score -= scoring.gap_extend
        else:
            score -= scoring.gap_open
        open_gap = gap_kind
    return score


# ============================================================================
# Aligner
# ============================================================================

class POAAligner:
    """
    Global aligner of a sequence against a POA graph.

    Uses full dynamic programming (no banding), so the returned alignment
    is always optimal under the scoring scheme.

    Example:
        >>> aligner = POAAligner(ScoringScheme(mismatch=4, gap_open=8, gap_extend=2))
        >>> result = aligner.align(POAGraph(), "ACGT")
        >>> result.insertions
        4
    """

    def __init__(self, scoring: ScoringScheme, alphabet: Optional[Iterable[str]] = None):
        """
        Initialize aligner.

        Args:
            scoring: Affine-gap scoring scheme
            alphabet: Allowed residue symbols (None = letters and '*')
        """
        self.scoring = scoring
        self.alphabet = resolve_alphabet(alphabet)

    def align(self, graph: POAGraph, sequence: str) -> AlignmentResult:
        """
        Align ``sequence`` end-to-end against ``graph``.

        Raises:
            InvalidSequence: empty sequence or unsupported symbols
            GraphCorrupted: the graph has no valid topological order
        """
        sequence = validate_sequence(sequence, self.alphabet)

        if graph.num_nodes == 0:
            # Nothing to align against: every residue becomes a new node
            alignment = [AlignedPair(None, pos) for pos in range(len(sequence))]
            return AlignmentResult(
                sequence=sequence,
                score=-self.scoring.gap_cost(len(sequence)),
                alignment=alignment,
                insertions=len(sequence),
            )

        order = graph.topological_order()
        logger.debug(
            f"Aligning sequence of length {len(sequence)} against "
            f"{graph.num_nodes} nodes"
        )

        matrices = self._fill(graph, order, sequence)
        score, alignment = self._traceback(graph, order, sequence, matrices)

        result = AlignmentResult(sequence=sequence, score=score, alignment=alignment)
        for pair in alignment:
            if pair.is_insertion:
                result.insertions += 1
            elif pair.is_deletion:
                result.deletions += 1
            elif graph.nodes[pair.node_id].symbol == sequence[pair.seq_pos]:
                result.matches += 1
            else:
                result.mismatches += 1

        logger.debug(
            f"Alignment score {score}: {result.matches} matches, "
            f"{result.mismatches} mismatches, {result.insertions} insertions, "
            f"{result.deletions} deletions"
        )
        return result

    # ------------------------------------------------------------------
    # Dynamic programming
    # ------------------------------------------------------------------

    @staticmethod
    def _predecessor_ids(graph: POAGraph, node_id: int) -> List[int]:
        """Predecessors in ascending id order; orphan nodes hang off the start sentinel."""
        preds = graph.predecessors(node_id)
        return preds if preds else [graph.start_id]

    @staticmethod
    def _end_predecessor_ids(graph: POAGraph, order: List[int]) -> List[int]:
        """Nodes the alignment may finish on: predecessors of the end sentinel and sinks."""
        preds = set(graph.predecessors(graph.end_id))
        for node_id in order[1:-1]:
            if not graph.out_edges[node_id]:
                preds.add(node_id)
        return sorted(preds) if preds else [graph.start_id]

    def _fill(
        self,
        graph: POAGraph,
        order: List[int],
        sequence: str
    ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Fill the M, Y and X matrices row by row in topological order."""
        scoring = self.scoring
        gap_open = float(scoring.gap_open)
        gap_extend = float(scoring.gap_extend)

        n_rows = len(order)
        m = len(sequence)
        seq_codes = np.frombuffer(sequence.encode('utf-32-le'), dtype=np.uint32)
        extend_offsets = gap_extend * np.arange(m + 1, dtype=np.float64)

        M = np.full((n_rows, m + 1), NEG_INF)
        Y = np.full((n_rows, m + 1), NEG_INF)
        X = np.full((n_rows, m + 1), NEG_INF)
        best = np.full((n_rows, m + 1), NEG_INF)

        # Start sentinel: empty prefix, then an insertion run
        M[0, 0] = 0.0
        X[0, 1:] = -gap_open - extend_offsets[:-1]
        best[0] = np.maximum(M[0], X[0])

        for row in range(1, n_rows - 1):
            node = graph.nodes[order[row]]
            pred_rows = [graph.nodes[u].rank for u in self._predecessor_ids(graph, node.id)]
            if any(pr >= row for pr in pred_rows):
                raise GraphCorrupted(f"Predecessor of node {node.id} ranked after it")

            substitution = np.where(
                seq_codes == ord(node.symbol), float(scoring.match), -float(scoring.mismatch)
            )
            best_pred = best[pred_rows].max(axis=0)
            M[row, 1:] = best_pred[:-1] + substitution

            Y[row] = np.maximum(
                M[pred_rows].max(axis=0) - gap_open,
                Y[pred_rows].max(axis=0) - gap_extend,
            )

            # X[v][j] = max over k < j of M[v][k] - gap_open - (j - 1 - k) * gap_extend
            running = np.maximum.accumulate(M[row, :-1] + extend_offsets[:-1])
            X[row, 1:] = running - gap_open - extend_offsets[:-1]

            best[row] = np.maximum(np.maximum(M[row], Y[row]), X[row])

        return M, Y, X

    def _traceback(
        self,
        graph: POAGraph,
        order: List[int],
        sequence: str,
        matrices: Tuple[np.ndarray, np.ndarray, np.ndarray]
    ) -> Tuple[int, List[AlignedPair]]:
        """Walk back from the best end cell to the start sentinel."""
        M, Y, X = matrices
        by_kind = {MATCH: M, DELETION: Y, INSERTION: X}
        gap_open = float(self.scoring.gap_open)
        gap_extend = float(self.scoring.gap_extend)
        m = len(sequence)

        end_preds = self._end_predecessor_ids(graph, order)
        end_rows = [graph.nodes[u].rank for u in end_preds]
        final = max(by_kind[kind][row, m] for kind in by_kind for row in end_rows)
        if final == NEG_INF:
            raise GraphCorrupted("No alignment reaches the end sentinel")

        kind, row = self._pick(
            [(k, r, by_kind[k][r, m]) for k in (MATCH, DELETION, INSERTION) for r in end_rows],
            final,
        )
        col = m
        pairs: List[AlignedPair] = []

        while row != 0 or kind != MATCH:
            node = graph.nodes[order[row]]

            if kind == MATCH:
                pairs.append(AlignedPair(node.id, col - 1))
                target = M[row, col] - self.scoring.substitution(sequence[col - 1], node.symbol)
                pred_rows = [graph.nodes[u].rank for u in self._predecessor_ids(graph, node.id)]
                kind, row = self._pick(
                    [(k, r, by_kind[k][r, col - 1])
                     for k in (MATCH, DELETION, INSERTION) for r in pred_rows],
                    target,
                )
                col -= 1

            elif kind == DELETION:
                pairs.append(AlignedPair(node.id, None))
                pred_rows = [graph.nodes[u].rank for u in self._predecessor_ids(graph, node.id)]
                candidates = [(MATCH, r, M[r, col] - gap_open) for r in pred_rows]
                candidates += [(DELETION, r, Y[r, col] - gap_extend) for r in pred_rows]
                kind, row = self._pick(candidates, Y[row, col])

            else:
                pairs.append(AlignedPair(None, col - 1))
                kind, row = self._pick(
                    [(MATCH, row, M[row, col - 1] - gap_open),
                     (INSERTION, row, X[row, col - 1] - gap_extend)],
                    X[row, col],
                )
                col -= 1

        if col != 0:
            raise GraphCorrupted(f"Traceback ended at sequence position {col}, expected 0")

        pairs.reverse()
        return int(final), pairs

    @staticmethod
    def _pick(candidates: List[Tuple[str, int, float]], target: float) -> Tuple[str, int]:
        """
        Return the first candidate reaching ``target``.

        Candidates arrive grouped by matrix preference and, within a
        matrix, by ascending node id.
        """
        for kind, row, value in candidates:
            if value == target:
                return kind, row
        raise GraphCorrupted(f"Traceback lost the optimal path (score {target})")


# PoaWeaver v0.1.0
# Any usage is subject to this software's license.
