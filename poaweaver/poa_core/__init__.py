"""
POA Core module for PoaWeaver.

This module provides the partial-order alignment engine:
- POA graph store (nodes, edges, sequence paths, topological order)
- Global affine-gap sequence-to-graph alignment
- Threading of alignments into the graph
"""

from .data_structures import (
    POAGraph,
    POANode,
    POAEdge,
    SequenceRecord,
    POAError,
    InvalidSequence,
    InvalidScoring,
    GraphCorrupted,
)
from .scoring import ScoringScheme
from .aligner_module import (
    AlignedPair,
    AlignmentResult,
    POAAligner,
    score_alignment,
)
from .graph_mutator import GraphMutator
from .engine import POAEngine

__all__ = [
    # Graph store
    "POAGraph",
    "POANode",
    "POAEdge",
    "SequenceRecord",
    # Errors
    "POAError",
    "InvalidSequence",
    "InvalidScoring",
    "GraphCorrupted",
    # Alignment
    "ScoringScheme",
    "AlignedPair",
    "AlignmentResult",
    "POAAligner",
    "score_alignment",
    "GraphMutator",
    "POAEngine",
]
