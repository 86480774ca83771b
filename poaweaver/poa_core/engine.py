#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

POA engine — one graph plus the aligner and mutator that grow it.

Each ``add_sequence`` call validates its input, aligns the sequence
against the current graph, and commits the alignment. Validation
failures leave the graph unchanged.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from .aligner_module import AlignmentResult, POAAligner
from .data_structures import POAGraph, SequenceRecord
from .graph_mutator import DEFAULT_NAME_PREFIX, GraphMutator, validate_weight
from .scoring import ScoringScheme
from ..config.schema import ConfigValidationError, merge_with_defaults, validate_config
from ..io_utils.gfa_export import graph_to_gfa, parse_gfa
from ..io_utils.msa_export import build_msa, msa_to_fasta
from ..utils.logging_utils import setup_logging
from ..utils.sequence_utils import GAP_CHAR, resolve_alphabet

logger = logging.getLogger(__name__)


class POAEngine:
    """
    Incremental partial-order aligner.

    Example:
        >>> engine = POAEngine(ScoringScheme(mismatch=4, gap_open=8, gap_extend=2))
        >>> _ = engine.add_sequence("ACGT")
        >>> _ = engine.add_sequence("ACGA")
        >>> engine.get_msa()
        ['ACGT', 'ACGA']
    """

    def __init__(
        self,
        scoring: Optional[ScoringScheme] = None,
        alphabet: Optional[Iterable[str]] = None,
        name_prefix: str = DEFAULT_NAME_PREFIX,
        gap_char: str = GAP_CHAR,
        fasta_line_width: int = 0,
        graph: Optional[POAGraph] = None
    ):
        """
        Initialize engine.

        Args:
            scoring: Default scoring scheme for insertions
            alphabet: Allowed residue symbols (None = letters and '*')
            name_prefix: Prefix of generated sequence names
            gap_char: Gap symbol in MSA output
            fasta_line_width: Wrapping of FASTA output (0 = none)
            graph: Existing graph to extend (default: a new empty graph)
        """
        self.graph = graph if graph is not None else POAGraph()
        self.scoring = scoring if scoring is not None else ScoringScheme()
        self.alphabet = resolve_alphabet(alphabet)
        self.gap_char = gap_char
        self.fasta_line_width = fasta_line_width
        self._mutator = GraphMutator(self.graph, name_prefix=name_prefix)

    @classmethod
    def from_config(
        cls,
        config: Optional[Dict[str, Any]] = None,
        graph: Optional[POAGraph] = None
    ) -> "POAEngine":
        """
        Build an engine from a configuration dictionary (None = defaults).

        Missing sections and keys fall back to DEFAULT_CONFIG.

        Raises:
            ConfigValidationError: If the configuration is invalid
        """
        config = merge_with_defaults(config)
        errors = validate_config(config)
        if errors:
            raise ConfigValidationError("; ".join(errors))

        if config['logging'].get('configure'):
            setup_logging(config)

        output = config['output']
        return cls(
            scoring=ScoringScheme.from_config(config),
            alphabet=config['alphabet'].get('symbols'),
            name_prefix=output.get('sequence_name_prefix', DEFAULT_NAME_PREFIX),
            gap_char=output.get('gap_char', GAP_CHAR),
            fasta_line_width=output.get('fasta_line_width', 0),
            graph=graph,
        )

    @classmethod
    def from_gfa(cls, text: str, **kwargs) -> "POAEngine":
        """Resume from a graph serialized with :meth:`get_gfa`."""
        return cls(graph=parse_gfa(text), **kwargs)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_sequence(
        self,
        sequence: str,
        weight: int = 1,
        scoring: Optional[ScoringScheme] = None,
        name: Optional[str] = None
    ) -> AlignmentResult:
        """
        Align ``sequence`` to the graph and merge it in.

        Args:
            sequence: Residue string
            weight: Multiplicity (counts as ``weight`` identical sequences)
            scoring: Scoring for this insertion (default: engine scoring)
            name: Sequence name (default ``seq_<index>``)

        Returns:
            AlignmentResult of the committed alignment

        Raises:
            InvalidSequence: empty sequence, bad symbol or bad weight
            InvalidScoring: inconsistent scoring parameters
            GraphCorrupted: internal invariant violated (graph rolled back)
        """
        validate_weight(weight)
        aligner = POAAligner(scoring if scoring is not None else self.scoring, self.alphabet)

        result = aligner.align(self.graph, sequence)
        record = self._mutator.apply(result.sequence, result.alignment, weight=weight, name=name)

        logger.info(
            f"Added {record.name}: length {len(record)}, weight {weight}, "
            f"score {result.score}"
        )
        return result

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def sequences(self) -> List[SequenceRecord]:
        return list(self.graph.sequences)

    def get_msa(self) -> List[str]:
        """Aligned rows in insertion order (empty list for an empty graph)."""
        return build_msa(self.graph, gap_char=self.gap_char)

    def get_msa_fasta(self) -> str:
        return msa_to_fasta(self.graph, line_width=self.fasta_line_width, gap_char=self.gap_char)

    def get_gfa(self) -> str:
        return graph_to_gfa(self.graph)

    def __len__(self):
        return len(self.graph.sequences)

    def __repr__(self):
        return f"POAEngine({self.graph!r}, scoring={self.scoring})"


# PoaWeaver v0.1.0
# Any usage is subject to this software's license.
