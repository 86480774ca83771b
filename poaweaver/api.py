#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

Handle-based interface for creating graphs, adding sequences with
explicit scoring parameters, and reading the MSA or GFA back.

Insertion functions report a Status code instead of raising, so callers
that bridge to other runtimes can forward a plain integer. Every failure
is logged before it is converted.

Example:
    >>> handle = create_graph()
    >>> add_sequence(handle, "ACGT", 4, 8, 2)
    <Status.OK: 0>
    >>> add_sequence(handle, "ACT", 4, 8, 2)
    <Status.OK: 0>
    >>> get_msa(handle)
    ['ACGT', 'AC-T']
    >>> destroy_graph(handle)

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from enum import IntEnum
from typing import Any, Dict, List, Optional

from .poa_core import (
    GraphCorrupted,
    InvalidScoring,
    InvalidSequence,
    POAEngine,
    ScoringScheme,
)

logger = logging.getLogger(__name__)


class Status(IntEnum):
    """Result codes of the insertion functions."""
    OK = 0
    INVALID_HANDLE = -1
    INVALID_SEQUENCE = -2
    INVALID_SCORING = -3
    GRAPH_CORRUPTED = -4


class GraphHandle:
    """
    Sole owner of one POA graph.

    A handle is valid from :func:`create_graph` until :func:`destroy_graph`
    (or the end of a ``with`` block). Insertions through one handle must
    not overlap; readers must not run during an insertion.
    """

    def __init__(self, engine: POAEngine):
        self._engine: Optional[POAEngine] = engine

    @property
    def is_valid(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Optional[POAEngine]:
        return self._engine

    def release(self):
        """Drop the graph; the handle becomes invalid."""
        if self._engine is not None:
            logger.debug(f"Releasing graph with {len(self._engine)} sequences")
        self._engine = None

    def __enter__(self) -> "GraphHandle":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False

    def __repr__(self):
        state = repr(self._engine.graph) if self._engine is not None else "released"
        return f"GraphHandle({state})"


def _resolve(handle: Optional[GraphHandle]) -> Optional[POAEngine]:
    if handle is None or not isinstance(handle, GraphHandle) or not handle.is_valid:
        logger.warning("Operation on an invalid or released graph handle")
        return None
    return handle.engine


# ============================================================================
#                           LIFECYCLE
# ============================================================================

def create_graph(config: Optional[Dict[str, Any]] = None) -> GraphHandle:
    """Create a new empty graph (settings from ``config``, defaults otherwise)."""
    engine = POAEngine.from_config(config) if config is not None else POAEngine()
    return GraphHandle(engine)


def destroy_graph(handle: Optional[GraphHandle]):
    """Release a graph. Destroying None or a released handle is a no-op."""
    if handle is not None:
        handle.release()


# ============================================================================
#                           INSERTION
# ============================================================================

def add_sequence(
    handle: GraphHandle,
    sequence: str,
    mismatch: int,
    gap_open: int,
    gap_extend: int
) -> Status:
    """Align and add ``sequence`` with weight 1 (global alignment)."""
    return add_sequence_weighted(handle, sequence, 1, mismatch, gap_open, gap_extend)


def add_sequence_weighted(
    handle: GraphHandle,
    sequence: str,
    weight: int,
    mismatch: int,
    gap_open: int,
    gap_extend: int
) -> Status:
    """
    Align and add ``sequence`` counting it ``weight`` times.

    Adding once with weight w gives the same graph as adding the sequence
    w times, with every node and edge weight on its path scaled by w.
    """
    engine = _resolve(handle)
    if engine is None:
        return Status.INVALID_HANDLE

    try:
        scoring = ScoringScheme(
            mismatch=mismatch,
            gap_open=gap_open,
            gap_extend=gap_extend,
            match=engine.scoring.match,
        )
        engine.add_sequence(sequence, weight=weight, scoring=scoring)
    except InvalidSequence as e:
        logger.warning(f"Rejected sequence: {e}")
        return Status.INVALID_SEQUENCE
    except InvalidScoring as e:
        logger.warning(f"Rejected scoring: {e}")
        return Status.INVALID_SCORING
    except GraphCorrupted as e:
        logger.error(f"Graph invariant violated, insertion rolled back: {e}")
        return Status.GRAPH_CORRUPTED

    return Status.OK


# ============================================================================
#                           OUTPUT
# ============================================================================

def get_msa(handle: GraphHandle) -> Optional[List[str]]:
    """
    Aligned rows, one per sequence in insertion order.

    Returns an empty list for an empty graph or an invalid handle, and
    None if the graph is corrupted. The list belongs to the caller.
    """
    engine = _resolve(handle)
    if engine is None:
        return []
    try:
        return engine.get_msa()
    except GraphCorrupted as e:
        logger.error(f"Cannot build MSA: {e}")
        return None


def get_gfa(handle: GraphHandle) -> Optional[str]:
    """
    GFA text of the graph (just the header line for an empty graph).

    Returns None for an invalid handle. The string belongs to the caller.
    """
    engine = _resolve(handle)
    if engine is None:
        return None
    return engine.get_gfa()


__all__ = [
    "Status",
    "GraphHandle",
    "create_graph",
    "destroy_graph",
    "add_sequence",
    "add_sequence_weighted",
    "get_msa",
    "get_gfa",
]


# PoaWeaver v0.1.0
# Any usage is subject to this software's license.
