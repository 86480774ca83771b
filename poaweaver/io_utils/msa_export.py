#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

MSA export — column assignment over the POA graph, aligned rows per
inserted sequence, and FASTA rendering of the alignment.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations
import logging
from pathlib import Path

from ..poa_core.data_structures import GraphCorrupted, POAGraph
from ..utils.sequence_utils import GAP_CHAR

logger = logging.getLogger(__name__)


# ============================================================================
#                           COLUMN ASSIGNMENT
# ============================================================================

def column_map(graph: POAGraph) -> dict[int, int]:
    """
    Assign an MSA column to every residue node.

    Columns follow the topological order with sentinels removed. Nodes of
    one aligned group come out of the order contiguously and share a
    single column.

    Returns:
        Dict mapping node_id -> 0-based column index
    """
    columns: dict[int, int] = {}
    column = -1
    for node_id in graph.topological_order():
        if graph.is_sentinel(node_id):
            continue
        shared = [columns[other] for other in graph.nodes[node_id].aligned_to if other in columns]
        if shared:
            columns[node_id] = shared[0]
        else:
            column += 1
            columns[node_id] = column
    return columns


# ============================================================================
#                              MSA BUILDER
# ============================================================================

def build_msa_records(graph: POAGraph, gap_char: str = GAP_CHAR) -> list[tuple[str, str]]:
    """
    Build (name, aligned row) pairs in insertion order.

    Each row is produced by walking the sequence's stored path, so the
    cost is proportional to the total path length plus the column count.

    Raises:
        GraphCorrupted: if a stored path does not advance through columns
    """
    if not graph.sequences:
        return []

    columns = column_map(graph)
    n_columns = max(columns.values()) + 1 if columns else 0

    records: list[tuple[str, str]] = []
    for record in graph.sequences:
        row = [gap_char] * n_columns
        last_column = -1
        for node_id in record.path:
            column = columns.get(node_id)
            if column is None or column <= last_column:
                raise GraphCorrupted(
                    f"Path of {record.name} is not monotone at node {node_id}"
                )
            row[column] = graph.nodes[node_id].symbol
            last_column = column
        records.append((record.name, ''.join(row)))
    return records


def build_msa(graph: POAGraph, gap_char: str = GAP_CHAR) -> list[str]:
    """
    Aligned strings, one per inserted sequence, in insertion order.

    All rows have the same length (the number of columns). An empty graph
    yields an empty list.

    Example:
        >>> engine = POAEngine()
        >>> _ = engine.add_sequence("ACGT")
        >>> _ = engine.add_sequence("ACT")
        >>> build_msa(engine.graph)
        ['ACGT', 'AC-T']
    """
    return [aligned for _, aligned in build_msa_records(graph, gap_char)]


# ============================================================================
#                              FASTA OUTPUT
# ============================================================================

def msa_to_fasta(graph: POAGraph, line_width: int = 0, gap_char: str = GAP_CHAR) -> str:
    """
    Render the MSA as FASTA text.

    Args:
        graph: POA graph
        line_width: Number of columns per line (0 = no wrapping)
        gap_char: Symbol used for gap positions
    """
    lines: list[str] = []
    for name, aligned in build_msa_records(graph, gap_char):
        lines.append(f">{name}")
        if line_width > 0:
            for i in range(0, len(aligned), line_width):
                lines.append(aligned[i:i + line_width])
        else:
            lines.append(aligned)
    return "\n".join(lines) + "\n" if lines else ""


def write_msa_fasta(
    graph: POAGraph,
    output_path: str | Path,
    line_width: int = 0,
    gap_char: str = GAP_CHAR
) -> Path:
    """
    Write the MSA of ``graph`` to a FASTA file.

    Returns:
        Path of the written file
    """
    output_path = Path(output_path)
    logger.info(f"Writing MSA of {len(graph.sequences)} sequences to {output_path}")

    text = msa_to_fasta(graph, line_width=line_width, gap_char=gap_char)
    with open(output_path, 'w') as f:
        f.write(text)

    logger.info(f"MSA export complete: {output_path}")
    return output_path


# PoaWeaver v0.1.0
# Any usage is subject to this software's license.
