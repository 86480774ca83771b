#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

GFA export — segment/link/path serialization of a POA graph for
visualization tools, plus the matching reader.

Record layout (GFA v1, tab separated):
  H  VN:Z:1.0
  S  <node id>  <symbol>  [LN:i:1]  RC:i:<node weight>  [al:Z:<aligned node ids>]
  L  <from id>  +  <to id>  +  0M  RC:i:<edge weight>
  P  <sequence name>  <id>+,<id>+,...  *  WT:i:<sequence weight>

Sentinel nodes and the edges touching them are not written; the reader
rebuilds them from the path records.

A `*` residue (stop codon) collides with the GFA "sequence absent"
marker, so its segment also carries `LN:i:1`; external tools then see a
one-base segment with no sequence, and the reader maps `*` back to the
residue.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path

from ..poa_core.data_structures import POAGraph, SequenceRecord

logger = logging.getLogger(__name__)

GFA_VERSION = "1.0"

# GFA 1 placeholder for a segment without sequence
ABSENT_SEQUENCE = "*"


# ============================================================================
#                           GFA RECORDS
# ============================================================================

@dataclass
class GFASegment:
    """Represents a GFA S-line (one residue node)."""
    node_id: int
    symbol: str
    weight: int
    aligned_to: list[int] = field(default_factory=list)

    def to_gfa_line(self) -> str:
        """
        Convert to GFA S-line format.

        Format: S <id> <symbol> [LN:i:1] RC:i:<weight> [al:Z:<id>,<id>...]
        """
        line = f"S\t{self.node_id}\t{self.symbol}"
        if self.symbol == ABSENT_SEQUENCE:
            line += "\tLN:i:1"
        line += f"\tRC:i:{self.weight}"
        if self.aligned_to:
            line += "\tal:Z:" + ",".join(str(nid) for nid in self.aligned_to)
        return line


@dataclass
class GFALink:
    """Represents a GFA L-line (edge)."""
    from_id: int
    to_id: int
    weight: int

    def to_gfa_line(self) -> str:
        """
        Convert to GFA L-line format.

        Format: L <from> + <to> + 0M RC:i:<weight>
        """
        return f"L\t{self.from_id}\t+\t{self.to_id}\t+\t0M\tRC:i:{self.weight}"


@dataclass
class GFAPath:
    """Represents a GFA P-line (one inserted sequence)."""
    name: str
    node_ids: list[int]
    weight: int

    def to_gfa_line(self) -> str:
        """
        Convert to GFA P-line format.

        Format: P <name> <id>+,<id>+,... * WT:i:<weight>
        """
        segments = ",".join(f"{nid}+" for nid in self.node_ids)
        return f"P\t{self.name}\t{segments}\t*\tWT:i:{self.weight}"


# ============================================================================
#                       GFA EXPORT FUNCTIONS
# ============================================================================

def graph_to_gfa(graph: POAGraph) -> str:
    """
    Serialize a POA graph to GFA text.

    Segments are written in node id order, links in (from, to) order and
    paths in insertion order. An empty graph gives just the header.
    """
    segments = [
        GFASegment(
            node_id=node.id,
            symbol=node.symbol,
            weight=node.weight,
            aligned_to=sorted(node.aligned_to),
        )
        for node in graph.real_nodes()
    ]
    links = [
        GFALink(from_id=edge.from_id, to_id=edge.to_id, weight=edge.weight)
        for edge in graph.real_edges()
    ]
    paths = [
        GFAPath(name=record.name, node_ids=list(record.path), weight=record.weight)
        for record in graph.sequences
    ]

    lines = [f"H\tVN:Z:{GFA_VERSION}"]
    lines.extend(seg.to_gfa_line() for seg in segments)
    lines.extend(link.to_gfa_line() for link in links)
    lines.extend(path.to_gfa_line() for path in paths)

    logger.debug(
        f"Serialized graph: {len(segments)} segments, {len(links)} links, "
        f"{len(paths)} paths"
    )
    return "\n".join(lines) + "\n"


def write_gfa(graph: POAGraph, output_path: str | Path) -> Path:
    """
    Export a POA graph to a GFA file.

    Returns:
        Path of the written file
    """
    output_path = Path(output_path)
    logger.info(f"Exporting graph to GFA: {output_path}")

    with open(output_path, 'w') as f:
        f.write(graph_to_gfa(graph))

    logger.info(f"GFA export complete: {output_path}")
    logger.info(f"  Segments: {graph.num_nodes}")
    logger.info(f"  Links: {graph.num_edges}")
    logger.info(f"  Paths: {len(graph.sequences)}")
    return output_path


# ============================================================================
#                           GFA READER (Graph Import)
# ============================================================================

def _parse_tags(fields: list[str]) -> dict[str, str]:
    """Map optional ``XX:T:value`` fields to ``{XX: value}``."""
    tags: dict[str, str] = {}
    for tag in fields:
        parts = tag.split(':', 2)
        if len(parts) == 3:
            tags[parts[0]] = parts[2]
    return tags


def _parse_node_id(name: str, line_no: int) -> int:
    try:
        return int(name)
    except ValueError as e:
        raise ValueError(f"GFA line {line_no}: segment name {name!r} is not a node id") from e


def parse_gfa(text: str) -> POAGraph:
    """
    Rebuild a POA graph from GFA text written by :func:`graph_to_gfa`.

    Node ids, symbols, weights, aligned groups, edges, edge weights and
    sequence paths are restored; sentinel edges are re-derived from the
    paths.

    Raises:
        ValueError: On malformed records or unsupported orientations
        GraphCorrupted: If records reference unknown or duplicate nodes
    """
    segments: list[GFASegment] = []
    links: list[GFALink] = []
    paths: list[GFAPath] = []

    for line_no, raw_line in enumerate(text.splitlines(), 1):
        line = raw_line.rstrip('\r')
        if not line or line.startswith('#'):
            continue

        parts = line.split('\t')
        record_type = parts[0]

        if record_type == 'H':
            continue

        elif record_type == 'S':
            # Segment: S <id> <symbol> [LN:i:1] [RC:i:<weight>] [al:Z:<ids>]
            if len(parts) < 3:
                logger.warning(f"GFA line {line_no}: malformed S-line, skipping")
                continue
            tags = _parse_tags(parts[3:])
            aligned = [int(x) for x in tags['al'].split(',')] if tags.get('al') else []
            segments.append(GFASegment(
                node_id=_parse_node_id(parts[1], line_no),
                symbol=parts[2],
                weight=int(tags.get('RC', 0)),
                aligned_to=aligned,
            ))

        elif record_type == 'L':
            # Link: L <from> <from_orient> <to> <to_orient> <overlap> [RC:i:<weight>]
            if len(parts) < 6:
                logger.warning(f"GFA line {line_no}: malformed L-line, skipping")
                continue
            if parts[2] != '+' or parts[4] != '+':
                raise ValueError(f"GFA line {line_no}: reverse orientation is not supported")
            tags = _parse_tags(parts[6:])
            links.append(GFALink(
                from_id=_parse_node_id(parts[1], line_no),
                to_id=_parse_node_id(parts[3], line_no),
                weight=int(tags.get('RC', 0)),
            ))

        elif record_type == 'P':
            # Path: P <name> <id>+,<id>+,... <overlaps> [WT:i:<weight>]
            if len(parts) < 3:
                logger.warning(f"GFA line {line_no}: malformed P-line, skipping")
                continue
            node_ids = []
            for step in parts[2].split(','):
                if not step.endswith('+'):
                    raise ValueError(f"GFA line {line_no}: reverse orientation is not supported")
                node_ids.append(_parse_node_id(step[:-1], line_no))
            tags = _parse_tags(parts[4:])
            paths.append(GFAPath(name=parts[1], node_ids=node_ids, weight=int(tags.get('WT', 1))))

        # W, C and other records ignored

    return _build_graph(segments, links, paths)


def _build_graph(
    segments: list[GFASegment],
    links: list[GFALink],
    paths: list[GFAPath]
) -> POAGraph:
    graph = POAGraph()

    for seg in sorted(segments, key=lambda s: s.node_id):
        graph.restore_node(seg.node_id, seg.symbol, weight=seg.weight)
    for seg in segments:
        for other in seg.aligned_to:
            graph.align_nodes(seg.node_id, other)

    for link in links:
        graph.add_edge(link.from_id, link.to_id, weight=link.weight)

    for index, path in enumerate(paths):
        record = SequenceRecord(
            index=index,
            name=path.name,
            sequence=''.join(graph.get_node(nid).symbol for nid in path.node_ids),
            weight=path.weight,
            path=list(path.node_ids),
        )
        steps = [graph.start_id] + record.path + [graph.end_id]
        for from_id, to_id in zip(steps, steps[1:]):
            if graph.is_sentinel(from_id) or graph.is_sentinel(to_id):
                graph.add_edge(from_id, to_id, weight=path.weight, sequence_id=index)
            else:
                edge = graph.add_edge(from_id, to_id, weight=0)
                edge.sequence_ids.append(index)
        graph.sequences.append(record)

    graph.topological_order()
    logger.info(
        f"Loaded graph: {graph.num_nodes} nodes, {graph.num_edges} edges, "
        f"{len(graph.sequences)} sequences"
    )
    return graph


def load_graph_from_gfa(gfa_path: str | Path) -> POAGraph:
    """
    Load a POA graph from a GFA file.

    Raises:
        FileNotFoundError: If gfa_path does not exist.
    """
    gfa_path = Path(gfa_path)
    if not gfa_path.exists():
        raise FileNotFoundError(f"GFA file not found: {gfa_path}")

    logger.info(f"Loading graph from GFA: {gfa_path}")
    with open(gfa_path, 'r') as f:
        return parse_gfa(f.read())


def validate_gfa(text: str) -> dict[str, int]:
    """
    Count the records of a GFA document.

    Returns:
        Dict with keys: 'segments', 'links', 'paths', 'version'
    """
    stats = {
        'segments': 0,
        'links': 0,
        'paths': 0,
        'version': None
    }

    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue

        if line.startswith('H'):
            if 'VN:Z:' in line:
                stats['version'] = line.split('VN:Z:')[1].split()[0]
        elif line.startswith('S'):
            stats['segments'] += 1
        elif line.startswith('L'):
            stats['links'] += 1
        elif line.startswith('P'):
            stats['paths'] += 1

    return stats


# PoaWeaver v0.1.0
# Any usage is subject to this software's license.
