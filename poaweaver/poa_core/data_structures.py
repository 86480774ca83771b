#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

POA graph store — nodes, edges, sequence provenance and the cached
topological order of the partial-order alignment DAG.

Nodes and edges live in an arena addressed by integer ids. Two sentinel
nodes (start = 0, end = 1) give the DAG a single source and a single sink
so the aligner can run a global front-to-back sweep.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import heapq
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)


# ============================================================================
# Errors
# ============================================================================

class POAError(Exception):
    """Base class for partial-order alignment errors."""
    pass


class InvalidSequence(POAError):
    """Raised when a sequence is empty or contains unsupported symbols."""
    pass


class InvalidScoring(POAError):
    """Raised when a scoring configuration is inconsistent."""
    pass


class GraphCorrupted(POAError):
    """Raised when a graph invariant (acyclicity, edge endpoints) is violated."""
    pass


# ============================================================================
# Core Data Structures
# ============================================================================

START_NODE_ID = 0
END_NODE_ID = 1
START_SYMBOL = '#'
END_SYMBOL = '$'


@dataclass
class POANode:
    """
    One aligned residue in the POA graph.

    ``aligned_to`` holds the ids of nodes sharing this node's MSA column
    with a different symbol (substitutions against it).
    """
    id: int
    symbol: str
    weight: int = 0  # Summed weight of sequences passing through
    rank: int = -1  # Position in the current topological order
    aligned_to: Set[int] = field(default_factory=set)

    @property
    def is_sentinel(self) -> bool:
        return self.id in (START_NODE_ID, END_NODE_ID)

    def __hash__(self):
        return hash(self.id)


@dataclass
class POAEdge:
    """Directed transition between two nodes, shared by every sequence using it."""
    from_id: int
    to_id: int
    weight: int = 0  # Summed weight of sequences traversing this edge
    sequence_ids: List[int] = field(default_factory=list)

    def __hash__(self):
        return hash((self.from_id, self.to_id))

    def __eq__(self, other):
        if not isinstance(other, POAEdge):
            return False
        return self.from_id == other.from_id and self.to_id == other.to_id


@dataclass
class SequenceRecord:
    """An inserted sequence and the node path it was threaded through."""
    index: int
    name: str
    sequence: str
    weight: int = 1
    path: List[int] = field(default_factory=list)  # Node ids, sentinels excluded

    def __len__(self):
        return len(self.sequence)


class POAGraph:
    """
    Partial-order alignment graph.

    The graph only grows: committed nodes and edges are never removed, and
    node ids are handed out monotonically and never reused. The topological
    order is computed lazily and cached until the next node or edge insertion.

    Example:
        >>> graph = POAGraph()
        >>> a = graph.add_node('A')
        >>> edge = graph.add_edge(graph.start_id, a)
        >>> graph.topological_order()
        [0, 2, 1]
    """

    def __init__(self):
        self.nodes: Dict[int, POANode] = {}
        self.edges: Dict[Tuple[int, int], POAEdge] = {}
        self.out_edges: Dict[int, Set[int]] = defaultdict(set)
        self.in_edges: Dict[int, Set[int]] = defaultdict(set)
        self.sequences: List[SequenceRecord] = []
        self._next_id = 0
        self._topo_cache: Optional[List[int]] = None

        self.start_id = self._new_node(START_SYMBOL)
        self.end_id = self._new_node(END_SYMBOL)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _new_node(self, symbol: str) -> int:
        node_id = self._next_id
        self._next_id += 1
        self.nodes[node_id] = POANode(id=node_id, symbol=symbol)
        self.out_edges[node_id] = set()
        self.in_edges[node_id] = set()
        self._topo_cache = None
        return node_id

    def add_node(self, symbol: str) -> int:
        """Add a residue node and return its id."""
        if len(symbol) != 1:
            raise ValueError(f"Node symbol must be a single character, got {symbol!r}")
        return self._new_node(symbol)

    def restore_node(self, node_id: int, symbol: str, weight: int = 0) -> int:
        """
        Re-create a residue node under a known id (used when loading a
        serialized graph). Later ``add_node`` calls continue above it.
        """
        if node_id in self.nodes:
            raise GraphCorrupted(f"Duplicate node id {node_id}")
        if node_id < 2:
            raise GraphCorrupted(f"Node id {node_id} is reserved for a sentinel")
        if len(symbol) != 1:
            raise ValueError(f"Node symbol must be a single character, got {symbol!r}")
        self.nodes[node_id] = POANode(id=node_id, symbol=symbol, weight=weight)
        self.out_edges[node_id] = set()
        self.in_edges[node_id] = set()
        self._next_id = max(self._next_id, node_id + 1)
        self._topo_cache = None
        return node_id

    def add_edge(
        self,
        from_id: int,
        to_id: int,
        weight: int = 1,
        sequence_id: Optional[int] = None
    ) -> POAEdge:
        """
        Add ``weight`` of support to the edge ``from_id -> to_id``.

        The edge is created on first use; afterwards its weight is
        incremented instead of duplicating it.
        """
        if from_id not in self.nodes or to_id not in self.nodes:
            raise GraphCorrupted(f"Edge {from_id} -> {to_id} references an unknown node")
        if from_id == to_id:
            raise GraphCorrupted(f"Self-loop on node {from_id}")

        key = (from_id, to_id)
        edge = self.edges.get(key)
        if edge is None:
            edge = POAEdge(from_id=from_id, to_id=to_id)
            self.edges[key] = edge
            self.out_edges[from_id].add(to_id)
            self.in_edges[to_id].add(from_id)
            self._topo_cache = None

        edge.weight += weight
        if sequence_id is not None:
            edge.sequence_ids.append(sequence_id)
        return edge

    def align_nodes(self, node_a: int, node_b: int):
        """Place two nodes in the same MSA column (merge their aligned groups)."""
        group = self.aligned_group(node_a) | self.aligned_group(node_b)
        for member in group:
            self.nodes[member].aligned_to = group - {member}
        self._topo_cache = None

    def aligned_group(self, node_id: int) -> Set[int]:
        """Return the node together with every node aligned to it."""
        return {node_id} | self.get_node(node_id).aligned_to

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def num_nodes(self) -> int:
        """Number of residue nodes (sentinels excluded)."""
        return len(self.nodes) - 2

    @property
    def num_edges(self) -> int:
        """Number of edges between residue nodes (sentinel edges excluded)."""
        return sum(1 for _ in self.real_edges())

    def is_empty(self) -> bool:
        return not self.sequences

    def get_node(self, node_id: int) -> POANode:
        try:
            return self.nodes[node_id]
        except KeyError:
            raise GraphCorrupted(f"Unknown node id {node_id}") from None

    def get_edge(self, from_id: int, to_id: int) -> Optional[POAEdge]:
        return self.edges.get((from_id, to_id))

    def predecessors(self, node_id: int) -> List[int]:
        """Predecessor ids in ascending order."""
        return sorted(self.in_edges.get(node_id, ()))

    def successors(self, node_id: int) -> List[int]:
        """Successor ids in ascending order."""
        return sorted(self.out_edges.get(node_id, ()))

    def is_sentinel(self, node_id: int) -> bool:
        return node_id in (self.start_id, self.end_id)

    def node_ids(self) -> List[int]:
        """Residue node ids in ascending order."""
        return sorted(nid for nid in self.nodes if not self.is_sentinel(nid))

    def real_nodes(self) -> Iterator[POANode]:
        for node_id in self.node_ids():
            yield self.nodes[node_id]

    def real_edges(self) -> Iterator[POAEdge]:
        """Edges between residue nodes, ordered by (from, to)."""
        for key in sorted(self.edges):
            if not self.is_sentinel(key[0]) and not self.is_sentinel(key[1]):
                yield self.edges[key]

    # ------------------------------------------------------------------
    # Topological order
    # ------------------------------------------------------------------

    def topological_order(self) -> List[int]:
        """
        Return node ids (sentinels included) in topological order.

        Aligned groups are treated as a single unit so that their members
        come out contiguously; this is the column order of the MSA. Ready
        groups are released lowest member id first, which makes the order
        deterministic.

        Raises:
            GraphCorrupted: on a cycle between groups or a dangling edge.
        """
        if self._topo_cache is not None:
            return self._topo_cache

        group_of: Dict[int, int] = {}
        members: Dict[int, List[int]] = {}
        for node_id in sorted(self.nodes):
            if node_id in group_of:
                continue
            group = sorted(self.aligned_group(node_id))
            for member in group:
                if member not in self.nodes:
                    raise GraphCorrupted(f"Node {node_id} is aligned to unknown node {member}")
                group_of[member] = group[0]
            members[group[0]] = group

        in_degree: Dict[int, int] = {key: 0 for key in members}
        for (from_id, to_id) in self.edges:
            if from_id not in self.nodes or to_id not in self.nodes:
                raise GraphCorrupted(f"Dangling edge {from_id} -> {to_id}")
            if group_of[from_id] == group_of[to_id]:
                raise GraphCorrupted(
                    f"Edge {from_id} -> {to_id} connects nodes of the same column"
                )
            in_degree[group_of[to_id]] += 1

        end_key = group_of[self.end_id]
        ready = [key for key, deg in in_degree.items() if deg == 0 and key != end_key]
        heapq.heapify(ready)

        order: List[int] = []
        while ready:
            key = heapq.heappop(ready)
            for node_id in members[key]:
                order.append(node_id)
                for succ in self.out_edges[node_id]:
                    succ_key = group_of[succ]
                    in_degree[succ_key] -= 1
                    if in_degree[succ_key] == 0 and succ_key != end_key:
                        heapq.heappush(ready, succ_key)

        if in_degree[end_key] != 0 or len(order) != len(self.nodes) - 1:
            raise GraphCorrupted(
                f"Cycle detected: ordered {len(order)} of {len(self.nodes)} nodes"
            )
        order.append(self.end_id)

        for rank, node_id in enumerate(order):
            self.nodes[node_id].rank = rank

        self._topo_cache = order
        return order

    def invalidate_order(self):
        self._topo_cache = None

    # ------------------------------------------------------------------
    # Rollback of a failed insertion
    # ------------------------------------------------------------------

    def discard_edge(self, from_id: int, to_id: int):
        """
        Remove an edge created by an insertion that is being undone.

        Only the mutator's undo log calls this; committed edges are never
        removed.
        """
        key = (from_id, to_id)
        if key not in self.edges:
            raise GraphCorrupted(f"Cannot discard missing edge {from_id} -> {to_id}")
        del self.edges[key]
        self.out_edges[from_id].discard(to_id)
        self.in_edges[to_id].discard(from_id)
        self._topo_cache = None

    def discard_node(self, node_id: int):
        """
        Remove a node created by an insertion that is being undone.

        The node must have no edges left. Its id is not handed out again.
        """
        if self.is_sentinel(node_id):
            raise GraphCorrupted(f"Cannot discard sentinel node {node_id}")
        if self.out_edges.get(node_id) or self.in_edges.get(node_id):
            raise GraphCorrupted(f"Cannot discard node {node_id}: edges still attached")
        node = self.get_node(node_id)
        for other in node.aligned_to:
            if other in self.nodes:
                self.nodes[other].aligned_to.discard(node_id)
        del self.nodes[node_id]
        self.out_edges.pop(node_id, None)
        self.in_edges.pop(node_id, None)
        self._topo_cache = None

    def __repr__(self):
        return (
            f"POAGraph(nodes={self.num_nodes}, edges={self.num_edges}, "
            f"sequences={len(self.sequences)})"
        )


# PoaWeaver v0.1.0
# Any usage is subject to this software's license.
