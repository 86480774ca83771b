"""
I/O utilities for PoaWeaver.

- MSA construction and FASTA output
- GFA serialization and import
"""

from .msa_export import (
    build_msa,
    build_msa_records,
    column_map,
    msa_to_fasta,
    write_msa_fasta,
)
from .gfa_export import (
    graph_to_gfa,
    load_graph_from_gfa,
    parse_gfa,
    validate_gfa,
    write_gfa,
)

__all__ = [
    "build_msa",
    "build_msa_records",
    "column_map",
    "msa_to_fasta",
    "write_msa_fasta",
    "graph_to_gfa",
    "load_graph_from_gfa",
    "parse_gfa",
    "validate_gfa",
    "write_gfa",
]
