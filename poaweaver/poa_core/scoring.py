#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
PoaWeaver v0.1.0

Scoring scheme for sequence-to-graph alignment.

Author: PoaWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .data_structures import InvalidScoring

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringScheme:
    """
    Affine-gap scoring parameters.

    A gap of length L costs ``gap_open + (L - 1) * gap_extend``. Penalties
    are given as non-negative magnitudes and subtracted during alignment.
    """
    mismatch: int = 4
    gap_open: int = 8
    gap_extend: int = 2
    match: int = 2

    def __post_init__(self):
        """Validate scoring parameters."""
        for name in ('match', 'mismatch', 'gap_open', 'gap_extend'):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidScoring(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise InvalidScoring(f"{name} must be >= 0, got {value}")
        if self.gap_extend > self.gap_open:
            raise InvalidScoring(
                f"gap_extend ({self.gap_extend}) must not exceed gap_open ({self.gap_open})"
            )

    def substitution(self, a: str, b: str) -> int:
        """Score of aligning residue ``a`` against residue ``b``."""
        return self.match if a == b else -self.mismatch

    def gap_cost(self, length: int) -> int:
        """Penalty (positive) of a gap spanning ``length`` positions."""
        if length <= 0:
            return 0
        return self.gap_open + (length - 1) * self.gap_extend

    @classmethod
    def from_config(cls, config: Dict[str, Any], **overrides: Optional[int]) -> "ScoringScheme":
        """
        Build a scheme from the ``scoring`` section of a configuration dict.

        Keyword overrides that are not None replace the configured values.
        """
        section = dict(config.get('scoring', {}))
        for key, value in overrides.items():
            if value is not None:
                section[key] = value
        return cls(
            mismatch=section.get('mismatch', cls.mismatch),
            gap_open=section.get('gap_open', cls.gap_open),
            gap_extend=section.get('gap_extend', cls.gap_extend),
            match=section.get('match', cls.match),
        )


# PoaWeaver v0.1.0
# Any usage is subject to this software's license.
