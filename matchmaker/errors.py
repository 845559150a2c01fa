"""Matchmaker error classes.

Errors fall into three groups:
- FormatError: malformed persisted graph, intent or payload bytes (fatal)
- InfeasibleCycle: a discovered cycle cannot be settled (recoverable)
- StructuralInvariantViolation: a graph algorithm was given input that
  breaks its contract (a bug, fatal)
"""

from __future__ import annotations

from collections.abc import Sequence


class MatchmakerError(Exception):
    """Base error for matchmaker operations."""

    pass


class FormatError(MatchmakerError, ValueError):
    """Bytes could not be decoded into a graph, intent or settlement."""

    pass


class InfeasibleCycle(MatchmakerError):
    """No transfer amounts satisfy every bound of a cycle.

    Attributes:
        reason: Short machine-friendly reason (e.g. "rate_product_exceeds_one")
        node_indices: Graph indices of the cycle, when known
    """

    def __init__(self, reason: str, node_indices: Sequence[int] = ()) -> None:
        super().__init__(reason)
        self.reason = reason
        self.node_indices = tuple(node_indices)


class StructuralInvariantViolation(MatchmakerError, RuntimeError):
    """A graph invariant that correct callers guarantee does not hold."""

    pass


__all__ = [
    "MatchmakerError",
    "FormatError",
    "InfeasibleCycle",
    "StructuralInvariantViolation",
]
