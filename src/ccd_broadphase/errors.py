# MIT License (see LICENSE)
"""
Exception types for the broad phase.

Every failure the broad phase can detect is a programmer error: inconsistent
input arrays, a degenerate grid, or a bounding box that falls outside the
grid domain. These are reported as ContractViolation and are never retried.
A HashGrid whose build raised must be resized before it is used again.
"""
from __future__ import annotations


class BroadPhaseError(Exception):
    """Base class for all errors raised by ccd_broadphase."""


class ContractViolation(BroadPhaseError, ValueError):
    """A precondition or invariant of the broad phase was broken by the caller."""


def require(condition: bool, message: str) -> None:
    """
    Raise ContractViolation with `message` unless `condition` holds.

    Unlike a bare assert, the check survives `python -O`.
    """
    if not condition:
        raise ContractViolation(message)
