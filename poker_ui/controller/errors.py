"""Controller exceptions. All of them signal a caller defect, not a game state."""
from __future__ import annotations


class ControllerError(Exception):
    """Base class for rejected controller operations."""


class IllegalActionError(ControllerError):
    """A control was invoked while its legality flag (or range) was absent."""


class IllegalTransitionError(ControllerError):
    """The amount-input machine was asked for a transition it does not have."""


class AmountOutOfRangeError(ControllerError, ValueError):
    """An amount outside the engine-supplied [start, end] bounds."""


class StaleSnapshotError(ControllerError):
    """A UI event was issued against a snapshot that has since been replaced."""
