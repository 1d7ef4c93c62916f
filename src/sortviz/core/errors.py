from __future__ import annotations


class SortvizError(Exception):
    """
    Base class for errors raised by sortviz.
    """


class InvalidInput(SortvizError, ValueError):
    """
    A dataset (generated or caller-supplied) failed validation.

    Raised before the sequence store is touched.
    """


class InvalidTransition(SortvizError, RuntimeError):
    """
    A lifecycle operation was requested from a state that does not allow it.
    """


class InternalSortError(SortvizError, RuntimeError):
    """
    An algorithm reached a state it should never reach.
    """


class SortCancelled(Exception):
    """
    Thrown into a running algorithm at a suspension point after pause().

    Control-flow signal, not an error: the run ends in the paused state.
    """
