"""Exceptions raised by the Kalman filter."""


class TransitionError(Exception):
    """A filter transition could not be carried out.

    Raised when prediction is asked to move time backwards or not at all
    (``dt <= 0``), or when the innovation covariance of a measurement
    update is numerically singular.  The check happens before any
    arithmetic result is produced, so a filter that raises keeps its
    previously committed state.
    """
