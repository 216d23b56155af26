# qsample/errors.py


class StateSpaceError(Exception):
    """Base class for state-space failures."""


class StateAllocationError(StateSpaceError, MemoryError):
    """The amplitude vector for the requested qubit count cannot be allocated."""


class DegenerateStateError(StateSpaceError, ValueError):
    """Sampling was requested from a vector with no usable probability mass."""


class NormalizationError(StateSpaceError, ValueError):
    """Sum of squared amplitude magnitudes is outside tolerance of 1."""
