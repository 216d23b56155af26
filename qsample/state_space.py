"""State-space handles and the factory that picks a backend for them.

Callers obtain a handle from get_state_space and only use the StateSpace
interface. One instance owns one amplitude vector and one random generator;
it is single-writer, so concurrent calls on the same instance must be
serialized by the caller.
"""
from __future__ import annotations

import abc
from typing import MutableSequence, Optional

import numpy as np

from .config import DEFAULT_CONFIG, StateSpaceConfig
from .logging_config import get_logger
from .sample_serial import sample as sample_serial
from .state import State

logger = get_logger("state_space")

BACKENDS = ("serial", "numba")


class StateSpace(abc.ABC):
    """Amplitude store for an N-qubit register plus Born-rule sampling."""

    backend = None

    def __init__(self, num_qubits: int, num_threads: int, config: StateSpaceConfig):
        self._num_threads = num_threads
        self._state = State.allocate(num_qubits, dtype=config.dtype,
                                     max_bytes=config.max_state_bytes)
        self._rng = np.random.default_rng(config.seed)

    @property
    def num_qubits(self) -> int:
        return self._state.n

    @property
    def num_threads(self) -> int:
        return self._num_threads

    @property
    def size(self) -> int:
        return self._state.size

    @property
    def dtype(self):
        return self._state.dtype

    def create_state(self):
        """Reset to the computational-basis zero state |0...0>."""
        self._state.reset()

    def set_ampl(self, index: int, value: complex):
        self._state.set_ampl(index, value)

    def get_ampl(self, index: int):
        return self._state.get_ampl(index)

    def norm2(self) -> float:
        return self._state.norm2()

    def copy_from(self, other: "StateSpace"):
        """Copy amplitudes from another handle of the same qubit count."""
        if other.num_qubits != self.num_qubits:
            raise ValueError(
                f"qubit count mismatch: {other.num_qubits} != {self.num_qubits}")
        np.copyto(self._state.psi, other.as_numpy(), casting="same_kind")

    def as_numpy(self) -> np.ndarray:
        """Live amplitude array, e.g. for gate kernels operating in place."""
        return self._state.as_numpy()

    def sample_state(self, num_samples: int, out: Optional[MutableSequence] = None,
                     check_norm: bool = False, check_norm_tol: float = 1e-4) -> np.ndarray:
        """
        Draw num_samples basis-state indices with probability |a_k|^2.

        Weights are used as-is: an unnormalized vector is sampled in proportion
        to its squared magnitudes. With check_norm=True a NormalizationError is
        raised instead when ||psi||^2 is not within check_norm_tol of 1.

        Returns a fresh uint64 array in draw order. When out is given the
        samples are also appended to it, only after the whole draw succeeded.
        """
        if check_norm and num_samples:
            self._state.check_normalized(tol=check_norm_tol)
        samples = self._sample(num_samples)
        if out is not None:
            out.extend(int(s) for s in samples)
        return samples

    @abc.abstractmethod
    def _sample(self, num_samples: int) -> np.ndarray:
        ...

    def __repr__(self):
        return (f"{type(self).__name__}(num_qubits={self.num_qubits}, "
                f"num_threads={self.num_threads}, dtype={self.dtype})")


class SerialStateSpace(StateSpace):
    """Reference implementation: vectorised numpy on the calling thread."""

    backend = "serial"

    def _sample(self, num_samples):
        return sample_serial(self._state, num_samples, self._rng)


class NumbaStateSpace(StateSpace):
    """Multi-threaded implementation built on numba parallel kernels."""

    backend = "numba"

    def __init__(self, num_qubits, num_threads, config):
        try:
            from . import sample_numba
        except Exception as e:
            raise RuntimeError("Numba backend not available. Did you `pip install numba`?") from e
        self._kernels = sample_numba
        super().__init__(num_qubits, min(num_threads, sample_numba.max_threads()), config)
        if self._num_threads != num_threads:
            logger.warning("requested %d threads > pool=%d; using %d",
                           num_threads, sample_numba.max_threads(), self._num_threads)

    def _sample(self, num_samples):
        self._kernels.set_threads(self._num_threads)
        return self._kernels.sample(self._state, num_samples, self._rng)


def _check_count(name, value, minimum):
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, (int, np.integer)):
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if value < minimum:
        raise ValueError(f"{name} must be >= {minimum}, got {value}")
    return int(value)


def get_state_space(num_qubits: int, num_threads: int = 1,
                    config: Optional[StateSpaceConfig] = None,
                    backend: Optional[str] = None) -> StateSpace:
    """
    Build a state-space handle for num_qubits qubits.

    The backend is chosen from the thread budget unless given explicitly:
    more than one thread (and at least config.parallel_min_qubits qubits)
    selects the numba backend, anything else the serial one. Amplitudes are
    allocated but not initialized; call create_state() before use.

    Raises:
        ValueError: bad counts or unknown backend name.
        StateAllocationError: amplitude vector too large.
        RuntimeError: numba backend requested but unavailable.
    """
    num_qubits = _check_count("num_qubits", num_qubits, 0)
    num_threads = _check_count("num_threads", num_threads, 1)
    if config is None:
        config = DEFAULT_CONFIG

    if backend is None:
        parallel = num_threads > 1 and num_qubits >= config.parallel_min_qubits
        backend = "numba" if parallel else "serial"

    if backend == "serial":
        space = SerialStateSpace(num_qubits, num_threads, config)
    elif backend == "numba":
        space = NumbaStateSpace(num_qubits, num_threads, config)
    else:
        raise ValueError(f"Unknown backend: {backend!r} (expected one of {BACKENDS})")

    logger.debug("allocated %r", space)
    return space
