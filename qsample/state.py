# qsample/state.py
import numpy as np
from dataclasses import dataclass
from typing import Optional

from .errors import NormalizationError, StateAllocationError

# basis indices are reported as uint64
MAX_QUBITS = 63

@dataclass
class State:
    n: int
    psi: np.ndarray  # shape (2**n,), dtype complex64/128

    @staticmethod
    def allocate(n: int, dtype=np.complex64, max_bytes: Optional[int] = None) -> "State":
        """Reserve 2**n amplitudes without initializing them."""
        if n > MAX_QUBITS:
            raise StateAllocationError(f"{n} qubits exceed the {MAX_QUBITS}-bit index space")
        N = 1 << n
        nbytes = N * np.dtype(dtype).itemsize
        if max_bytes is not None and nbytes > max_bytes:
            raise StateAllocationError(
                f"{n} qubits need {nbytes} bytes, limit is {max_bytes}")
        try:
            psi = np.empty(N, dtype=dtype)
        except (MemoryError, ValueError) as e:
            raise StateAllocationError(f"cannot allocate {nbytes} bytes for {n} qubits") from e
        return State(n=n, psi=psi)

    @staticmethod
    def zero(n: int, dtype=np.complex64) -> "State":
        st = State.allocate(n, dtype=dtype)
        st.reset()
        return st

    @property
    def dtype(self):
        return self.psi.dtype

    @property
    def size(self) -> int:
        return self.psi.shape[0]

    def reset(self):
        """Overwrite with |0...0>."""
        self.psi.fill(0)
        self.psi[0] = 1.0 + 0.0j

    def _check_index(self, index: int):
        # negative indices would wrap in numpy
        if not 0 <= index < self.size:
            raise IndexError(f"amplitude index {index} out of range for {self.n} qubits")

    def set_ampl(self, index: int, value: complex):
        self._check_index(index)
        self.psi[index] = value

    def get_ampl(self, index: int):
        self._check_index(index)
        return self.psi[index]

    def weights(self) -> np.ndarray:
        """|a_k|^2 in the real precision of the store."""
        return self.psi.real * self.psi.real + self.psi.imag * self.psi.imag

    def norm2(self) -> float:
        return float(np.vdot(self.psi, self.psi).real)

    def check_normalized(self, tol=1e-6):
        n2 = self.norm2()
        if not (abs(1.0 - n2) <= tol):
            raise NormalizationError(f"Normalization failed: ||psi||^2={n2}")

    def copy(self) -> "State":
        return State(self.n, self.psi.copy())

    def as_numpy(self) -> np.ndarray:
        return self.psi
