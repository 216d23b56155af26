"""
Configuration for state-space construction.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass
class StateSpaceConfig:
    """Settings consumed by get_state_space."""

    # Amplitude precision; complex64 matches single-precision (float, float) pairs
    dtype: type = np.complex64

    # Seed for the per-instance sampling generator (None -> OS entropy)
    seed: Optional[int] = None

    # Smallest register that may be handed to the multi-threaded backend
    parallel_min_qubits: int = 0

    # Upper bound on amplitude storage in bytes (None -> only index width limits)
    max_state_bytes: Optional[int] = None

    def __post_init__(self):
        if not np.issubdtype(np.dtype(self.dtype), np.complexfloating):
            raise ValueError(f"dtype must be a complex type, got {np.dtype(self.dtype)}")
        if self.parallel_min_qubits < 0:
            raise ValueError("parallel_min_qubits must be >= 0")
        if self.max_state_bytes is not None and self.max_state_bytes <= 0:
            raise ValueError("max_state_bytes must be positive")


# Default configuration instance
DEFAULT_CONFIG = StateSpaceConfig()
