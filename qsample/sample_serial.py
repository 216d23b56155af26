# qsample/sample_serial.py
import numpy as np
from .state import State
from .errors import DegenerateStateError

def check_num_samples(num_samples) -> int:
    if isinstance(num_samples, (bool, np.bool_)) or not isinstance(num_samples, (int, np.integer)):
        raise ValueError(f"num_samples must be an integer, got {num_samples!r}")
    if num_samples < 0:
        raise ValueError(f"num_samples must be >= 0, got {num_samples}")
    return int(num_samples)

def check_total(total: float) -> float:
    if not np.isfinite(total) or total <= 0.0:
        raise DegenerateStateError(f"cannot sample: total weight is {total}")
    return float(total)

def last_nonzero(w: np.ndarray) -> int:
    """Index of the last basis state carrying probability mass."""
    nz = np.flatnonzero(w)
    return int(nz[-1])

def cumulative_weights(state: State) -> np.ndarray:
    """Prefix sums of |a_k|^2; weights in store precision, sums in float64."""
    return np.cumsum(state.weights(), dtype=np.float64)

def sample(state: State, num_samples: int, rng: np.random.Generator) -> np.ndarray:
    """Draw num_samples basis indices with P(k) proportional to |a_k|^2."""
    m = check_num_samples(num_samples)
    if m == 0:
        return np.empty(0, dtype=np.uint64)
    w = state.weights()
    cdf = np.cumsum(w, dtype=np.float64)
    total = check_total(cdf[-1])
    # first k with cdf[k] > u; zero-weight cells are never selected
    u = rng.random(m) * total
    idx = np.searchsorted(cdf, u, side="right")
    # u*total may round up to total
    np.minimum(idx, last_nonzero(w), out=idx)
    return idx.astype(np.uint64)
