# qsample/sample_numba.py
import numpy as np
from numba import config, njit, prange, set_num_threads, get_num_threads
from .state import State
from .sample_serial import check_num_samples, check_total
from .logging_config import get_logger

logger = get_logger("sample_numba")

# ---------- low-level kernels (Numba JIT) ----------

@njit(parallel=True)
def _cumulative_kernel(psi, cdf, nchunks):
    """Chunked prefix sum of |a|^2; returns index of the last non-zero weight (-1 if none)."""
    N = psi.shape[0]
    chunk = (N + nchunks - 1) // nchunks
    totals = np.zeros(nchunks, dtype=np.float64)
    lasts = np.full(nchunks, -1, dtype=np.int64)
    for c in prange(nchunks):
        lo = c * chunk
        hi = min(lo + chunk, N)
        acc = 0.0
        for i in range(lo, hi):
            a = psi[i]
            w = a.real * a.real + a.imag * a.imag
            if w != 0:
                lasts[c] = i
            acc += w
            cdf[i] = acc
        totals[c] = acc
    # exclusive scan over chunk totals
    offset = 0.0
    last = -1
    for c in range(nchunks):
        t = totals[c]
        totals[c] = offset
        offset += t
        if lasts[c] > last:
            last = lasts[c]
    for c in prange(nchunks):
        lo = c * chunk
        hi = min(lo + chunk, N)
        for i in range(lo, hi):
            cdf[i] += totals[c]
    return last

@njit(parallel=True)
def _search_kernel(cdf, draws, last, out):
    for j in prange(draws.shape[0]):
        u = draws[j]
        lo = 0
        hi = last
        # first k in [0, last] with cdf[k] > u, else last
        while lo < hi:
            mid = (lo + hi) >> 1
            if cdf[mid] > u:
                hi = mid
            else:
                lo = mid + 1
        out[j] = lo

# ---------- thread control ----------

def max_threads() -> int:
    return config.NUMBA_NUM_THREADS

def set_threads(n: int) -> int:
    """Set the worker count, clamped to the numba pool; returns the value used."""
    pool = max_threads()
    tt = min(int(n), pool)
    if tt != n:
        logger.warning("requested %d threads > pool=%d; using %d", n, pool, tt)
    set_num_threads(tt)
    return tt

def get_threads() -> int:
    return get_num_threads()

# ---------- user-facing helpers ----------

def cumulative_weights(state: State, nchunks=None):
    """(cdf, last) where last is the final basis index with non-zero weight."""
    if nchunks is None:
        nchunks = get_num_threads()
    cdf = np.empty(state.size, dtype=np.float64)
    last = _cumulative_kernel(state.psi, cdf, max(1, min(int(nchunks), state.size)))
    return cdf, int(last)

def sample(state: State, num_samples: int, rng: np.random.Generator) -> np.ndarray:
    """Parallel counterpart of sample_serial.sample; same distribution, same output order."""
    m = check_num_samples(num_samples)
    if m == 0:
        return np.empty(0, dtype=np.uint64)
    cdf, last = cumulative_weights(state)
    total = check_total(cdf[-1])
    u = rng.random(m) * total
    out = np.empty(m, dtype=np.uint64)
    _search_kernel(cdf, u, np.int64(last), out)
    return out
