# qsample/tests/test_state_space.py
import numpy as np
import pytest
from qsample import (StateSpaceConfig, StateAllocationError, SerialStateSpace,
                     NumbaStateSpace, get_state_space)

def test_create_state_is_zero_state():
    space = get_state_space(3, 1)
    space.create_state()
    assert space.get_ampl(0) == 1.0 + 0.0j
    for k in range(1, 8):
        assert space.get_ampl(k) == 0.0 + 0.0j

def test_create_state_idempotent():
    space = get_state_space(2, 1)
    space.create_state()
    once = space.as_numpy().copy()
    space.set_ampl(3, 0.5 - 0.5j)
    space.create_state()
    space.create_state()
    assert np.array_equal(space.as_numpy(), once)

def test_set_get_roundtrip_single_precision():
    space = get_state_space(1, 1)
    space.create_state()
    space.set_ampl(1, 0.25 + 0.75j)
    a = space.get_ampl(1)
    assert a.dtype == np.complex64
    assert a == np.complex64(0.25 + 0.75j)
    # no normalization on write
    assert space.norm2() == pytest.approx(1.0 + 0.25**2 + 0.75**2)

@pytest.mark.parametrize("index", [-1, 4, 100])
def test_out_of_bounds_access_raises(index):
    space = get_state_space(2, 1)
    space.create_state()
    with pytest.raises(IndexError):
        space.get_ampl(index)
    with pytest.raises(IndexError):
        space.set_ampl(index, 1.0)

def test_zero_qubits():
    space = get_state_space(0, 1)
    space.create_state()
    assert space.size == 1
    assert space.get_ampl(0) == 1.0
    assert list(space.sample_state(5)) == [0] * 5

def test_factory_dispatch_by_threads():
    assert isinstance(get_state_space(2, 1), SerialStateSpace)
    assert isinstance(get_state_space(2, 4), NumbaStateSpace)
    assert isinstance(get_state_space(2, 1, backend="numba"), NumbaStateSpace)
    assert isinstance(get_state_space(2, 4, backend="serial"), SerialStateSpace)

def test_factory_parallel_min_qubits():
    cfg = StateSpaceConfig(parallel_min_qubits=10)
    assert isinstance(get_state_space(4, 8, config=cfg), SerialStateSpace)
    assert isinstance(get_state_space(10, 8, config=cfg), NumbaStateSpace)

def test_numba_threads_clamped_to_pool():
    from qsample.sample_numba import max_threads
    space = get_state_space(2, 10_000)
    assert space.num_threads == max_threads()

@pytest.mark.parametrize("n, t", [(-1, 1), (2, 0), (2.0, 1), (2, True)])
def test_factory_rejects_bad_counts(n, t):
    with pytest.raises(ValueError):
        get_state_space(n, t)

def test_factory_unknown_backend():
    with pytest.raises(ValueError, match="Unknown backend"):
        get_state_space(2, 1, backend="cupy")

def test_allocation_failure_index_width():
    with pytest.raises(StateAllocationError):
        get_state_space(64, 1)

def test_allocation_failure_byte_cap():
    cfg = StateSpaceConfig(max_state_bytes=1024)
    get_state_space(7, 1, config=cfg)  # 128 * 8 bytes fits
    with pytest.raises(StateAllocationError):
        get_state_space(8, 1, config=cfg)
    # also a MemoryError for callers that only know builtins
    with pytest.raises(MemoryError):
        get_state_space(8, 1, config=cfg)

def test_config_rejects_real_dtype():
    with pytest.raises(ValueError):
        StateSpaceConfig(dtype=np.float32)

def test_complex128_store():
    space = get_state_space(1, 1, config=StateSpaceConfig(dtype=np.complex128))
    space.create_state()
    assert space.dtype == np.complex128

def test_copy_from_other_backend():
    src = get_state_space(2, 1)
    src.create_state()
    src.set_ampl(0, 0.0)
    src.set_ampl(2, 1.0j)
    dst = get_state_space(2, 4)
    dst.create_state()
    dst.copy_from(src)
    assert np.array_equal(dst.as_numpy(), src.as_numpy())
    # independent storage
    src.set_ampl(2, 0.0)
    assert dst.get_ampl(2) == 1.0j

def test_copy_from_qubit_mismatch():
    a = get_state_space(2, 1)
    b = get_state_space(3, 1)
    with pytest.raises(ValueError):
        a.copy_from(b)
