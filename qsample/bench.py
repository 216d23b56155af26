# qsample/bench.py
import argparse, csv, os, socket, subprocess, time, platform
from datetime import datetime
import numpy as np
from .config import StateSpaceConfig
from .logging_config import setup_logging, get_logger
from .state_space import get_state_space

DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "data")

logger = get_logger("bench")

def backend_dir(backend):
    path = os.path.join(DATA_DIR, backend)
    os.makedirs(path, exist_ok=True)
    return path

# ---------------------------------------------------------------------

def meta_row():
    commit = ""
    try:
        commit = subprocess.check_output(["git", "rev-parse", "--short", "HEAD"],
                                         stderr=subprocess.DEVNULL).decode().strip()
    except (OSError, subprocess.CalledProcessError):
        pass
    return {
        "hostname": socket.gethostname(),
        "commit": commit,
        "dtype": "complex64",
        "timestamp": datetime.now().isoformat(timespec="seconds"),
    }

HEADER = ["qubits","shots","backend","threads","wall_ms","hostname","commit","dtype","timestamp"]

def new_csv(path):
    """Create/overwrite CSV with header."""
    os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", newline="") as f:
        csv.DictWriter(f, fieldnames=HEADER).writeheader()

def write_row(path, n, shots, space, wall):
    row = {"qubits": n, "shots": shots, "backend": space.backend,
           "threads": space.num_threads, "wall_ms": f"{wall:.3f}"}
    row.update(meta_row())
    with open(path, "a", newline="") as f:
        csv.DictWriter(f, fieldnames=HEADER).writerow(row)

# ---------------------------------------------------------------------

def random_state_space(n, backend, threads=1, seed=0):
    """Handle filled with a random normalized state."""
    space = get_state_space(n, threads, config=StateSpaceConfig(seed=seed), backend=backend)
    rng = np.random.default_rng(seed)
    psi = rng.normal(size=space.size) + 1j * rng.normal(size=space.size)
    psi /= np.linalg.norm(psi)
    space.as_numpy()[:] = psi
    return space

def time_sample(space, shots):
    t0 = time.perf_counter()
    space.sample_state(shots)
    return (time.perf_counter() - t0) * 1e3  # ms

def warmup(space):
    # JIT-compile the numba kernels outside the timed region
    space.sample_state(1)

# ---------------------------------------------------------------------
# individual experiments

def bench_qubits(ns, shots, backend, threads, out_path):
    logger.info("Qubits scaling -> %s", out_path)
    new_csv(out_path)
    for i, n in enumerate(ns):
        space = random_state_space(n, backend, threads)
        if i == 0:
            warmup(space)
        wall = time_sample(space, shots)
        write_row(out_path, n, shots, space, wall)
        logger.info("  n=%d  wall=%.2f ms", n, wall)

def bench_threads(n, shots, threads_list, out_path):
    logger.info("Thread scaling -> %s", out_path)
    new_csv(out_path)
    base = random_state_space(n, "numba", 1)
    warmup(base)
    t1 = time_sample(base, shots)
    logger.info("  T1=%.1f ms", t1)
    for t in threads_list:
        space = random_state_space(n, "numba", t)
        wall = time_sample(space, shots)
        speedup = t1 / wall if wall > 0 else float("nan")
        write_row(out_path, n, shots, space, wall)
        logger.info("  t=%d  wall=%.2f ms  speedup=%.2fx", space.num_threads, wall, speedup)

def bench_shots(n, shots_list, backend, threads, out_path):
    logger.info("Shots scaling -> %s", out_path)
    new_csv(out_path)
    space = random_state_space(n, backend, threads)
    warmup(space)
    for m in shots_list:
        wall = time_sample(space, m)
        write_row(out_path, n, m, space, wall)
        logger.info("  shots=%d  wall=%.2f ms", m, wall)

# ---------------------------------------------------------------------
def main(argv=None):
    p = argparse.ArgumentParser(description="qsample sampling benchmarks -> data/<backend>/*.csv")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_qubits = sub.add_parser("qubits")
    p_qubits.add_argument("--ns", type=str, required=True)
    p_qubits.add_argument("--shots", type=int, default=100_000)
    p_qubits.add_argument("--backend", type=str, default="numba", choices=["serial","numba"])
    p_qubits.add_argument("--threads", type=int, default=1)

    p_threads = sub.add_parser("threads")
    p_threads.add_argument("--n", type=int, default=20)
    p_threads.add_argument("--shots", type=int, default=1_000_000)
    p_threads.add_argument("--threads", type=str, default="1,2,4,8,16")
    # thread scaling is only meaningful for numba
    p_threads.add_argument("--backend", type=str, default="numba", choices=["numba"])

    p_shots = sub.add_parser("shots")
    p_shots.add_argument("--n", type=int, default=16)
    p_shots.add_argument("--shots", type=str, default="1000,10000,100000,1000000")
    p_shots.add_argument("--backend", type=str, default="numba", choices=["serial","numba"])
    p_shots.add_argument("--threads", type=int, default=1)

    args = p.parse_args(argv)
    setup_logging()

    base = backend_dir(args.backend)

    if args.cmd == "qubits":
        ns = [int(x) for x in args.ns.split(",")]
        bench_qubits(ns, args.shots, args.backend, args.threads, os.path.join(base, "qubits.csv"))

    elif args.cmd == "threads":
        ts = [int(x) for x in args.threads.split(",")]
        bench_threads(args.n, args.shots, ts, os.path.join(base, "threads.csv"))

    elif args.cmd == "shots":
        ms = [int(x) for x in args.shots.split(",")]
        bench_shots(args.n, ms, args.backend, args.threads, os.path.join(base, "shots.csv"))

if __name__ == "__main__":
    main()
