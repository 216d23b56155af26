# qsample/plot_results.py
import csv, os
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from collections import defaultdict
from statistics import median
from .logging_config import setup_logging, get_logger

DATA_DIR = os.path.join(os.path.dirname(__file__), "..", "data")

logger = get_logger("plot_results")

def load_rows(path):
    rows = []
    with open(path, "r") as f:
        r = csv.DictReader(f)
        for row in r:
            row["qubits"]  = int(row["qubits"])
            row["shots"]   = int(row["shots"])
            row["threads"] = int(row["threads"])
            row["wall_ms"] = float(row["wall_ms"])
            rows.append(row)
    return rows

def median_by_key(rows, key_fields):
    buckets = defaultdict(list)
    for r in rows:
        key = tuple(r[k] for k in key_fields)
        buckets[key].append(r["wall_ms"])
    agg = []
    for key, vals in buckets.items():
        out = dict(zip(key_fields, key))
        out["wall_ms"] = float(median(vals))
        agg.append(out)
    return agg

def _line_plot(pts, xkey, xlabel, title, out_path, logx=False):
    pts = sorted(median_by_key(pts, [xkey]), key=lambda r: r[xkey])
    if not pts:
        return
    plt.figure()
    plt.plot([r[xkey] for r in pts], [r["wall_ms"] for r in pts], marker="o")
    if logx:
        plt.xscale("log")
    plt.xlabel(xlabel)
    plt.ylabel("Runtime (ms)")
    plt.title(title)
    plt.grid(True)
    plt.savefig(out_path, dpi=200)
    plt.close()

def plot_speedup_vs_threads(rows, tag, outdir):
    pts = sorted(median_by_key(rows, ["threads"]), key=lambda r: r["threads"])
    t1 = next((r["wall_ms"] for r in pts if r["threads"] == 1), None)
    if not t1:
        return
    plt.figure()
    plt.plot([r["threads"] for r in pts], [t1 / r["wall_ms"] for r in pts], marker="o")
    plt.xlabel("Threads")
    plt.ylabel("Speedup (T1/Tt)")
    plt.title(f"Speedup vs Threads [{tag}]")
    plt.grid(True)
    plt.savefig(os.path.join(outdir, f"speedup_vs_threads_{tag}.png"), dpi=200)
    plt.close()

def plot_csv(path):
    """Render the plots matching one benchmark CSV into its directory."""
    tag = os.path.splitext(os.path.basename(path))[0]
    backend = os.path.basename(os.path.dirname(path))
    outdir = os.path.dirname(path)
    rows = load_rows(path)
    logger.info("Plotting from %s/%s.csv (%d rows)...", backend, tag, len(rows))

    if tag.startswith("qubits"):
        _line_plot(rows, "qubits", "Qubits (n)", f"Sampling runtime vs Qubits [{backend}]",
                   os.path.join(outdir, f"runtime_vs_qubits_{backend}.png"))
    elif tag.startswith("threads"):
        _line_plot(rows, "threads", "Threads", f"Sampling runtime vs Threads [{backend}]",
                   os.path.join(outdir, f"runtime_vs_threads_{backend}.png"))
        plot_speedup_vs_threads(rows, backend, outdir)
    elif tag.startswith("shots"):
        _line_plot(rows, "shots", "Shots", f"Sampling runtime vs Shots [{backend}]",
                   os.path.join(outdir, f"runtime_vs_shots_{backend}.png"), logx=True)
    else:
        logger.warning("Skipping %s: unknown experiment", path)

def main():
    setup_logging()
    csvs = []
    for root, _, files in os.walk(DATA_DIR):
        for f in files:
            if f.endswith(".csv"):
                csvs.append(os.path.join(root, f))

    if not csvs:
        logger.info("No CSV files found under data/")
        return

    for path in csvs:
        try:
            plot_csv(path)
        except (KeyError, ValueError) as e:
            logger.warning("Skipping %s: %s", path, e)
    logger.info("Saved all plots under data/<backend>/*.png")


if __name__ == "__main__":
    main()
