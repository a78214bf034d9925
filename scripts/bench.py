from __future__ import annotations
import argparse
import csv
from pathlib import Path
from cuckoo_cycle.api import SolverConfig, solve


def main():
    p = argparse.ArgumentParser()
    p.add_argument("--header", required=False, default="00"*32)
    p.add_argument("--n", type=int, nargs="+", default=[1 << 10, 1 << 12, 1 << 14])
    p.add_argument("--cycle-len", type=int, default=6)
    p.add_argument("--trim-rounds", type=int, nargs="+", default=[0, 10, 100])
    p.add_argument("--threads", type=int, default=1)
    p.add_argument("--attempts", type=int, default=8)
    p.add_argument("--out", type=str, default=None, help="optional CSV file for the results")
    args = p.parse_args()

    rows = []
    for n in args.n:
        for rounds in args.trim_rounds:
            cfg = SolverConfig(header=bytes.fromhex(args.header), n=n, cycle_len=args.cycle_len,
                               trim_rounds=rounds, threads=args.threads, max_attempts=args.attempts)
            res = solve(cfg)
            rows.append({
                "n": n,
                "trim_rounds": rounds,
                "found": res.found,
                "nonce": res.nonce,
                "attempts": res.metrics.get("attempts", 0),
                "edges_after_trim": res.metrics.get("edges_after_trim", 0),
                "branches": res.metrics.get("branches", 0),
                "elapsed_ms": round(res.elapsed_ms, 1),
            })
            print(rows[-1])

    if args.out:
        with Path(args.out).open("w", newline="") as f:
            wr = csv.DictWriter(f, fieldnames=list(rows[0]))
            wr.writeheader()
            wr.writerows(rows)

if __name__ == "__main__":
    main()
