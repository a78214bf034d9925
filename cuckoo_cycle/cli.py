import argparse
import binascii
import logging
import sys
from .api import SolverConfig, solve, verify_cycle


def parse_header(hs: str) -> bytes:
    hs = hs.strip().lower().replace("0x", "")
    try:
        return binascii.unhexlify(hs)
    except binascii.Error as exc:
        raise argparse.ArgumentTypeError(f"header must be hex: {exc}") from exc


def configure_logging(level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )


def create_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="cuckoo-cycle", description="Cuckoo Cycle solver and verifier")
    p.add_argument("header", type=parse_header, help="header hex; hashed with the nonce into the siphash key")
    p.add_argument("n", type=int, help="number of edges in the graph")
    p.add_argument("--cycle-len", type=int, default=42)
    p.add_argument("--trim-rounds", type=int, default=100)
    p.add_argument("--threads", type=int, default=1)
    p.add_argument("--nonce", type=int, default=0)
    p.add_argument("--attempts", type=int, default=1)
    p.add_argument("--time_budget_ms", type=int, default=None)
    p.add_argument("--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR"], default="WARNING")
    return p


def main(argv=None) -> int:
    p = create_parser()
    args = p.parse_args(argv)
    configure_logging(getattr(logging, args.log_level))

    if args.n <= 0:
        p.error(f"n must be positive, got {args.n}")
    if args.cycle_len <= 0 or args.cycle_len % 2:
        p.error(f"--cycle-len must be a positive even number, got {args.cycle_len}")
    if args.threads < 1:
        p.error(f"--threads must be >= 1, got {args.threads}")
    if args.trim_rounds < 0:
        p.error(f"--trim-rounds must be >= 0, got {args.trim_rounds}")

    cfg = SolverConfig(header=args.header, n=args.n, cycle_len=args.cycle_len,
                       trim_rounds=args.trim_rounds, threads=args.threads, nonce=args.nonce,
                       max_attempts=args.attempts, time_budget_ms=args.time_budget_ms)
    res = solve(cfg)
    print({
        "found": res.found,
        "nonce": res.nonce,
        "cycle": res.cycle_edges,
        "timed_out": res.timed_out,
        "elapsed_ms": res.elapsed_ms,
        "rss_bytes": res.rss_bytes,
        "metrics": res.metrics,
    })
    if res.found:
        ok = verify_cycle(cfg.header, cfg.n, res.cycle_edges, cfg.cycle_len, res.nonce)
        print("verify:", ok)
    return 0


if __name__ == "__main__":
    sys.exit(main())
