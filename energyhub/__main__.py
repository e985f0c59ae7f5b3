"""
energyhub/__main__.py

Entry point for the energy hub CLI.
"""

import argparse
import logging
import sys

from .logs.logger import LOG_FORMAT
from .run import run_from_config


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description="Energy hub PtX capacity expansion and dispatch optimisation"
    )
    parser.add_argument("--config", type=str, required=True, help="Path to the YAML run configuration.")
    parser.add_argument("--output", type=str, help="Output directory (overrides the configuration).")
    parser.add_argument("--processes", type=int, default=1, help="Number of scenarios solved in parallel.")
    parser.add_argument("--loglevel", type=str, default="INFO", help="Set logging level.")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=args.loglevel.upper(),
        format=LOG_FORMAT,
    )

    results = run_from_config(args.config, processes=args.processes, output_dir=args.output)
    for r in results:
        objective = f"{r.objective:.6g}" if r.objective is not None else "-"
        print(f"[{r.status.upper()}] {r.location} / {r.scenario}: objective={objective}")

    return 0 if all(r.succeeded for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
