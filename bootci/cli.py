"""Command-line interface"""

import argparse
from pathlib import Path

from bootci.run.runner import compare_experiment, run_experiment
from bootci.utils.io import read_json
from bootci.utils.logging import setup_logging


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description="Bootstrap percentile confidence intervals")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level")
    parser.add_argument("--log-file", type=str, default=None, help="Also write logs to this file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # Run command
    run_parser = subparsers.add_parser("run", help="Bootstrap a statistic and write intervals")
    run_parser.add_argument("--config", type=str, required=True, help="Path to config YAML file")
    run_parser.add_argument("--progress", action="store_true", help="Show a progress bar")

    # Compare command
    compare_parser = subparsers.add_parser("compare", help="Compare flat and grouped resampling")
    compare_parser.add_argument("--config", type=str, required=True, help="Path to config YAML file")
    compare_parser.add_argument("--group-key", type=str, default=None, help="Column to group by")

    args = parser.parse_args(argv)
    setup_logging(Path(args.log_file) if args.log_file else None, args.log_level)

    if args.command == "run":
        run_dir = run_experiment(args.config, show_progress=args.progress)
        report = read_json(run_dir / "intervals.json")
        level = report["confidence_level"]
        print(f"Run completed. Results in: {run_dir}")
        print(f"Replicates: {report['successful']}/{report['replicates']} "
              f"({report['failure_count']} failed)")
        for dim in report["dimensions"]:
            interval = dim["interval"]
            print(f"  {dim['name']}: observed={dim['observed']:.6g} "
                  f"{level:.0%} CI [{interval['lower']:.6g}, {interval['upper']:.6g}]")
        if report["threshold_exceeded"]:
            print("Warning: failure rate exceeded the configured threshold")

    elif args.command == "compare":
        run_dir = compare_experiment(args.config, group_key=args.group_key)
        print(f"Comparison written to: {run_dir / 'comparison.csv'}")
        print((run_dir / "comparison.csv").read_text(encoding="utf-8"))


if __name__ == "__main__":
    main()
