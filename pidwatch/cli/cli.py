#!/usr/bin/env python3
"""
Command-line interface for pidwatch.
"""
import argparse
from pathlib import Path
from typing import Any, Dict, List, Optional

from pidwatch.consts.MemoryMetric import MemoryMetric


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pidwatch",
        description="Sample memory and CPU usage of a process once per second "
                    "until it exits or pidwatch is interrupted, then write a report.",
    )
    parser.add_argument("pid", type=int, help="Process ID to monitor")
    parser.add_argument("output", type=Path, help="Report file (created or overwritten)")
    parser.add_argument(
        "--env",
        type=str,
        default=None,
        help=(
            "Environment name for configuration override (e.g., 'dev'). "
            "Loads config_<env>.yaml in addition to the base config.yaml."
        ),
    )
    parser.add_argument("--config-dir", type=Path, default=None,
                        help="Directory holding config.yaml (default: packaged config)")
    parser.add_argument("--log-file", type=Path, default=None,
                        help="Also write DEBUG logs to this file")
    parser.add_argument("--log-level", type=str, default=None,
                        help="Console log level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument("--memory-metric", choices=[m.value for m in MemoryMetric], default=None,
                        help="Memory figure to record (default from config: rss)")
    parser.add_argument("--no-summary", dest="summary", action="store_false", default=None,
                        help="Do not log the summary table after the report is written")
    return parser


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    args = build_parser().parse_args(argv)
    if args.pid <= 0:
        build_parser().error(f"pid must be positive, got {args.pid}")
    return args


def config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Settings given on the command line, to be layered over the YAML config"""
    return {
        "log_file": args.log_file,
        "log_level": args.log_level,
        "memory_metric": args.memory_metric,
        "summary": args.summary,
    }
