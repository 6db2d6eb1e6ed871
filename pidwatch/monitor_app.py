#!/usr/bin/env python3
"""
pidwatch application entry point.

Wires the metrics provider, sampler, status and shutdown coordinator
together, runs until one termination trigger fires, and maps failures to
exit codes.
"""
import sys
from typing import List, Optional

from tabulate import tabulate

from pidwatch.cli.cli import config_overrides, parse_args
from pidwatch.config.config_loader import ConfigLoader
from pidwatch.config.monitor_config import MonitorConfig
from pidwatch.consts.TerminationTrigger import TerminationTrigger
from pidwatch.exceptions import PidWatchError, ReportWriteError, SetupError
from pidwatch.monitor.metrics_provider import MetricsProvider
from pidwatch.monitor.process_status import ProcessStatus
from pidwatch.monitor.sampler import Sampler
from pidwatch.monitor.shutdown_coordinator import ShutdownCoordinator
from pidwatch.monitor.status_snapshot import StatusSnapshot
from pidwatch.report.reporter import Reporter
from pidwatch.util.log_config import configure_package_logging, setup_logger

logger = setup_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_SETUP_FAILURE = 2

WAIT_SLICE_SECONDS = 0.5


def summary_table(snapshot: StatusSnapshot, trigger: TerminationTrigger, config: MonitorConfig) -> str:
    stats = snapshot.to_dict()
    headers = ["Metric", "Value"]
    table_data = [
        ["Samples", f"{stats['samples_count']}"],
        ["Peak Memory", f"{stats['memory_max']} B ({stats['memory_max'] / (1024 * 1024):.2f} MB)"],
        ["Peak CPU", f"{stats['cpu_max']:.2f}%"],
        ["Avg CPU", f"{stats['avg_cpu_percent']:.2f}%"],
        ["Stopped by", trigger.value],
        ["Report", str(config.output)],
    ]
    return tabulate(table_data, headers=headers, tablefmt="heavy_grid", stralign="right", numalign="right")


def print_summary(snapshot: StatusSnapshot, trigger: TerminationTrigger, config: MonitorConfig):
    logger.info(f"Process {config.pid} summary:\n{summary_table(snapshot, trigger, config)}")


def run(config: MonitorConfig, provider: Optional[MetricsProvider] = None) -> TerminationTrigger:
    """
    Monitor config.pid until it exits or a configured signal arrives.

    Must be called from the main thread so the signal handlers can be installed.

    Returns:
        The trigger that ended monitoring

    Raises:
        SetupError: monitoring could not start
        ReportWriteError: report could not be written
        MonitorError: metrics failed mid-run
    """
    provider = provider or MetricsProvider(config.pid, config.memory_metric)
    logger.info(f"Monitoring process {config.pid} ({getattr(provider, 'name', '?')}), "
                f"memory metric: {config.memory_metric.value}")

    status = ProcessStatus()
    coordinator = ShutdownCoordinator(status, Reporter(), config.output)
    coordinator.install_signal_handlers(config.signals)

    sampler = Sampler(config.pid, provider, status, coordinator)
    sampler.start()

    # timed waits so pending signal handlers run on the main thread
    trigger = None
    while trigger is None:
        trigger = coordinator.wait(timeout=WAIT_SLICE_SECONDS)

    if config.summary and coordinator.snapshot is not None:
        print_summary(coordinator.snapshot, trigger, config)
    return trigger


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        loader = ConfigLoader(args.config_dir, env=args.env)
        config = loader.build(args.pid, args.output, config_overrides(args))
        configure_package_logging(config.log_level, config.log_file)
    except (SetupError, ValueError) as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_SETUP_FAILURE

    try:
        run(config)
    except SetupError as e:
        logger.error(f"Cannot start monitoring: {e}")
        return EXIT_SETUP_FAILURE
    except ReportWriteError as e:
        logger.error(str(e))
        return EXIT_FAILURE
    except PidWatchError as e:
        logger.error(f"Monitoring failed: {e}")
        return EXIT_FAILURE
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
