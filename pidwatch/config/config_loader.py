"""
Configuration loader for pidwatch.

This module provides the ConfigLoader class for loading monitor settings
from YAML files and merging command-line overrides on top of them.
"""
import signal
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from pidwatch.config.monitor_config import MonitorConfig
from pidwatch.consts.MemoryMetric import MemoryMetric
from pidwatch.exceptions import SetupError

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent / "config_yaml"


class ConfigLoader:

    def __init__(self, config_path: Optional[Path] = None, env: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else DEFAULT_CONFIG_DIR
        self.env = env
        self.config_data = self._load_yaml()

    def _read(self, config_file: Path) -> Dict[str, Any]:
        try:
            with open(config_file, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except FileNotFoundError:
            raise SetupError(f"Config file not found: {config_file}") from None
        except yaml.YAMLError as e:
            raise SetupError(f"Invalid YAML in {config_file}: {e}") from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise SetupError(f"Config file {config_file} must contain a mapping")
        return data

    def _load_yaml(self) -> Dict[str, Any]:
        """
        Load config.yaml, then apply config_<env>.yaml on top if an env is set.

        Returns:
            Dict of merged settings
        """
        data = self._read(self.config_path / "config.yaml")
        if self.env:
            # dict.update() overwrites existing keys
            data.update(self._read(self.config_path / f"config_{self.env}.yaml"))
        return data

    def build(self, pid: int, output: Path, overrides: Optional[Dict[str, Any]] = None) -> MonitorConfig:
        """
        Build a MonitorConfig for one run.

        Args:
            pid: Process ID to monitor
            output: Report destination
            overrides: Values from the command line; None entries are ignored

        Returns:
            MonitorConfig: validated configuration
        """
        data = dict(self.config_data)
        for key, value in (overrides or {}).items():
            if value is not None:
                data[key] = value

        try:
            memory_metric = MemoryMetric(str(data.get("memory_metric", "rss")).lower())
        except ValueError:
            choices = ", ".join(m.value for m in MemoryMetric)
            raise SetupError(f"Unknown memory_metric {data.get('memory_metric')!r} (expected one of: {choices})") from None

        log_file = data.get("log_file")

        summary = data.get("summary", True)
        if not isinstance(summary, bool):
            raise SetupError(f"summary must be true or false, got {summary!r}")

        return MonitorConfig(
            pid=pid,
            output=Path(output),
            memory_metric=memory_metric,
            log_level=str(data.get("log_level", "INFO")).upper(),
            log_file=Path(log_file) if log_file else None,
            summary=summary,
            signals=[self._parse_signal(name) for name in data.get("signals", ["SIGINT", "SIGTERM"])],
        )

    @staticmethod
    def _parse_signal(name: str) -> signal.Signals:
        name = str(name).upper()
        if not name.startswith("SIG"):
            name = f"SIG{name}"
        try:
            return signal.Signals[name]
        except KeyError:
            raise SetupError(f"Unknown signal in config: {name}") from None


if __name__ == "__main__":

    # python3 -m pidwatch.config.config_loader

    loader = ConfigLoader(env="dev")
    print(loader.config_data)
