"""
Configuration manager for the loader.

This module provides the ConfigLoader class for loading and validating the
loader configuration from YAML files.
"""
import os
from pathlib import Path
from typing import Optional

import yaml

from moviedb_loader.config.dataset import Dataset
from moviedb_loader.config.loader_config import LoaderConfig
from moviedb_loader.service.errors import ConfigError

CONFIG_DIR_ENV = "MOVIEDB_CONFIG_DIR"
DEFAULT_CONFIG_DIR = Path(__file__).parent.parent / "config_yaml"

# Upper bound on the stored query, in bytes
DEFAULT_QUERY_MAX_BYTES = 65536

REQUIRED_KEYS = ("db_file", "query_file", "result_file", "datasets")
DATASET_KEYS = ("path", "table", "columns", "schema")


def default_config_path() -> Path:
    env_dir = os.environ.get(CONFIG_DIR_ENV)
    return Path(env_dir) if env_dir else DEFAULT_CONFIG_DIR


class ConfigLoader:

    def __init__(self, config_path: Optional[Path] = None, env: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else default_config_path()
        self.env = env
        self.config_data = self._load_config()

    def _read_yaml(self, path: Path) -> dict:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read configuration file {path}", str(e)) from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}", str(e)) from e
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"Configuration file {path} must contain a mapping")
        return data

    def _load_config(self) -> LoaderConfig:
        """
        Load and parse the loader configuration from YAML.
        Supports environment-specific overrides via config_<env>.yaml

        Returns:
            LoaderConfig: validated configuration instance
        """
        # Load base YAML file
        data = self._read_yaml(self.config_path / "config.yaml")

        # Merge environment config into base config; dict.update() overwrites existing keys
        if self.env:
            data.update(self._read_yaml(self.config_path / f"config_{self.env}.yaml"))

        missing = [key for key in REQUIRED_KEYS if key not in data]
        if missing:
            raise ConfigError(f"Missing configuration keys: {', '.join(missing)}")

        config = LoaderConfig()
        config.db_file = Path(data["db_file"])
        config.query_file = Path(data["query_file"])
        config.result_file = Path(data["result_file"])
        config.encoding = data.get("encoding", "utf-8")
        config.log_level = str(data.get("log_level", "INFO")).upper()
        config.log_file = Path(data["log_file"]) if data.get("log_file") else None

        try:
            config.query_max_bytes = int(data.get("query_max_bytes", DEFAULT_QUERY_MAX_BYTES))
        except (TypeError, ValueError) as e:
            raise ConfigError("query_max_bytes must be an integer", str(e)) from e
        if config.query_max_bytes <= 0:
            raise ConfigError("query_max_bytes must be positive")

        config.datasets = [self._parse_dataset(i, ds) for i, ds in enumerate(data["datasets"] or [])]
        tables = [ds.table for ds in config.datasets]
        duplicates = sorted({t for t in tables if tables.count(t) > 1})
        if duplicates:
            raise ConfigError(f"Duplicate dataset tables: {', '.join(duplicates)}")

        return config

    @staticmethod
    def _parse_dataset(index: int, raw) -> Dataset:
        if not isinstance(raw, dict):
            raise ConfigError(f"Dataset #{index + 1} must be a mapping")
        missing = [key for key in DATASET_KEYS if key not in raw]
        if missing:
            raise ConfigError(f"Dataset #{index + 1} is missing: {', '.join(missing)}")

        columns = raw["columns"]
        if not isinstance(columns, int) or isinstance(columns, bool) or columns <= 0:
            raise ConfigError(f"Dataset {raw['table']}: columns must be a positive integer")

        return Dataset(
            path=Path(raw["path"]),
            table=str(raw["table"]),
            columns=columns,
            schema=str(raw["schema"]).strip(),
        )


if __name__ == "__main__":

    # python3 -m moviedb_loader.config.config_loader

    config = ConfigLoader()
    print(config.config_data)
    for dataset in config.config_data.datasets:
        print(f"  {dataset.table:<18} {dataset.columns} columns  <- {dataset.path}")
