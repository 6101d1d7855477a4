from datetime import datetime
from pathlib import Path
from typing import Optional

import yaml

DEFAULT_CONFIG: dict = {
    "max_line_distance": None,  # None = nearest-line matching has no distance bound
    "workers": 1,
    "batch_size": 50,  # <file> elements parsed per ingestion batch
    "exclude": [],  # fnmatch patterns or directory names to skip (e.g. "generated/", "*Test.java")
    "output": None,  # None = timestamped directory under the home directory
    "format": "html",
    "source_root": None,
}

REPORT_FORMATS = ("html", "json")


def load_config(config_path: str = ".lintdiff.yml", cli_overrides: Optional[dict] = None) -> dict:
    """
    Load configuration by merging (in order of precedence):
      1. Built-in defaults
      2. .lintdiff.yml in the current directory
      3. CLI argument overrides
    """
    config = {**DEFAULT_CONFIG, "exclude": list(DEFAULT_CONFIG["exclude"])}

    path = Path(config_path)
    if path.exists():
        with open(path) as f:
            file_config = yaml.safe_load(f) or {}
        if not isinstance(file_config, dict):
            raise ValueError(f"Configuration file {config_path} must contain a mapping.")
        config.update(file_config)

    if cli_overrides:
        for key, value in cli_overrides.items():
            if value is not None:
                config[key] = value

    if config["format"] not in REPORT_FORMATS:
        raise ValueError(f"Unknown report format: {config['format']!r}. Choose 'html' or 'json'.")
    if config["max_line_distance"] is not None:
        _check_int(config, "max_line_distance", minimum=0)
    _check_int(config, "workers", minimum=1)
    _check_int(config, "batch_size", minimum=1)
    exclude = config["exclude"]
    if not isinstance(exclude, list) or not all(isinstance(p, str) for p in exclude):
        raise ValueError("exclude must be a list of patterns.")

    return config


def _check_int(config: dict, key: str, minimum: int) -> None:
    value = config[key]
    # YAML booleans are ints to Python; reject them explicitly.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be an integer, got {value!r}.")
    if value < minimum:
        raise ValueError(f"{key} must be at least {minimum}.")


def default_output_path(now: Optional[datetime] = None) -> Path:
    """Return ~/lintdiff_report_YYYY.MM.DD_HH_MM_SS for runs without an explicit output."""
    stamp = (now or datetime.now()).strftime("%Y.%m.%d_%H_%M_%S")
    return Path.home() / f"lintdiff_report_{stamp}"
