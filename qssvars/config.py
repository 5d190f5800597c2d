"""Runtime configuration for the stylesheet loader.

Configuration precedence:
1) Built-in defaults in this file
2) JSON file from environment variable ``QSSVARS_CONFIG_FILE``
"""

import copy
import json
import os
import sys


CONFIG_ENV_VAR = "QSSVARS_CONFIG_FILE"


DEFAULT_CONFIG = {
    "reload": {
        "debounce_ms": 150,
    },
    "logging": {
        "level": "INFO",
        "file": None,
    },
}

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _warn(message):
    print(f"warning: {message}", file=sys.stderr)


def _overlay(defaults, override):
    """Return ``defaults`` with the known keys of ``override`` laid over it.

    Sections are merged one level deep; keys that do not exist in the
    defaults are ignored.
    """
    merged = copy.deepcopy(defaults)
    for section, values in (override or {}).items():
        if section not in merged:
            continue
        if not isinstance(values, dict):
            _warn(f"config section {section!r} must be a JSON object; ignored")
            continue
        merged[section].update(
            (key, value) for key, value in values.items() if key in merged[section]
        )
    return merged


def _read_config_file(config_path):
    """Read the JSON object at ``config_path``; raise ValueError for anything else."""
    with open(config_path, "r", encoding="utf-8") as handle:
        payload = json.load(handle)
    if not isinstance(payload, dict):
        raise ValueError("expected a JSON object")
    return payload


def _normalize_paths(config, config_dir=None):
    """Resolve a relative log file path against the config file directory."""
    value = config["logging"].get("file")
    if not value:
        return
    value = os.path.expanduser(str(value))
    if not os.path.isabs(value) and config_dir:
        value = os.path.join(config_dir, value)
    config["logging"]["file"] = os.path.abspath(value)


def build_runtime_config(environ=None):
    """Resolve defaults plus the optional file named by ``QSSVARS_CONFIG_FILE``."""
    environ = os.environ if environ is None else environ
    override, config_dir = {}, None
    config_path = environ.get(CONFIG_ENV_VAR)
    if config_path:
        abs_path = os.path.abspath(os.path.expanduser(config_path))
        try:
            override = _read_config_file(abs_path)
            config_dir = os.path.dirname(abs_path)
        except (OSError, ValueError) as exc:
            _warn(f"ignoring {CONFIG_ENV_VAR}={abs_path}: {exc}")

    config = _overlay(DEFAULT_CONFIG, override)
    _normalize_paths(config, config_dir=config_dir)
    return config


RUNTIME_CONFIG = build_runtime_config()


def get_runtime_config():
    """Return a copy of resolved runtime configuration."""
    return copy.deepcopy(RUNTIME_CONFIG)


def as_positive_int(name, value, fallback):
    try:
        number = int(value)
    except (TypeError, ValueError):
        number = 0
    if number > 0:
        return number
    _warn(f"{name} must be a positive integer, got {value!r}; using {fallback!r}")
    return int(fallback)


def as_log_level(name, value, fallback):
    level = str(value or "").strip().upper()
    if level in _LOG_LEVELS:
        return level
    _warn(f"{name} must be one of {', '.join(_LOG_LEVELS)}, got {value!r}; using {fallback!r}")
    return fallback


RELOAD_DEBOUNCE_MS = as_positive_int(
    "reload.debounce_ms",
    RUNTIME_CONFIG["reload"].get("debounce_ms"),
    DEFAULT_CONFIG["reload"]["debounce_ms"],
)
LOG_LEVEL = as_log_level(
    "logging.level",
    RUNTIME_CONFIG["logging"].get("level"),
    DEFAULT_CONFIG["logging"]["level"],
)
LOG_FILE = RUNTIME_CONFIG["logging"].get("file")
