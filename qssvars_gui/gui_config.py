"""Persisted stylesheet preferences.

Canonical config: ~/.qssvars/config.yaml
Falls back to defaults if file does not exist.
"""

import copy
import os

import yaml

DEFAULT_CONFIG_DIR = os.path.expanduser("~/.qssvars")
DEFAULT_CONFIG_FILE = os.path.join(DEFAULT_CONFIG_DIR, "config.yaml")

DEFAULT_GUI_CONFIG = {
    "stylesheet_path": None,
    "theme": "",
    "auto_reload": False,
}


def _apply_defaults(cfg):
    path = cfg.get("stylesheet_path")
    cfg["stylesheet_path"] = os.path.expanduser(str(path)) if path else None
    cfg["theme"] = str(cfg.get("theme") or "")
    cfg["auto_reload"] = bool(cfg.get("auto_reload", False))
    return cfg


def load_gui_config(path=DEFAULT_CONFIG_FILE):
    """Load preferences from YAML file. Returns dict with defaults merged."""
    if not os.path.isfile(path):
        return _apply_defaults(copy.deepcopy(DEFAULT_GUI_CONFIG))
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return _apply_defaults(copy.deepcopy(DEFAULT_GUI_CONFIG))
    if not isinstance(data, dict):
        return _apply_defaults(copy.deepcopy(DEFAULT_GUI_CONFIG))

    merged = copy.deepcopy(DEFAULT_GUI_CONFIG)
    for key in DEFAULT_GUI_CONFIG:
        if key in data:
            merged[key] = data[key]
    return _apply_defaults(merged)


def save_gui_config(config, path=DEFAULT_CONFIG_FILE):
    """Save preferences to YAML file."""
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    payload = {key: config.get(key, DEFAULT_GUI_CONFIG[key]) for key in DEFAULT_GUI_CONFIG}
    with open(path, "w", encoding="utf-8") as f:
        yaml.safe_dump(payload, f, allow_unicode=True, sort_keys=False)
