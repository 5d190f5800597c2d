"""Wire a StylesheetLoader into an application from the saved preferences."""

from qssvars.blocks import parse_available_themes
from qssvars.document import read_stylesheet
from qssvars.log import get_logger
from qssvars_gui.gui_config import DEFAULT_CONFIG_FILE, load_gui_config, save_gui_config
from qssvars_gui.stylesheet_loader import StylesheetLoader
from qssvars_gui.theme import pick_theme

logger = get_logger("app_stylesheet")


def _startup_theme(stylesheet_path, preferred):
    try:
        themes = parse_available_themes(read_stylesheet(stylesheet_path))
    except (OSError, UnicodeDecodeError):
        # load_stylesheet reports the failure.
        return preferred
    return pick_theme(themes, preferred)


def install_app_stylesheet(app=None, config_path=DEFAULT_CONFIG_FILE, loader=None):
    """Create (or reuse) a loader and apply the configured stylesheet.

    Returns the loader even when nothing could be loaded so callers can still
    connect to its signals and load something later.
    """
    cfg = load_gui_config(path=config_path)
    if loader is None:
        loader = StylesheetLoader(parent=app)

    stylesheet_path = cfg.get("stylesheet_path")
    if not stylesheet_path:
        logger.debug("No stylesheet configured in %s", config_path)
        return loader

    theme = _startup_theme(stylesheet_path, cfg.get("theme") or "")
    if loader.load_stylesheet(stylesheet_path, theme):
        loader.enable_auto_reload(cfg.get("auto_reload", False))
    return loader


def remember_stylesheet_choice(loader, config_path=DEFAULT_CONFIG_FILE):
    """Persist the loader's current file, theme and auto-reload flag."""
    cfg = load_gui_config(path=config_path)
    path = loader.get_current_stylesheet_path()
    if path:
        cfg["stylesheet_path"] = path
    cfg["theme"] = loader.get_current_theme_name()
    cfg["auto_reload"] = loader.is_auto_reload_enabled()
    save_gui_config(cfg, path=config_path)
    return cfg
