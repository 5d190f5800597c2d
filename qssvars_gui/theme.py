from PySide6.QtGui import QPalette
from PySide6.QtWidgets import QApplication

from qssvars.blocks import DEFAULT_THEME_NAME


def apply_stylesheet(stylesheet, app=None):
    """Apply ``stylesheet`` to the running QApplication.

    Does nothing when no widget application exists (e.g. a QCoreApplication in
    scripts or tests).
    """
    target = app if app is not None else QApplication.instance()
    if not isinstance(target, QApplication):
        return False
    target.setStyleSheet(stylesheet)
    return True


def current_theme_mode(app=None):
    """Best-effort theme mode inference from current app palette."""
    target = app if app is not None else QApplication.instance()
    if not isinstance(target, QApplication):
        return "dark"
    window = target.palette().color(QPalette.Window)
    return "dark" if window.lightness() < 128 else "light"


def pick_theme(available_themes, preferred="", mode=None):
    """Choose the theme to load from a stylesheet's declared themes.

    ``preferred`` wins when it is declared. Otherwise a theme whose name matches
    the palette mode (``dark``/``light``, case-insensitive) is used. Returns ``""``
    (default block only) when nothing fits.
    """
    themes = set(available_themes or ())
    themes.discard(DEFAULT_THEME_NAME)
    if preferred and preferred in themes:
        return preferred

    active_mode = mode or current_theme_mode()
    for name in sorted(themes):
        if name.lower() == active_mode:
            return name
    return ""
