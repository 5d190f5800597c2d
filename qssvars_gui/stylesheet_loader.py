"""Load QSS stylesheets with ``@Variables`` support, theme switching and auto-reload.

Variables live in blocks inside the stylesheet itself::

    @Variables { @ColorPrimary: #123456; }
    @Variables[Name="Dark"] { @ColorPrimary: #000000; @Accent: @ColorPrimary; }
    QWidget { background: @ColorPrimary; }

The default block is parsed first and the selected theme block overrides it.
Values may reference other variables; references are resolved recursively and
cycles resolve to an empty string.

With auto-reload enabled, a ``QFileSystemWatcher`` observes the loaded file and
every change notification (re)starts a single-shot ``QTimer``. Bursts of writes
therefore produce one reload, which reads whatever is on disk when the timer
fires and keeps the current theme. A reload does not switch themes: if the
current theme disappeared from the file, the default block is used.
"""

import os

from PySide6.QtCore import QFileSystemWatcher, QObject, QTimer, Signal, Slot

from qssvars.config import RELOAD_DEBOUNCE_MS
from qssvars.document import DocumentState, build_document, read_stylesheet
from qssvars.log import get_logger
from qssvars.substitution import find_unresolved_variables
from qssvars_gui.theme import apply_stylesheet

logger = get_logger("stylesheet_loader")


class StylesheetLoader(QObject):
    stylesheet_applied = Signal(str)
    stylesheet_reloaded = Signal(str)  # source path
    unresolved_variables = Signal(list)
    load_failed = Signal(str)

    def __init__(self, parent=None, sink=None, debounce_ms=None):
        """
        Args:
            parent: Parent QObject, or None.
            sink: Callable receiving the final stylesheet text. Defaults to
                applying it to the running QApplication.
            debounce_ms: Delay between the last change notification and the
                reload. Defaults to ``reload.debounce_ms`` from the runtime config.
        """
        super().__init__(parent)
        self._sink = sink if sink is not None else apply_stylesheet
        self._state = DocumentState()
        self._auto_reload_enabled = False
        self.last_error = ""

        self._watcher = QFileSystemWatcher(self)
        self._watcher.fileChanged.connect(self._on_stylesheet_file_changed)
        self._watcher.directoryChanged.connect(self._on_stylesheet_directory_changed)

        self._reload_timer = QTimer(self)
        self._reload_timer.setSingleShot(True)
        self._reload_timer.setInterval(
            RELOAD_DEBOUNCE_MS if debounce_ms is None else int(debounce_ms)
        )
        self._reload_timer.timeout.connect(self._on_reload_timeout)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    def load_stylesheet(self, file_path, theme_name="") -> bool:
        """Read ``file_path``, resolve its variables for ``theme_name`` and apply it."""
        path = str(file_path or "")
        try:
            raw = read_stylesheet(path)
        except (OSError, UnicodeDecodeError) as exc:
            return self._fail(f"Failed to load stylesheet from {path}: {exc}")
        return self._process_and_apply(raw, theme_name, source_path=path)

    def load_stylesheet_from_data(self, stylesheet, theme_name="") -> bool:
        """Apply an in-memory stylesheet. In-memory sources are never watched."""
        return self._process_and_apply(stylesheet, theme_name, source_path=None)

    def reload_stylesheet(self) -> bool:
        """Re-read the last loaded file with the current theme."""
        path = self._state.source_path
        if not path:
            return self._fail("Reload failed: no previously loaded stylesheet path")
        ok = self.load_stylesheet(path, self._state.current_theme)
        if ok:
            self.stylesheet_reloaded.emit(path)
        return ok

    def set_theme(self, theme_name) -> bool:
        """Switch to ``theme_name`` (``""`` for the default block) and reapply.

        Fails when nothing is loaded yet or when a non-empty theme is not declared
        in the stylesheet. Uses the text already in memory; the source path is
        kept so auto-reload keeps following the file.
        """
        theme = theme_name or ""
        if not self._state.is_loaded:
            return self._fail("set_theme failed: no stylesheet loaded yet")
        if theme and theme not in self._state.available_themes:
            return self._fail(
                f"Theme not available: {theme} "
                f"(available: {sorted(self._state.available_themes)})"
            )
        return self._process_and_apply(
            self._state.raw_text, theme, source_path=self._state.source_path
        )

    # ------------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------------

    def get_current_stylesheet(self) -> str:
        return self._state.render()

    def get_available_themes(self) -> set:
        return set(self._state.available_themes)

    def get_current_theme_name(self) -> str:
        return self._state.current_theme

    def get_current_stylesheet_path(self):
        return self._state.source_path

    def get_variables(self) -> dict:
        """Return a copy of the resolved variables."""
        return dict(self._state.variables)

    def has_variable(self, name) -> bool:
        return name in self._state.variables

    def set_variable(self, name, value):
        """Set or override a resolved variable and reapply the stylesheet."""
        self._apply(self._state.with_variable(name, str(value)))

    def remove_variable(self, name) -> bool:
        """Remove a variable and reapply. Returns False if it did not exist."""
        if name not in self._state.variables:
            return False
        self._apply(self._state.without_variable(name))
        return True

    # ------------------------------------------------------------------
    # Auto-reload
    # ------------------------------------------------------------------

    def enable_auto_reload(self, enabled) -> bool:
        """Toggle watching of the loaded file.

        Returns True only when a watch was armed; disabling, or enabling with no
        file loaded, returns False.
        """
        self._auto_reload_enabled = bool(enabled)
        if not self._auto_reload_enabled:
            self._reload_timer.stop()
        return self._configure_watcher()

    def is_auto_reload_enabled(self) -> bool:
        return self._auto_reload_enabled

    def is_reload_pending(self) -> bool:
        return self._reload_timer.isActive()

    @Slot(str)
    def _on_stylesheet_file_changed(self, changed_path):
        if self._auto_reload_enabled and changed_path == self._state.source_path:
            logger.debug("Change detected in %s, reload scheduled", changed_path)
            self._reload_timer.start()

    @Slot(str)
    def _on_stylesheet_directory_changed(self, changed_dir):
        # Only watched while the file itself is missing.
        path = self._state.source_path
        if not (self._auto_reload_enabled and path):
            return
        if os.path.dirname(path) == changed_dir and os.path.exists(path):
            logger.debug("%s reappeared, reload scheduled", path)
            self._reload_timer.start()

    @Slot()
    def _on_reload_timeout(self):
        if self._auto_reload_enabled and self._state.source_path:
            logger.info("Auto-reloading stylesheet from %s", self._state.source_path)
            if not self.reload_stylesheet():
                self._configure_watcher()

    def _configure_watcher(self) -> bool:
        # Re-adding after every load keeps the watch alive for editors that
        # replace the file instead of writing in place. A missing file is
        # followed through its directory until it comes back.
        watched = self._watcher.files() + self._watcher.directories()
        if watched:
            self._watcher.removePaths(watched)
        path = self._state.source_path
        if not (self._auto_reload_enabled and path):
            return False
        if os.path.exists(path):
            return self._watcher.addPath(path)
        directory = os.path.dirname(path)
        if directory and os.path.isdir(directory):
            self._watcher.addPath(directory)
        return False

    # ------------------------------------------------------------------
    # Pipeline
    # ------------------------------------------------------------------

    def _process_and_apply(self, stylesheet, theme_name, source_path) -> bool:
        try:
            state = build_document(stylesheet, theme_name, source_path=source_path)
        except ValueError as exc:
            return self._fail(str(exc))

        self._apply(state)
        self._configure_watcher()
        if source_path:
            logger.debug("Loaded stylesheet from %s with theme %r", source_path, state.current_theme)
        else:
            logger.debug("Loaded stylesheet from data with theme %r", state.current_theme)
        return True

    def _apply(self, state):
        final_stylesheet = state.render()
        unresolved = find_unresolved_variables(final_stylesheet)
        if unresolved:
            logger.warning("Unresolved variable(s) remain in stylesheet: %s", ", ".join(unresolved))

        self._sink(final_stylesheet)
        self._state = state
        self.last_error = ""

        if unresolved:
            self.unresolved_variables.emit(unresolved)
        self.stylesheet_applied.emit(final_stylesheet)

    def _fail(self, message) -> bool:
        logger.warning(message)
        self.last_error = message
        self.load_failed.emit(message)
        return False
