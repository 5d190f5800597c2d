#!/usr/bin/env python3
"""
Render a QSS file with @Variables blocks into a plain Qt stylesheet.
"""

import argparse
import os
import sys

import yaml

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
from qssvars.config import LOG_FILE, LOG_LEVEL, RELOAD_DEBOUNCE_MS
from qssvars.document import build_document, read_stylesheet
from qssvars.log import configure_logging


def _write_output(text, output_path=None):
    if output_path:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(text)
    else:
        sys.stdout.write(text)
        if not text.endswith("\n"):
            sys.stdout.write("\n")
        sys.stdout.flush()


def render_once(path, theme="", list_themes=False, show_variables=False, output_path=None, strict=False):
    """Render ``path`` once. Returns the process exit code."""
    try:
        state = build_document(read_stylesheet(path), theme, source_path=path)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {path}: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"error: {path}: {exc}", file=sys.stderr)
        return 1

    if list_themes:
        for name in sorted(state.available_themes):
            print(name)
        return 0

    if show_variables:
        print(yaml.safe_dump(dict(state.variables), allow_unicode=True, sort_keys=True), end="")
        return 0

    _write_output(state.render(), output_path)

    unresolved = state.unresolved_variables()
    if unresolved:
        print(f"[WARN] unresolved variables: {', '.join(unresolved)}", file=sys.stderr)
        if strict:
            return 2
    return 0


def watch(path, theme="", output_path=None, debounce_ms=RELOAD_DEBOUNCE_MS):
    """Render ``path`` and re-render on every change until interrupted."""
    from PySide6.QtCore import QCoreApplication

    from qssvars_gui.stylesheet_loader import StylesheetLoader

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    loader = StylesheetLoader(sink=lambda text: _write_output(text, output_path), debounce_ms=debounce_ms)
    if not loader.load_stylesheet(path, theme):
        print(f"error: {loader.last_error}", file=sys.stderr)
        return 1
    if not loader.enable_auto_reload(True):
        print(f"error: cannot watch {path}", file=sys.stderr)
        return 1
    return app.exec()


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Render a QSS stylesheet with @Variables blocks",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Render with the default @Variables block
  python render_qss.py app.qss

  # Render the "Dark" theme into a file
  python render_qss.py app.qss --theme Dark --output app.dark.qss

  # Re-render whenever the file changes
  python render_qss.py app.qss --theme Dark --watch
        """
    )
    parser.add_argument("path", help="QSS file to render")
    parser.add_argument("--theme", default="", help="Theme block to apply on top of the default block")
    parser.add_argument("--list-themes", action="store_true", help="List declared themes and exit")
    parser.add_argument("--variables", action="store_true", help="Print resolved variables as YAML and exit")
    parser.add_argument("--output", default=None, help="Write the stylesheet to this file instead of stdout")
    parser.add_argument("--watch", action="store_true", help="Keep running and re-render on file changes")
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Exit with status 2 when unresolved variables remain",
    )

    args = parser.parse_args(argv)
    configure_logging(LOG_LEVEL, LOG_FILE)

    if args.watch:
        return watch(args.path, args.theme, output_path=args.output)
    return render_once(
        args.path,
        theme=args.theme,
        list_themes=args.list_themes,
        show_variables=args.variables,
        output_path=args.output,
        strict=args.strict,
    )


if __name__ == "__main__":
    raise SystemExit(main())
