"""Locate and parse ``@Variables`` blocks inside a QSS document.

Supported syntax::

    @Variables { @ColorPrimary: #123456; }
    @Variables[Name="Dark"] { @ColorPrimary: #000000; }

Blocks end at the first closing brace; nested braces are not supported.
"""

import re

DEFAULT_THEME_NAME = "Default"

_DEFAULT_BLOCK_RE = re.compile(r"@Variables\s*\{(.*?)\}", flags=re.S)
_DEFAULT_BLOCK_START_RE = re.compile(r"@Variables\s*\{")
_THEME_TAG_RE = re.compile(r'@Variables\[Name="([^"]*)"\]')
_ANY_BLOCK_RE = re.compile(r'@Variables(?:\[Name="[^"]*"\])?\s*\{.*?\}', flags=re.S)
_ENTRY_RE = re.compile(r"@([A-Za-z0-9_\-]+)\s*:\s*([^;]+);")


def _theme_block_re(theme_name):
    return re.compile(
        r'@Variables\[Name="' + re.escape(theme_name) + r'"\]\s*\{(.*?)\}',
        flags=re.S,
    )


def extract_variables_block(stylesheet: str, theme_name: str = "") -> str:
    """Return the body of the block for ``theme_name``.

    Falls back to the untagged default block when the theme is empty, missing,
    or declares an empty body. Returns ``""`` when nothing matches.
    """
    text = stylesheet or ""
    if theme_name:
        match = _theme_block_re(theme_name).search(text)
        if match and match.group(1).strip():
            return match.group(1)

    match = _DEFAULT_BLOCK_RE.search(text)
    return match.group(1) if match else ""


def parse_variables_block(block: str, variables=None) -> dict:
    """Parse ``@name: value;`` entries from ``block`` into ``variables``.

    Later entries overwrite earlier ones, which is how a theme block overrides
    the default block when both are parsed into the same mapping.
    """
    if variables is None:
        variables = {}
    for match in _ENTRY_RE.finditer(block or ""):
        variables[match.group(1)] = match.group(2).strip()
    return variables


def parse_available_themes(stylesheet: str) -> frozenset:
    """Return declared theme names, plus ``Default`` when an untagged block exists."""
    text = stylesheet or ""
    themes = {name for name in _THEME_TAG_RE.findall(text) if name}
    if _DEFAULT_BLOCK_START_RE.search(text):
        themes.add(DEFAULT_THEME_NAME)
    return frozenset(themes)


def remove_variables_blocks(stylesheet: str) -> str:
    """Strip every tagged and untagged ``@Variables`` block."""
    return _ANY_BLOCK_RE.sub("", stylesheet or "")
