"""Replace ``@name`` placeholders in a stylesheet with resolved values."""

import re

_IDENTIFIER_TAIL = r"(?![A-Za-z0-9_\-])"
_PLACEHOLDER_RE = re.compile(r"@([A-Za-z0-9_\-]+)")


def _placeholder_re(name):
    return re.compile("@" + re.escape(name) + _IDENTIFIER_TAIL)


def substitute_variables(stylesheet: str, variables) -> str:
    """Substitute every ``@name`` token that has an entry in ``variables``.

    Longer names go first so ``@ColorPrimary`` is never consumed by ``@Color``.
    A token only matches when the name is not followed by another identifier
    character. Tokens without an entry are left untouched.
    """
    result = stylesheet or ""
    for name in sorted(variables, key=len, reverse=True):
        value = str(variables[name])
        result = _placeholder_re(name).sub(lambda _match, value=value: value, result)
    return result


def find_unresolved_variables(stylesheet: str) -> list:
    """Return distinct ``@identifier`` tokens still present, in order of appearance."""
    seen = []
    for name in _PLACEHOLDER_RE.findall(stylesheet or ""):
        if name not in seen:
            seen.append(name)
    return seen
