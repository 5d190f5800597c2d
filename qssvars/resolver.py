"""Resolution of ``@name`` references between variables."""

import re

from .log import get_logger

logger = get_logger("resolver")

_REFERENCE_RE = re.compile(r"@([A-Za-z0-9_\-]+)")


class _Frame:
    """One variable whose value is being expanded."""

    __slots__ = ("name", "pieces", "index", "out")

    def __init__(self, name, value):
        self.name = name
        # Even indexes are literal text, odd indexes are referenced names.
        self.pieces = _REFERENCE_RE.split(value)
        self.index = 0
        self.out = []


def resolve_variable(name, variables, in_progress=None) -> str:
    """Resolve ``name`` against the raw ``variables`` mapping.

    Every ``@other`` token in the value is replaced by the fully resolved value
    of ``other``. Unknown names resolve to ``""``; so does any reference back to
    a name that is still being resolved higher up the chain (a cycle). Both
    cases inside a value are logged as warnings.

    Expansion runs on an explicit stack, so chain depth is not bounded by the
    interpreter recursion limit.

    Args:
        name: Variable name without the leading ``@``.
        variables: Raw mapping whose values may contain references.
        in_progress: Names to treat as already being resolved. Callers normally
            leave this as ``None`` so each top-level call starts fresh.

    Returns:
        The resolved value.
    """
    path = set(in_progress or ())
    if name in path or name not in variables:
        return ""

    path.add(name)
    stack = [_Frame(name, variables[name])]
    while True:
        frame = stack[-1]
        if frame.index >= len(frame.pieces):
            stack.pop()
            path.discard(frame.name)
            value = "".join(frame.out)
            if not stack:
                return value
            stack[-1].out.append(value)
            continue

        piece = frame.pieces[frame.index]
        is_reference = frame.index % 2 == 1
        frame.index += 1
        if not is_reference:
            frame.out.append(piece)
        elif piece in path:
            logger.warning("Cyclic reference @%s in variable @%s resolves to empty", piece, frame.name)
        elif piece not in variables:
            logger.warning("Unknown reference @%s in variable @%s resolves to empty", piece, frame.name)
        else:
            path.add(piece)
            stack.append(_Frame(piece, variables[piece]))


def resolve_all(variables) -> dict:
    """Return a new mapping with every entry of ``variables`` resolved."""
    return {name: resolve_variable(name, variables) for name in variables}
