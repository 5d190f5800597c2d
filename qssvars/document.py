"""Stylesheet document snapshot and the load pipeline that produces it."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional

from .blocks import (
    extract_variables_block,
    parse_available_themes,
    parse_variables_block,
    remove_variables_blocks,
)
from .resolver import resolve_all
from .substitution import find_unresolved_variables, substitute_variables


@dataclass(frozen=True)
class DocumentState:
    """Everything known about the last successfully applied stylesheet.

    Instances are never mutated; every load, reload, theme switch or variable
    edit produces a new snapshot that replaces the old one in a single step.
    """

    raw_text: str = ""
    source_path: Optional[str] = None
    available_themes: FrozenSet[str] = frozenset()
    current_theme: str = ""
    variables: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def is_loaded(self) -> bool:
        return bool(self.raw_text)

    def render(self) -> str:
        """Return the public stylesheet: blocks stripped, variables substituted."""
        return substitute_variables(remove_variables_blocks(self.raw_text), self.variables)

    def unresolved_variables(self) -> List[str]:
        return find_unresolved_variables(self.render())

    def with_variable(self, name: str, value: str) -> "DocumentState":
        variables = dict(self.variables)
        variables[name] = value
        return replace(self, variables=MappingProxyType(variables))

    def without_variable(self, name: str) -> "DocumentState":
        variables = dict(self.variables)
        variables.pop(name, None)
        return replace(self, variables=MappingProxyType(variables))


def collect_variables(stylesheet: str, theme_name: str = "") -> Dict[str, str]:
    """Return the raw mapping: default block first, then the theme block on top."""
    variables: Dict[str, str] = {}
    parse_variables_block(extract_variables_block(stylesheet, ""), variables)
    if theme_name:
        parse_variables_block(extract_variables_block(stylesheet, theme_name), variables)
    return variables


def build_document(stylesheet: str, theme_name: str = "", source_path: Optional[str] = None) -> DocumentState:
    """Run the full parse/resolve pipeline over ``stylesheet``.

    Raises:
        ValueError: If ``stylesheet`` is empty.
    """
    if not stylesheet:
        raise ValueError("Provided stylesheet data is empty")

    theme = theme_name or ""
    resolved = resolve_all(collect_variables(stylesheet, theme))
    return DocumentState(
        raw_text=stylesheet,
        source_path=source_path,
        available_themes=parse_available_themes(stylesheet),
        current_theme=theme,
        variables=MappingProxyType(resolved),
    )


def read_stylesheet(path) -> str:
    """Read a stylesheet file as UTF-8 text.

    Raises:
        OSError: If the file cannot be opened or read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    with open(path, "r", encoding="utf-8") as f:
        return f.read()
