"""Stylesheet model: StyleRule, AtRule, Verbatim, and Stylesheet dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union


@dataclass(frozen=True)
class Verbatim:
    """Whitespace, comments, or anything written back exactly as read."""

    text: str

    @property
    def is_comment(self) -> bool:
        return self.text.startswith("/*")

    def serialize(self) -> str:
        return self.text


@dataclass(frozen=True)
class StyleRule:
    """A qualified rule pairing a selector list with its declaration block."""

    prelude: str  # selector list exactly as written
    selectors: tuple[str, ...]  # top-level comma-separated parts, trimmed
    block: str  # everything between the braces

    def with_selectors(self, selectors: tuple[str, ...]) -> StyleRule:
        """Return a copy keeping only *selectors*."""
        if selectors == self.selectors:
            return self
        return StyleRule(prelude=", ".join(selectors), selectors=selectors, block=self.block)

    def serialize(self) -> str:
        return f"{self.prelude}{{{self.block}}}"


@dataclass(frozen=True)
class AtRule:
    """An at-rule. ``children`` is set for conditional group rules only."""

    keyword: str  # as written, without "@"
    prelude: str
    block: str | None = None  # raw block text when not parsed further
    children: tuple[Node, ...] | None = None

    def serialize(self) -> str:
        head = f"@{self.keyword}{self.prelude}"
        if self.children is not None:
            return f"{head}{{{''.join(c.serialize() for c in self.children)}}}"
        if self.block is None:
            return f"{head};"
        return f"{head}{{{self.block}}}"


Node = Union[StyleRule, AtRule, Verbatim]


@dataclass(frozen=True)
class Stylesheet:
    """A parsed stylesheet: top-level nodes in source order."""

    nodes: tuple[Node, ...] = field(default_factory=tuple)

    def serialize(self) -> str:
        return "".join(n.serialize() for n in self.nodes)
