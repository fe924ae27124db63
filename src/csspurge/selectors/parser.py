"""Lark Transformer that converts a selector parse tree into a SelectorList."""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

from lark import Lark, Token, Transformer
from lark.exceptions import LarkError

from csspurge.errors import SelectorSyntaxError
from csspurge.selectors.model import ComplexSelector, SelectorList, SelectorTerm

__all__ = ["parse_selector", "parse_candidate"]

GRAMMAR_PATH = Path(__file__).parent / "grammar.lark"
CANDIDATE_GRAMMAR_PATH = Path(__file__).parent / "candidate.lark"

_ESCAPE_RE = re.compile(r"\\(?:([0-9a-fA-F]{1,6})[ \t\r\n\f]?|(.))", re.DOTALL)

# Splits an ATTRIBUTE token that the grammar already accepted.
_ATTRIBUTE_RE = re.compile(
    r"""
    ^\[\s*
    (?:(?:[^\s|=\]]*)\|(?!=))?              # optional namespace prefix
    (?P<name>(?:\\.|[^\s~|^$*=\]])+)
    \s*
    (?:
        (?P<op>[~|^$*]?=)\s*
        (?P<value>"(?:[^"\\]|\\.)*"|'(?:[^'\\]|\\.)*'|[^\s\]]+)
        (?:\s*(?P<flag>[iIsS]))?
        \s*
    )?
    \]$
    """,
    re.VERBOSE | re.DOTALL,
)

_MAX_CODE_POINT = 0x10FFFF


def _unescape(raw: str) -> str:
    """Resolve CSS escapes (``\\:``, ``\\31 ``) in an identifier or string."""

    def repl(match: re.Match[str]) -> str:
        if match.group(1):
            code = int(match.group(1), 16)
            if code == 0 or code > _MAX_CODE_POINT or 0xD800 <= code <= 0xDFFF:
                return "\ufffd"
            return chr(code)
        return match.group(2)

    return _ESCAPE_RE.sub(repl, raw)


def _function_name(token: Token) -> str:
    """``not(`` -> ``not``."""
    return _unescape(str(token).rstrip().rstrip("(")).lower()


class _SelectorTransformer(Transformer):
    """Transforms the Lark parse tree into selector model objects."""

    def selector_list(self, items: list) -> SelectorList:
        return SelectorList(selectors=tuple(items))

    def complex_selector(self, items: list) -> ComplexSelector:
        terms: list[SelectorTerm] = []
        for item in items:
            if isinstance(item, tuple):  # compound; combinators are None
                terms.extend(item)
        return ComplexSelector(terms=tuple(terms))

    def combinator(self, items: list) -> None:
        return None

    def compound_selector(self, items: list) -> tuple[SelectorTerm, ...]:
        return tuple(items)

    def tag(self, items: list) -> SelectorTerm:
        return SelectorTerm(kind="tag", value=_unescape(str(items[0])))

    def universal(self, items: list) -> SelectorTerm:
        return SelectorTerm(kind="universal", value="*")

    def class_selector(self, items: list) -> SelectorTerm:
        return SelectorTerm(kind="class", value=_unescape(str(items[0])))

    def id_selector(self, items: list) -> SelectorTerm:
        return SelectorTerm(kind="id", value=_unescape(str(items[0])))

    def attribute_selector(self, items: list) -> SelectorTerm:
        match = _ATTRIBUTE_RE.match(str(items[0]))
        if match is None:
            raise SelectorSyntaxError(f"Malformed attribute selector: {items[0]!r}")
        value = match.group("value")
        if value is not None:
            if value[0] in "\"'":
                value = value[1:-1]
            value = _unescape(value)
        return SelectorTerm(
            kind="attribute",
            value=_unescape(match.group("name")),
            operator=match.group("op"),
            argument=value,
        )

    def pseudo_class(self, items: list) -> SelectorTerm:
        return SelectorTerm(kind="pseudo-class", value=_unescape(str(items[0])).lower())

    def pseudo_class_selector(self, items: list) -> SelectorTerm:
        return SelectorTerm(
            kind="pseudo-class",
            value=_function_name(items[0]),
            selectors=items[1].selectors,
        )

    def pseudo_class_function(self, items: list) -> SelectorTerm:
        argument = str(items[1]).strip() if len(items) > 1 else ""
        return SelectorTerm(kind="pseudo-class", value=_function_name(items[0]), argument=argument)

    def pseudo_element(self, items: list) -> SelectorTerm:
        return SelectorTerm(kind="pseudo-element", value=_unescape(str(items[0])).lower())

    def pseudo_element_function(self, items: list) -> SelectorTerm:
        name = _function_name(items[0])
        if len(items) > 1 and isinstance(items[1], SelectorList):
            return SelectorTerm(kind="pseudo-element", value=name, selectors=items[1].selectors)
        argument = str(items[1]).strip() if len(items) > 1 else ""
        return SelectorTerm(kind="pseudo-element", value=name, argument=argument)


@lru_cache(maxsize=1)
def _get_parser() -> Lark:
    grammar = GRAMMAR_PATH.read_text(encoding="utf-8")
    return Lark(
        grammar,
        parser="lalr",
        start="selector_list",
        transformer=_SelectorTransformer(),
    )


@lru_cache(maxsize=8192)
def parse_selector(text: str) -> SelectorList:
    """Parse a CSS selector list into a :class:`SelectorList`.

    Raises :class:`SelectorSyntaxError` when *text* is not a selector list.
    Whitespace around the whole list is significant and rejected.
    """
    if not text:
        raise SelectorSyntaxError("Empty selector")
    try:
        return _get_parser().parse(text)
    except LarkError as exc:
        raise SelectorSyntaxError(f"Invalid selector {text!r}: {exc}") from exc


@lru_cache(maxsize=1)
def _get_candidate_parser() -> Lark:
    grammar = CANDIDATE_GRAMMAR_PATH.read_text(encoding="utf-8")
    return Lark(grammar, parser="lalr", start="selector_list")


@lru_cache(maxsize=8192)
def parse_candidate(text: str) -> None:
    """Check *text* against the lenient candidate grammar.

    Accepts everything :func:`parse_selector` accepts, plus the loose names
    that selector engines tolerate (``w-1/2``, ``2xl:text-lg``, ``!mt-2``).
    Raises :class:`SelectorSyntaxError` otherwise.
    """
    if not text:
        raise SelectorSyntaxError("Empty selector")
    try:
        _get_candidate_parser().parse(text)
    except LarkError as exc:
        raise SelectorSyntaxError(f"Invalid selector {text!r}: {exc}") from exc
