"""Module scanner: harvests candidate selector text from JavaScript syntax trees."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from typing import Any, Callable

import tree_sitter_javascript
from tree_sitter import Language, Node, Parser, Tree

from csspurge.config import Extractor
from csspurge.errors import ModuleParseError
from csspurge.host import ModuleInfo

log = logging.getLogger(__name__)

JS_LANGUAGE = Language(tree_sitter_javascript.language())

# Node types that correspond to ESTree ``Identifier``.
IDENTIFIER_TYPES = frozenset(
    {
        "identifier",
        "property_identifier",
        "shorthand_property_identifier",
        "shorthand_property_identifier_pattern",
        "statement_identifier",
    }
)

_ESCAPE_RE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|[0-7]{1,3}|\r\n|[\s\S])"
)
_SINGLE_ESCAPES = {"b": "\b", "f": "\f", "n": "\n", "r": "\r", "t": "\t", "v": "\v"}
_LINE_TERMINATORS = "\r\n\u2028\u2029"
_SURROGATE_RE = re.compile("[\ud800-\udfff]")

Parse = Callable[[str], Any]


def parse_module(code: str) -> Tree:
    """Parse JavaScript module source into a tree-sitter tree.

    tree-sitter always produces a tree; a tree containing ERROR or missing
    nodes is reported as a :class:`ModuleParseError` at the first such node.
    """
    tree = Parser(JS_LANGUAGE).parse(code.encode("utf-8"))
    broken = _first_error(tree.root_node)
    if broken is not None:
        row, column = broken.start_point
        raise ModuleParseError(
            f"Unexpected syntax at line {row + 1}, column {column + 1}",
            line=row + 1,
            column=column + 1,
        )
    return tree


def _first_error(root: Node) -> Node | None:
    if not root.has_error:
        return None
    stack = [root]
    while stack:
        node = stack.pop()
        if node.type == "ERROR" or node.is_missing:
            return node
        stack.extend(child for child in reversed(node.children) if child.has_error or child.is_missing)
    return root


def cook(raw: str, *, template: bool = False) -> str | None:
    """Resolve JavaScript escape sequences in *raw* literal text.

    Returns ``None`` when the text holds an escape that has no cooked value,
    which only template literals allow (e.g. ``\\unicode`` in a tagged
    template).
    """
    invalid = False

    def repl(match: re.Match[str]) -> str:
        nonlocal invalid
        esc = match.group(1)
        head = esc[0]
        if head == "u" and len(esc) > 1:
            code = int(esc[2:-1] if esc[1] == "{" else esc[1:], 16)
            if code > 0x10FFFF:
                invalid = True
                return ""
            return chr(code)
        if head == "x" and len(esc) == 3:
            return chr(int(esc[1:], 16))
        if head in "01234567":
            if esc == "0":
                return "\0"
            if template:
                invalid = True
                return ""
            return chr(int(esc, 8))
        if head in "ux" or (template and head in "89"):
            invalid = True
            return ""
        if esc == "\r\n" or head in _LINE_TERMINATORS:
            return ""
        return _SINGLE_ESCAPES.get(head, head)

    cooked = _ESCAPE_RE.sub(repl, raw)
    if invalid:
        return None
    if _SURROGATE_RE.search(cooked):
        # join \uD83D\uDE00 style pairs; lone halves become U+FFFD
        cooked = cooked.encode("utf-16", "surrogatepass").decode("utf-16", "replace")
    return cooked


def _template_segments(node: Node) -> Iterator[str]:
    """Yield the raw text of each quasi between ``${...}`` substitutions."""
    source = node.text
    base = node.start_byte
    start = 1  # skip the opening backtick
    for child in node.children:
        if child.type == "template_substitution":
            yield source[start : child.start_byte - base].decode("utf-8")
            start = child.end_byte - base
    yield source[start : len(source) - 1].decode("utf-8")


def iter_candidate_texts(root: Node | Tree) -> Iterator[str]:
    """Walk every node under *root*, yielding text that may hold selectors.

    - string literals yield their cooked value;
    - identifiers yield their name;
    - template text segments yield their cooked value, or the raw text when
      cooking fails.
    """
    node = getattr(root, "root_node", root)
    stack = [node]
    while stack:
        node = stack.pop()
        kind = node.type
        if kind == "string":
            raw = node.text.decode("utf-8")[1:-1]
            cooked = cook(raw)
            yield raw if cooked is None else cooked
        elif kind in IDENTIFIER_TYPES:
            yield node.text.decode("utf-8")
        elif kind == "template_string":
            for raw in _template_segments(node):
                if raw:
                    cooked = cook(raw, template=True)
                    yield raw if cooked is None else cooked
        stack.extend(reversed(node.children))


def scan_module(
    module_id: str,
    code: str,
    extractor: Extractor,
    parse: Parse = parse_module,
) -> frozenset[str]:
    """Return every candidate token found in one module's source."""
    try:
        tree = parse(code)
    except ModuleParseError as exc:
        raise exc.with_module(module_id) from exc
    except Exception as exc:
        raise ModuleParseError(str(exc) or type(exc).__name__).with_module(module_id) from exc
    tokens: set[str] = set()
    for text in iter_candidate_texts(tree):
        tokens.update(extractor(text))
    return frozenset(tokens)


def collect_candidates(
    modules: Iterable[ModuleInfo | None],
    extractor: Extractor,
    parse: Parse = parse_module,
) -> frozenset[str]:
    """Union the candidate tokens of every included module.

    Modules dropped from the build, or whose code the host cannot provide,
    are skipped so that dead code never pins selectors.
    """
    tokens: set[str] = set()
    scanned = 0
    for info in modules:
        if info is None:
            continue
        if not info.is_included or info.code is None:
            log.debug("Skipping module %s (included=%s)", info.id, info.is_included)
            continue
        tokens |= scan_module(info.id, info.code, extractor, parse)
        scanned += 1
    log.info("Scanned %d module(s), %d candidate token(s)", scanned, len(tokens))
    return frozenset(tokens)
