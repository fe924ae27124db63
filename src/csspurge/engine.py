"""Purge engine: removes style rules whose selectors are neither used nor safelisted."""

from __future__ import annotations

import fnmatch
import glob
import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Protocol

from csspurge.config import Extractor, RawContent, Safelist, SafelistEntry
from csspurge.errors import SelectorSyntaxError
from csspurge.extractors import default_extractor, extractor_for
from csspurge.selectors import ComplexSelector, SelectorTerm, parse_selector
from csspurge.stylesheet import AtRule, StyleRule, Verbatim, parse_stylesheet
from csspurge.stylesheet.model import Node

log = logging.getLogger(__name__)

# Attributes whose presence depends on runtime state, not on markup.
_DYNAMIC_ATTRIBUTES = frozenset({"value", "checked", "selected", "open"})

_IGNORE_NEXT = "purgecss ignore"
_IGNORE_START = "purgecss start ignore"
_IGNORE_END = "purgecss end ignore"


@dataclass(frozen=True)
class RawCss:
    """Stylesheet text handed to the engine, tagged with its file name."""

    raw: str
    name: str | None = None


@dataclass(frozen=True)
class EngineOptions:
    """Everything one engine invocation needs."""

    css: tuple[RawCss, ...]
    content: tuple[str | RawContent, ...] = ()
    safelist: Safelist = field(default_factory=Safelist)
    blocklist: tuple[SafelistEntry, ...] = ()
    default_extractor: Extractor | None = None
    extractors: dict[str, Extractor] = field(default_factory=dict)
    skipped_content: tuple[str, ...] = ()
    rejected: bool = False
    rejected_css: bool = False


@dataclass(frozen=True)
class PurgeResult:
    """The retained CSS of one input, plus what was dropped when requested."""

    css: str
    file: str | None = None
    rejected: tuple[str, ...] = ()
    rejected_css: str | None = None


class Engine(Protocol):
    """Protocol for purge engines: one result per non-empty CSS input."""

    def purge(self, options: EngineOptions) -> list[PurgeResult]: ...


def _matches(entry: SafelistEntry, value: str) -> bool:
    if isinstance(entry, str):
        return entry == value
    return entry.search(value) is not None


class SelectorMatcher:
    """Decides, selector by selector, whether a style rule survives.

    A selector is kept when a greedy or deep pattern matches its text, when
    its whole text is safelisted, or when every checkable term (tag, class,
    id, attribute) is either safelisted or present in the content.
    Blocklisted terms always lose. Selectors that cannot be parsed are kept.
    """

    def __init__(
        self,
        tokens: frozenset[str],
        safelist: Safelist,
        blocklist: tuple[SafelistEntry, ...] = (),
    ) -> None:
        self._tokens = tokens
        self._safelist = safelist
        self._blocklist = blocklist

    def is_safelisted(self, value: str) -> bool:
        return any(_matches(entry, value) for entry in self._safelist.standard)

    def is_blocked(self, value: str) -> bool:
        return any(_matches(entry, value) for entry in self._blocklist)

    def keep(self, selector: str) -> bool:
        patterns = self._safelist.greedy + self._safelist.deep
        if any(p.search(selector) for p in patterns):
            return True
        if self.is_safelisted(selector):
            return True
        try:
            parsed = parse_selector(selector)
        except SelectorSyntaxError:
            log.debug("Keeping unparseable selector %r", selector)
            return True
        return all(self._keep_complex(c) for c in parsed.selectors)

    def _keep_complex(self, selector: ComplexSelector) -> bool:
        terms = selector.checkable_terms()
        if any(self.is_blocked(t.value) for t in terms if not t.matches_any):
            return False
        return all(self._is_used(t) for t in terms)

    def _is_used(self, term: SelectorTerm) -> bool:
        # :is(.a, .b) is used when any of its arguments is
        if term.matches_any:
            return any(self._keep_complex(c) for c in term.selectors)
        return self.is_safelisted(term.value) or self._is_present(term)

    def _is_present(self, term: SelectorTerm) -> bool:
        if term.kind == "universal":
            return True
        if term.kind == "tag":
            return term.value in self._tokens or term.value.lower() in self._tokens
        if term.kind in ("class", "id"):
            return term.value in self._tokens
        return self._is_attribute_present(term)

    def _is_attribute_present(self, term: SelectorTerm) -> bool:
        name = term.value.lower()
        if name in _DYNAMIC_ATTRIBUTES:
            return True
        if name not in ("class", "id") and term.value not in self._tokens:
            return False
        value, op = term.argument, term.operator
        if op is None or not value:
            return True
        if op in ("=", "~="):
            return value in self._tokens
        if op == "|=":
            return value in self._tokens or any(t.startswith(value + "-") for t in self._tokens)
        if op == "^=":
            return any(t.startswith(value) for t in self._tokens)
        if op == "$=":
            return any(t.endswith(value) for t in self._tokens)
        return any(value in t for t in self._tokens)  # *=


@dataclass
class _Rejections:
    selectors: list[str] = field(default_factory=list)
    rules: list[str] = field(default_factory=list)


def _has_rules(nodes: tuple[Node, ...]) -> bool:
    return any(isinstance(n, (StyleRule, AtRule)) for n in nodes)


def _purge_nodes(
    nodes: tuple[Node, ...], matcher: SelectorMatcher, rejections: _Rejections
) -> tuple[Node, ...]:
    kept: list[Node] = []
    ignore_next = False
    ignoring = False
    for node in nodes:
        if isinstance(node, Verbatim):
            if node.is_comment:
                directive = node.text[2:-2].strip().lower()
                if directive == _IGNORE_START:
                    ignoring = True
                elif directive == _IGNORE_END:
                    ignoring = False
                elif directive == _IGNORE_NEXT:
                    ignore_next = True
            kept.append(node)
            continue
        if ignoring or ignore_next:
            ignore_next = False
            kept.append(node)
            continue

        if isinstance(node, StyleRule):
            verdicts = [(s, matcher.keep(s)) for s in node.selectors]
            survivors = tuple(s for s, ok in verdicts if ok)
            rejections.selectors.extend(s for s, ok in verdicts if not ok)
            if survivors or not node.selectors:
                kept.append(node.with_selectors(survivors) if survivors else node)
            else:
                rejections.rules.append(node.serialize())
        elif isinstance(node, AtRule) and node.children is not None:
            children = _purge_nodes(node.children, matcher, rejections)
            if _has_rules(children) or not _has_rules(node.children):
                kept.append(replace(node, children=children))
        else:
            kept.append(node)
    return tuple(kept)


class PurgeEngine:
    """Default engine built on tinycss2 and the selector grammar."""

    def purge(self, options: EngineOptions) -> list[PurgeResult]:
        results: list[PurgeResult] = []
        tokens: frozenset[str] | None = None
        for css in options.css:
            if not css.raw.strip():
                log.debug("Nothing to purge in %s", css.name or "<raw css>")
                continue
            if tokens is None:
                tokens = self.extract_content(options)
            results.append(self._purge_one(css, tokens, options))
        return results

    def extract_content(self, options: EngineOptions) -> frozenset[str]:
        """Run the extractors over every content source."""
        fallback = options.default_extractor or default_extractor()
        tokens: set[str] = set()
        files = 0
        for item in options.content:
            if isinstance(item, RawContent):
                extract = extractor_for(f"raw.{item.extension}", options.extractors, fallback)
                tokens.update(extract(item.raw))
                continue
            for path in sorted(glob.glob(item, recursive=True)):
                if not Path(path).is_file() or _is_skipped(path, options.skipped_content):
                    continue
                text = Path(path).read_text(encoding="utf-8", errors="replace")
                tokens.update(extractor_for(path, options.extractors, fallback)(text))
                files += 1
        log.debug("Extracted %d token(s) from %d content file(s)", len(tokens), files)
        return frozenset(tokens)

    def _purge_one(
        self, css: RawCss, tokens: frozenset[str], options: EngineOptions
    ) -> PurgeResult:
        matcher = SelectorMatcher(tokens, options.safelist, options.blocklist)
        sheet = parse_stylesheet(css.raw)
        rejections = _Rejections()
        purged = replace(sheet, nodes=_purge_nodes(sheet.nodes, matcher, rejections))
        log.debug(
            "Purged %s: %d selector(s) rejected",
            css.name or "<raw css>",
            len(rejections.selectors),
        )
        return PurgeResult(
            css=purged.serialize().strip(),
            file=css.name,
            rejected=tuple(rejections.selectors) if options.rejected else (),
            rejected_css="\n".join(rejections.rules) if options.rejected_css else None,
        )


def _is_skipped(path: str, patterns: tuple[str, ...]) -> bool:
    return any(fnmatch.fnmatch(path, p) for p in patterns)
