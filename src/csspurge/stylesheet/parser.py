"""tinycss2-backed parser producing the purge-oriented stylesheet model.

Only what rule inclusion needs is modelled: selector lists of style rules and
the nesting of conditional group rules. Everything else is kept as text and
written back unchanged.
"""

from __future__ import annotations

import logging

import tinycss2

from csspurge.stylesheet.model import AtRule, Node, StyleRule, Stylesheet, Verbatim

log = logging.getLogger(__name__)

__all__ = ["parse_stylesheet", "split_selector_list", "GROUP_AT_RULES"]

# At-rules whose block holds style rules that are purged individually.
GROUP_AT_RULES = frozenset(
    {"media", "supports", "layer", "container", "document", "-moz-document", "scope"}
)


def split_selector_list(prelude: list) -> tuple[str, ...]:
    """Split a rule prelude into its selectors on top-level commas."""
    parts: list[list] = [[]]
    for token in prelude:
        if token.type == "literal" and token.value == ",":
            parts.append([])
        else:
            parts[-1].append(token)
    selectors = (tinycss2.serialize(p).strip() for p in parts)
    return tuple(s for s in selectors if s)


def _convert(node) -> Node:
    if node.type == "qualified-rule":
        return StyleRule(
            prelude=tinycss2.serialize(node.prelude),
            selectors=split_selector_list(node.prelude),
            block=tinycss2.serialize(node.content),
        )
    if node.type == "at-rule":
        prelude = tinycss2.serialize(node.prelude)
        if node.content is None:
            return AtRule(keyword=node.at_keyword, prelude=prelude)
        if node.lower_at_keyword in GROUP_AT_RULES:
            children = tinycss2.parse_rule_list(
                node.content, skip_comments=False, skip_whitespace=False
            )
            return AtRule(
                keyword=node.at_keyword,
                prelude=prelude,
                children=_convert_all(children),
            )
        return AtRule(
            keyword=node.at_keyword,
            prelude=prelude,
            block=tinycss2.serialize(node.content),
        )
    return Verbatim(text=node.serialize())


def _convert_all(nodes: list) -> tuple[Node, ...]:
    converted: list[Node] = []
    for node in nodes:
        if node.type == "error":
            # tinycss2 cannot write these back; the broken text is dropped
            log.warning("Dropping unparseable CSS at line %d: %s", node.source_line, node.message)
            continue
        converted.append(_convert(node))
    return tuple(converted)


def parse_stylesheet(source: str) -> Stylesheet:
    """Parse CSS source into a :class:`Stylesheet`, keeping comments and whitespace."""
    nodes = tinycss2.parse_stylesheet(source, skip_comments=False, skip_whitespace=False)
    return Stylesheet(nodes=_convert_all(nodes))
