"""Selector validator: admits candidate tokens that are usable safelist entries."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from csspurge.errors import SelectorSyntaxError
from csspurge.selectors.parser import parse_candidate

log = logging.getLogger(__name__)


def is_valid_selector(token: str) -> bool:
    """Return True if *token* parses as a CSS selector list.

    Names are read loosely, the way selector engines read them, so utility
    classes like ``w-1/2`` or ``md:w-1/2`` count as selectors.
    """
    try:
        parse_candidate(token)
    except SelectorSyntaxError:
        return False
    return True


def is_valid_pattern(token: str) -> bool:
    """Return True if *token* compiles as a regular expression."""
    try:
        re.compile(token)
    except re.error:
        return False
    return True


def is_admissible(token: str) -> bool:
    """A token joins the selector set only if it passes both gates."""
    return is_valid_selector(token) and is_valid_pattern(token)


def validate_selectors(tokens: Iterable[str]) -> tuple[str, ...]:
    """Filter *tokens* down to the sorted, de-duplicated admissible selectors.

    Rejected tokens are dropped without error: the extractor overgenerates and
    most of what it yields is prose or object keys, not CSS.
    """
    candidates = set(tokens)
    admitted = tuple(sorted(t for t in candidates if is_admissible(t)))
    log.debug("Admitted %d of %d candidate selectors", len(admitted), len(candidates))
    return admitted
