"""Safelist builder: baseline entries, user additions, and discovered selectors."""

from __future__ import annotations

import re
from collections.abc import Iterable

from csspurge.config import Safelist, SafelistEntry

# Always protected, whatever the user configures.
BASELINE_STANDARD: tuple[SafelistEntry, ...] = (
    "*",
    "html",
    "body",
    re.compile(r"aria-current"),
    re.compile(r"svelte-"),
    # bare pseudo-class functions (`:is`, `:where`) emitted as standalone
    # tokens by some preprocessors look unused on their own
    re.compile(r"^:[-a-z]+$"),
)

BASELINE_GREEDY: tuple[re.Pattern[str], ...] = (re.compile(r"svelte-"),)


def build_safelist(user: Safelist | None, selectors: Iterable[str] = ()) -> Safelist:
    """Merge the baseline, the user's safelist, and the discovered selectors.

    Order is baseline, then user entries, then discovered selectors; later
    sources only ever append.
    """
    user = user or Safelist()
    return Safelist(
        standard=BASELINE_STANDARD + tuple(user.standard) + tuple(selectors),
        greedy=BASELINE_GREEDY + tuple(user.greedy),
        deep=tuple(user.deep),
        keyframes=tuple(user.keyframes),
        variables=tuple(user.variables),
    )
