"""Token extractors: turn arbitrary text into candidate selector tokens."""

from __future__ import annotations

import re
from pathlib import PurePath

from csspurge.config import Extractor

# Whole class attribute values, variants included (``md:hover:bg-red-500``).
_BROAD_RE = re.compile(r"""[^<>"'`\s]*[^<>"'`\s:]""")
# Pieces nested inside punctuation (``foo`` in ``{foo}`` or ``[foo]``).
_INNER_RE = re.compile(r"""[^<>"'`\s.(){}\[\]#=%]*[^<>"'`\s.(){}\[\]#=%:]""")


def default_extractor() -> Extractor:
    """Return the Tailwind-style extractor used when none is configured.

    It overgenerates on purpose: anything that could be a class name in
    markup, a template, or a string concatenation is returned, and later
    stages discard what is not a selector.
    """

    def extract(content: str) -> list[str]:
        tokens = _BROAD_RE.findall(content)
        tokens.extend(_INNER_RE.findall(content))
        return list(dict.fromkeys(tokens))

    return extract


def extractor_for(
    path: str | PurePath,
    extractors: dict[str, Extractor],
    fallback: Extractor,
) -> Extractor:
    """Pick the extractor registered for *path*'s extension, else *fallback*."""
    suffix = PurePath(path).suffix.lstrip(".").lower()
    return extractors.get(suffix, fallback)
