"""Selector model: SelectorTerm, ComplexSelector, and SelectorList dataclasses."""

from __future__ import annotations

from dataclasses import dataclass

# Pseudo-classes that match when any of their argument selectors match.
MATCHES_ANY_PSEUDOS = frozenset({"is", "where", "matches", "any", "-webkit-any", "-moz-any"})


@dataclass(frozen=True)
class SelectorTerm:
    """One simple selector inside a compound selector.

    Kinds:
        tag, universal, class, id, attribute, pseudo-class, pseudo-element
    """

    kind: str
    value: str  # tag / class / id / attribute / pseudo name, escapes resolved
    operator: str | None = None  # attribute operator ("=", "~=", ...)
    argument: str | None = None  # attribute value or raw pseudo argument
    selectors: tuple[ComplexSelector, ...] = ()  # :not(...), :is(...) arguments

    @property
    def is_pseudo(self) -> bool:
        return self.kind in ("pseudo-class", "pseudo-element")

    @property
    def matches_any(self) -> bool:
        return (
            self.kind == "pseudo-class"
            and self.value in MATCHES_ANY_PSEUDOS
            and bool(self.selectors)
        )


@dataclass(frozen=True)
class ComplexSelector:
    """Compound selectors joined by combinators, flattened to their terms."""

    terms: tuple[SelectorTerm, ...]

    def checkable_terms(self) -> tuple[SelectorTerm, ...]:
        """Terms whose presence in markup can be checked.

        Pseudos are skipped, except :is()-like ones whose arguments are checked.
        """
        return tuple(t for t in self.terms if not t.is_pseudo or t.matches_any)


@dataclass(frozen=True)
class SelectorList:
    """A comma-separated list of complex selectors."""

    selectors: tuple[ComplexSelector, ...]
