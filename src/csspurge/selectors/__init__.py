from csspurge.selectors.model import ComplexSelector, SelectorList, SelectorTerm
from csspurge.selectors.parser import parse_candidate, parse_selector
from csspurge.selectors.validator import (
    is_admissible,
    is_valid_pattern,
    is_valid_selector,
    validate_selectors,
)

__all__ = [
    "parse_selector",
    "parse_candidate",
    "SelectorList",
    "ComplexSelector",
    "SelectorTerm",
    "is_valid_selector",
    "is_valid_pattern",
    "is_admissible",
    "validate_selectors",
]
