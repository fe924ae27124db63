from csspurge.stylesheet.parser import parse_stylesheet, split_selector_list
from csspurge.stylesheet.model import AtRule, Stylesheet, StyleRule, Verbatim

__all__ = [
    "parse_stylesheet",
    "split_selector_list",
    "Stylesheet",
    "StyleRule",
    "AtRule",
    "Verbatim",
]
