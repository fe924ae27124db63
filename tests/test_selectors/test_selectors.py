"""Tests for the selector grammar and the selector validator."""

import random

import pytest

from csspurge.errors import SelectorSyntaxError
from csspurge.selectors import (
    ComplexSelector,
    SelectorTerm,
    is_admissible,
    is_valid_pattern,
    is_valid_selector,
    parse_candidate,
    parse_selector,
    validate_selectors,
)


def _terms(text):
    parsed = parse_selector(text)
    assert len(parsed.selectors) == 1
    return parsed.selectors[0].terms


# ---------------------------------------------------------------------------
# Simple selectors
# ---------------------------------------------------------------------------


class TestSimpleSelectors:
    def test_class(self):
        assert _terms(".btn") == (SelectorTerm(kind="class", value="btn"),)

    def test_id(self):
        assert _terms("#main") == (SelectorTerm(kind="id", value="main"),)

    def test_tag(self):
        assert _terms("div") == (SelectorTerm(kind="tag", value="div"),)

    def test_universal(self):
        assert _terms("*") == (SelectorTerm(kind="universal", value="*"),)

    def test_hyphenated_class_name(self):
        assert _terms("btn-primary")[0].value == "btn-primary"

    def test_trailing_hyphen_is_an_identifier(self):
        assert _terms("item-")[0] == SelectorTerm(kind="tag", value="item-")

    def test_escaped_colon_is_resolved(self):
        assert _terms(r".md\:flex") == (SelectorTerm(kind="class", value="md:flex"),)

    def test_hex_escape_is_resolved(self):
        assert _terms(r".\31 0") == (SelectorTerm(kind="class", value="10"),)


# ---------------------------------------------------------------------------
# Compound and complex selectors
# ---------------------------------------------------------------------------


class TestCompoundSelectors:
    def test_tag_with_classes(self):
        terms = _terms("div.card.active")
        assert [t.kind for t in terms] == ["tag", "class", "class"]
        assert [t.value for t in terms] == ["div", "card", "active"]

    def test_child_combinator(self):
        terms = _terms("ul > li")
        assert [t.value for t in terms] == ["ul", "li"]

    def test_combinator_without_spaces(self):
        assert [t.value for t in _terms("a+b")] == ["a", "b"]

    def test_descendant_combinator(self):
        assert [t.value for t in _terms("nav a")] == ["nav", "a"]

    def test_selector_list(self):
        parsed = parse_selector("h1, .title,#x")
        assert len(parsed.selectors) == 3
        assert isinstance(parsed.selectors[0], ComplexSelector)


# ---------------------------------------------------------------------------
# Attributes and pseudos
# ---------------------------------------------------------------------------


class TestAttributeSelectors:
    def test_presence(self):
        assert _terms("[disabled]") == (SelectorTerm(kind="attribute", value="disabled"),)

    def test_quoted_value(self):
        (term,) = _terms('[aria-current="page"]')
        assert term.value == "aria-current"
        assert term.operator == "="
        assert term.argument == "page"

    def test_operator_and_flag(self):
        (term,) = _terms("[type^=check i]")
        assert term.operator == "^="
        assert term.argument == "check"

    def test_dash_match_is_not_a_namespace(self):
        (term,) = _terms("[lang|=en]")
        assert term.value == "lang"
        assert term.operator == "|="

    def test_unterminated_attribute_is_invalid(self):
        assert not is_valid_selector("[data-x")


class TestPseudoSelectors:
    def test_pseudo_class(self):
        terms = _terms("a:hover")
        assert terms[1] == SelectorTerm(kind="pseudo-class", value="hover")
        assert terms[1].is_pseudo

    def test_pseudo_element(self):
        terms = _terms("p::first-line")
        assert terms[1] == SelectorTerm(kind="pseudo-element", value="first-line")

    def test_functional_pseudo_class_argument(self):
        terms = _terms("li:nth-child(2n+1)")
        assert terms[1].value == "nth-child"
        assert terms[1].argument == "2n+1"

    def test_selector_argument(self):
        terms = _terms(".item:not(.a, .b)")
        assert terms[1].value == "not"
        assert len(terms[1].selectors) == 2

    def test_checkable_terms_skip_pseudos(self):
        (selector,) = parse_selector(".btn:focus-visible::after").selectors
        assert [t.value for t in selector.checkable_terms()] == ["btn"]

    def test_is_and_where_are_checkable(self):
        (selector,) = parse_selector(".btn:is(.a, .b):not(.c):where(p)").selectors
        terms = selector.checkable_terms()
        assert [t.value for t in terms] == ["btn", "is", "where"]
        assert terms[1].matches_any
        assert not selector.terms[2].matches_any


# ---------------------------------------------------------------------------
# Rejections
# ---------------------------------------------------------------------------


class TestInvalidSelectors:
    @pytest.mark.parametrize(
        "text",
        ["", " a", "a ", "class=", "w-1/2", "2xl", "a{b}", "foo(", ".", "#", "a,,b", "a >"],
    )
    def test_rejected(self, text):
        with pytest.raises(SelectorSyntaxError):
            parse_selector(text)

    def test_rejection_names_the_input(self):
        with pytest.raises(SelectorSyntaxError, match="w-1/2"):
            parse_selector("w-1/2")


# ---------------------------------------------------------------------------
# Validator
# ---------------------------------------------------------------------------


class TestValidator:
    def test_universal_is_a_selector_but_not_a_pattern(self):
        assert is_valid_selector("*")
        assert not is_valid_pattern("*")
        assert not is_admissible("*")

    def test_pattern_that_is_not_a_selector(self):
        assert is_valid_pattern("a{")
        assert not is_admissible("a{")

    def test_admits_class_names(self):
        assert is_admissible("btn-primary")
        assert is_admissible("[data-open]")

    @pytest.mark.parametrize(
        "token",
        ["w-1/2", "md:w-1/2", "2xl:text-lg", "!mt-2", "translate-x-1/2", "hover:bg-red-500"],
    )
    def test_admits_utility_classes(self, token):
        assert is_valid_selector(token)
        assert is_admissible(token)

    @pytest.mark.parametrize("token", ["class=", "a{", "foo(", "a >", " a", "a ", "a,,b", "."])
    def test_rejects_non_selectors(self, token):
        assert not is_valid_selector(token)

    def test_candidate_grammar_is_only_used_for_admission(self):
        assert is_valid_selector("w-1/2")
        with pytest.raises(SelectorSyntaxError):
            parse_selector("w-1/2")
        with pytest.raises(SelectorSyntaxError):
            parse_candidate("a{")

    def test_validate_sorts_and_deduplicates(self):
        tokens = ["btn", "card", "btn", "class=", "a{", "*", "(", "hero", " pad"]
        assert validate_selectors(tokens) == ("btn", "card", "hero")

    def test_validate_empty(self):
        assert validate_selectors([]) == ()

    def test_admission_on_generated_tokens(self):
        alphabet = "ab-_.#:[]()*+>~=,\"' 1\\/!"
        rng = random.Random(1234)
        tokens = {
            "".join(rng.choice(alphabet) for _ in range(rng.randint(1, 8)))
            for _ in range(2000)
        }
        admitted = set(validate_selectors(tokens))

        for token in tokens:
            expected = is_valid_selector(token) and is_valid_pattern(token)
            assert (token in admitted) == expected, token
            try:
                parse_selector(token)
            except SelectorSyntaxError:
                continue
            # anything the stylesheet grammar reads is also a candidate
            assert is_valid_selector(token), token
        assert admitted <= tokens
